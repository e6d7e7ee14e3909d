"""Project-root resolution through an ordered chain of resolvers.

A resolver is a zero-argument callable returning a path string or ``None``.
The first non-empty answer wins; when every resolver declines, the working
directory is used. A resolver that fails is treated as having declined.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

RootResolver = Callable[[], "str | None"]

DEFAULT_RESOLVER_NAMES: tuple[str, ...] = ("markers", "git")
DEFAULT_PROJECT_MARKERS: tuple[str, ...] = (".pointsearch-root", ".projectile")
GIT_TIMEOUT_SECONDS = 0.5


@dataclass(frozen=True)
class ResolverChain:
    resolvers: tuple[RootResolver, ...] = ()

    def resolve(self, cwd: Path | None = None) -> Path:
        for resolver in self.resolvers:
            try:
                answer = resolver()
            except Exception:
                continue
            if answer:
                return Path(answer).resolve()
        return (cwd if cwd is not None else Path.cwd()).resolve()


def _start_directory(current_file: Path | None) -> Path | None:
    if current_file is None:
        return None
    directory = current_file if current_file.is_dir() else current_file.parent
    return directory.resolve()


def marker_resolver(current_file: Path | None, markers: Sequence[str]) -> RootResolver:
    """Nearest ancestor of ``current_file`` containing any of ``markers``."""

    def resolve() -> str | None:
        start = _start_directory(current_file)
        if start is None or not markers:
            return None
        for directory in (start, *start.parents):
            if any((directory / marker).exists() for marker in markers):
                return str(directory)
        return None

    return resolve


def git_resolver(current_file: Path | None, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> RootResolver:
    """Top level of the git work tree containing ``current_file``."""

    def resolve() -> str | None:
        start = _start_directory(current_file)
        if start is None:
            return None
        try:
            proc = subprocess.run(
                ["git", "-C", str(start), "rev-parse", "--show-toplevel"],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout_seconds,
            )
        except Exception:
            return None
        if proc.returncode != 0:
            return None
        top = proc.stdout.strip()
        return top or None

    return resolve


def build_resolver_chain(
    current_file: Path | None,
    names: Sequence[str] = DEFAULT_RESOLVER_NAMES,
    markers: Sequence[str] = DEFAULT_PROJECT_MARKERS,
) -> ResolverChain:
    """Build resolvers in ``names`` order; unknown names are skipped."""
    factories: dict[str, Callable[[], RootResolver]] = {
        "markers": lambda: marker_resolver(current_file, markers),
        "git": lambda: git_resolver(current_file),
    }
    return ResolverChain(tuple(factories[name]() for name in names if name in factories))


def resolve_root(
    current_file: Path | None,
    names: Sequence[str] = DEFAULT_RESOLVER_NAMES,
    markers: Sequence[str] = DEFAULT_PROJECT_MARKERS,
    cwd: Path | None = None,
) -> Path:
    return build_resolver_chain(current_file, names, markers).resolve(cwd)
