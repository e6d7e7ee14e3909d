"""Preselect keys: which picker candidate should be highlighted first.

A key is a plain string that a candidate row must *start with*. It is an
optimistic hint; nothing guarantees a matching candidate exists.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from .backends import Backend, BackendKind


def to_root_relative(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` in POSIX form.

    The literal relationship is tried first so relative inputs keep working
    without touching the filesystem; resolved paths are compared next. Paths
    outside the root are returned whole.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        pass
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except (OSError, ValueError):
        return path.as_posix()


def build_preselect_key(
    backend: Backend,
    file_path: Path | None,
    root_path: Path | None,
    line_number: int,
) -> str | None:
    if file_path is None or root_path is None:
        return None
    if backend is Backend.BUFFER_GREP:
        return f"{line_number}:"
    if not backend.path_scoped:
        # Symbol search preselects through the nearest index entry instead.
        return None
    relative = to_root_relative(file_path, root_path)
    if backend.kind is BackendKind.CONTENT:
        return f"{relative}:{line_number}:"
    return relative


def preselect_pattern(key: str) -> re.Pattern[str]:
    """Compile ``key`` as a literal, start-anchored pattern."""
    return re.compile("^" + re.escape(key))


def preselect_index(candidates: Sequence[str], key: str | None) -> int | None:
    """Return the index of the first candidate starting with ``key``."""
    if not key:
        return None
    pattern = preselect_pattern(key)
    for index, candidate in enumerate(candidates):
        if pattern.match(candidate):
            return index
    return None
