"""Candidate producers for each backend.

These are thin adapters over external tools. Each returns
``(candidates, error_message)``; failures are reported, never raised.
Content candidates use the ``path:line:text`` form, relative to the root.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from .backends import Backend, BackendKind

SEARCH_TIMEOUT_SECONDS = 30.0
MAX_CANDIDATES = 20_000


def content_command(backend: Backend, pattern: str) -> list[str]:
    """Argv printing ``path:line:text`` rows for ``pattern`` under the cwd."""
    if backend is Backend.RIPGREP:
        return ["rg", "--line-number", "--no-heading", "--color", "never", "--smart-case", "-e", pattern, "."]
    if backend is Backend.SILVER_SEARCHER:
        return ["ag", "--nocolor", "--nogroup", "--line-numbers", "--smart-case", "--", pattern, "."]
    if backend is Backend.GIT_GREP:
        return ["git", "--no-pager", "grep", "--line-number", "-I", "--extended-regexp", "-e", pattern]
    if backend is Backend.GREP:
        return ["grep", "-rnIE", "--exclude-dir=.git", "--exclude-dir=.hg", "--exclude-dir=.svn", "-e", pattern, "."]
    raise ValueError(f"{backend.value} is not an external content backend")


def _normalize_content_line(raw: str) -> str:
    line = raw.rstrip("\r\n")
    return line[2:] if line.startswith("./") else line


def collect_content_candidates(
    backend: Backend,
    root: Path,
    pattern: str,
    max_candidates: int = MAX_CANDIDATES,
) -> tuple[list[str], str | None]:
    cmd = content_command(backend, pattern)
    if shutil.which(cmd[0]) is None:
        return [], f"{cmd[0]} is not installed."

    try:
        proc = subprocess.run(
            cmd,
            cwd=root,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=SEARCH_TIMEOUT_SECONDS,
        )
    except subprocess.TimeoutExpired:
        return [], f"{cmd[0]} timed out after {SEARCH_TIMEOUT_SECONDS:g}s."
    except Exception as exc:
        return [], f"failed to run {cmd[0]}: {exc}"

    # Exit status 1 means "no matches" for every grep flavour.
    if proc.returncode not in (0, 1):
        err = (proc.stderr or "").strip() or f"{cmd[0]} failed with exit code {proc.returncode}"
        return [], err

    lines = [_normalize_content_line(raw) for raw in proc.stdout.splitlines() if raw.strip()]
    return lines[:max_candidates], None


def buffer_candidates(text: str) -> list[str]:
    """Every buffer line prefixed with its 1-based number."""
    lines = text.split("\n")
    if lines and lines[-1] == "" and len(lines) > 1:
        lines.pop()
    return [f"{number}:{line}" for number, line in enumerate(lines, start=1)]


def _collect_files_walk(root: Path) -> list[str]:
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        dirnames[:] = sorted((name for name in dirnames if not name.startswith(".")), key=str.lower)
        for filename in sorted(filenames, key=str.lower):
            if filename.startswith("."):
                continue
            files.append((base / filename).relative_to(root).as_posix())
    return files


def _collect_files_tool(cmd: list[str], root: Path) -> list[str] | None:
    if shutil.which(cmd[0]) is None:
        return None
    try:
        proc = subprocess.run(
            cmd,
            cwd=root,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            check=True,
            timeout=SEARCH_TIMEOUT_SECONDS,
        )
    except Exception:
        return None
    files: list[str] = []
    for raw in proc.stdout.splitlines():
        relative = raw[2:] if raw.startswith("./") else raw
        if not relative or any(part.startswith(".") for part in Path(relative).parts):
            continue
        files.append(relative)
    return files


_FILE_LIST_COMMANDS: dict[Backend, list[str]] = {
    Backend.FILE_JUMP: ["rg", "--files"],
    Backend.FUZZY_FILE: ["fd", "--type", "f"],
}


def collect_file_candidates(
    backend: Backend,
    root: Path,
    max_candidates: int = MAX_CANDIDATES,
) -> tuple[list[str], str | None]:
    """Root-relative file paths for a file backend.

    Tool-backed listings fall back to a directory walk when the tool is
    missing or fails.
    """
    if backend.kind is not BackendKind.FILE:
        raise ValueError(f"{backend.value} is not a file backend")
    if not root.is_dir():
        return [], f"Not a directory: {root}"

    files: list[str] | None = None
    cmd = _FILE_LIST_COMMANDS.get(backend)
    if cmd is not None:
        files = _collect_files_tool(cmd, root)
    if files is None:
        files = _collect_files_walk(root)
    return files[:max_candidates], None
