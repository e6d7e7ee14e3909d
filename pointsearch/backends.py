"""Closed set of search backends and their per-backend traits.

Each backend knows what it searches (content, files, or symbols), whether its
query is a regular expression, and how its preselect key is shaped.
"""

from __future__ import annotations

from enum import Enum


class UnknownBackendError(ValueError):
    """Raised when a command or tag names no known backend."""


class BackendKind(Enum):
    CONTENT = "content"
    FILE = "file"
    SYMBOL = "symbol"


class Backend(Enum):
    RIPGREP = "rg"
    SILVER_SEARCHER = "ag"
    GIT_GREP = "git-grep"
    GREP = "grep"
    BUFFER_GREP = "buffer-grep"
    FILE_JUMP = "file-jump"
    FIND_FILE = "find-file"
    FUZZY_FILE = "fuzzy-file"
    SYMBOL_INDEX = "imenu"

    @property
    def kind(self) -> BackendKind:
        return _KIND_BY_BACKEND[self]

    @property
    def regex_query(self) -> bool:
        """Whether the seed text is interpreted as a regular expression."""
        return self in _REGEX_BACKENDS

    @property
    def path_scoped(self) -> bool:
        """Whether candidates carry a root-relative path component."""
        return self is not Backend.BUFFER_GREP and self.kind is not BackendKind.SYMBOL


_KIND_BY_BACKEND: dict[Backend, BackendKind] = {
    Backend.RIPGREP: BackendKind.CONTENT,
    Backend.SILVER_SEARCHER: BackendKind.CONTENT,
    Backend.GIT_GREP: BackendKind.CONTENT,
    Backend.GREP: BackendKind.CONTENT,
    Backend.BUFFER_GREP: BackendKind.CONTENT,
    Backend.FILE_JUMP: BackendKind.FILE,
    Backend.FIND_FILE: BackendKind.FILE,
    Backend.FUZZY_FILE: BackendKind.FILE,
    Backend.SYMBOL_INDEX: BackendKind.SYMBOL,
}

_REGEX_BACKENDS = frozenset(
    {
        Backend.RIPGREP,
        Backend.SILVER_SEARCHER,
        Backend.GIT_GREP,
        Backend.GREP,
    }
)


def backend_from_tag(tag: str) -> Backend:
    """Return the backend for ``tag`` or raise ``UnknownBackendError``."""
    try:
        return Backend(tag)
    except ValueError:
        raise UnknownBackendError(f"Unknown search backend: {tag!r}") from None
