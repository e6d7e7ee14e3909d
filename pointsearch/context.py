"""Derive seed text and cursor line from an editor snapshot."""

from __future__ import annotations

from pathlib import Path

from .ansi import strip_ansi
from .backends import Backend
from .editor_state import EditorState
from .preselect import build_preselect_key
from .thing_at_point import ThingAtPoint, identifier_at_point

# Characters with special meaning in Python re, PCRE, POSIX ERE and Rust
# regex alike. Escaping only these keeps the quoted text valid in all four.
REGEX_METACHARACTERS = frozenset("\\.^$*+?()[]{}|")


def current_line_number(state: EditorState) -> int:
    """Return the 1-based line of the cursor in the whole document.

    Counts from the absolute start of the text, so any narrowing of the
    visible region has no effect.
    """
    return 1 + state.text.count("\n", 0, state.cursor)


def extract_seed_text(state: EditorState, thing_at_point: ThingAtPoint = identifier_at_point) -> str:
    """Return the initial query for a search started at ``state``.

    A non-empty selection wins and is collapsed as a side effect; otherwise
    the thing-at-point extractor decides, with ``""`` for nothing.
    """
    selection = state.active_selection()
    if selection is not None:
        seed = strip_ansi(state.text[selection.start : selection.end])
        state.collapse_selection()
        return seed
    return thing_at_point(state) or ""


def quote_regex(text: str) -> str:
    """Escape ``text`` so regex backends match it literally."""
    return "".join(f"\\{ch}" if ch in REGEX_METACHARACTERS else ch for ch in text)


def first_nonblank_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    return ""


def seed_for_backend(seed: str, backend: Backend) -> str:
    """Return the query a backend receives for ``seed``.

    External grep tools match one line at a time, so a multi-line seed is cut
    to its first non-blank line before quoting.
    """
    if not backend.regex_query:
        return seed
    return quote_regex(first_nonblank_line(seed))


def extract_current_line_key(state: EditorState, backend: Backend, root_path: Path | None) -> str | None:
    """Return the preselect key for the cursor's line under ``backend``."""
    return build_preselect_key(backend, state.path, root_path, current_line_number(state))
