"""Extractors for the text unit under (or just before) the cursor.

Every extractor takes an ``EditorState`` and returns a string, or ``None``
when the cursor sits on nothing useful such as whitespace.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

from pygments.lexers import get_lexer_for_filename
from pygments.token import Name
from pygments.util import ClassNotFound

from .editor_state import EditorState

ThingAtPoint = Callable[[EditorState], "str | None"]

DEFAULT_THING_AT_POINT = "identifier"


def _is_word_char(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def _is_identifier_char(ch: str) -> bool:
    return ch == "_" or _is_word_char(ch)


def _run_at_point(state: EditorState, accepts: Callable[[str], bool]) -> str | None:
    """Return the run of accepted characters under or ending at the cursor."""
    text = state.text
    cursor = state.cursor
    if cursor < len(text) and accepts(text[cursor]):
        anchor = cursor
    elif cursor > 0 and accepts(text[cursor - 1]):
        anchor = cursor - 1
    else:
        return None

    start = anchor
    while start > 0 and accepts(text[start - 1]):
        start -= 1
    end = anchor + 1
    while end < len(text) and accepts(text[end]):
        end += 1
    return text[start:end]


def identifier_at_point(state: EditorState) -> str | None:
    return _run_at_point(state, _is_identifier_char)


def word_at_point(state: EditorState) -> str | None:
    return _run_at_point(state, _is_word_char)


def _line_bounds(text: str, cursor: int) -> tuple[int, int]:
    start = text.rfind("\n", 0, cursor) + 1
    end = text.find("\n", cursor)
    return start, (len(text) if end < 0 else end)


def line_at_point(state: EditorState) -> str | None:
    start, end = _line_bounds(state.text, state.cursor)
    stripped = state.text[start:end].strip()
    return stripped or None


@lru_cache(maxsize=64)
def _lexer_for_name(filename: str):
    try:
        return get_lexer_for_filename(filename, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


def symbol_at_point(state: EditorState) -> str | None:
    """Return the language-aware name token at the cursor.

    Lexes the cursor's line with the Pygments lexer for the file name and
    picks a ``Name`` token covering or ending at the cursor. Falls back to
    :func:`identifier_at_point` when there is no lexer or no name token.
    """
    lexer = _lexer_for_name(state.path.name) if state.path is not None else None
    if lexer is None:
        return identifier_at_point(state)

    line_start, line_end = _line_bounds(state.text, state.cursor)
    column = state.cursor - line_start
    line_text = state.text[line_start:line_end]

    fallback: str | None = None
    for index, token_type, value in lexer.get_tokens_unprocessed(line_text):
        if token_type not in Name or not value.strip():
            continue
        end = index + len(value)
        if index <= column < end:
            return value
        if end == column:
            fallback = value
    return fallback if fallback is not None else identifier_at_point(state)


THING_AT_POINT_EXTRACTORS: dict[str, ThingAtPoint] = {
    "identifier": identifier_at_point,
    "symbol": symbol_at_point,
    "word": word_at_point,
    "line": line_at_point,
}


def extractor_for_name(name: str | None) -> ThingAtPoint:
    """Resolve a configured extractor name, defaulting to identifiers."""
    if name is None:
        return THING_AT_POINT_EXTRACTORS[DEFAULT_THING_AT_POINT]
    return THING_AT_POINT_EXTRACTORS.get(name.strip().lower(), identifier_at_point)
