"""Symbol index for the current buffer and nearest-entry selection.

Index entries come from Tree-sitter when a grammar package is installed and
from per-language regex patterns otherwise. The selector picks the entry the
cursor is "inside": the last one starting before the end of the cursor line.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .editor_state import EditorState
from .symbol_patterns import (
    CLASS_NODE_TYPES,
    FALLBACK_PATTERNS_BY_LANGUAGE,
    FUNCTION_NODE_TYPES,
    GENERIC_FALLBACK_PATTERNS,
    LANGUAGE_BY_SUFFIX,
)

MAX_INDEX_ENTRIES = 2000


@dataclass(frozen=True)
class IndexEntry:
    """One symbol-index row.

    ``position`` is a character offset, or a live marker exposing ``offset``
    or ``position()`` that resolves to one.
    """

    label: str
    position: object


def entry_offset(position: object) -> int:
    """Resolve a plain offset or marker-like position to an int."""
    if isinstance(position, int) and not isinstance(position, bool):
        return position
    offset = getattr(position, "offset", None)
    if isinstance(offset, int):
        return offset
    resolve = getattr(position, "position", None)
    if callable(resolve):
        return int(resolve())
    raise TypeError(f"Cannot resolve index position: {position!r}")


def line_end_boundary(state: EditorState) -> int:
    """Offset where the line after the cursor line begins."""
    newline = state.text.find("\n", state.cursor)
    return len(state.text) if newline < 0 else newline + 1


def select_nearest_entry(entries: Iterable[IndexEntry], boundary: int) -> str | None:
    """Label of the entry with the greatest position strictly before ``boundary``.

    Entries are scanned in the given order without sorting. Later entries
    with an equal position lose to the first one seen.
    """
    best_label: str | None = None
    best_position = -1
    for entry in entries:
        position = entry_offset(entry.position)
        if best_position < position < boundary:
            best_label = entry.label
            best_position = position
    return best_label


def select_nearest_entry_for_state(entries: Iterable[IndexEntry], state: EditorState) -> str | None:
    return select_nearest_entry(entries, line_end_boundary(state))


def format_index_label(kind: str, name: str, line: int) -> str:
    """Fixed-width picker label; ``line`` is 1-based."""
    clean_name = name if len(name) <= 200 else (name[:197] + "...")
    return f"{kind:5} L{line:>5}  {clean_name}"


_LABEL_LINE_RE = re.compile(r"^\S+\s+L\s*(?P<line>\d+)\s")


def line_for_index_label(label: str) -> int | None:
    match = _LABEL_LINE_RE.match(label)
    return int(match.group("line")) if match else None


def _language_for_path(path: Path | None) -> str | None:
    if path is None:
        return None
    return LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


@lru_cache(maxsize=32)
def _load_parser(language_name: str):
    """Return a Tree-sitter parser, or ``None`` when no grammar package is usable.

    Tries ``tree_sitter_languages`` first, then ``tree_sitter_language_pack``.
    The former only works against ``tree-sitter<0.22``; a failure there moves
    on to the next package.
    """
    try:
        from tree_sitter_languages import get_parser

        return get_parser(language_name)
    except Exception:
        pass

    try:
        from tree_sitter_language_pack import get_parser

        return get_parser(language_name)
    except Exception:
        return None


def _line_starts(text: str) -> list[int]:
    return [0, *(match.end() for match in re.finditer("\n", text))]


def _collect_fallback(text: str, language_name: str | None, max_entries: int) -> list[IndexEntry]:
    patterns = FALLBACK_PATTERNS_BY_LANGUAGE.get(language_name or "", GENERIC_FALLBACK_PATTERNS)
    entries: list[IndexEntry] = []
    offset = 0
    for line_idx, line in enumerate(text.split("\n")):
        for kind, pattern in patterns:
            match = pattern.match(line)
            if match is None:
                continue
            entries.append(
                IndexEntry(
                    label=format_index_label(kind, match.group("name"), line_idx + 1),
                    position=offset + match.start("name"),
                )
            )
            break
        if len(entries) >= max_entries:
            break
        offset += len(line) + 1
    return entries


def _node_name(source_bytes: bytes, node) -> str:
    for field_name in ("name", "declarator"):
        child = node.child_by_field_name(field_name)
        if child is None:
            continue
        nested = child.child_by_field_name("declarator")
        if nested is None:
            nested = child.child_by_field_name("name")
        target = nested if nested is not None else child
        return source_bytes[target.start_byte : target.end_byte].decode("utf-8", errors="replace")
    return "<anonymous>"


def _collect_tree_sitter(parser, text: str, max_entries: int) -> list[IndexEntry]:
    source_bytes = text.encode("utf-8")
    tree = parser.parse(source_bytes)
    line_starts = _line_starts(text)
    entries: list[IndexEntry] = []

    def walk(node) -> None:
        if len(entries) >= max_entries:
            return
        if node.type in FUNCTION_NODE_TYPES or node.type in CLASS_NODE_TYPES:
            kind = "fn" if node.type in FUNCTION_NODE_TYPES else "class"
            row, byte_column = node.start_point
            line_start = line_starts[row] if row < len(line_starts) else len(text)
            line_bytes = text[line_start : line_start + byte_column].encode("utf-8")[:byte_column]
            column = len(line_bytes.decode("utf-8", errors="ignore"))
            entries.append(
                IndexEntry(
                    label=format_index_label(kind, _node_name(source_bytes, node), row + 1),
                    position=line_start + column,
                )
            )
        for child in node.named_children:
            walk(child)

    walk(tree.root_node)
    return entries


def collect_index_entries(text: str, path: Path | None = None, max_entries: int = MAX_INDEX_ENTRIES) -> list[IndexEntry]:
    """Build the symbol index for a buffer, in document order."""
    language_name = _language_for_path(path)
    parser = _load_parser(language_name) if language_name is not None else None
    if parser is not None:
        try:
            entries = _collect_tree_sitter(parser, text, max_entries)
        except Exception:
            entries = []
        if entries:
            return entries
    return _collect_fallback(text, language_name, max_entries)
