"""Read-only snapshot of the editor at the moment a search command runs.

Offsets are 0-based character offsets into ``text``. Line numbers are 1-based.
The only mutation allowed on a snapshot is collapsing the selection.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Selection:
    """Active region between two offsets, in either order."""

    start: int
    end: int

    def normalized(self) -> Selection:
        if self.start <= self.end:
            return self
        return Selection(start=self.end, end=self.start)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass
class EditorState:
    text: str
    cursor: int = 0
    path: Path | None = None
    selection: Selection | None = None
    # Visible (start, end) range when the host narrows the view. Line
    # numbering deliberately ignores it.
    narrowing: tuple[int, int] | None = None

    def __post_init__(self) -> None:
        self.cursor = _clamp(self.cursor, 0, len(self.text))

    @classmethod
    def from_file(
        cls,
        path: Path,
        line: int = 1,
        column: int = 0,
        selection: Selection | None = None,
    ) -> EditorState:
        """Snapshot a file on disk with the cursor at ``line``/``column``."""
        text = read_text(path)
        return cls(
            text=text,
            cursor=offset_for_line_column(text, line, column),
            path=path,
            selection=selection,
        )

    def active_selection(self) -> Selection | None:
        """Return the clamped, ordered selection, or ``None`` when empty."""
        if self.selection is None:
            return None
        normalized = self.selection.normalized()
        limit = len(self.text)
        clamped = Selection(_clamp(normalized.start, 0, limit), _clamp(normalized.end, 0, limit))
        return None if clamped.is_empty else clamped

    def collapse_selection(self) -> None:
        self.selection = None


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def offset_for_line_column(text: str, line: int, column: int = 0) -> int:
    """Convert 1-based ``line`` and 0-based ``column`` to a clamped offset.

    Lines past the end land on the end of the text; columns past the end of
    their line land on that line's end.
    """
    offset = 0
    for _ in range(max(0, line - 1)):
        newline = text.find("\n", offset)
        if newline < 0:
            return len(text)
        offset = newline + 1
    line_end = text.find("\n", offset)
    if line_end < 0:
        line_end = len(text)
    return offset + _clamp(column, 0, line_end - offset)
