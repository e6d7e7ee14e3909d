"""Pickers: present candidates and return the chosen one.

Every picker is called as ``picker(candidates, *, prompt, initial_input,
preselect)`` and returns the chosen row or ``None``. ``preselect`` is matched
as a literal prefix of the candidate row.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from .ansi import clip_display_line
from .preselect import preselect_index

FZF_ABORT_CODES = (1, 130)


class PickerError(RuntimeError):
    """Raised when an interactive picker cannot be run at all."""


class _TermType(Enum):
    FUZZY = "fuzzy"
    EXACT = "exact"
    BOUNDARY = "boundary"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    EQUAL = "equal"


@dataclass(frozen=True)
class _Term:
    type: _TermType
    text: str
    inverse: bool
    case_sensitive: bool


def parse_fzf_query(query: str, exact: bool = True) -> list[list[_Term]]:
    """Split an fzf extended-search query into AND-ed groups of OR-ed terms.

    Follows fzf's own parsing: smart case per term, ``!`` negates, ``^`` and
    ``$`` anchor, ``'`` flips exactness (``'x'`` is a word-boundary match),
    and a lone ``|`` joins its neighbours into one OR group.
    """
    groups: list[list[_Term]] = []
    group: list[_Term] = []
    switch_group = False
    after_bar = False
    for token in query.split():
        if group and not after_bar and token == "|":
            switch_group = False
            after_bar = True
            continue
        after_bar = False

        case_sensitive = token != token.lower()
        text = token if case_sensitive else token.lower()
        term_type = _TermType.EXACT if exact else _TermType.FUZZY
        inverse = False
        if text.startswith("!"):
            inverse = True
            term_type = _TermType.EXACT
            text = text[1:]
        if text != "$" and text.endswith("$"):
            term_type = _TermType.SUFFIX
            text = text[:-1]
        if len(text) > 2 and text.startswith("'") and text.endswith("'"):
            term_type = _TermType.BOUNDARY
            text = text[1:-1]
        elif text.startswith("'"):
            term_type = _TermType.FUZZY if exact or inverse else _TermType.EXACT
            text = text[1:]
        elif text.startswith("^"):
            term_type = _TermType.EQUAL if term_type is _TermType.SUFFIX else _TermType.PREFIX
            text = text[1:]
        if not text:
            continue

        if switch_group:
            groups.append(group)
            group = []
        group.append(_Term(term_type, text, inverse, case_sensitive))
        switch_group = True
    if group:
        groups.append(group)
    return groups


def _is_subsequence(needle: str, haystack: str) -> bool:
    chars = iter(haystack)
    return all(ch in chars for ch in needle)


def _at_word_boundaries(needle: str, haystack: str) -> bool:
    start = haystack.find(needle)
    while start >= 0:
        end = start + len(needle)
        before = haystack[start - 1] if start > 0 else ""
        after = haystack[end] if end < len(haystack) else ""
        if not (before.isalnum() or before == "_") and not (after.isalnum() or after == "_"):
            return True
        start = haystack.find(needle, start + 1)
    return False


def _term_matches(term: _Term, candidate: str) -> bool:
    haystack = candidate if term.case_sensitive else candidate.lower()
    if term.type is _TermType.FUZZY:
        found = _is_subsequence(term.text, haystack)
    elif term.type is _TermType.EXACT:
        found = term.text in haystack
    elif term.type is _TermType.BOUNDARY:
        found = _at_word_boundaries(term.text, haystack)
    elif term.type is _TermType.PREFIX:
        found = haystack.lstrip().startswith(term.text)
    elif term.type is _TermType.SUFFIX:
        found = haystack.rstrip().endswith(term.text)
    else:
        found = haystack.strip() == term.text
    return found != term.inverse


def fzf_query_matches(query: str, candidate: str, exact: bool = True) -> bool:
    """Whether fzf would keep ``candidate`` for ``query`` (``--exact`` by default)."""
    return all(
        any(_term_matches(term, candidate) for term in group)
        for group in parse_fzf_query(query, exact)
    )


@dataclass
class ListPicker:
    """Non-interactive picker that lists rows and accepts the preselection."""

    stream: TextIO | None = None
    max_cols: int | None = None

    def __call__(
        self,
        candidates: Sequence[str],
        *,
        prompt: str = "",
        initial_input: str = "",
        preselect: str | None = None,
    ) -> str | None:
        stream = self.stream if self.stream is not None else sys.stderr
        max_cols = self.max_cols or shutil.get_terminal_size((80, 24)).columns
        selected = preselect_index(candidates, preselect)

        if prompt or initial_input:
            stream.write(f"{prompt}{initial_input}\n")
        width = len(str(len(candidates)))
        for index, candidate in enumerate(candidates):
            marker = ">" if index == selected else " "
            stream.write(clip_display_line(f"{marker}{index + 1:>{width}} {candidate}", max_cols) + "\n")

        if selected is not None:
            return candidates[selected]
        return candidates[0] if candidates else None


@dataclass
class FzfPicker:
    """Interactive picker backed by ``fzf``; the cursor starts on the preselection."""

    executable: str = "fzf"

    def command(self, candidates: Sequence[str], prompt: str, initial_input: str, preselect: str | None) -> list[str]:
        cmd = [self.executable, "--exact", "--no-sort", "--query", initial_input]
        if prompt:
            cmd.extend(["--prompt", prompt])
        # fzf positions count rows left after the initial query filters the list.
        visible = [candidate for candidate in candidates if fzf_query_matches(initial_input, candidate)]
        selected = preselect_index(visible, preselect)
        if selected is not None:
            cmd.extend(["--bind", f"load:pos({selected + 1})"])
        return cmd

    def __call__(
        self,
        candidates: Sequence[str],
        *,
        prompt: str = "",
        initial_input: str = "",
        preselect: str | None = None,
    ) -> str | None:
        if shutil.which(self.executable) is None:
            raise PickerError(f"{self.executable} is not installed.")

        cmd = self.command(candidates, prompt, initial_input, preselect)
        proc = subprocess.run(
            cmd,
            input="\n".join(candidates) + "\n",
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        if proc.returncode in FZF_ABORT_CODES:
            return None
        if proc.returncode != 0:
            raise PickerError(f"{self.executable} failed with exit code {proc.returncode}")
        choice = proc.stdout.rstrip("\n")
        return choice or None


def picker_for_name(name: str | None):
    if name == "fzf":
        return FzfPicker()
    return ListPicker()
