"""Search commands: build a request from editor state and run it.

One command exists per backend. A command resolves the project root, takes
the seed text and preselect key from the cursor, collects candidates from the
backend, and calls the picker with the preselect key injected for that one
call.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .backends import Backend, BackendKind, backend_from_tag
from .config import Settings
from .context import extract_current_line_key, extract_seed_text, seed_for_backend
from .editor_state import EditorState
from .invocation import InterceptablePicker, Precedence, with_preselect
from .pickers import PickerError, picker_for_name
from .providers import buffer_candidates, collect_content_candidates, collect_file_candidates
from .roots import resolve_root
from .symbols import collect_index_entries, line_for_index_label, select_nearest_entry_for_state
from .thing_at_point import extractor_for_name

COMMANDS: dict[str, Backend] = {backend.value: backend for backend in Backend}

_CONTENT_CHOICE_RE = re.compile(r"^(?P<path>.+?):(?P<line>\d+):")
_BUFFER_CHOICE_RE = re.compile(r"^(?P<line>\d+):")


def command_backend(name: str) -> Backend:
    """Backend behind a command name; raises ``UnknownBackendError``."""
    return backend_from_tag(name)


@dataclass(frozen=True)
class SearchRequest:
    backend: Backend
    seed_text: str
    root_path: Path
    preselect_key: str | None = None

    @property
    def query(self) -> str:
        """Seed text as the backend should receive it."""
        return seed_for_backend(self.seed_text, self.backend)

    def to_dict(self) -> dict[str, object]:
        return {
            "backend": self.backend.value,
            "seed_text": self.seed_text,
            "query": self.query,
            "root_path": str(self.root_path),
            "preselect_key": self.preselect_key,
        }


@dataclass(frozen=True)
class JumpTarget:
    path: Path | None
    line: int | None = None

    def format(self) -> str:
        location = "" if self.path is None else str(self.path)
        return location if self.line is None else f"{location}:{self.line}"


@dataclass(frozen=True)
class SearchOutcome:
    choice: str | None = None
    target: JumpTarget | None = None
    error: str | None = None


def build_search_request(
    backend: Backend,
    state: EditorState,
    settings: Settings | None = None,
    cwd: Path | None = None,
) -> SearchRequest:
    """Compute root, seed and preselect key for ``backend`` at ``state``.

    Collapses an active selection (see :func:`extract_seed_text`).
    """
    settings = settings or Settings()
    root = resolve_root(state.path, settings.root_resolvers, settings.project_markers, cwd)
    seed = extract_seed_text(state, extractor_for_name(settings.thing_at_point))
    if backend.kind is BackendKind.SYMBOL:
        preselect = select_nearest_entry_for_state(collect_index_entries(state.text, state.path), state)
    else:
        preselect = extract_current_line_key(state, backend, root)
    return SearchRequest(backend=backend, seed_text=seed, root_path=root, preselect_key=preselect)


def collect_candidates(request: SearchRequest, state: EditorState) -> tuple[list[str], str | None]:
    backend = request.backend
    if backend is Backend.BUFFER_GREP:
        return buffer_candidates(state.text), None
    if backend.kind is BackendKind.CONTENT:
        return collect_content_candidates(backend, request.root_path, request.query)
    if backend.kind is BackendKind.FILE:
        return collect_file_candidates(backend, request.root_path)
    return [entry.label for entry in collect_index_entries(state.text, state.path)], None


def parse_choice(request: SearchRequest, choice: str, state: EditorState) -> JumpTarget | None:
    """Turn a picked row back into a location to jump to."""
    backend = request.backend
    if backend is Backend.BUFFER_GREP:
        match = _BUFFER_CHOICE_RE.match(choice)
        return JumpTarget(state.path, int(match.group("line"))) if match else None
    if backend.kind is BackendKind.CONTENT:
        match = _CONTENT_CHOICE_RE.match(choice)
        if match is None:
            return None
        return JumpTarget(request.root_path / match.group("path"), int(match.group("line")))
    if backend.kind is BackendKind.FILE:
        return JumpTarget(request.root_path / choice)
    line = line_for_index_label(choice)
    return JumpTarget(state.path, line) if line is not None else None


def run_search(
    request: SearchRequest,
    state: EditorState,
    picker: Callable[..., str | None],
    precedence: Precedence = Precedence.INJECTED,
) -> SearchOutcome:
    candidates, error = collect_candidates(request, state)
    if error is not None:
        return SearchOutcome(error=error)

    interceptable = picker if isinstance(picker, InterceptablePicker) else InterceptablePicker(picker)
    extra = {"preselect": request.preselect_key} if request.preselect_key is not None else {}

    def pick() -> str | None:
        return interceptable(
            candidates,
            prompt=f"{request.backend.value}> ",
            initial_input=request.seed_text,
        )

    try:
        choice = with_preselect(interceptable, extra, pick, precedence)
    except PickerError as exc:
        return SearchOutcome(error=str(exc))
    if choice is None:
        return SearchOutcome()
    return SearchOutcome(choice=choice, target=parse_choice(request, choice, state))


def search_at_point(
    command: str,
    state: EditorState,
    settings: Settings | None = None,
    picker: Callable[..., str | None] | None = None,
    cwd: Path | None = None,
) -> SearchOutcome:
    """Run command ``command`` for the editor snapshot ``state``.

    The backend is validated before anything else happens, so an unknown
    command fails without touching the selection or any picker.
    """
    backend = command_backend(command)
    settings = settings or Settings()
    request = build_search_request(backend, state, settings, cwd)
    return run_search(request, state, picker or picker_for_name(settings.picker))
