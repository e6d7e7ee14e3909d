"""Command-line front door for pointsearch.

An editor integration runs ``pointsearch COMMAND FILE --line N --column N``
and reads back the jump target from stdout.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .backends import UnknownBackendError
from .commands import COMMANDS, build_search_request, command_backend, run_search
from .config import init_config, load_settings
from .editor_state import EditorState, Selection
from .pickers import picker_for_name


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _selection(value: str) -> Selection:
    """argparse type for ``START:END`` character offsets."""
    start_text, sep, end_text = value.partition(":")
    try:
        if not sep:
            raise ValueError(value)
        return Selection(int(start_text), int(end_text))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid selection {value!r}; expected START:END") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pointsearch",
        description="Search from the cursor: seed the query from the thing at point and preselect the current line.",
    )
    parser.add_argument("command", nargs="?", help=f"Search command ({', '.join(COMMANDS)}).")
    parser.add_argument("path", nargs="?", default=None, help="File the cursor is in.")
    parser.add_argument("--line", type=_positive_int, default=1, help="1-based cursor line.")
    parser.add_argument("--column", type=_nonnegative_int, default=0, help="0-based cursor column.")
    parser.add_argument("--selection", type=_selection, default=None, help="Active selection as START:END offsets.")
    parser.add_argument("--picker", choices=("list", "fzf"), default=None, help="Override the configured picker.")
    parser.add_argument("--cwd", default=None, help="Fallback root when no resolver finds one.")
    parser.add_argument("--print-request", action="store_true", help="Print the computed request as JSON and exit.")
    parser.add_argument("--init-config", action="store_true", help="Write the effective settings to the config file.")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.init_config:
        print(init_config())
        return
    if args.command is None or args.path is None:
        raise SystemExit("Both COMMAND and FILE are required.")

    try:
        backend = command_backend(args.command)
    except UnknownBackendError as exc:
        raise SystemExit(str(exc)) from None

    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")

    settings = load_settings()
    state = EditorState.from_file(path, line=args.line, column=args.column, selection=args.selection)
    cwd = Path(args.cwd) if args.cwd else None
    request = build_search_request(backend, state, settings, cwd)

    if args.print_request:
        sys.stdout.write(json.dumps(request.to_dict(), indent=2) + "\n")
        return

    outcome = run_search(request, state, picker_for_name(args.picker or settings.picker))
    if outcome.error is not None:
        raise SystemExit(outcome.error)
    if outcome.target is None:
        raise SystemExit(1)
    sys.stdout.write(outcome.target.format() + "\n")


if __name__ == "__main__":
    main()
