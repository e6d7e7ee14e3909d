"""Persistent JSON config and the per-command settings bundle.

Stores the root-resolver order, project markers, thing-at-point extractor and
picker choice. All access is defensive: malformed or missing config falls
back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .roots import DEFAULT_PROJECT_MARKERS, DEFAULT_RESOLVER_NAMES
from .thing_at_point import DEFAULT_THING_AT_POINT, THING_AT_POINT_EXTRACTORS

APP_NAME = "pointsearch"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

KNOWN_RESOLVERS = frozenset(DEFAULT_RESOLVER_NAMES)
KNOWN_PICKERS = frozenset({"list", "fzf"})
DEFAULT_PICKER = "list"


@dataclass(frozen=True)
class Settings:
    """Strategy choices handed to each command invocation."""

    root_resolvers: tuple[str, ...] = DEFAULT_RESOLVER_NAMES
    project_markers: tuple[str, ...] = DEFAULT_PROJECT_MARKERS
    thing_at_point: str = DEFAULT_THING_AT_POINT
    picker: str = DEFAULT_PICKER


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep behavior non-fatal
    when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _string_list(value: object) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def load_root_resolvers() -> tuple[str, ...]:
    """Configured resolver order; unknown names are dropped.

    An explicit empty list is honored and means "always use the cwd".
    """
    names = _string_list(load_config().get("root_resolvers"))
    if names is None:
        return DEFAULT_RESOLVER_NAMES
    ordered: list[str] = []
    for name in names:
        if name in KNOWN_RESOLVERS and name not in ordered:
            ordered.append(name)
    return tuple(ordered)


def load_project_markers() -> tuple[str, ...]:
    markers = _string_list(load_config().get("project_markers"))
    if markers is None:
        return DEFAULT_PROJECT_MARKERS
    return tuple(markers)


def _load_choice(key: str, known: frozenset[str] | set[str], default: str) -> str:
    value = load_config().get(key)
    if not isinstance(value, str):
        return default
    stripped = value.strip().lower()
    return stripped if stripped in known else default


def load_thing_at_point_name() -> str:
    return _load_choice("thing_at_point", set(THING_AT_POINT_EXTRACTORS), DEFAULT_THING_AT_POINT)


def load_picker_name() -> str:
    return _load_choice("picker", KNOWN_PICKERS, DEFAULT_PICKER)


def settings_to_config(settings: Settings) -> dict[str, object]:
    return {
        "root_resolvers": list(settings.root_resolvers),
        "project_markers": list(settings.project_markers),
        "thing_at_point": settings.thing_at_point,
        "picker": settings.picker,
    }


def init_config() -> Path:
    """Write the effective settings so they can be edited by hand.

    Keys already present in the file are kept as they are.
    """
    config = settings_to_config(load_settings())
    config.update(load_config())
    save_config(config)
    return CONFIG_PATH


def load_settings() -> Settings:
    return Settings(
        root_resolvers=load_root_resolvers(),
        project_markers=load_project_markers(),
        thing_at_point=load_thing_at_point_name(),
        picker=load_picker_name(),
    )
