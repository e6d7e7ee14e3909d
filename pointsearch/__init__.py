"""Public package surface for pointsearch.

Exports ``main`` for programmatic CLI invocation and ``search_at_point`` for
editor integrations that embed the library directly.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def search_at_point(*args, **kwargs):
    from .commands import search_at_point as _search_at_point

    return _search_at_point(*args, **kwargs)


__all__ = ["main", "search_at_point"]
