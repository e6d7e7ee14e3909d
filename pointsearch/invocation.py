"""Scoped augmentation of picker calls.

``InterceptablePicker`` forwards to a real picker. While an overlay is
installed through :meth:`InterceptablePicker.augmented` (or
:func:`with_preselect`), every call has the overlay's options merged in. The
overlay is removed when the scope exits, whether or not the body raised.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")


class Precedence(Enum):
    """Which side wins when caller and injected options share a key."""

    INJECTED = "injected"
    CALLER = "caller"


def merge_options(
    caller: Mapping[str, Any],
    injected: Mapping[str, Any],
    precedence: Precedence = Precedence.INJECTED,
) -> dict[str, Any]:
    if precedence is Precedence.INJECTED:
        return {**caller, **injected}
    return {**injected, **caller}


@dataclass(frozen=True, eq=False)
class _Overlay:
    options: Mapping[str, Any]
    precedence: Precedence


@dataclass
class InterceptablePicker:
    picker: Callable[..., Any]
    _overlays: list[_Overlay] = field(default_factory=list, init=False, repr=False)

    def __call__(self, candidates: Sequence[str], **options: Any) -> Any:
        merged: dict[str, Any] = dict(options)
        for overlay in self._overlays:
            merged = merge_options(merged, overlay.options, overlay.precedence)
        return self.picker(candidates, **merged)

    @property
    def active_overlays(self) -> tuple[Mapping[str, Any], ...]:
        return tuple(overlay.options for overlay in self._overlays)

    @contextmanager
    def augmented(
        self,
        extra: Mapping[str, Any],
        precedence: Precedence = Precedence.INJECTED,
    ) -> Iterator[InterceptablePicker]:
        overlay = _Overlay(options=dict(extra), precedence=precedence)
        self._overlays.append(overlay)
        try:
            yield self
        finally:
            # Remove this exact overlay; nested scopes may still hold others.
            self._overlays[:] = [item for item in self._overlays if item is not overlay]


def with_preselect(
    picker: InterceptablePicker,
    extra: Mapping[str, Any],
    body: Callable[[], T],
    precedence: Precedence = Precedence.INJECTED,
) -> T:
    """Run ``body`` with ``extra`` merged into every call to ``picker``."""
    with picker.augmented(extra, precedence):
        return body()
