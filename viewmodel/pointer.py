# viewmodel/pointer.py
"""Pointer events delivered to the edit session, and predicates over them.

The host view translates its own mouse events into :class:`PointerEvent`
instances carrying both the world coordinate and the pixel position.
Conditions are plain callables ``event -> bool`` so a caller can inject its
own delete gesture.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet

import numpy as np

from models import as_point

Condition = Callable[["PointerEvent"], bool]


class PointerEventType(Enum):
    MOVE = "move"
    DOWN = "down"
    DRAG = "drag"
    UP = "up"
    # sent by the host after an up that was not part of a drag
    CLICK = "click"


@dataclass
class PointerEvent:
    type: PointerEventType
    coordinate: np.ndarray
    pixel: np.ndarray
    modifiers: FrozenSet[str] = field(default_factory=frozenset)
    # host view is panning/zooming; hover evaluation is skipped meanwhile
    interacting: bool = False

    def __post_init__(self):
        self.coordinate = as_point(self.coordinate)
        self.pixel = as_point(self.pixel)
        self.modifiers = frozenset(str(m) for m in self.modifiers)


def no_modifier_keys(event: PointerEvent) -> bool:
    return not event.modifiers


def alt_key_only(event: PointerEvent) -> bool:
    return event.modifiers == frozenset({"Alt"})


def single_click(event: PointerEvent) -> bool:
    return event.type is PointerEventType.CLICK


def never(event: PointerEvent) -> bool:
    return False


def all_of(*conditions: Condition) -> Condition:
    def _combined(event: PointerEvent) -> bool:
        return all(cond(event) for cond in conditions)
    return _combined


DEFAULT_DELETE_CONDITION: Condition = all_of(no_modifier_keys, single_click)

_NAMED_CONDITIONS = {
    "single_click": DEFAULT_DELETE_CONDITION,
    "alt_click": all_of(alt_key_only, single_click),
    "never": never,
}


def condition_from_name(name: str) -> Condition:
    """Look up a named delete gesture from configuration."""
    try:
        return _NAMED_CONDITIONS[str(name)]
    except KeyError:
        raise ValueError(f"unknown condition {name!r}; expected one of {sorted(_NAMED_CONDITIONS)}") from None
