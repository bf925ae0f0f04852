"""Pointer events dispatched against an editor document."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from bs4 import Tag


class EventType(str, Enum):
    """Events the interaction layer listens for."""

    CLICK = "click"
    POINTER_ENTER = "pointerenter"
    POINTER_LEAVE = "pointerleave"
    DRAG_START = "dragstart"

    @property
    def bubbles(self) -> bool:
        """Enter/leave fire on the element only; the rest bubble to ancestors."""
        return self in (EventType.CLICK, EventType.DRAG_START)


@dataclass
class EditorEvent:
    """A single dispatched event.

    ``target`` is the deepest element the pointer hit; ``current_target`` is
    the element whose listener is running.
    """

    type: EventType
    target: Tag
    current_target: Tag | None = None
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


Listener = Callable[[EditorEvent], None]
