"""Protocols for the page primitives a note widget consumes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..geometry.coords import Rect

EventCallback = Callable[[Any], None]


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in viewport coordinates."""
    client_x: float
    client_y: float


class AnchorElement(Protocol):
    """The page element a note is attached to. Must support weak references."""

    @property
    def is_connected(self) -> bool:
        """True while the element is still attached to the document."""
        ...

    def get_bounding_client_rect(self) -> Rect:
        ...

    def add_class(self, name: str) -> None:
        ...

    def remove_class(self, name: str) -> None:
        ...


class NoteSurface(Protocol):
    """The note's own rendered element. Coordinates are viewport coordinates."""

    def get_bounding_client_rect(self) -> Rect:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def set_z_index(self, z_index: int) -> None:
        ...

    def set_theme(self, theme: str) -> None:
        ...

    def set_visible(self, visible: bool) -> None:
        ...


class Host(Protocol):
    """Window-level measurement, event and timer primitives."""

    viewport_width: float
    viewport_height: float
    scroll_x: float
    scroll_y: float

    def add_event_listener(self, kind: str, callback: EventCallback) -> None:
        ...

    def remove_event_listener(self, kind: str, callback: EventCallback) -> None:
        ...

    def set_interval(self, callback: Callable[[], None], interval_ms: float) -> Any:
        ...

    def clear_interval(self, handle: Any) -> None:
        ...
