"""In-memory stand-ins for the page: anchor elements, note surfaces and the window."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from stickyanchor.geometry.coords import Rect
from stickyanchor.models import AnchorSlot
from stickyanchor.widget.note import NoteWidget
from stickyanchor.widget.stacking import OverlayContext


class FakeElement:
    def __init__(self, left: float = 50, top: float = 50, width: float = 100, height: float = 30):
        self.rect = Rect(left, top, width, height)
        self.is_connected = True
        self.classes: set[str] = set()

    def get_bounding_client_rect(self) -> Rect:
        return self.rect

    def add_class(self, name: str) -> None:
        self.classes.add(name)

    def remove_class(self, name: str) -> None:
        self.classes.discard(name)


class FakeSurface:
    def __init__(self, width: float = 200, height: float = 100):
        self.left = 0.0
        self.top = 0.0
        self.width = width
        self.height = height
        self.z_index: int | None = None
        self.theme: str | None = None
        self.visible = False
        self.moves: list[tuple[float, float]] = []

    @property
    def position(self) -> tuple[float, float]:
        return self.left, self.top

    def get_bounding_client_rect(self) -> Rect:
        return Rect(self.left, self.top, self.width, self.height)

    def move_to(self, x: float, y: float) -> None:
        self.left, self.top = x, y
        self.moves.append((x, y))

    def set_z_index(self, z_index: int) -> None:
        self.z_index = z_index

    def set_theme(self, theme: str) -> None:
        self.theme = theme

    def set_visible(self, visible: bool) -> None:
        self.visible = visible


class FakeHost:
    def __init__(self, viewport_width: float = 1024, viewport_height: float = 768):
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.scroll_x = 0.0
        self.scroll_y = 0.0
        self.listeners: dict[str, list[Callable[[Any], None]]] = {}
        self.intervals: dict[int, tuple[Callable[[], None], float]] = {}
        self._next_handle = 1

    def add_event_listener(self, kind: str, callback: Callable[[Any], None]) -> None:
        self.listeners.setdefault(kind, []).append(callback)

    def remove_event_listener(self, kind: str, callback: Callable[[Any], None]) -> None:
        callbacks = self.listeners.get(kind, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def dispatch(self, kind: str, event: Any = None) -> None:
        for callback in list(self.listeners.get(kind, [])):
            callback(event)

    def set_interval(self, callback: Callable[[], None], interval_ms: float) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.intervals[handle] = (callback, interval_ms)
        return handle

    def clear_interval(self, handle: int) -> None:
        self.intervals.pop(handle, None)

    def tick(self) -> None:
        for callback, _ in list(self.intervals.values()):
            callback()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def context() -> OverlayContext:
    return OverlayContext()


@pytest.fixture
def element() -> FakeElement:
    return FakeElement()


@pytest.fixture
def position_changes() -> list:
    return []


@pytest.fixture
def make_widget(host, context, position_changes):
    """Build a NoteWidget on a fresh 200x100 surface; position changes land in `position_changes`."""

    def _make(note_id: str = "n1", **kwargs: Any) -> NoteWidget:
        kwargs.setdefault("surface", FakeSurface())
        kwargs.setdefault("on_position_change", position_changes.append)
        if kwargs.get("anchor") is not None and "position" not in kwargs:
            kwargs["position"] = AnchorSlot("bottom-right")
        return NoteWidget(note_id, host=host, context=context, **kwargs)

    return _make


@pytest.fixture
def make_element():
    return FakeElement


@pytest.fixture
def make_surface():
    return FakeSurface
