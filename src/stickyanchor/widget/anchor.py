from __future__ import annotations

import weakref

from ..geometry.coords import Rect
from .host import AnchorElement


class AnchorRef:
    """Non-owning handle to an anchor element.

    The element is never kept alive by the handle. Every read goes through
    `resolve()`, which returns None once the element has been collected or
    detached from the document.
    """

    def __init__(self, element: AnchorElement | None) -> None:
        self._ref: weakref.ref[AnchorElement] | None = (
            weakref.ref(element) if element is not None else None
        )

    @property
    def is_set(self) -> bool:
        return self._ref is not None

    def resolve(self) -> AnchorElement | None:
        if self._ref is None:
            return None
        element = self._ref()
        if element is None or not element.is_connected:
            return None
        return element

    def rect(self) -> Rect | None:
        """Live bounding rect of the anchor, or None if it is gone."""
        element = self.resolve()
        if element is None:
            return None
        return element.get_bounding_client_rect()
