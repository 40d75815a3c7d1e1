"""Coordinate model.

Viewport coordinates have their origin at the visible top-left and shift with
scroll. Document coordinates have their origin at the document top-left and are
stable across scroll. Anchor-relative offsets are always measured in viewport
space against the anchor's live bounding box, so they carry no scroll state.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return max(self.width, 0.0) * max(self.height, 0.0)

    def translate(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.width, self.height)

    def intersection_area(self, other: "Rect") -> float:
        w = min(self.right, other.right) - max(self.left, other.left)
        h = min(self.bottom, other.bottom) - max(self.top, other.top)
        if w <= 0 or h <= 0:
            return 0.0
        return w * h

    def contains(self, other: "Rect") -> bool:
        return (
            other.left >= self.left
            and other.top >= self.top
            and other.right <= self.right
            and other.bottom <= self.bottom
        )


def to_viewport(doc_x: float, doc_y: float, scroll_x: float, scroll_y: float) -> tuple[float, float]:
    return doc_x - scroll_x, doc_y - scroll_y


def to_document(view_x: float, view_y: float, scroll_x: float, scroll_y: float) -> tuple[float, float]:
    return view_x + scroll_x, view_y + scroll_y


def offset_from_anchor(view_x: float, view_y: float, anchor_rect: Rect) -> tuple[float, float]:
    """Capture a viewport point as an offset from the anchor's top-left."""
    return view_x - anchor_rect.left, view_y - anchor_rect.top


def apply_anchor_offset(offset_x: float, offset_y: float, anchor_rect: Rect) -> tuple[float, float]:
    """Replay an anchor offset against the anchor's current rect."""
    return anchor_rect.left + offset_x, anchor_rect.top + offset_y
