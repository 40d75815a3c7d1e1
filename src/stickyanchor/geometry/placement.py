"""Placement selector: slot geometry, best-slot search and viewport clamping."""

from __future__ import annotations

from ..models import CANDIDATE_SLOTS
from .coords import Rect

DEFAULT_PADDING = 10.0
DEFAULT_SLOT_GAP = 10.0


def slot_origin(
    slot: str,
    anchor_rect: Rect,
    note_width: float,
    note_height: float,
    gap: float = DEFAULT_SLOT_GAP,
) -> tuple[float, float]:
    """Viewport top-left of a note placed in `slot` around `anchor_rect`.

    Slot names read from the note's point of view: "top-right" means above the
    anchor and to its right. Unknown slots fall back to "bottom-right".
    """
    vertical, _, horizontal = slot.partition("-")

    if horizontal == "left":
        x = anchor_rect.left - note_width - gap
    elif horizontal == "center":
        x = anchor_rect.left + (anchor_rect.width - note_width) / 2
    else:
        x = anchor_rect.right + gap

    if vertical == "top":
        y = anchor_rect.top - note_height - gap
    elif vertical == "center":
        y = anchor_rect.top + (anchor_rect.height - note_height) / 2
    else:
        y = anchor_rect.bottom + gap

    return x, y


def visible_fraction(rect: Rect, viewport: Rect) -> float:
    if rect.area <= 0:
        return 0.0
    return rect.intersection_area(viewport) / rect.area


def calculate_best_position(
    anchor_rect: Rect,
    note_width: float,
    note_height: float,
    *,
    viewport_width: float,
    viewport_height: float,
    gap: float = DEFAULT_SLOT_GAP,
) -> str:
    """Pick the candidate slot that best keeps the note on screen.

    A slot whose rectangle fits entirely in the viewport always beats one that
    doesn't; among non-fitting slots the larger visible fraction wins. Ties go to
    the earliest slot in CANDIDATE_SLOTS. Always returns a candidate slot, never
    "auto".
    """
    viewport = Rect(0.0, 0.0, viewport_width, viewport_height)

    best_slot = CANDIDATE_SLOTS[0]
    best_score: tuple[bool, float] | None = None
    for slot in CANDIDATE_SLOTS:
        x, y = slot_origin(slot, anchor_rect, note_width, note_height, gap)
        rect = Rect(x, y, note_width, note_height)
        fits = viewport.contains(rect)
        score = (fits, 1.0 if fits else visible_fraction(rect, viewport))
        # Strict comparison keeps the earlier (preferred) slot on ties.
        if best_score is None or score > best_score:
            best_slot, best_score = slot, score
    return best_slot


def clamp_to_viewport(
    x: float,
    y: float,
    width: float,
    height: float,
    *,
    viewport_width: float,
    viewport_height: float,
    padding: float = DEFAULT_PADDING,
) -> tuple[float, float]:
    """Shift a rectangle the minimum amount needed to keep it `padding` inside the viewport.

    When the rectangle is larger than the padded viewport it is pinned to the
    padding edge and may still overflow on the far side.
    """
    max_x = viewport_width - width - padding
    max_y = viewport_height - height - padding
    return max(padding, min(x, max_x)), max(padding, min(y, max_y))
