from .coords import Rect, to_document, to_viewport
from .placement import calculate_best_position, clamp_to_viewport, slot_origin

__all__ = [
    "Rect",
    "to_document",
    "to_viewport",
    "calculate_best_position",
    "clamp_to_viewport",
    "slot_origin",
]
