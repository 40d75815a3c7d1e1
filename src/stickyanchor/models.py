from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

logger = logging.getLogger(__name__)

AUTO_SLOT = "auto"

# Order here is also the tie-break preference used by the placement selector.
CANDIDATE_SLOTS: tuple[str, ...] = (
    "bottom-right",
    "bottom-left",
    "top-right",
    "top-left",
    "bottom-center",
    "top-center",
    "center-right",
    "center-left",
)

VALID_SLOTS: frozenset[str] = frozenset(CANDIDATE_SLOTS) | {AUTO_SLOT}

DEFAULT_SLOT = "top-right"
DEFAULT_THEME = "yellow"


@dataclass(frozen=True)
class AnchorSlot:
    """Position relative to the anchor's live bounding box.

    slot is one of the 8 candidate slots or "auto".
    """
    slot: str = DEFAULT_SLOT

    def to_dict(self) -> dict[str, Any]:
        return {"anchor": self.slot}


@dataclass(frozen=True)
class AnchorOffset:
    """Pixel offset from the anchor's top-left corner, captured in viewport space."""
    offset_x: float
    offset_y: float

    def to_dict(self) -> dict[str, Any]:
        return {"offsetX": self.offset_x, "offsetY": self.offset_y}


@dataclass(frozen=True)
class LegacyAbsolute:
    """Raw document coordinates written by older versions of the drag code."""
    x: float
    y: float

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class PageCoordinate:
    """Document coordinates of a page-level note (no anchor element)."""
    page_x: float
    page_y: float

    def to_dict(self) -> dict[str, Any]:
        return {"pageX": self.page_x, "pageY": self.page_y}


PositionDescriptor = Union[AnchorSlot, AnchorOffset, LegacyAbsolute, PageCoordinate]
CustomPosition = Union[AnchorOffset, LegacyAbsolute]


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def descriptor_from_dict(data: Any) -> PositionDescriptor | None:
    """Parse a persisted descriptor. Returns None for anything malformed."""
    if not isinstance(data, Mapping):
        return None

    if "anchor" in data:
        slot = data["anchor"]
        if slot in VALID_SLOTS:
            return AnchorSlot(slot=slot)
        logger.warning(f"Ignoring unknown anchor slot: {slot!r}")
        return None

    if "offsetX" in data or "offsetY" in data:
        ox, oy = _number(data.get("offsetX")), _number(data.get("offsetY"))
        if ox is not None and oy is not None:
            return AnchorOffset(offset_x=ox, offset_y=oy)
    elif "pageX" in data or "pageY" in data:
        px, py = _number(data.get("pageX")), _number(data.get("pageY"))
        if px is not None and py is not None:
            return PageCoordinate(page_x=px, page_y=py)
    elif "x" in data or "y" in data:
        x, y = _number(data.get("x")), _number(data.get("y"))
        if x is not None and y is not None:
            return LegacyAbsolute(x=x, y=y)

    logger.warning(f"Ignoring malformed position descriptor: {dict(data)!r}")
    return None


def split_descriptor(
    desc: PositionDescriptor | None,
) -> tuple[AnchorSlot | PageCoordinate | None, CustomPosition | None]:
    """Route a persisted descriptor into a widget's (position, custom_position) pair."""
    if isinstance(desc, (AnchorOffset, LegacyAbsolute)):
        return None, desc
    return desc, None


@dataclass(frozen=True)
class NoteSnapshot:
    """One note as reported by the server of record.

    Only id, content and theme take part in diffing; everything else rides
    along in `extra` for the widget manager.
    """
    id: str
    content: str = ""
    theme: str = DEFAULT_THEME
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "NoteSnapshot":
        extra = {k: v for k, v in data.items() if k not in ("id", "content", "theme")}
        return NoteSnapshot(
            id=str(data["id"]),
            content=data.get("content") or "",
            theme=data.get("theme") or DEFAULT_THEME,
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        return {**self.extra, "id": self.id, "content": self.content, "theme": self.theme}
