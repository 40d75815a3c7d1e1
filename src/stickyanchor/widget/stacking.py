from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from ..geometry.placement import DEFAULT_PADDING, DEFAULT_SLOT_GAP
from ..models import DEFAULT_SLOT

if TYPE_CHECKING:
    from ..config import OverlayConfig

# Leaves ~3600 bring-to-front calls below INT32_MAX.
DEFAULT_BASE_Z_INDEX = 2_147_480_000


class Stackable(Protocol):
    z_index: int

    @property
    def is_destroyed(self) -> bool:
        ...

    def apply_z_index(self) -> None:
        ...


@dataclass
class StackingCounter:
    """Monotonic z-order source shared by every note in one overlay."""

    base: int = DEFAULT_BASE_Z_INDEX
    current: int = -1

    def __post_init__(self) -> None:
        if self.current < self.base:
            self.current = self.base

    def bring_to_front(self, widget: Stackable) -> None:
        if widget.is_destroyed:
            return
        self.current += 1
        widget.z_index = self.current
        widget.apply_z_index()


@dataclass
class OverlayContext:
    """Shared state for one independent note overlay (e.g. one per frame).

    Injected into every widget at construction time. `selection_mode` is set by
    the element picker while it owns hover feedback on the page.
    """

    stacking: StackingCounter = field(default_factory=StackingCounter)
    selection_mode: bool = False
    highlight_class: str = "sn-anchor-highlight"
    padding: float = DEFAULT_PADDING
    slot_gap: float = DEFAULT_SLOT_GAP
    default_slot: str = DEFAULT_SLOT

    @staticmethod
    def from_config(cfg: "OverlayConfig") -> "OverlayContext":
        return OverlayContext(
            stacking=StackingCounter(base=cfg.base_z_index),
            highlight_class=cfg.highlight_class,
            padding=cfg.padding,
            slot_gap=cfg.slot_gap,
            default_slot=cfg.default_slot,
        )
