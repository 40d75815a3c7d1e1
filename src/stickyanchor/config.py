from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import tomllib
from typing import Any

from .geometry.placement import DEFAULT_PADDING, DEFAULT_SLOT_GAP
from .models import DEFAULT_SLOT, VALID_SLOTS
from .sync.manager import DEFAULT_PURGE_INTERVAL_MS
from .sync.markers import DEFAULT_GRACE_PERIOD_MS
from .widget.stacking import DEFAULT_BASE_Z_INDEX

INT32_MAX = 2**31 - 1

# Minimum number of bring-to-front calls the base z-index must leave room for.
MIN_Z_HEADROOM = 1000


@dataclass(frozen=True)
class OverlayConfig:
    """Configuration for one note overlay.

    Keep field names stable; they mirror the TOML sections.
    """

    # Placement
    padding: float = DEFAULT_PADDING
    slot_gap: float = DEFAULT_SLOT_GAP

    # Stacking
    base_z_index: int = DEFAULT_BASE_Z_INDEX

    # Sync
    grace_period_ms: float = DEFAULT_GRACE_PERIOD_MS
    purge_interval_ms: float = DEFAULT_PURGE_INTERVAL_MS

    # Widget
    default_slot: str = DEFAULT_SLOT
    highlight_class: str = "sn-anchor-highlight"

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "OverlayConfig":
        placement = data.get("placement", {})
        stacking = data.get("stacking", {})
        sync = data.get("sync", {})
        widget = data.get("widget", {})

        padding = float(placement.get("padding", DEFAULT_PADDING))
        slot_gap = float(placement.get("slot_gap", DEFAULT_SLOT_GAP))
        if padding < 0 or padding > 500:
            raise ValueError(f"Invalid padding: {padding}. Must be between 0 and 500.")
        if slot_gap < 0 or slot_gap > 500:
            raise ValueError(f"Invalid slot_gap: {slot_gap}. Must be between 0 and 500.")

        base_z_index = int(stacking.get("base_z_index", DEFAULT_BASE_Z_INDEX))
        if base_z_index < 0 or base_z_index > INT32_MAX - MIN_Z_HEADROOM:
            raise ValueError(
                f"Invalid base_z_index: {base_z_index}. "
                f"Must be between 0 and {INT32_MAX - MIN_Z_HEADROOM}."
            )

        grace_period_ms = float(sync.get("grace_period_ms", DEFAULT_GRACE_PERIOD_MS))
        purge_interval_ms = float(sync.get("purge_interval_ms", DEFAULT_PURGE_INTERVAL_MS))
        if grace_period_ms <= 0:
            raise ValueError(f"Invalid grace_period_ms: {grace_period_ms}. Must be positive.")
        if purge_interval_ms <= 0:
            raise ValueError(f"Invalid purge_interval_ms: {purge_interval_ms}. Must be positive.")

        default_slot = widget.get("default_slot", DEFAULT_SLOT)
        if default_slot not in VALID_SLOTS:
            raise ValueError(f"Invalid default_slot: {default_slot}. Must be one of {sorted(VALID_SLOTS)}.")

        highlight_class = str(widget.get("highlight_class", "sn-anchor-highlight"))
        if not highlight_class or any(c.isspace() for c in highlight_class):
            raise ValueError(f"Invalid highlight_class: {highlight_class!r}. Must be a single class name.")

        return OverlayConfig(
            padding=padding,
            slot_gap=slot_gap,
            base_z_index=base_z_index,
            grace_period_ms=grace_period_ms,
            purge_interval_ms=purge_interval_ms,
            default_slot=default_slot,
            highlight_class=highlight_class,
        )

    @staticmethod
    def from_toml(path: str | Path) -> "OverlayConfig":
        data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
        return OverlayConfig.from_dict(data)
