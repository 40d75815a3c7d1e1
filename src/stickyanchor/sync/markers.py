"""Session markers: short-lived records of locally created notes.

A marker protects a note the local UI has already rendered from being torn
down by a server snapshot that doesn't include it yet. Markers die when the
server echoes the note back or when their grace period runs out.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, MutableMapping

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD_MS = 15_000


def monotonic_ms() -> float:
    return time.monotonic() * 1000


def purge_expired(
    markers: MutableMapping[str, float],
    now: float,
    grace_period: float = DEFAULT_GRACE_PERIOD_MS,
) -> list[str]:
    """Drop every marker older than `grace_period` and return the dropped ids.

    Age exactly equal to the grace period is kept.
    """
    expired = [note_id for note_id, created_at in markers.items() if now - created_at > grace_period]
    for note_id in expired:
        del markers[note_id]
    return expired


@dataclass
class SessionMarkers:
    """Marker table shared by the local-create path and the reconciler."""

    grace_period_ms: float = DEFAULT_GRACE_PERIOD_MS
    clock: Callable[[], float] = monotonic_ms
    entries: dict[str, float] = field(default_factory=dict)

    def mark(self, note_id: str, now: float | None = None) -> None:
        self.entries[note_id] = self.clock() if now is None else now

    def confirm(self, note_id: str) -> bool:
        """Remove the marker once the server snapshot includes the note."""
        return self.entries.pop(note_id, None) is not None

    def purge_expired(self, now: float | None = None) -> list[str]:
        expired = purge_expired(
            self.entries,
            self.clock() if now is None else now,
            self.grace_period_ms,
        )
        if expired:
            logger.debug(f"Purged {len(expired)} expired session markers: {expired}")
        return expired

    def clear(self) -> None:
        self.entries.clear()

    def __contains__(self, note_id: object) -> bool:
        return note_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)
