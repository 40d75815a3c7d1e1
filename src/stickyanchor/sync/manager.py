from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from ..models import NoteSnapshot
from ..widget.host import Host
from ..widget.note import NoteWidget
from .markers import SessionMarkers, monotonic_ms
from .reconciler import NoteDiff, calculate_note_diff, coerce_snapshot

if TYPE_CHECKING:
    from ..config import OverlayConfig

logger = logging.getLogger(__name__)

# Builds a widget for a remote note. Returns None when the note can't be shown
# yet (e.g. its anchor element isn't on the page).
WidgetFactory = Callable[[NoteSnapshot, bool], "NoteWidget | None"]

DEFAULT_PURGE_INTERVAL_MS = 5_000


@dataclass
class NoteSyncManager:
    """Applies remote snapshots to the set of live note widgets.

    Snapshots must be delivered one at a time; overlapping fetches should be
    dropped or queued by the caller.
    """

    factory: WidgetFactory
    host: Host
    markers: SessionMarkers = field(default_factory=SessionMarkers)
    purge_interval_ms: float = DEFAULT_PURGE_INTERVAL_MS
    notes: dict[str, NoteWidget] = field(default_factory=dict)
    _timer: Any = field(default=None, init=False, repr=False)

    @staticmethod
    def from_config(
        cfg: "OverlayConfig",
        factory: WidgetFactory,
        host: Host,
        clock: Callable[[], float] = monotonic_ms,
    ) -> "NoteSyncManager":
        return NoteSyncManager(
            factory=factory,
            host=host,
            markers=SessionMarkers(grace_period_ms=cfg.grace_period_ms, clock=clock),
            purge_interval_ms=cfg.purge_interval_ms,
        )

    def start(self) -> None:
        """Purge markers on a timer so they expire even if no snapshot arrives."""
        if self._timer is not None:
            return
        self._timer = self.host.set_interval(self.markers.purge_expired, self.purge_interval_ms)

    def stop(self) -> None:
        if self._timer is None:
            return
        self.host.clear_interval(self._timer)
        self._timer = None

    def add_note(self, widget: NoteWidget) -> None:
        self.notes[widget.id] = widget

    def register_local_note(self, widget: NoteWidget) -> None:
        """Track a note the local UI just created, before the server has echoed it."""
        self.markers.mark(widget.id)
        self.add_note(widget)

    def remove_note(self, note_id: str) -> None:
        widget = self.notes.pop(note_id, None)
        if widget is not None:
            widget.destroy()

    def handle_remote_snapshot(self, snapshot: Iterable[NoteSnapshot | Mapping[str, Any]]) -> NoteDiff:
        snaps = [s for s in (coerce_snapshot(e) for e in snapshot) if s is not None]

        self.markers.purge_expired()
        diff = calculate_note_diff(self.notes, snaps, self.markers)

        for note_id in diff.to_remove:
            self.remove_note(note_id)
            logger.debug(f"Removed note: {note_id}")

        for snap in diff.to_update:
            widget = self.notes.get(snap.id)
            if widget is None:
                continue
            if widget.content != snap.content:
                widget.set_content(snap.content)
                logger.debug(f"Updated note content: {snap.id}")
            if widget.theme != snap.theme:
                widget.set_theme(snap.theme)
                logger.debug(f"Updated note theme: {snap.id}")

        for inst in diff.to_create:
            widget = self.factory(inst.note, inst.is_new_note)
            if widget is None:
                logger.debug(f"Note {inst.note.id} not shown yet, factory returned nothing")
                continue
            self.notes[inst.note.id] = widget
            logger.debug(f"Created note from snapshot: {inst.note.id} is_new_note={inst.is_new_note}")

        # Deferred creates keep their marker until a widget actually exists.
        for snap in snaps:
            if snap.id in self.notes:
                self.markers.confirm(snap.id)

        return diff

    def clear(self) -> None:
        for note_id in list(self.notes):
            self.remove_note(note_id)
        self.markers.clear()
