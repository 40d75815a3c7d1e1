from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Container, Iterable, Mapping

from ..models import DEFAULT_THEME, NoteSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateInstruction:
    """A note the widget manager should build.

    is_new_note is True when the note was created locally and the server is
    only now catching up; the manager should treat it as a confirmation rather
    than a fresh insertion.
    """
    note: NoteSnapshot
    is_new_note: bool = False


@dataclass
class NoteDiff:
    to_create: list[CreateInstruction] = field(default_factory=list)
    to_update: list[NoteSnapshot] = field(default_factory=list)
    to_remove: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.to_create or self.to_update or self.to_remove)


def _local_fields(note: Any) -> tuple[str, str]:
    if isinstance(note, Mapping):
        content, theme = note.get("content"), note.get("theme")
    else:
        content, theme = getattr(note, "content", None), getattr(note, "theme", None)
    return content or "", theme or DEFAULT_THEME


def coerce_snapshot(entry: Any) -> NoteSnapshot | None:
    if isinstance(entry, NoteSnapshot):
        return entry
    if isinstance(entry, Mapping) and entry.get("id") is not None:
        return NoteSnapshot.from_dict(entry)
    logger.warning(f"Skipping snapshot entry without an id: {entry!r}")
    return None


def calculate_note_diff(
    current_notes: Mapping[str, Any],
    remote_list: Iterable[NoteSnapshot | Mapping[str, Any]],
    session_markers: Container[str],
) -> NoteDiff:
    """Three-way diff between the local note map and one remote snapshot.

    Local entries only need `content` and `theme` (as attributes or keys).
    Ids present in `session_markers` are never removed, and creates for them
    are flagged `is_new_note`. The caller must not mutate `current_notes`
    while this runs and must pass one consistent snapshot per call.
    """
    remote: dict[str, NoteSnapshot] = {}
    for entry in remote_list:
        snap = coerce_snapshot(entry)
        if snap is None:
            continue
        if snap.id in remote:
            logger.warning(f"Duplicate note id in snapshot, keeping first: {snap.id}")
            continue
        remote[snap.id] = snap

    diff = NoteDiff()

    for note_id in current_notes:
        if note_id in remote:
            continue
        # Created locally and not echoed back yet: replication lag, not a delete.
        if note_id in session_markers:
            continue
        diff.to_remove.append(note_id)

    for note_id, snap in remote.items():
        if note_id in current_notes:
            if _local_fields(current_notes[note_id]) != (snap.content, snap.theme):
                diff.to_update.append(snap)
        else:
            diff.to_create.append(CreateInstruction(note=snap, is_new_note=note_id in session_markers))

    return diff
