from .manager import NoteSyncManager
from .markers import SessionMarkers, purge_expired
from .reconciler import CreateInstruction, NoteDiff, calculate_note_diff

__all__ = [
    "NoteSyncManager",
    "SessionMarkers",
    "purge_expired",
    "CreateInstruction",
    "NoteDiff",
    "calculate_note_diff",
]
