"""stickyanchor: keeps page-attached sticky notes glued to their elements.

Anchor-relative positioning for notes pinned to elements of an arbitrary web
page, plus reconciliation of locally rendered notes against an eventually
consistent server snapshot.

Public API:
- OverlayConfig
- NoteWidget, OverlayContext
- NoteSyncManager, calculate_note_diff
"""

from .config import OverlayConfig
from .sync.manager import NoteSyncManager
from .sync.reconciler import calculate_note_diff
from .widget.note import NoteWidget
from .widget.stacking import OverlayContext

__all__ = ["OverlayConfig", "NoteWidget", "OverlayContext", "NoteSyncManager", "calculate_note_diff"]
