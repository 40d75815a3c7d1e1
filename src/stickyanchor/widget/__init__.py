from .anchor import AnchorRef
from .host import AnchorElement, Host, NoteSurface, PointerEvent
from .note import NoteWidget
from .stacking import OverlayContext, StackingCounter

__all__ = [
    "AnchorRef",
    "AnchorElement",
    "Host",
    "NoteSurface",
    "PointerEvent",
    "NoteWidget",
    "OverlayContext",
    "StackingCounter",
]
