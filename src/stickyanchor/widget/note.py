"""Note widget: positioning, drag and stacking for one sticky note."""

from __future__ import annotations

import logging
from typing import Callable

from ..geometry.coords import (
    apply_anchor_offset,
    offset_from_anchor,
    to_document,
    to_viewport,
)
from ..geometry.placement import calculate_best_position, clamp_to_viewport, slot_origin
from ..models import (
    AUTO_SLOT,
    DEFAULT_THEME,
    VALID_SLOTS,
    AnchorOffset,
    AnchorSlot,
    CustomPosition,
    LegacyAbsolute,
    PageCoordinate,
    PositionDescriptor,
)
from .anchor import AnchorRef
from .host import AnchorElement, Host, NoteSurface, PointerEvent
from .stacking import OverlayContext

logger = logging.getLogger(__name__)

PositionCallback = Callable[[PositionDescriptor], None]


class NoteWidget:
    """Owns one note's position descriptor, anchor handle and z-order.

    The widget renders in viewport coordinates through its NoteSurface and
    re-reads anchor geometry on every update, so it can be repositioned at any
    time after the page has reflowed.

    `position` holds the slot (anchored notes) or page coordinate (page-level
    notes). `custom_position` is set by dragging an anchored note and wins over
    `position` until the anchor is replaced.
    """

    def __init__(
        self,
        note_id: str,
        *,
        surface: NoteSurface,
        host: Host,
        context: OverlayContext,
        anchor: AnchorElement | None = None,
        is_page_level: bool = False,
        position: AnchorSlot | PageCoordinate | None = None,
        custom_position: CustomPosition | None = None,
        content: str = "",
        theme: str = DEFAULT_THEME,
        on_position_change: PositionCallback | None = None,
    ) -> None:
        self.id = note_id
        self.surface = surface
        self.host = host
        self.context = context
        self.anchor = AnchorRef(anchor)
        self.is_page_level = is_page_level
        self.position = position
        self.custom_position = custom_position
        self.content = content
        self.theme = theme
        self.on_position_change = on_position_change or (lambda _desc: None)

        self.z_index = context.stacking.base
        self.is_visible = False
        self.is_dragging = False
        self.drag_offset = (0.0, 0.0)
        self._drag_result: PositionDescriptor | None = None
        self._destroyed = False

        self.surface.set_z_index(self.z_index)
        self.surface.set_theme(self.theme)
        self.surface.set_visible(False)
        self.host.add_event_listener("resize", self.handle_window_resize)
        self.host.add_event_listener("scroll", self.handle_scroll)
        self.update_position()

    # -- state ---------------------------------------------------------------

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def persisted_position(self) -> PositionDescriptor | None:
        """The descriptor the storage layer should hold for this note."""
        if self.custom_position is not None and not self.is_page_level:
            return self.custom_position
        return self.position

    # -- positioning ---------------------------------------------------------

    def compute_position(self) -> tuple[float, float]:
        """Viewport coordinates for the note given the current page geometry."""
        host = self.host
        custom = self.custom_position

        if isinstance(custom, LegacyAbsolute):
            return to_viewport(custom.x, custom.y, host.scroll_x, host.scroll_y)

        if self.is_page_level:
            return self._page_position()

        anchor_rect = self.anchor.rect()
        if anchor_rect is None:
            logger.debug(f"Note {self.id}: anchor missing or detached, using page fallback")
            return self._page_position()

        if isinstance(custom, AnchorOffset):
            return apply_anchor_offset(custom.offset_x, custom.offset_y, anchor_rect)

        position = self.position
        if isinstance(position, AnchorSlot) and position.slot in VALID_SLOTS:
            note_rect = self.surface.get_bounding_client_rect()
            slot = position.slot
            if slot == AUTO_SLOT:
                slot = calculate_best_position(
                    anchor_rect,
                    note_rect.width,
                    note_rect.height,
                    viewport_width=host.viewport_width,
                    viewport_height=host.viewport_height,
                    gap=self.context.slot_gap,
                )
            return slot_origin(slot, anchor_rect, note_rect.width, note_rect.height, self.context.slot_gap)

        if isinstance(position, PageCoordinate):
            return self._page_position()

        if position is not None:
            logger.warning(f"Note {self.id}: unusable position {position!r}, using default placement")
        return self.context.padding, self.context.padding

    def _page_position(self) -> tuple[float, float]:
        if isinstance(self.position, PageCoordinate):
            doc_x, doc_y = self.position.page_x, self.position.page_y
        else:
            doc_x = doc_y = self.context.padding
        return to_viewport(doc_x, doc_y, self.host.scroll_x, self.host.scroll_y)

    def update_position(self) -> None:
        if self._destroyed:
            return
        x, y = self.compute_position()
        self.surface.move_to(x, y)

    def reveal(self) -> None:
        """Render the note clamped into the viewport without touching its stored position.

        Used to surface a note whose anchor is off screen or gone.
        """
        if self._destroyed:
            return
        x, y = self.compute_position()
        rect = self.surface.get_bounding_client_rect()
        x, y = clamp_to_viewport(
            x,
            y,
            rect.width,
            rect.height,
            viewport_width=self.host.viewport_width,
            viewport_height=self.host.viewport_height,
            padding=self.context.padding,
        )
        self.surface.move_to(x, y)

    def handle_window_resize(self, _event: object = None) -> None:
        if self.is_page_level:
            self.update_position()
            return
        # Old document-space placements keep their spot across resizes.
        if isinstance(self.custom_position, LegacyAbsolute):
            return
        self.update_position()

    def handle_scroll(self, _event: object = None) -> None:
        self.update_position()

    def set_slot(self, slot: str) -> None:
        """Pick a named slot (or "auto") from the position picker."""
        if self._destroyed:
            return
        if slot not in VALID_SLOTS:
            logger.warning(f"Note {self.id}: ignoring unknown slot {slot!r}")
            return
        self.position = AnchorSlot(slot=slot)
        self.custom_position = None
        self.update_position()
        self.on_position_change(self.position)

    def update_anchor(self, new_anchor: AnchorElement | None) -> None:
        """Attach the note to a replacement element and start over from the default slot.

        Any dragged offset is dropped: it was measured against the old anchor.
        """
        if self._destroyed:
            return
        self._set_anchor_highlight(False)
        self.anchor = AnchorRef(new_anchor)
        if new_anchor is not None:
            self.is_page_level = False
        self.custom_position = None
        self.position = AnchorSlot(slot=self.context.default_slot)
        logger.debug(f"Note {self.id}: anchor replaced, reset to {self.position.slot}")
        self.on_position_change(self.position)
        self.update_position()

    # -- stacking ------------------------------------------------------------

    def apply_z_index(self) -> None:
        self.surface.set_z_index(self.z_index)

    def bring_to_front(self) -> None:
        self.context.stacking.bring_to_front(self)

    def handle_click(self, _event: object = None) -> None:
        self.bring_to_front()

    def focus(self) -> None:
        self.bring_to_front()

    # -- drag ----------------------------------------------------------------

    def handle_drag_start(self, event: PointerEvent) -> None:
        if self._destroyed or self.is_dragging:
            return
        self.bring_to_front()
        rect = self.surface.get_bounding_client_rect()
        self.drag_offset = (event.client_x - rect.left, event.client_y - rect.top)
        self._drag_result = None
        self.is_dragging = True
        self.host.add_event_listener("pointermove", self.handle_drag_move)
        self.host.add_event_listener("pointerup", self.handle_drag_end)

    def handle_drag_move(self, event: PointerEvent) -> None:
        if not self.is_dragging:
            return
        x = event.client_x - self.drag_offset[0]
        y = event.client_y - self.drag_offset[1]
        self.surface.move_to(x, y)

        if self.is_page_level:
            page_x, page_y = to_document(x, y, self.host.scroll_x, self.host.scroll_y)
            self.position = PageCoordinate(page_x=page_x, page_y=page_y)
            # A legacy document placement would otherwise win on the next render.
            self.custom_position = None
            self._drag_result = self.position
            return

        anchor_rect = self.anchor.rect()
        if anchor_rect is None:
            logger.debug(f"Note {self.id}: anchor vanished mid-drag, offset not updated")
            return
        offset_x, offset_y = offset_from_anchor(x, y, anchor_rect)
        self.custom_position = AnchorOffset(offset_x=offset_x, offset_y=offset_y)
        self._drag_result = self.custom_position

    def handle_drag_end(self, _event: object = None) -> None:
        if not self.is_dragging:
            return
        self._stop_drag()
        result, self._drag_result = self._drag_result, None
        if result is None:
            return
        logger.debug(f"Note {self.id}: drag ended at {result.to_dict()}")
        self.on_position_change(result)

    def _stop_drag(self) -> None:
        self.is_dragging = False
        self.host.remove_event_listener("pointermove", self.handle_drag_move)
        self.host.remove_event_listener("pointerup", self.handle_drag_end)

    # -- hover highlight -----------------------------------------------------

    def handle_pointer_enter(self, _event: object = None) -> None:
        self._set_anchor_highlight(True)

    def handle_pointer_leave(self, _event: object = None) -> None:
        self._set_anchor_highlight(False)

    def _set_anchor_highlight(self, on: bool) -> None:
        if self.context.selection_mode:
            return
        element = self.anchor.resolve()
        if element is None:
            return
        if on:
            element.add_class(self.context.highlight_class)
        else:
            element.remove_class(self.context.highlight_class)

    # -- content mirror and visibility ---------------------------------------

    def set_content(self, content: str) -> None:
        self.content = content

    def set_theme(self, theme: str) -> None:
        if self._destroyed:
            return
        self.theme = theme
        self.surface.set_theme(theme)

    def show(self) -> None:
        if self._destroyed:
            return
        self.is_visible = True
        self.surface.set_visible(True)
        self.update_position()

    def hide(self) -> None:
        if self._destroyed:
            return
        self.is_visible = False
        self.surface.set_visible(False)

    def destroy(self) -> None:
        if self._destroyed:
            return
        if self.is_dragging:
            self._stop_drag()
        self._set_anchor_highlight(False)
        self.host.remove_event_listener("resize", self.handle_window_resize)
        self.host.remove_event_listener("scroll", self.handle_scroll)
        self._destroyed = True
