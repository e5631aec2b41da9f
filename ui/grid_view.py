"""
Qt adapter for the grid engine.

GridController turns resize notifications and drag gestures into engine
calls and re-emits the results as signals. VideoGridWidget renders
placeholder tiles for the committed layout.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from PyQt6 import QtCore, QtWidgets
from PyQt6.QtCore import Qt, pyqtSignal

from core.engine import GridEngine
from core.models import GridItem, Participant, ScreenShare
from ui.layout import apply_layout, cell_at, grid_extent
from utils.helpers import format_remaining_label, log_layout_summary


class GridController(QtCore.QObject):
    layouts_changed = pyqtSignal(object)
    breakpoint_changed = pyqtSignal(str)
    dimensions_changed = pyqtSignal(object)

    def __init__(self, engine: GridEngine, debounce_ms: int = 150, parent=None):
        """Wrap an engine; resize notifications are debounced by debounce_ms."""
        super().__init__(parent)
        self.engine = engine
        self.debounce_ms = max(0, int(debounce_ms))
        self._pending_size: Optional[tuple[int, int]] = None

        self._resize_timer = QtCore.QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.timeout.connect(self.apply_pending_resize)

    # --------------------------------------------------------
    # Inputs
    # --------------------------------------------------------
    def notify_resize(self, width: int, height: int) -> None:
        """Record a viewport size; the engine sees only the last one per burst."""
        self._pending_size = (int(width), int(height))
        if self.debounce_ms == 0:
            self.apply_pending_resize()
        else:
            self._resize_timer.start(self.debounce_ms)

    def apply_pending_resize(self) -> None:
        if self._pending_size is None:
            return
        width, height = self._pending_size
        self._pending_size = None
        try:
            old_bp = self.engine.breakpoint
            old_dims = self.engine.dimensions
            changed = self.engine.set_viewport(width, height)
            if self.engine.breakpoint != old_bp:
                logging.info("Breakpoint %s -> %s (width=%d)", old_bp, self.engine.breakpoint, width)
                self.breakpoint_changed.emit(self.engine.breakpoint)
            if self.engine.dimensions != old_dims:
                self.dimensions_changed.emit(self.engine.dimensions)
            if changed:
                self._emit_layouts()
        except Exception:
            logging.exception("apply_pending_resize")

    def update_participants(self, ordered: Sequence[Participant]) -> bool:
        return self._after(self.engine.update_participants(ordered))

    def update_roster(
        self,
        roster: Sequence[Participant],
        local_id: Optional[str] = None,
        pinned_ids: Iterable[str] = (),
        screen_shares: Iterable[ScreenShare] = (),
        speaking_ids: Iterable[str] = (),
    ) -> bool:
        return self._after(
            self.engine.update_roster(roster, local_id, pinned_ids, screen_shares, speaking_ids)
        )

    def set_template(self, template_id: str) -> bool:
        logging.info("Layout template -> %s", template_id)
        return self._after(self.engine.set_template(template_id))

    # --------------------------------------------------------
    # Drag
    # --------------------------------------------------------
    def drag_start(self, item_id: str) -> bool:
        return self.engine.drag_start(item_id)

    def drag_move(self, x: int, y: int) -> None:
        self.engine.drag_move(x, y)

    def drag_stop(self, item_id: str, x: Optional[int] = None, y: Optional[int] = None) -> None:
        try:
            result = self.engine.drag_stop(item_id, x, y)
        except Exception:
            logging.exception("drag_stop")
            self.engine.cancel_drag()
            return
        if result is None:
            return
        if result.reverted:
            logging.debug("Drop of %s reverted", item_id)
        self._emit_layouts()

    # --------------------------------------------------------
    # Output
    # --------------------------------------------------------
    def _after(self, changed: bool) -> bool:
        if changed:
            self.dimensions_changed.emit(self.engine.dimensions)
            self._emit_layouts()
        return changed

    def _emit_layouts(self) -> None:
        log_layout_summary(
            self.engine.layouts,
            self.engine.columns_by_breakpoint,
            self.engine.breakpoint,
            self.engine.remaining_count,
        )
        self.layouts_changed.emit(self.engine.layouts)


class ParticipantTile(QtWidgets.QLabel):
    """Placeholder tile: participant name, or the overflow count."""

    def __init__(self, item_id: str, parent=None):
        super().__init__(parent)
        self.item_id = item_id
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setMinimumSize(60, 40)
        self.setSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding,
        )
        self.setStyleSheet("background-color: #1f2937; color: #e5e7eb; border-radius: 8px;")

    def update_from(self, item: GridItem, participant: Optional[Participant]) -> None:
        if item.is_remaining:
            self.setText(format_remaining_label(item.overflow))
            return
        text = participant.label if participant is not None else item.id
        if participant is not None:
            flags = []
            if participant.is_pinned:
                flags.append("pinned")
            if participant.mic_off:
                flags.append("muted")
            if participant.video_off:
                flags.append("video off")
            if flags:
                text = f"{text}\n({', '.join(flags)})"
        self.setText(text)
        border = "2px solid #22c55e" if participant is not None and participant.is_speaking else "none"
        self.setStyleSheet(
            f"background-color: #1f2937; color: #e5e7eb; border-radius: 8px; border: {border};"
        )


class VideoGridWidget(QtWidgets.QWidget):
    """Renders the current breakpoint's layout and forwards drag gestures."""

    def __init__(self, controller: GridController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.tiles: dict[str, ParticipantTile] = {}
        self._drag_id: Optional[str] = None

        self.grid = QtWidgets.QGridLayout(self)
        self.grid.setContentsMargins(16, 16, 16, 16)
        self.grid.setSpacing(16)

        controller.layouts_changed.connect(self.render)
        controller.breakpoint_changed.connect(self.render)

    def _participants(self) -> dict[str, Participant]:
        split = self.controller.engine.split
        return {p.peer_id: p for p in split.to_display}

    def render(self, *_args) -> None:
        try:
            engine = self.controller.engine
            items = engine.current_layout
            participants = self._participants()
            columns = engine.columns
            local = engine.local_participant
            if local is not None:
                items = (GridItem(id=local.peer_id, x=0, y=0, static=True),)
                participants = {local.peer_id: local}
                columns = 1
            live_ids = {item.id for item in items}

            for item_id in list(self.tiles):
                if item_id not in live_ids:
                    tile = self.tiles.pop(item_id)
                    self.grid.removeWidget(tile)
                    tile.deleteLater()

            for item in items:
                tile = self.tiles.get(item.id)
                if tile is None:
                    tile = ParticipantTile(item.id, self)
                    tile.installEventFilter(self)
                    self.tiles[item.id] = tile
                tile.update_from(item, participants.get(item.id))

            apply_layout(self.grid, self.tiles, items, columns)
        except Exception:
            logging.exception("render grid")

    def _cell_for(self, tile: QtWidgets.QWidget, event) -> tuple[int, int]:
        pos = tile.mapTo(self, event.position().toPoint())
        rows, cols = grid_extent(self.controller.engine.current_layout, self.controller.engine.columns)
        return cell_at(pos.x(), pos.y(), self.width(), self.height(), rows, cols)

    def eventFilter(self, obj, event):
        if not isinstance(obj, ParticipantTile):
            return super().eventFilter(obj, event)
        try:
            et = event.type()
            if et == QtCore.QEvent.Type.MouseButtonPress and event.button() == Qt.MouseButton.LeftButton:
                if self.controller.drag_start(obj.item_id):
                    self._drag_id = obj.item_id
                    logging.debug("Drag start %s", obj.item_id)
                return True
            if et == QtCore.QEvent.Type.MouseMove and self._drag_id is not None:
                self.controller.drag_move(*self._cell_for(obj, event))
                return True
            if et == QtCore.QEvent.Type.MouseButtonRelease and self._drag_id is not None:
                col, row = self._cell_for(obj, event)
                drag_id, self._drag_id = self._drag_id, None
                logging.debug("Drag stop %s at (%d, %d)", drag_id, col, row)
                self.controller.drag_stop(drag_id, col, row)
                return True
        except Exception:
            logging.exception("tile event")
            self._drag_id = None
        return super().eventFilter(obj, event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        window = self.window()
        self.controller.notify_resize(self.width(), window.height() if window else self.height())
