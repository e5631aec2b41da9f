"""
Drag and drop reconciliation for the participant grid.

A dropped tile may land on other tiles. Tiles that are wider than the
dragged one win and the drop is reverted; otherwise every covered tile is
moved to the first free rectangle (row-major) of an occupancy map. When no
free rectangle exists the tile is left overlapping and a warning is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

import numpy as np

from core.models import GridItem


@dataclass(frozen=True)
class DropResult:
    layout: tuple[GridItem, ...]
    reverted: bool = False
    relocated: tuple[str, ...] = ()
    unresolved: tuple[str, ...] = ()


# ============================================================
# OCCUPANCY MAP
# ------------------------------------------------------------
def check_overlap(a: GridItem, b: GridItem) -> bool:
    """Inclusive cell-bounds rectangle intersection."""
    return not (
        a.right < b.x
        or a.x > b.right
        or a.bottom < b.y
        or a.y > b.bottom
    )


def mark_occupied(grid: np.ndarray, item: GridItem) -> None:
    """Claim an item's cells; parts outside the map are ignored."""
    rows, cols = grid.shape
    x0, y0 = max(0, item.x), max(0, item.y)
    x1, y1 = min(cols, item.x + item.w), min(rows, item.y + item.h)
    if x0 < x1 and y0 < y1:
        grid[y0:y1, x0:x1] = True


def create_occupancy_map(
    layout: Iterable[GridItem],
    columns: int,
    rows: int,
    exclude: Iterable[str] = (),
) -> np.ndarray:
    excluded = set(exclude)
    grid = np.zeros((max(0, rows), max(1, columns)), dtype=bool)
    for item in layout:
        if item.id not in excluded:
            mark_occupied(grid, item)
    return grid


def find_empty_slot(grid: np.ndarray, w: int, h: int) -> Optional[tuple[int, int]]:
    """First (x, y) in row-major order where a w x h block is free."""
    rows, cols = grid.shape
    for y in range(rows - h + 1):
        for x in range(cols - w + 1):
            if not grid[y:y + h, x:x + w].any():
                return x, y
    return None


def layout_extent(layout: Iterable[GridItem]) -> int:
    """Number of rows the layout reaches down to."""
    return max((item.y + item.h for item in layout), default=0)


# ============================================================
# DROP RESOLUTION
# ------------------------------------------------------------
def _clamp_position(item: GridItem, x: int, y: int, columns: int) -> tuple[int, int]:
    max_x = max(0, columns - item.w)
    return min(max(0, int(x)), max_x), max(0, int(y))


def resolve_drop(
    layout: Sequence[GridItem],
    item_id: str,
    x: int,
    y: int,
    origin: tuple[int, int],
    columns: int,
    rows: Optional[int] = None,
) -> DropResult:
    """
    Reconcile a tile dropped at (x, y).

    ``rows`` bounds the grid height. Without it the grid grows downward far
    enough for every covered tile to be placed below the current content.
    Covered tiles avoid the dragged tile's origin first, then fall back to
    any free rectangle.
    """
    working = list(layout)
    index = next((i for i, item in enumerate(working) if item.id == item_id), None)
    if index is None:
        logging.debug("Drop for unknown item %s ignored", item_id)
        return DropResult(layout=tuple(working))

    columns = max(1, columns)
    moved = working[index].moved_to(*_clamp_position(working[index], x, y, columns))
    working[index] = moved

    overlapped = [item for item in working if item.id != moved.id and check_overlap(moved, item)]
    if not overlapped:
        return DropResult(layout=tuple(working))

    if any(item.w > moved.w for item in overlapped):
        logging.debug("Drop of %s onto a wider tile, reverting to %s", moved.id, origin)
        working[index] = moved.moved_to(*origin)
        return DropResult(layout=tuple(working), reverted=True)

    if rows is None:
        map_rows = layout_extent(working) + max(item.h for item in overlapped)
    else:
        map_rows = max(rows, layout_extent(working))
    vacated = GridItem(id=moved.id, x=origin[0], y=origin[1], w=moved.w, h=moved.h)

    relocated: list[str] = []
    unresolved: list[str] = []
    for target in overlapped:
        pos = next(i for i, item in enumerate(working) if item.id == target.id)
        current = working[pos]
        occupancy = create_occupancy_map(working, columns, map_rows, exclude=(current.id,))

        reserved = occupancy.copy()
        mark_occupied(reserved, vacated)
        slot = find_empty_slot(reserved, current.w, current.h)
        if slot is None:
            slot = find_empty_slot(occupancy, current.w, current.h)

        if slot is None:
            logging.warning("No free slot for grid item %s, leaving it overlapping", current.id)
            unresolved.append(current.id)
            continue
        working[pos] = current.moved_to(*slot)
        relocated.append(current.id)

    return DropResult(
        layout=tuple(working),
        relocated=tuple(relocated),
        unresolved=tuple(unresolved),
    )


# ============================================================
# DRAG STATE MACHINE
# ------------------------------------------------------------
class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESOLVING = "resolving"


class DragReconciler:
    """Tracks one drag gesture at a time and resolves it on release."""

    def __init__(self):
        self.state = DragState.IDLE
        self.active_id: Optional[str] = None
        self.origin: Optional[tuple[int, int]] = None
        self.position: Optional[tuple[int, int]] = None

    @property
    def is_dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def drag_start(self, layout: Sequence[GridItem], item_id: str) -> bool:
        """Capture the pre-drag position. Static and unknown items are not draggable."""
        if self.state is not DragState.IDLE:
            self.cancel()
        item = next((i for i in layout if i.id == item_id), None)
        if item is None or item.static:
            logging.debug("Drag start ignored for %s", item_id)
            return False
        self.state = DragState.DRAGGING
        self.active_id = item.id
        self.origin = (item.x, item.y)
        self.position = (item.x, item.y)
        return True

    def drag_move(self, x: int, y: int) -> None:
        """Track the pointer; the layout is only committed on release."""
        if self.state is DragState.DRAGGING:
            self.position = (x, y)

    def drag_stop(
        self,
        layout: Sequence[GridItem],
        item_id: str,
        x: Optional[int] = None,
        y: Optional[int] = None,
        columns: int = 1,
        rows: Optional[int] = None,
    ) -> Optional[DropResult]:
        """Resolve the drop. Returns None when there is nothing to commit."""
        if self.state is not DragState.DRAGGING or item_id != self.active_id:
            logging.debug("Drag stop for %s without a matching drag start", item_id)
            self.cancel()
            return None
        if all(item.id != item_id for item in layout):
            logging.debug("Drag stop for %s which is no longer in the layout", item_id)
            self.cancel()
            return None

        if x is None or y is None:
            x, y = self.position
        origin = self.origin
        self.state = DragState.RESOLVING
        try:
            return resolve_drop(layout, item_id, x, y, origin, columns, rows)
        finally:
            self.cancel()

    def cancel(self) -> None:
        self.state = DragState.IDLE
        self.active_id = None
        self.origin = None
        self.position = None
