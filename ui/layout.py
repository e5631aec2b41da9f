"""
Grid layout helpers for Video Grid.

Maps engine grid items onto QGridLayout cells and back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

if TYPE_CHECKING:
    from PyQt6 import QtWidgets

    from core.models import GridItem


def item_to_cell_span(item: GridItem) -> tuple[int, int, int, int]:
    """Return (row, col, row_span, col_span) for a grid item."""
    return item.y, item.x, max(1, item.h), max(1, item.w)


def grid_extent(items: Sequence[GridItem], columns: int) -> tuple[int, int]:
    """Return the (rows, cols) needed to show every item."""
    rows = max((item.y + item.h for item in items), default=1)
    cols = max([columns] + [item.x + item.w for item in items])
    return max(1, rows), max(1, cols)


def cell_at(x: float, y: float, width: float, height: float, rows: int, cols: int) -> tuple[int, int]:
    """Map a pixel position inside a width x height area to a (col, row) cell."""
    if width <= 0 or height <= 0:
        return 0, 0
    col = int(x * cols // width)
    row = int(y * rows // height)
    return min(max(0, col), cols - 1), min(max(0, row), rows - 1)


def apply_layout(
    grid: QtWidgets.QGridLayout,
    widgets: Mapping[str, QtWidgets.QWidget],
    items: Sequence[GridItem],
    columns: int,
) -> tuple[int, int]:
    """Place widgets on the grid per item. Widgets without an item are hidden."""
    for widget in widgets.values():
        grid.removeWidget(widget)

    placed = set()
    for item in items:
        widget = widgets.get(item.id)
        if widget is None:
            continue
        row, col, row_span, col_span = item_to_cell_span(item)
        grid.addWidget(widget, row, col, row_span, col_span)
        widget.show()
        placed.add(item.id)

    for peer_id, widget in widgets.items():
        if peer_id not in placed:
            widget.hide()

    rows, cols = grid_extent(items, columns)
    for c in range(grid.columnCount()):
        grid.setColumnStretch(c, 1 if c < cols else 0)
    for r in range(grid.rowCount()):
        grid.setRowStretch(r, 1 if r < rows else 0)
    return rows, cols
