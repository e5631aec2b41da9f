"""
Grid dimension and capacity calculations.

Calculates column/row counts, row height and overall grid height for a
number of display items, and how many participants a template can show
before the "+N" tile is needed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from core.breakpoints import FORCED_COLUMNS, create_breakpoints
from core.templates import AUTO, is_auto, resolve_template

FORCED_ROWS = 3
MAX_GRID_SIZE = 12


@dataclass(frozen=True)
class GridDimensions:
    columns: int
    row_height: int
    row_count: int
    total_height: int


def get_optimal_layout(num_items: int, max_grid_size: int = MAX_GRID_SIZE) -> tuple[int, int]:
    """Return a near-square (cols, rows) for N tiles, bounded by max_grid_size."""
    n = min(max(0, num_items), max(1, max_grid_size))
    if n <= 1:
        return 1, 1
    elif n == 2:
        return 2, 1
    elif n == 3:
        return 3, 1
    elif n == 4:
        return 2, 2
    elif n <= 6:
        return 3, 2
    elif n <= 9:
        return 3, 3
    elif n <= 12:
        return 4, 3
    else:
        cols = min(6, int(math.ceil(math.sqrt(n))))
        rows = (n + cols - 1) // cols
        return cols, rows


def calculate_grid_dimensions(
    total_display_items: int,
    available_height: float,
    template_id: Optional[str] = AUTO,
    breakpoint: Optional[str] = None,
    container_padding: int = 16,
    margin_size: int = 16,
    min_row_height: int = 180,
    max_row_height_limit: int = 500,
    max_grid_size: int = MAX_GRID_SIZE,
    forced_columns: int = FORCED_COLUMNS,
    forced_rows: int = FORCED_ROWS,
) -> GridDimensions:
    """
    Size the grid for the given number of display items.

    Columns come from the breakpoint's column count when a breakpoint is
    given, otherwise from the widest layout. Row height fits the rows into
    the available height, clamped to [min_row_height, max_row_height_limit].
    The grid is never shorter than the available height.
    """
    items = max(0, total_display_items)
    available = max(0, int(available_height))

    if is_auto(template_id):
        columns, _ = get_optimal_layout(items, max_grid_size)
    else:
        columns = max(1, forced_columns)

    if breakpoint is not None:
        per_breakpoint = create_breakpoints(items, columns, template_id, forced_columns)
        columns = per_breakpoint.get(str(getattr(breakpoint, "value", breakpoint)), columns)

    if is_auto(template_id):
        row_count = max(1, math.ceil(items / columns))
    else:
        row_count = max(1, forced_rows)

    usable = available - container_padding * 2
    fitted = (usable - (row_count - 1) * margin_size) // row_count
    upper = max(min_row_height, max_row_height_limit)
    row_height = int(max(min_row_height, min(fitted, upper)))

    content_height = row_count * (row_height + margin_size) + container_padding * 2
    total_height = max(content_height, available)

    return GridDimensions(
        columns=columns,
        row_height=row_height,
        row_count=row_count,
        total_height=total_height,
    )


def capacity_grid(
    template_id: Optional[str] = AUTO,
    max_grid_size: int = MAX_GRID_SIZE,
    forced_columns: int = FORCED_COLUMNS,
    forced_rows: int = FORCED_ROWS,
) -> tuple[int, int]:
    """Columns and rows a template's capacity is measured against."""
    if is_auto(template_id):
        return get_optimal_layout(max_grid_size, max_grid_size)
    return max(1, forced_columns), max(1, forced_rows)


def max_visible_participants(
    template_id: Optional[str],
    total_participants: int,
    columns: int,
    rows: int,
) -> int:
    """
    How many participants fit before the overflow tile is needed.

    Falls back to columns * rows - 1 when the template has no capacity
    function or it yields something unusable.
    """
    cols = max(1, columns)
    rows = max(1, rows)
    fallback = max(0, cols * rows - 1)
    template, _ = resolve_template(template_id)

    if template.capacity is None:
        logging.warning("Template %s has no capacity function, using %d", template.id, fallback)
        return fallback
    try:
        capacity = template.capacity(max(0, total_participants), cols, rows)
    except Exception:
        logging.warning("Capacity for template %s failed, using %d", template.id, fallback, exc_info=True)
        return fallback
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
        logging.warning("Capacity for template %s is indeterminate (%r), using %d", template.id, capacity, fallback)
        return fallback
    return capacity
