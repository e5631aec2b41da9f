"""
Responsive breakpoints.

Maps viewport width to a named bucket and each bucket to a column count.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional

from core.templates import is_auto


class Breakpoint(str, Enum):
    """Viewport buckets, widest first."""

    LG = "lg"
    MD = "md"
    SM = "sm"
    XS = "xs"
    XXS = "xxs"


BREAKPOINT_ORDER: tuple[Breakpoint, ...] = (
    Breakpoint.LG,
    Breakpoint.MD,
    Breakpoint.SM,
    Breakpoint.XS,
    Breakpoint.XXS,
)

DEFAULT_BREAKPOINT_WIDTHS: dict[str, int] = {
    "lg": 1200,
    "md": 996,
    "sm": 768,
    "xs": 480,
    "xxs": 0,
}

FORCED_COLUMNS = 4


def breakpoint_for_width(width: float, widths: Optional[Mapping[str, int]] = None) -> Breakpoint:
    """Widest breakpoint whose minimum width fits ``width``."""
    widths = widths or DEFAULT_BREAKPOINT_WIDTHS
    for bp in BREAKPOINT_ORDER:
        if width >= widths.get(bp.value, 0):
            return bp
    return Breakpoint.XXS


def create_breakpoints(
    total_items: int,
    grid_cols: int,
    template_id: Optional[str] = "auto",
    forced_columns: int = FORCED_COLUMNS,
) -> dict[str, int]:
    """Column count per breakpoint.

    Named templates share one fixed coordinate space at every width. Auto
    keeps the computed column count on wide screens and narrows below that;
    two or three tiles keep a side-by-side row until the smallest bucket.
    """
    if not is_auto(template_id):
        cols = max(1, forced_columns)
        return {bp.value: cols for bp in BREAKPOINT_ORDER}

    cols = max(1, grid_cols)
    if total_items in (2, 3):
        narrow = total_items
    else:
        narrow = min(cols, 2)
    return {
        Breakpoint.LG.value: cols,
        Breakpoint.MD.value: cols,
        Breakpoint.SM.value: narrow,
        Breakpoint.XS.value: narrow,
        Breakpoint.XXS.value: 1,
    }
