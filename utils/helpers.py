"""
Utility functions for Video Grid.

Includes id-sequence keys, overflow labels and layout audit logging.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from core.reconciler import check_overlap

if TYPE_CHECKING:
    from core.models import GridItem, Participant


def peer_ids_key(participants: Iterable[Participant]) -> str:
    """Comma-joined peer ids, used to compare display sequences."""
    return ",".join(p.peer_id for p in participants)


def format_remaining_label(count: int) -> str:
    """Text for the overflow tile."""
    return f"+{max(0, count)} other users"


def find_overlaps(items: Sequence[GridItem]) -> list[tuple[str, str]]:
    """Pairs of item ids whose rectangles intersect."""
    return [
        (a.id, b.id)
        for a, b in itertools.combinations(items, 2)
        if check_overlap(a, b)
    ]


def out_of_bounds(items: Iterable[GridItem], columns: int) -> list[str]:
    """Ids of items that break x >= 0, y >= 0, w/h >= 1 or x + w <= columns."""
    return [
        item.id
        for item in items
        if item.x < 0 or item.y < 0 or item.w < 1 or item.h < 1 or item.x + item.w > columns
    ]


def log_layout_summary(
    layouts: Mapping[str, Sequence[GridItem]],
    columns_by_breakpoint: Mapping[str, int],
    current_breakpoint: str,
    remaining_count: int = 0,
) -> None:
    """Log a summary of the committed layouts.

    Args:
        layouts: Grid items per breakpoint
        columns_by_breakpoint: Column count per breakpoint
        current_breakpoint: Breakpoint the view is rendering
        remaining_count: Participants hidden behind the overflow tile
    """
    degraded = 0
    for bp, items in layouts.items():
        overlaps = find_overlaps(items)
        if overlaps:
            degraded += 1
            logging.warning("Layout %s has overlapping tiles: %s", bp, overlaps)
        bad = out_of_bounds(items, columns_by_breakpoint.get(bp, 0))
        if bad:
            degraded += 1
            logging.warning("Layout %s has tiles outside the grid: %s", bp, bad)

    current = layouts.get(current_breakpoint, ())
    logging.info(
        "Layout breakpoint=%s cols=%d tiles=%d remaining=%d degraded=%d/%d",
        current_breakpoint,
        columns_by_breakpoint.get(current_breakpoint, 0),
        len(current),
        remaining_count,
        degraded,
        len(layouts),
    )
