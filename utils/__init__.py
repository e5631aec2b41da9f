"""Utility modules for labels, id keys and layout auditing."""

__all__ = [
    "peer_ids_key",
    "format_remaining_label",
    "find_overlaps",
    "out_of_bounds",
    "log_layout_summary",
]

from .helpers import (
    peer_ids_key,
    format_remaining_label,
    find_overlaps,
    out_of_bounds,
    log_layout_summary,
)
