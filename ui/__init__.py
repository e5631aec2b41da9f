"""UI modules for the grid controller, tiles and layout helpers."""

__all__ = [
    "GridController",
    "ParticipantTile",
    "VideoGridWidget",
    "apply_layout",
    "cell_at",
    "grid_extent",
    "item_to_cell_span",
]

from .grid_view import GridController, ParticipantTile, VideoGridWidget
from .layout import apply_layout, cell_at, grid_extent, item_to_cell_span
