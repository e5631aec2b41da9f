"""
Grid engine: the per-view layout state container.

Holds one GridItem list per breakpoint and recomputes them from explicit
inputs (ordered participants, template id, viewport). Updates go through
small reducer functions that return a new LayoutState. A recompute with
unchanged derived inputs leaves the state (and any manual arrangement)
untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Optional, Sequence

from core.breakpoints import (
    DEFAULT_BREAKPOINT_WIDTHS,
    FORCED_COLUMNS,
    Breakpoint,
    breakpoint_for_width,
    create_breakpoints,
)
from core.dimensions import (
    FORCED_ROWS,
    MAX_GRID_SIZE,
    GridDimensions,
    calculate_grid_dimensions,
    capacity_grid,
    max_visible_participants,
)
from core.models import REMAINING_ID, GridItem, Participant, ScreenShare
from core.participants import (
    DisplaySplit,
    ParticipantSelector,
    collect_screen_shares,
    default_ordering,
)
from core.reconciler import DragReconciler, DropResult
from core.templates import AUTO, build_layout, resolve_template


@dataclass(frozen=True)
class GridSettings:
    """Geometry knobs for the engine. Built from config at the edges."""

    container_padding: int = 16
    margin_size: int = 16
    min_row_height: int = 180
    max_row_height_limit: int = 500
    header_height: int = 100
    max_grid_size: int = MAX_GRID_SIZE
    forced_columns: int = FORCED_COLUMNS
    forced_rows: int = FORCED_ROWS
    breakpoint_widths: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_BREAKPOINT_WIDTHS))

    @classmethod
    def from_config(cls) -> "GridSettings":
        from core import config

        return cls(
            container_padding=config.CONTAINER_PADDING,
            margin_size=config.MARGIN_SIZE,
            min_row_height=config.MIN_ROW_HEIGHT,
            max_row_height_limit=config.MAX_ROW_HEIGHT_LIMIT,
            header_height=config.HEADER_HEIGHT,
            max_grid_size=config.MAX_GRID_SIZE,
            forced_columns=config.FORCED_COLUMNS,
            forced_rows=config.FORCED_ROWS,
            breakpoint_widths=config.breakpoint_widths(),
        )


# ============================================================
# STATE + REDUCERS
# ------------------------------------------------------------
@dataclass(frozen=True)
class LayoutState:
    layouts: Mapping[str, tuple[GridItem, ...]] = field(default_factory=dict)
    breakpoint: str = Breakpoint.LG.value

    def layout_for(self, breakpoint: Optional[str] = None) -> tuple[GridItem, ...]:
        return self.layouts.get(breakpoint or self.breakpoint, ())


def with_layouts(state: LayoutState, layouts: Mapping[str, Iterable[GridItem]]) -> LayoutState:
    return LayoutState(
        layouts={bp: tuple(items) for bp, items in layouts.items()},
        breakpoint=state.breakpoint,
    )


def with_breakpoint(state: LayoutState, breakpoint: str) -> LayoutState:
    if breakpoint == state.breakpoint:
        return state
    return LayoutState(layouts=state.layouts, breakpoint=breakpoint)


def with_breakpoint_layout(state: LayoutState, breakpoint: str, items: Iterable[GridItem]) -> LayoutState:
    layouts = dict(state.layouts)
    layouts[breakpoint] = tuple(items)
    return LayoutState(layouts=layouts, breakpoint=state.breakpoint)


# ============================================================
# ENGINE
# ------------------------------------------------------------
class GridEngine:
    """Owns the per-breakpoint layouts for one grid view."""

    def __init__(
        self,
        template_id: str = AUTO,
        viewport_width: float = 1280,
        viewport_height: float = 760,
        settings: Optional[GridSettings] = None,
    ):
        self.settings = settings or GridSettings()
        self.template_id = template_id
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height

        self.state = LayoutState(
            breakpoint=breakpoint_for_width(viewport_width, self.settings.breakpoint_widths).value
        )
        self.columns_by_breakpoint: dict[str, int] = {}
        self.dimensions: GridDimensions = self._dimensions(0)

        self._ordered: tuple[Participant, ...] = ()
        self._roster_ids: tuple[str, ...] = ()
        self._local_only = False
        self._selector = ParticipantSelector()
        self._reconciler = DragReconciler()
        self._key: Optional[tuple] = None

    # --------------------------------------------------------
    # Read side
    # --------------------------------------------------------
    @property
    def breakpoint(self) -> str:
        return self.state.breakpoint

    @property
    def layouts(self) -> Mapping[str, tuple[GridItem, ...]]:
        return self.state.layouts

    @property
    def current_layout(self) -> tuple[GridItem, ...]:
        return self.state.layout_for()

    @property
    def split(self) -> DisplaySplit:
        return self._selector.split

    @property
    def remaining_count(self) -> int:
        return self._selector.split.remaining_count

    @property
    def columns(self) -> int:
        return self.columns_by_breakpoint.get(self.breakpoint, self.dimensions.columns)

    @property
    def is_local_only(self) -> bool:
        """Only the local user is present; layouts are empty and the view shows them alone."""
        return self._local_only

    @property
    def local_participant(self) -> Optional[Participant]:
        return self._ordered[0] if self._local_only else None

    @property
    def is_dragging(self) -> bool:
        return self._reconciler.is_dragging

    @property
    def available_height(self) -> int:
        return max(0, int(self.viewport_height) - self.settings.header_height)

    # --------------------------------------------------------
    # Inputs
    # --------------------------------------------------------
    def update_participants(self, ordered: Sequence[Participant]) -> bool:
        """Take an already ordered display list. Returns True if layouts changed."""
        if any(p.peer_id == REMAINING_ID for p in ordered):
            logging.warning("Participant id %r is reserved for the overflow tile, skipping", REMAINING_ID)
            ordered = [p for p in ordered if p.peer_id != REMAINING_ID]
        ids = tuple(p.peer_id for p in ordered)
        if ids != self._roster_ids and self._reconciler.is_dragging:
            logging.debug("Roster changed mid-drag, cancelling gesture")
            self._reconciler.cancel()
        self._roster_ids = ids
        self._ordered = tuple(ordered)
        self._local_only = bool(ordered) and all(p.is_local and not p.is_screen_share for p in ordered)
        return self.recompute()

    def update_roster(
        self,
        roster: Sequence[Participant],
        local_id: Optional[str] = None,
        pinned_ids: Iterable[str] = (),
        screen_shares: Iterable[ScreenShare] = (),
        speaking_ids: Iterable[str] = (),
    ) -> bool:
        """Order the roster with the default policy, then update."""
        shares = collect_screen_shares(screen_shares, local_id)
        ordered = default_ordering(roster, local_id, pinned_ids, speaking_ids, shares)
        if local_id is not None:
            ordered = [
                p if p.is_local or p.peer_id != local_id else replace(p, is_local=True)
                for p in ordered
            ]
        return self.update_participants(ordered)

    def set_template(self, template_id: str) -> bool:
        if template_id == self.template_id:
            return False
        self._reconciler.cancel()
        self.template_id = template_id
        return self.recompute()

    def set_viewport(self, width: float, height: float) -> bool:
        """Apply a resize. Returns True if the breakpoint or layouts changed."""
        self.viewport_width = width
        self.viewport_height = height
        bp = breakpoint_for_width(width, self.settings.breakpoint_widths).value
        bp_changed = bp != self.state.breakpoint
        if bp_changed:
            self._reconciler.cancel()
            self.state = with_breakpoint(self.state, bp)
        changed = self.recompute()
        return changed or bp_changed

    # --------------------------------------------------------
    # Recompute
    # --------------------------------------------------------
    def _dimensions(self, total_items: int) -> GridDimensions:
        s = self.settings
        return calculate_grid_dimensions(
            total_items,
            self.available_height,
            template_id=self.template_id,
            breakpoint=self.state.breakpoint,
            container_padding=s.container_padding,
            margin_size=s.margin_size,
            min_row_height=s.min_row_height,
            max_row_height_limit=s.max_row_height_limit,
            max_grid_size=s.max_grid_size,
            forced_columns=s.forced_columns,
            forced_rows=s.forced_rows,
        )

    def recompute(self) -> bool:
        """Rebuild every breakpoint layout if the derived inputs changed."""
        s = self.settings
        template, _ = resolve_template(self.template_id)
        cap_cols, cap_rows = capacity_grid(
            template.id, s.max_grid_size, s.forced_columns, s.forced_rows
        )
        capacity = max_visible_participants(self.template_id, len(self._ordered), cap_cols, cap_rows)
        self._selector.update(self._ordered, capacity, template.id)
        split = self._selector.split

        total = split.total_display_items
        widest = calculate_grid_dimensions(
            total,
            self.available_height,
            template_id=template.id,
            max_grid_size=s.max_grid_size,
            forced_columns=s.forced_columns,
            forced_rows=s.forced_rows,
        )
        columns = create_breakpoints(total, widest.columns, template.id, s.forced_columns)
        self.dimensions = self._dimensions(total)

        key = (
            split.display_ids,
            split.remaining_ids,
            template.id,
            tuple(sorted(columns.items())),
            self._local_only,
        )
        if key == self._key:
            return False
        self._key = key
        self.columns_by_breakpoint = columns

        if self._local_only:
            # The local user alone is shown as a single view, not a grid.
            layouts = {bp: () for bp in columns}
        else:
            layouts = {
                bp: build_layout(self.template_id, split.to_display, cols, split.remaining_count)
                for bp, cols in columns.items()
            }
        self.state = with_layouts(self.state, layouts)
        logging.debug(
            "Layouts rebuilt template=%s shown=%d remaining=%d columns=%s",
            template.id,
            len(split.to_display),
            split.remaining_count,
            columns,
        )
        return True

    # --------------------------------------------------------
    # Drag and drop
    # --------------------------------------------------------
    def drag_start(self, item_id: str) -> bool:
        return self._reconciler.drag_start(self.current_layout, item_id)

    def drag_move(self, x: int, y: int) -> None:
        self._reconciler.drag_move(x, y)

    def drag_stop(self, item_id: str, x: Optional[int] = None, y: Optional[int] = None) -> Optional[DropResult]:
        """Resolve and commit the gesture to the current breakpoint's layout."""
        result = self._reconciler.drag_stop(
            self.current_layout, item_id, x, y, columns=self.columns, rows=self.dimensions.row_count
        )
        if result is None:
            return None
        self.state = with_breakpoint_layout(self.state, self.breakpoint, result.layout)
        return result

    def cancel_drag(self) -> None:
        self._reconciler.cancel()
