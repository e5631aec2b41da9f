"""Core modules for grid templates, sizing, participant selection and drag reconciliation."""

__all__ = [
    # config module exports
    "load_config",
    "apply_config",
    "configure_logging",
    "dprint",
    "CONFIG_PATH",
    # models module exports
    "Participant",
    "ScreenShare",
    "GridItem",
    "REMAINING_ID",
    # templates module exports
    "LayoutTemplate",
    "build_layout",
    "list_templates",
    "register_template",
    "resolve_template",
    # breakpoints module exports
    "Breakpoint",
    "breakpoint_for_width",
    "create_breakpoints",
    # dimensions module exports
    "GridDimensions",
    "calculate_grid_dimensions",
    "get_optimal_layout",
    "max_visible_participants",
    # participants module exports
    "DisplaySplit",
    "ParticipantSelector",
    "collect_screen_shares",
    "default_ordering",
    "split_participants",
    # reconciler module exports
    "DragReconciler",
    "DragState",
    "DropResult",
    "resolve_drop",
    # engine module exports
    "GridEngine",
    "GridSettings",
    "LayoutState",
]

from .config import load_config, apply_config, configure_logging, dprint, CONFIG_PATH
from .models import Participant, ScreenShare, GridItem, REMAINING_ID
from .templates import LayoutTemplate, build_layout, list_templates, register_template, resolve_template
from .breakpoints import Breakpoint, breakpoint_for_width, create_breakpoints
from .dimensions import GridDimensions, calculate_grid_dimensions, get_optimal_layout, max_visible_participants
from .participants import (
    DisplaySplit,
    ParticipantSelector,
    collect_screen_shares,
    default_ordering,
    split_participants,
)
from .reconciler import DragReconciler, DragState, DropResult, resolve_drop
from .engine import GridEngine, GridSettings, LayoutState
