"""
Layout templates for the participant grid.

Each template is a pure placement function
``(visible, columns, remaining_count) -> list[GridItem]`` plus an optional
capacity function ``(total, columns, rows) -> int``. Templates are looked up
by id in a registry; unknown ids fall back to the auto (row-major) template.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Union

from core.models import REMAINING_ID, GridItem, Participant, remaining_item

ParticipantLike = Union[Participant, str]
PlacementFn = Callable[[Sequence[ParticipantLike], int, int], list[GridItem]]
CapacityFn = Callable[[int, int, int], int]

AUTO = "auto"
SIDEBAR = "sidebar"
SPOTLIGHT = "spotlight"
TOP_HERO_BAR = "top-hero-bar"

SIDEBAR_SLOTS = 3
SIDEBAR_HERO_ROWS = 3
SPOTLIGHT_ROWS = 3
HERO_ROWS = 2


@dataclass(frozen=True)
class LayoutTemplate:
    id: str
    name: str
    description: str
    icon: str
    place: PlacementFn
    capacity: Optional[CapacityFn] = None


def _peer_id(participant: ParticipantLike) -> str:
    if isinstance(participant, str):
        return participant
    return participant.peer_id


def _tile(peer_id: str, x: int, y: int, **bounds) -> GridItem:
    return GridItem(id=peer_id, x=x, y=y, **bounds)


# ============================================================
# PLACEMENT FUNCTIONS
# ------------------------------------------------------------
def place_auto(visible: Sequence[ParticipantLike], columns: int, remaining_count: int) -> list[GridItem]:
    """Row-major fill, one cell per tile, sentinel in the next cell."""
    cols = max(1, columns)
    layout = [
        _tile(_peer_id(p), idx % cols, idx // cols, max_w=2, max_h=2)
        for idx, p in enumerate(visible)
    ]
    if remaining_count > 0:
        n = len(layout)
        layout.append(remaining_item(n % cols, n // cols, remaining_count))
    return layout


def place_sidebar(visible: Sequence[ParticipantLike], columns: int, remaining_count: int) -> list[GridItem]:
    """Hero on the left, up to three tiles stacked in the right column."""
    if not visible:
        return []
    cols = max(1, columns)
    hero_id = _peer_id(visible[0])
    side = [_peer_id(p) for p in visible[1:1 + SIDEBAR_SLOTS]]

    if cols < 2:
        # Not enough width for a side column: stack everything vertically.
        layout = [_tile(hero_id, 0, 0, h=HERO_ROWS, max_w=1, max_h=SIDEBAR_HERO_ROWS)]
        for idx, peer_id in enumerate(side):
            layout.append(_tile(peer_id, 0, HERO_ROWS + idx, max_w=1, max_h=1))
        if remaining_count > 0:
            layout.append(remaining_item(0, HERO_ROWS + len(side), remaining_count))
        return layout

    if len(visible) == 1 and remaining_count <= 0:
        return [_tile(hero_id, 0, 0, w=cols, h=SIDEBAR_HERO_ROWS, max_w=cols, max_h=SIDEBAR_HERO_ROWS)]

    side_x = cols - 1
    layout = [
        _tile(
            hero_id, 0, 0,
            w=side_x, h=SIDEBAR_HERO_ROWS,
            min_w=min(2, side_x), min_h=2,
            max_w=side_x, max_h=SIDEBAR_HERO_ROWS,
        )
    ]
    for idx, peer_id in enumerate(side):
        layout.append(_tile(peer_id, side_x, idx, max_w=1, max_h=1))
    if remaining_count > 0:
        layout.append(remaining_item(side_x, len(side), remaining_count))
    return layout


def place_spotlight(visible: Sequence[ParticipantLike], columns: int, remaining_count: int) -> list[GridItem]:
    """Only the first participant, across the whole grid. Never shows overflow."""
    if not visible:
        return []
    cols = max(1, columns)
    return [
        _tile(
            _peer_id(visible[0]), 0, 0,
            w=cols, h=SPOTLIGHT_ROWS,
            min_w=cols, min_h=SPOTLIGHT_ROWS,
            max_w=cols, max_h=SPOTLIGHT_ROWS,
        )
    ]


def place_top_hero_bar(visible: Sequence[ParticipantLike], columns: int, remaining_count: int) -> list[GridItem]:
    """Hero spanning all columns over two rows, the rest in one bottom row."""
    if not visible:
        return []
    cols = max(1, columns)
    layout = [
        _tile(
            _peer_id(visible[0]), 0, 0,
            w=cols, h=HERO_ROWS,
            min_w=cols, min_h=HERO_ROWS,
            max_w=cols, max_h=HERO_ROWS,
        )
    ]
    bar = [_peer_id(p) for p in visible[1:1 + cols]]
    for idx, peer_id in enumerate(bar):
        layout.append(_tile(peer_id, idx, HERO_ROWS))
    if remaining_count > 0:
        slot = len(bar)
        if slot < cols:
            layout.append(remaining_item(slot, HERO_ROWS, remaining_count))
        else:
            layout.append(remaining_item(0, HERO_ROWS + 1, remaining_count))
    return layout


# ============================================================
# CAPACITY FUNCTIONS
# ------------------------------------------------------------
def auto_capacity(total: int, columns: int, rows: int) -> int:
    """Every cell but one; the last is reserved for the overflow tile."""
    return max(0, columns * rows - 1)


def sidebar_capacity(total: int, columns: int, rows: int) -> int:
    slots = 1 + SIDEBAR_SLOTS
    return slots if total <= slots else slots - 1


def spotlight_capacity(total: int, columns: int, rows: int) -> int:
    return 1


def top_hero_bar_capacity(total: int, columns: int, rows: int) -> int:
    slots = 1 + max(1, columns)
    return slots if total <= slots else slots - 1


# ============================================================
# REGISTRY
# ------------------------------------------------------------
_BUILTIN_TEMPLATES: tuple[LayoutTemplate, ...] = (
    LayoutTemplate(AUTO, "Auto", "Auto layout", "⚡", place_auto, auto_capacity),
    LayoutTemplate(
        SIDEBAR, "Sidebar", "Main speaker in the center, others on the side", "📱",
        place_sidebar, sidebar_capacity,
    ),
    LayoutTemplate(
        SPOTLIGHT, "Spotlight", "Only show the active speaker", "🎯",
        place_spotlight, spotlight_capacity,
    ),
    LayoutTemplate(
        TOP_HERO_BAR, "Top Hero + Bottom Bar",
        "Large frame occupies 2 rows on top, small frames on the bottom", "🧊",
        place_top_hero_bar, top_hero_bar_capacity,
    ),
)

_REGISTRY: dict[str, LayoutTemplate] = {t.id: t for t in _BUILTIN_TEMPLATES}

DEFAULT_TEMPLATE = _REGISTRY[AUTO]


def register_template(template: LayoutTemplate) -> None:
    """Add or replace a template. Built-in ids cannot be replaced."""
    if template.id in {t.id for t in _BUILTIN_TEMPLATES}:
        raise ValueError(f"Cannot replace built-in template {template.id!r}")
    _REGISTRY[template.id] = template


def unregister_template(template_id: str) -> None:
    if template_id in {t.id for t in _BUILTIN_TEMPLATES}:
        raise ValueError(f"Cannot remove built-in template {template_id!r}")
    _REGISTRY.pop(template_id, None)


def list_templates() -> list[LayoutTemplate]:
    return list(_REGISTRY.values())


def resolve_template(template_id: Optional[str]) -> tuple[LayoutTemplate, bool]:
    """Return (template, known). Unknown or empty ids resolve to auto."""
    if template_id and template_id in _REGISTRY:
        return _REGISTRY[template_id], True
    return DEFAULT_TEMPLATE, False


def is_auto(template_id: Optional[str]) -> bool:
    """True when the id places tiles with the auto template (including fallback)."""
    return resolve_template(template_id)[0].id == AUTO


def _unique(visible: Iterable[ParticipantLike]) -> list[ParticipantLike]:
    seen: set[str] = set()
    result = []
    for p in visible:
        peer_id = _peer_id(p)
        if peer_id == REMAINING_ID:
            logging.warning("Participant id %r is reserved for the overflow tile, skipping", peer_id)
            continue
        if peer_id in seen:
            logging.debug("Dropping duplicate participant %s from layout", peer_id)
            continue
        seen.add(peer_id)
        result.append(p)
    return result


def build_layout(
    template_id: Optional[str],
    visible: Sequence[ParticipantLike],
    columns: int,
    remaining_count: int = 0,
) -> list[GridItem]:
    """Place visible participants with the named template.

    Unknown templates and placement functions that raise both degrade to the
    auto placement; this never raises.
    """
    template, known = resolve_template(template_id)
    if not known and template_id:
        logging.warning("Unknown layout template %r, using %s", template_id, template.id)

    participants = _unique(visible)
    remaining_count = max(0, remaining_count)
    try:
        return template.place(participants, columns, remaining_count)
    except Exception:
        logging.exception("Layout template %s failed, using default placement", template.id)
        return place_auto(participants, columns, remaining_count)
