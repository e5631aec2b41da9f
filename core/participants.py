"""
Participant selection and overflow splitting.

Orders the roster for display, then slices it at a template's capacity into
tiles to show and participants summarised by the "+N" tile.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from core.models import REMAINING_ID, Participant, ScreenShare
from core.templates import SPOTLIGHT, resolve_template

LOCAL_ALIAS = "local"


@dataclass(frozen=True)
class DisplaySplit:
    to_display: tuple[Participant, ...] = ()
    remaining: tuple[Participant, ...] = ()

    @property
    def display_ids(self) -> tuple[str, ...]:
        return tuple(p.peer_id for p in self.to_display)

    @property
    def remaining_ids(self) -> tuple[str, ...]:
        return tuple(p.peer_id for p in self.remaining)

    @property
    def remaining_count(self) -> int:
        return len(self.remaining)

    @property
    def total_display_items(self) -> int:
        """Visible tiles plus the overflow tile when there is one."""
        return len(self.to_display) + (1 if self.remaining else 0)


def _is_local(participant: Participant, local_id: Optional[str]) -> bool:
    return participant.is_local or participant.peer_id in (local_id, LOCAL_ALIAS)


def collect_screen_shares(
    shares: Iterable[ScreenShare],
    local_id: Optional[str] = None,
) -> list[Participant]:
    """One synthetic tile per sharer, preferring a stream that carries video."""
    best: dict[str, ScreenShare] = {}
    for share in shares:
        owner = share.owner_id
        if owner == LOCAL_ALIAS and local_id:
            owner = local_id
        if not owner:
            continue
        existing = best.get(owner)
        if existing is None or (share.has_video and not existing.has_video):
            best[owner] = share

    tiles = []
    for owner, share in best.items():
        if not share.has_video:
            logging.debug("Screen share from %s has no video, skipping", owner)
            continue
        tiles.append(
            Participant(
                peer_id=f"{owner}-screen",
                display_name=f"{owner} - Screen Share",
                is_screen_share=True,
                owner_id=owner,
                is_local=owner == local_id,
            )
        )
    return tiles


def default_ordering(
    roster: Sequence[Participant],
    local_id: Optional[str] = None,
    pinned_ids: Iterable[str] = (),
    speaking_ids: Iterable[str] = (),
    screen_shares: Sequence[Participant] = (),
) -> list[Participant]:
    """
    Display order used by the client: screen shares, then the local user,
    then remote users that are sharing, pinned, speaking or have a stream.
    The sort is stable so join order breaks ties.
    """
    pinned = set(pinned_ids)
    speaking = set(speaking_ids)
    sharing = {s.owner_id for s in screen_shares}

    local = next((p for p in roster if _is_local(p, local_id)), None)
    others = [p for p in roster if not _is_local(p, local_id) and not p.is_screen_share]
    others = [
        replace(p, is_pinned=p.is_pinned or p.peer_id in pinned, is_speaking=p.is_speaking or p.peer_id in speaking)
        for p in others
    ]
    others.sort(
        key=lambda p: (
            p.peer_id not in sharing,
            not p.is_pinned,
            not p.is_speaking,
            not p.has_stream,
        )
    )

    ordered: list[Participant] = list(screen_shares)
    if local is not None:
        ordered.append(local)
    ordered.extend(others)
    return ordered


def split_participants(
    ordered: Sequence[Participant],
    capacity: int,
    template_id: Optional[str] = None,
) -> DisplaySplit:
    """Slice at capacity. Spotlight hides overflow instead of counting it."""
    capacity = max(0, capacity)
    if any(p.peer_id == REMAINING_ID for p in ordered):
        logging.warning("Participant id %r is reserved for the overflow tile, skipping", REMAINING_ID)
        ordered = [p for p in ordered if p.peer_id != REMAINING_ID]
    to_display = tuple(ordered[:capacity])
    remaining = tuple(ordered[capacity:])
    if resolve_template(template_id)[0].id == SPOTLIGHT:
        remaining = ()
    return DisplaySplit(to_display=to_display, remaining=remaining)


class ParticipantSelector:
    """Keeps the last split and reports a change only when id sequences differ."""

    def __init__(self):
        self._split = DisplaySplit()

    @property
    def split(self) -> DisplaySplit:
        return self._split

    def update(
        self,
        ordered: Sequence[Participant],
        capacity: int,
        template_id: Optional[str] = None,
    ) -> bool:
        new_split = split_participants(ordered, capacity, template_id)
        unchanged = (
            new_split.display_ids == self._split.display_ids
            and new_split.remaining_ids == self._split.remaining_ids
        )
        if unchanged:
            # Same tiles; keep the fresh flags for the renderer.
            self._split = new_split
            return False
        logging.debug(
            "Display set changed: %d shown, %d remaining",
            len(new_split.to_display),
            new_split.remaining_count,
        )
        self._split = new_split
        return True

    def reset(self) -> None:
        self._split = DisplaySplit()
