"""
Data types shared by the layout engine.

Participants are read-only snapshots owned by the session. Grid items are
immutable cell rectangles; every change produces a new item.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

REMAINING_ID = "remaining"


@dataclass(frozen=True)
class Participant:
    """One tile-worthy roster entry (a person or a synthetic screen share)."""

    peer_id: str
    display_name: str = ""
    is_local: bool = False
    is_screen_share: bool = False
    is_pinned: bool = False
    is_speaking: bool = False
    video_off: bool = False
    mic_off: bool = False
    has_stream: bool = True
    owner_id: Optional[str] = None  # sharer of a screen-share entry
    avatar: Optional[Mapping[str, Any]] = field(default=None, compare=False, hash=False)

    @property
    def label(self) -> str:
        if self.is_screen_share:
            return f"{self.owner_id or self.peer_id} - Screen Share"
        return self.display_name or self.peer_id


@dataclass(frozen=True)
class ScreenShare:
    """An active screen-share stream announced by the session."""

    owner_id: str
    stream: Any = field(default=None, compare=False, hash=False)
    has_video: bool = True


@dataclass(frozen=True)
class GridItem:
    """A tile rectangle in cell units."""

    id: str
    x: int
    y: int
    w: int = 1
    h: int = 1
    min_w: int = 1
    min_h: int = 1
    max_w: Optional[int] = None
    max_h: Optional[int] = None
    static: bool = False
    overflow: int = 0  # participants summarised by the sentinel

    @property
    def is_remaining(self) -> bool:
        return self.id == REMAINING_ID

    @property
    def label(self) -> str:
        return f"+{self.overflow}" if self.is_remaining else self.id

    @property
    def right(self) -> int:
        """Last occupied column (inclusive)."""
        return self.x + self.w - 1

    @property
    def bottom(self) -> int:
        """Last occupied row (inclusive)."""
        return self.y + self.h - 1

    def moved_to(self, x: int, y: int) -> "GridItem":
        return replace(self, x=x, y=y)


def remaining_item(x: int, y: int, count: int) -> GridItem:
    """Build the "+N" overflow sentinel at a cell."""
    return GridItem(
        id=REMAINING_ID,
        x=x,
        y=y,
        w=1,
        h=1,
        min_w=1,
        min_h=1,
        max_w=2,
        max_h=2,
        overflow=count,
    )
