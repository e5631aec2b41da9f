"""
Tests for core/breakpoints.py - Viewport buckets and column counts.
"""

import pytest

from core.breakpoints import (
    BREAKPOINT_ORDER,
    Breakpoint,
    breakpoint_for_width,
    create_breakpoints,
)
from core.templates import SIDEBAR, SPOTLIGHT, TOP_HERO_BAR


class TestBreakpointForWidth:
    @pytest.mark.parametrize(
        "width,expected",
        [(1920, Breakpoint.LG), (1200, Breakpoint.LG), (1199, Breakpoint.MD), (996, Breakpoint.MD),
         (800, Breakpoint.SM), (480, Breakpoint.XS), (320, Breakpoint.XXS), (0, Breakpoint.XXS)],
    )
    def test_default_widths(self, width, expected):
        """Test default widths map to the expected breakpoint."""
        assert breakpoint_for_width(width) is expected

    def test_custom_widths(self):
        """Test custom widths are honoured."""
        widths = {"lg": 2000, "md": 1500, "sm": 1000, "xs": 500, "xxs": 0}
        assert breakpoint_for_width(1600, widths) is Breakpoint.MD

    def test_idempotent(self):
        """Test repeated calls give the same result."""
        assert {breakpoint_for_width(777) for _ in range(10)} == {Breakpoint.SM}

    def test_order_widest_first(self):
        """Test breakpoints are ordered widest first."""
        assert [bp.value for bp in BREAKPOINT_ORDER] == ["lg", "md", "sm", "xs", "xxs"]


class TestCreateBreakpoints:
    def test_two_items_auto(self):
        """Test two tiles keep a row until xxs."""
        cols = create_breakpoints(2, 2)
        assert cols["lg"] == 2
        assert cols["sm"] == 2
        assert cols["xxs"] == 1

    def test_three_items_auto(self):
        """Test three tiles keep a row until xxs."""
        cols = create_breakpoints(3, 3)
        assert (cols["lg"], cols["md"], cols["sm"], cols["xs"]) == (3, 3, 3, 3)
        assert cols["xxs"] == 1

    def test_many_items_narrow_to_two(self):
        """Test larger rosters narrow to two columns at sm and xs."""
        cols = create_breakpoints(12, 4)
        assert cols == {"lg": 4, "md": 4, "sm": 2, "xs": 2, "xxs": 1}

    @pytest.mark.parametrize("template_id", [SIDEBAR, SPOTLIGHT, TOP_HERO_BAR])
    def test_named_templates_forced(self, template_id):
        """Test named templates use four columns everywhere."""
        assert set(create_breakpoints(2, 2, template_id).values()) == {4}
