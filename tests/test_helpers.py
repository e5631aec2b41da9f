"""
Tests for utils/helpers.py utility functions.
"""

import logging

from core.models import Participant
from utils import helpers


class TestPeerIdsKey:
    """Tests for peer_ids_key function."""

    def test_joins_in_order(self):
        """Test ids are joined in sequence order."""
        key = helpers.peer_ids_key([Participant("b"), Participant("a")])
        assert key == "b,a"

    def test_empty(self):
        """Test empty sequence gives empty key."""
        assert helpers.peer_ids_key([]) == ""

    def test_flags_ignored(self):
        """Test only ids contribute to the key."""
        assert helpers.peer_ids_key([Participant("a", is_speaking=True)]) == helpers.peer_ids_key([Participant("a")])


class TestFormatRemainingLabel:
    """Tests for format_remaining_label function."""

    def test_label(self):
        """Test the overflow label text."""
        assert helpers.format_remaining_label(4) == "+4 other users"

    def test_negative_clamped(self):
        """Test negative counts are clamped to zero."""
        assert helpers.format_remaining_label(-1) == "+0 other users"


class TestLayoutAudit:
    """Tests for find_overlaps and out_of_bounds."""

    def test_find_overlaps(self, item):
        """Test overlapping pairs are reported once."""
        items = [item("A", 0, 0, 2, 1), item("B", 1, 0), item("C", 0, 1)]
        assert helpers.find_overlaps(items) == [("A", "B")]

    def test_no_overlaps(self, item):
        """Test side-by-side tiles are not reported."""
        assert helpers.find_overlaps([item("A", 0, 0), item("B", 1, 0)]) == []

    def test_out_of_bounds(self, item):
        """Test items past the column count or with bad sizes are flagged."""
        items = [item("A", 0, 0), item("B", 1, 0, 2, 1), item("C", -1, 0), item("D", 0, 1, 1, 0)]
        assert helpers.out_of_bounds(items, 2) == ["B", "C", "D"]


class TestLogLayoutSummary:
    """Tests for log_layout_summary function."""

    def test_logs_summary(self, item, caplog):
        """Test info summary for a clean layout."""
        layouts = {"lg": [item("A", 0, 0), item("B", 1, 0)], "xxs": [item("A", 0, 0), item("B", 0, 1)]}
        with caplog.at_level(logging.INFO):
            helpers.log_layout_summary(layouts, {"lg": 2, "xxs": 1}, "lg", remaining_count=3)
        assert "breakpoint=lg cols=2 tiles=2 remaining=3 degraded=0/2" in caplog.text
        assert "WARNING" not in caplog.text

    def test_warns_on_degraded_layout(self, item, caplog):
        """Test overlaps and out-of-bounds tiles are warned about."""
        layouts = {"lg": [item("A", 0, 0), item("B", 0, 0)], "sm": [item("A", 3, 0)]}
        with caplog.at_level(logging.INFO):
            helpers.log_layout_summary(layouts, {"lg": 2, "sm": 2}, "sm")
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert "degraded=2/2" in caplog.text
