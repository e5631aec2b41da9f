"""
Tests for ui/grid_view.py - Controller signals, resize debounce and tile rendering.
"""

from unittest.mock import patch

import pytest

from core.engine import GridEngine
from core.models import REMAINING_ID, Participant
from core.templates import SPOTLIGHT


@pytest.fixture
def controller(qapp):
    from ui.grid_view import GridController

    return GridController(GridEngine(viewport_width=1280, viewport_height=760), debounce_ms=0)


def record(signal):
    received = []
    signal.connect(received.append)
    return received


class TestGridController:
    def test_update_emits_layouts(self, controller, make_roster):
        """Test a roster change emits layouts and dimensions."""
        layouts = record(controller.layouts_changed)
        dims = record(controller.dimensions_changed)
        assert controller.update_participants(make_roster(3))
        assert len(layouts) == 1
        assert set(layouts[0]) == {"lg", "md", "sm", "xs", "xxs"}
        assert dims[-1] == controller.engine.dimensions

    def test_unchanged_update_is_silent(self, controller, make_roster):
        """Test an unchanged roster emits nothing."""
        controller.update_participants(make_roster(3))
        layouts = record(controller.layouts_changed)
        assert controller.update_participants(make_roster(3)) is False
        assert layouts == []

    def test_resize_changes_breakpoint(self, controller, make_roster):
        """Test a narrow resize emits the new breakpoint."""
        controller.update_participants(make_roster(2))
        breakpoints = record(controller.breakpoint_changed)
        controller.notify_resize(320, 700)
        assert breakpoints == ["xxs"]
        assert controller.engine.columns == 1

    def test_resize_debounced(self, qapp, make_roster):
        """Test only the last size of a burst reaches the engine."""
        from ui.grid_view import GridController

        controller = GridController(GridEngine(viewport_width=1280), debounce_ms=500)
        controller.notify_resize(900, 700)
        controller.notify_resize(320, 700)
        assert controller.engine.breakpoint == "lg"
        controller.apply_pending_resize()
        assert controller.engine.viewport_width == 320
        assert controller.engine.breakpoint == "xxs"

    def test_drag_stop_commits(self, controller, make_roster):
        """Test a drop is committed and emitted."""
        controller.update_participants(make_roster(4))
        layouts = record(controller.layouts_changed)
        assert controller.drag_start("p2")
        controller.drag_stop("p2", 0, 0)
        assert len(layouts) == 1
        moved = {i.id: (i.x, i.y) for i in controller.engine.current_layout}
        assert moved["p2"] == (0, 0)

    def test_drag_stop_without_start_is_silent(self, controller, make_roster):
        """Test a stray drop emits nothing."""
        controller.update_participants(make_roster(4))
        layouts = record(controller.layouts_changed)
        controller.drag_stop("p2", 0, 0)
        assert layouts == []

    def test_drag_stop_error_cancels_drag(self, controller, make_roster, caplog):
        """Test an engine error during a drop is logged and the drag cancelled."""
        controller.update_participants(make_roster(4))
        controller.drag_start("p2")
        with patch.object(controller.engine, "drag_stop", side_effect=RuntimeError("boom")):
            controller.drag_stop("p2", 0, 0)
        assert not controller.engine.is_dragging
        assert "drag_stop" in caplog.text

    def test_set_template(self, controller, make_roster):
        """Test switching template rebuilds the layout."""
        controller.update_participants(make_roster(4))
        assert controller.set_template(SPOTLIGHT)
        assert len(controller.engine.current_layout) == 1


class TestVideoGridWidget:
    def test_render_creates_tiles(self, controller, make_roster):
        """Test one tile per layout item, including the overflow tile."""
        from ui.grid_view import VideoGridWidget

        widget = VideoGridWidget(controller)
        controller.update_participants(make_roster(13))
        assert set(widget.tiles) == {f"p{i}" for i in range(1, 12)} | {REMAINING_ID}
        assert widget.tiles[REMAINING_ID].text() == "+2 other users"

    def test_render_drops_departed_tiles(self, controller, make_roster):
        """Test tiles for departed participants are removed."""
        from ui.grid_view import VideoGridWidget

        widget = VideoGridWidget(controller)
        controller.update_participants(make_roster(4))
        controller.update_participants(make_roster(2))
        assert set(widget.tiles) == {"p1", "p2"}

    def test_local_only_shows_single_tile(self, controller):
        """Test a lone local user is rendered as one tile filling the view."""
        from ui.grid_view import VideoGridWidget

        widget = VideoGridWidget(controller)
        controller.update_participants([Participant("me", "You", is_local=True)])
        assert list(widget.tiles) == ["me"]
        assert widget.tiles["me"].text() == "You"
        assert widget.grid.getItemPosition(widget.grid.indexOf(widget.tiles["me"])) == (0, 0, 1, 1)


class TestParticipantTile:
    def test_flags_in_text(self, qapp, item):
        """Test participant flags are shown under the name."""
        from ui.grid_view import ParticipantTile

        tile = ParticipantTile("a")
        tile.update_from(item("a", 0, 0), Participant("a", "Alice", is_pinned=True, mic_off=True))
        assert tile.text() == "Alice\n(pinned, muted)"

    def test_unknown_participant_shows_id(self, qapp, item):
        """Test a tile without a participant shows its id."""
        from ui.grid_view import ParticipantTile

        tile = ParticipantTile("ghost")
        tile.update_from(item("ghost", 0, 0), None)
        assert tile.text() == "ghost"
