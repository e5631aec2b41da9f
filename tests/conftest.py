"""
Pytest configuration and shared fixtures for Video Grid tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.models import GridItem, Participant  # noqa: E402


@pytest.fixture
def temp_config_file() -> Generator[Path, None, None]:
    """Create a temporary config file for testing."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".ini", delete=False) as f:
        f.write("""
[logging]
level = DEBUG
file =
max_bytes = 1048576
backup_count = 2
stdout = false

[grid]
container_padding = 8
margin = 12
min_row_height = 120
max_row_height_limit = 400
header_height = 80
max_grid_size = 9
forced_columns = 4
forced_rows = 3
default_template = sidebar

[breakpoints]
lg = 1400
md = 1000
sm = 700
xs = 400
xxs = 0

[ui]
resize_debounce_ms = 50
initial_width = 1024
initial_height = 700
""")
        f.flush()
        yield Path(f.name)
    os.unlink(f.name)


@pytest.fixture
def make_roster() -> Callable[[int], list[Participant]]:
    """Factory for rosters of N remote participants named p1..pN."""

    def _make(count: int, **flags) -> list[Participant]:
        return [Participant(f"p{i}", f"Participant {i}", **flags) for i in range(1, count + 1)]

    return _make


@pytest.fixture
def item() -> Callable[..., GridItem]:
    """Shorthand GridItem builder: item("A", x, y, w, h)."""

    def _item(item_id: str, x: int, y: int, w: int = 1, h: int = 1, **kwargs) -> GridItem:
        return GridItem(id=item_id, x=x, y=y, w=w, h=h, **kwargs)

    return _item


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication instance for widget tests.

    This fixture is session-scoped to avoid creating multiple QApplication instances.
    """
    # Only import PyQt6 if running widget tests
    try:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        from PyQt6.QtWidgets import QApplication

        app = QApplication.instance()
        if app is None:
            app = QApplication([])
        yield app
    except ImportError:
        pytest.skip("PyQt6 not available")
