"""
Configuration for Video Grid.

Loads config.ini, validates values and exposes them as module-level settings.
Settings are read by the controller and entrypoint, then passed into the
layout engine as explicit arguments.
"""

from __future__ import annotations

import configparser
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# ============================================================
# DEBUG PRINTS (disabled by default)
# ------------------------------------------------------------
DEBUG_PRINTS = False


def dprint(*args, **kwargs) -> None:
    """Lightweight debug print wrapper."""
    if DEBUG_PRINTS:
        print(*args, **kwargs)


# ============================================================
# DEFAULTS
# ------------------------------------------------------------
CONFIG_PATH = str(Path(__file__).resolve().parent.parent / "config.ini")
CONFIG_ENV_VAR = "VIDEO_GRID_CONFIG"

LOG_LEVEL = "INFO"
LOG_FILE = ""
LOG_MAX_BYTES = 1048576
LOG_BACKUP_COUNT = 2
LOG_STDOUT = True

# Grid geometry (pixels unless noted)
CONTAINER_PADDING = 16
MARGIN_SIZE = 16
MIN_ROW_HEIGHT = 180
MAX_ROW_HEIGHT_LIMIT = 500
HEADER_HEIGHT = 100
MAX_GRID_SIZE = 12  # cells
FORCED_COLUMNS = 4  # named templates
FORCED_ROWS = 3
DEFAULT_TEMPLATE = "auto"

# Minimum viewport width of each breakpoint
BREAKPOINT_LG = 1200
BREAKPOINT_MD = 996
BREAKPOINT_SM = 768
BREAKPOINT_XS = 480
BREAKPOINT_XXS = 0

# UI
RESIZE_DEBOUNCE_MS = 150
INITIAL_WIDTH = 1280
INITIAL_HEIGHT = 760


def _as_bool(value: str, default: bool) -> bool:
    """Parse a config boolean, falling back to default."""
    val = value.strip().lower()
    if val in ("1", "true", "yes", "on"):
        return True
    if val in ("0", "false", "no", "off"):
        return False
    return default


def _as_int(
    value: str,
    default: int,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> int:
    """Parse an int with optional clamping."""
    try:
        result = int(value.strip())
    except (ValueError, AttributeError):
        return default
    if min_value is not None:
        result = max(min_value, result)
    if max_value is not None:
        result = min(max_value, result)
    return result


def load_config(path: Optional[str] = None) -> configparser.ConfigParser:
    """
    Load the INI config.

    Resolution order: explicit path, VIDEO_GRID_CONFIG, CONFIG_PATH.
    A missing file gives an empty parser so defaults stay in effect.
    """
    parser = configparser.ConfigParser()
    config_path = path or os.environ.get(CONFIG_ENV_VAR) or CONFIG_PATH
    try:
        read = parser.read(config_path)
        if not read:
            logging.debug("Config file %s not found, using defaults", config_path)
    except configparser.Error:
        logging.exception("Failed to parse config %s", config_path)
    return parser


def apply_config(parser: configparser.ConfigParser) -> None:
    """Apply parsed values to module-level settings."""
    global LOG_LEVEL, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT, LOG_STDOUT
    global CONTAINER_PADDING, MARGIN_SIZE, MIN_ROW_HEIGHT, MAX_ROW_HEIGHT_LIMIT
    global HEADER_HEIGHT, MAX_GRID_SIZE, FORCED_COLUMNS, FORCED_ROWS, DEFAULT_TEMPLATE
    global BREAKPOINT_LG, BREAKPOINT_MD, BREAKPOINT_SM, BREAKPOINT_XS, BREAKPOINT_XXS
    global RESIZE_DEBOUNCE_MS, INITIAL_WIDTH, INITIAL_HEIGHT

    if parser.has_section("logging"):
        s = parser["logging"]
        LOG_LEVEL = s.get("level", LOG_LEVEL).strip().upper() or LOG_LEVEL
        LOG_FILE = s.get("file", LOG_FILE).strip()
        LOG_MAX_BYTES = _as_int(s.get("max_bytes", ""), LOG_MAX_BYTES, min_value=1024)
        LOG_BACKUP_COUNT = _as_int(s.get("backup_count", ""), LOG_BACKUP_COUNT, min_value=0, max_value=20)
        LOG_STDOUT = _as_bool(s.get("stdout", ""), LOG_STDOUT)

    if parser.has_section("grid"):
        s = parser["grid"]
        CONTAINER_PADDING = _as_int(s.get("container_padding", ""), CONTAINER_PADDING, min_value=0, max_value=200)
        MARGIN_SIZE = _as_int(s.get("margin", ""), MARGIN_SIZE, min_value=0, max_value=200)
        MIN_ROW_HEIGHT = _as_int(s.get("min_row_height", ""), MIN_ROW_HEIGHT, min_value=1)
        MAX_ROW_HEIGHT_LIMIT = _as_int(
            s.get("max_row_height_limit", ""), MAX_ROW_HEIGHT_LIMIT, min_value=MIN_ROW_HEIGHT
        )
        HEADER_HEIGHT = _as_int(s.get("header_height", ""), HEADER_HEIGHT, min_value=0)
        MAX_GRID_SIZE = _as_int(s.get("max_grid_size", ""), MAX_GRID_SIZE, min_value=1, max_value=36)
        FORCED_COLUMNS = _as_int(s.get("forced_columns", ""), FORCED_COLUMNS, min_value=1, max_value=12)
        FORCED_ROWS = _as_int(s.get("forced_rows", ""), FORCED_ROWS, min_value=1, max_value=12)
        DEFAULT_TEMPLATE = s.get("default_template", DEFAULT_TEMPLATE).strip() or DEFAULT_TEMPLATE

    if parser.has_section("breakpoints"):
        s = parser["breakpoints"]
        BREAKPOINT_LG = _as_int(s.get("lg", ""), BREAKPOINT_LG, min_value=0)
        BREAKPOINT_MD = _as_int(s.get("md", ""), BREAKPOINT_MD, min_value=0, max_value=BREAKPOINT_LG)
        BREAKPOINT_SM = _as_int(s.get("sm", ""), BREAKPOINT_SM, min_value=0, max_value=BREAKPOINT_MD)
        BREAKPOINT_XS = _as_int(s.get("xs", ""), BREAKPOINT_XS, min_value=0, max_value=BREAKPOINT_SM)
        BREAKPOINT_XXS = _as_int(s.get("xxs", ""), BREAKPOINT_XXS, min_value=0, max_value=BREAKPOINT_XS)

    if parser.has_section("ui"):
        s = parser["ui"]
        RESIZE_DEBOUNCE_MS = _as_int(s.get("resize_debounce_ms", ""), RESIZE_DEBOUNCE_MS, min_value=0, max_value=5000)
        INITIAL_WIDTH = _as_int(s.get("initial_width", ""), INITIAL_WIDTH, min_value=200)
        INITIAL_HEIGHT = _as_int(s.get("initial_height", ""), INITIAL_HEIGHT, min_value=200)


def breakpoint_widths() -> dict[str, int]:
    """Configured minimum width per breakpoint name."""
    return {
        "lg": BREAKPOINT_LG,
        "md": BREAKPOINT_MD,
        "sm": BREAKPOINT_SM,
        "xs": BREAKPOINT_XS,
        "xxs": BREAKPOINT_XXS,
    }


def configure_logging(parser: Optional[configparser.ConfigParser] = None) -> None:
    """Configure root logging from config (rotating file + optional stdout)."""
    if parser is not None:
        apply_config(parser)

    level = getattr(logging, LOG_LEVEL, logging.INFO)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if LOG_FILE:
        try:
            log_dir = os.path.dirname(LOG_FILE)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
            )
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError:
            print(f"Could not open log file {LOG_FILE}", file=sys.stderr)

    if LOG_STDOUT or not root.handlers:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)
