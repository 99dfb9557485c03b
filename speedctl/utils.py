import math
import os
import sys
from pathlib import Path

MIN_SPEED = 0.07
MAX_SPEED = 16.0
DEFAULT_SPEED = 1.0
DEFAULT_SPEED_STEP = 0.1
DEFAULT_VOLUME_STEP = 0.1
DEFAULT_SEEK_STEP = 10.0
DEFAULT_FAST_SPEED = 1.8

MODIFIER_NAMES = ("ctrl", "shift", "alt", "meta")

HIDDEN_CLASS = "sc-hidden"
MANUAL_CLASS = "sc-manual"
CONTROLLER_CLASS = "sc-controller"
SETTINGS_UI_CLASS = "sc-settings"

EDITABLE_TAGS = frozenset({"input", "textarea", "select"})

KEY_J = 74
KEY_M = 77


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_speed(value: float) -> float:
    return round(float(value), 2)


def format_speed(value: float) -> str:
    return f"{float(value):.2f}"


def to_number(value) -> float | None:
    """Coerce a binding value to float, None when it is missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def known_duration(value) -> float | None:
    number = to_number(value)
    if number is None or math.isinf(number) or number <= 0:
        return None
    return number


def get_user_data_dir() -> Path:
    """Get writable base directory for settings and logs."""
    override = os.getenv("SPEEDCTL_HOME")
    if override:
        base = Path(override)
    elif getattr(sys, "frozen", False) and os.getenv("APPDATA"):
        # In installed mode, use %APPDATA%/SpeedCtl
        base = Path(os.getenv("APPDATA")) / "SpeedCtl"
    else:
        base = Path.home() / ".speedctl"
    base.mkdir(parents=True, exist_ok=True)
    return base


def get_user_data_path(filename: str) -> str:
    return str(get_user_data_dir() / filename)


def normalize_action(name) -> str:
    """Lowercase and drop separators, so setSpeed, set_speed and set-speed match."""
    return "".join(ch for ch in str(name or "").lower() if ch not in "_- ")
