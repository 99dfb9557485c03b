from .actions import ActionHandler
from .app import SpeedControl, create_app
from .events import EventManager, KeyEvent
from .media import MediaElement, MediaElementState, MediaRegistry
from .settings import Binding, SettingsSnapshot, SettingsStore

__all__ = [
    "ActionHandler",
    "Binding",
    "EventManager",
    "KeyEvent",
    "MediaElement",
    "MediaElementState",
    "MediaRegistry",
    "SettingsSnapshot",
    "SettingsStore",
    "SpeedControl",
    "create_app",
]
