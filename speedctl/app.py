import logging

from .actions import ActionHandler
from .app_logging import setup_app_logging
from .events import EventManager
from .media import MediaRegistry, default_controller_factory
from .settings import SettingsStore
from .tree import composed_parent


class SpeedControl:
    """Wires settings, registry, action handler and key router together.

    Settings are loaded once at construction. ``last_speed`` changes stay in
    memory until ``flush`` writes them back.
    """

    def __init__(self, store: SettingsStore, controller_factory=default_controller_factory, next_node=composed_parent):
        self.store = store
        self.settings = store.load()
        self.registry = MediaRegistry(self.settings, controller_factory)
        self.actions = ActionHandler(self.settings, self.registry)
        self.router = EventManager(self.settings, self.actions, self.registry, next_node)
        self._saved_speed = self.settings.last_speed

    def attach(self, root):
        self.router.attach(root)

    def add_media_element(self, element, shadow_root=None):
        """Register ``element``; ``shadow_root`` also gets a key listener."""
        state = self.registry.add_media_element(element)
        if shadow_root is not None:
            self.router.attach(shadow_root)
        return state

    def remove_media_element(self, element) -> bool:
        return self.registry.remove_media_element(element)

    def run_action(self, action, value=None, forced_value=None, target=None):
        self.actions.run_action(action, value, forced_value, target)

    def handle_keydown(self, event):
        self.router.handle_keydown(event)

    def flush(self) -> bool:
        if self.settings.last_speed == self._saved_speed:
            return False
        self.store.save_last_speed(self.settings.last_speed)
        self._saved_speed = self.settings.last_speed
        logging.info("Last speed saved: %.2f", self._saved_speed)
        return True

    def shutdown(self):
        self.flush()
        self.router.detach_all()
        for element in self.registry.elements():
            self.registry.remove_media_element(element)
        logging.info("Speed control shut down")


def create_app(settings_path=None, log: bool = False, log_path=None) -> SpeedControl:
    if log:
        setup_app_logging(log_path)
    return SpeedControl(SettingsStore(settings_path))
