import logging
import weakref

from .tree import composed_parent, composed_path, is_editable
from .utils import MODIFIER_NAMES

KEYDOWN = "keydown"


class KeyEvent:
    def __init__(
        self,
        key_code: int,
        target=None,
        ctrl_key: bool = False,
        shift_key: bool = False,
        alt_key: bool = False,
        meta_key: bool = False,
    ):
        self.key_code = key_code
        self.target = target
        self.ctrl_key = ctrl_key
        self.shift_key = shift_key
        self.alt_key = alt_key
        self.meta_key = meta_key
        self.default_prevented = False
        self.propagation_stopped = False

    def __repr__(self):
        mods = "+".join(sorted(event_modifiers(self)))
        return f"<KeyEvent {mods + '+' if mods else ''}{self.key_code} target={self.target!r}>"

    def prevent_default(self):
        self.default_prevented = True

    def stop_propagation(self):
        self.propagation_stopped = True


def event_modifiers(event) -> frozenset:
    return frozenset(name for name in MODIFIER_NAMES if getattr(event, f"{name}_key", False))


class EventManager:
    """Routes key presses to the action handler.

    One instance serves the document and every shadow root it is attached
    to. It never changes settings or element state itself.
    """

    def __init__(self, settings, action_handler, registry, next_node=composed_parent):
        self.settings = settings
        self.action_handler = action_handler
        self.registry = registry
        self.next_node = next_node
        self._roots = weakref.WeakSet()
        self._last_event = None

    def attach(self, root):
        if root in self._roots:
            return
        root.add_event_listener(KEYDOWN, self.handle_keydown)
        self._roots.add(root)

    def detach(self, root):
        if root not in self._roots:
            return
        root.remove_event_listener(KEYDOWN, self.handle_keydown)
        self._roots.discard(root)

    def detach_all(self):
        for root in list(self._roots):
            self.detach(root)

    @property
    def attached_roots(self) -> list:
        return list(self._roots)

    def note_interaction(self, element):
        """Make ``element`` the target of following key presses."""
        self.registry.set_active(element)

    def _remember(self, event):
        # weak, so a handled event never pins its target element
        try:
            self._last_event = weakref.ref(event)
        except TypeError:
            self._last_event = None

    def handle_keydown(self, event):
        # the same event reaches both a shadow root listener and the document one
        if self._last_event is not None and self._last_event() is event:
            return
        if not self.settings.enabled:
            return
        target = getattr(event, "target", None)
        if target is not None and is_editable(target, self.next_node):
            return
        key_code = getattr(event, "key_code", None)
        if key_code is None:
            return

        binding = self.settings.find_binding(key_code, event_modifiers(event))
        if binding is None:
            return
        self._remember(event)

        element = self.resolve_target(target)
        if element is None:
            logging.debug("No media element for %r (%s)", event, binding.action)
        else:
            self.action_handler.run_action(binding.action, binding.value, target=element)

        event.prevent_default()
        event.stop_propagation()

    def resolve_target(self, target):
        active = self.registry.active
        if active is not None:
            return active
        if target is None:
            return None

        path = composed_path(target, self.next_node)
        positions = {id(node): index for index, node in enumerate(path)}
        items = self.registry.items()

        for element, state in items:
            if id(state.controller) in positions:
                return element

        best = None
        best_index = None
        for element, state in items:
            for node in composed_path(element, self.next_node):
                index = positions.get(id(node))
                if index is None:
                    continue
                if best_index is None or index < best_index:
                    best, best_index = element, index
                break
        return best
