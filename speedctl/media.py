import logging
import weakref

from .tree import Node
from .utils import CONTROLLER_CLASS, HIDDEN_CLASS, MANUAL_CLASS, format_speed


class MediaElement(Node):
    """In-memory media element with the playback properties the dispatcher drives."""

    def __init__(
        self,
        tag: str = "video",
        playback_rate: float = 1.0,
        current_time: float = 0.0,
        duration: float = float("nan"),
        volume: float = 1.0,
        muted: bool = False,
        paused: bool = True,
    ):
        super().__init__(tag)
        self.playback_rate = playback_rate
        self.current_time = current_time
        self.duration = duration
        self.volume = volume
        self.muted = muted
        self.paused = paused


class ControllerOverlay(Node):
    def __init__(self):
        super().__init__("div", classes=(CONTROLLER_CLASS,))
        self.speed_indicator = self.append_child(Node("span", text="1.00"))

    @property
    def hidden(self) -> bool:
        return HIDDEN_CLASS in self.classes

    @property
    def manual(self) -> bool:
        return MANUAL_CLASS in self.classes


class MediaElementState:
    def __init__(self, controller, speed_indicator):
        self.controller = controller
        self.speed_indicator = speed_indicator
        self.mark = None
        self.hidden = False
        self.manual = False
        self.reset_speed = None

    @property
    def visibility_mode(self) -> str:
        if not self.manual:
            return "auto"
        return "manual_hidden" if self.hidden else "manual_shown"

    def apply_visibility(self):
        set_class = getattr(self.controller, "set_class", None)
        if set_class is None:
            return
        set_class(HIDDEN_CLASS, self.hidden)
        set_class(MANUAL_CLASS, self.manual)

    def show_speed(self, speed: float):
        if self.speed_indicator is not None:
            self.speed_indicator.text_content = format_speed(speed)


def default_controller_factory(element):
    overlay = ControllerOverlay()
    return overlay, overlay.speed_indicator


class MediaRegistry:
    """Tracks instrumented media elements and their per-element state.

    State lives in a side table keyed weakly by element, so a tracked element
    that is dropped everywhere else also drops out of the registry.
    """

    def __init__(self, settings, controller_factory=default_controller_factory):
        self.settings = settings
        self.controller_factory = controller_factory
        self._states = weakref.WeakKeyDictionary()
        self._active = None

    def __contains__(self, element) -> bool:
        return element in self._states

    def __len__(self) -> int:
        return len(self._states)

    def add_media_element(self, element) -> MediaElementState:
        state = self._states.get(element)
        if state is not None:
            return state
        controller, speed_indicator = self.controller_factory(element)
        state = MediaElementState(controller, speed_indicator)
        self._states[element] = state

        speed = self.settings.last_speed
        try:
            element.playback_rate = speed
        except (AttributeError, RuntimeError, TypeError) as e:
            logging.warning("Could not apply last speed %.2f to %r: %s", speed, element, e)
        state.show_speed(speed)
        if self.settings.start_hidden:
            state.hidden = True
        state.apply_visibility()
        logging.debug("Media element registered: %r speed=%.2f", element, speed)
        return state

    def remove_media_element(self, element) -> bool:
        state = self.get_state(element)
        if state is None:
            return False
        del self._states[element]
        remove = getattr(state.controller, "remove", None)
        if remove is not None:
            remove()
        if self.active is element:
            self._active = None
        logging.debug("Media element unregistered: %r", element)
        return True

    def get_state(self, element) -> MediaElementState | None:
        try:
            return self._states.get(element)
        except TypeError:
            # unhashable or not weak-referenceable, so never registered
            return None

    def elements(self) -> list:
        return list(self._states.keys())

    def items(self) -> list:
        return list(self._states.items())

    def prune(self) -> int:
        """Unregister elements that are no longer attached to a document."""
        removed = 0
        for element in self.elements():
            if not getattr(element, "is_connected", True):
                self.remove_media_element(element)
                removed += 1
        return removed

    @property
    def active(self):
        if self._active is None:
            return None
        element = self._active()
        if element is None or element not in self._states:
            return None
        return element

    def set_active(self, element):
        if element is None:
            self._active = None
            return
        if element not in self._states:
            return
        self._active = weakref.ref(element)
