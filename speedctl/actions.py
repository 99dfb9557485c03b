import logging

from .utils import (
    DEFAULT_FAST_SPEED,
    DEFAULT_SEEK_STEP,
    DEFAULT_SPEED,
    DEFAULT_SPEED_STEP,
    DEFAULT_VOLUME_STEP,
    clamp,
    known_duration,
    normalize_action,
    round_speed,
    to_number,
)


def _safe_float(element, attr: str, default: float | None = 0.0) -> float | None:
    try:
        raw = getattr(element, attr, None)
    except (AttributeError, RuntimeError):
        return default
    number = to_number(raw)
    return default if number is None else number


def _safe_set(element, attr: str, value) -> bool:
    try:
        setattr(element, attr, value)
        return True
    except (AttributeError, RuntimeError, TypeError, ValueError) as e:
        logging.debug("Could not set %s=%r on %r: %s", attr, value, element, e)
        return False


class ActionHandler:
    """Applies named actions to registered media elements.

    Every action is a silent no-op for elements the registry does not know,
    and numeric inputs are clamped rather than rejected.
    """

    def __init__(self, settings, registry):
        self.settings = settings
        self.registry = registry
        self._actions = {
            "faster": self._faster,
            "slower": self._slower,
            "setspeed": self._set_speed_action,
            "reset": self._reset,
            "fast": self._fast,
            "pause": self._pause,
            "muted": self._muted,
            "louder": self._louder,
            "softer": self._softer,
            "advance": self._advance,
            "rewind": self._rewind,
            "mark": self._mark,
            "jump": self._jump,
            "display": self._display,
        }

    @property
    def action_names(self) -> list[str]:
        return list(self._actions)

    def has_action(self, action) -> bool:
        return normalize_action(action) in self._actions

    def run_action(self, action, value=None, forced_value=None, target=None):
        handler = self._actions.get(normalize_action(action))
        if handler is None:
            logging.debug("Ignoring unknown action %r", action)
            return
        targets = [target] if target is not None else self.registry.elements()
        for element in targets:
            state = self.registry.get_state(element)
            if state is None:
                logging.debug("Ignoring %s for untracked element %r", action, element)
                continue
            handler(element, state, value, forced_value)

    def set_speed(self, element, speed):
        state = self.registry.get_state(element)
        if state is None:
            return
        self._apply_speed(element, state, speed)

    def _apply_speed(self, element, state, speed) -> bool:
        number = to_number(speed)
        if number is None:
            return False
        value = round_speed(clamp(number, self.settings.min_speed, self.settings.max_speed))
        if not _safe_set(element, "playback_rate", value):
            return False
        state.show_speed(value)
        self.settings.last_speed = value
        logging.debug("Speed set to %.2f on %r", value, element)
        return True

    def _step(self, value, default: float) -> float:
        step = to_number(value)
        return default if step is None else step

    def _faster(self, element, state, value, forced_value):
        current = _safe_float(element, "playback_rate", DEFAULT_SPEED)
        self._apply_speed(element, state, current + self._step(value, DEFAULT_SPEED_STEP))

    def _slower(self, element, state, value, forced_value):
        current = _safe_float(element, "playback_rate", DEFAULT_SPEED)
        self._apply_speed(element, state, current - self._step(value, DEFAULT_SPEED_STEP))

    def _set_speed_action(self, element, state, value, forced_value):
        self._apply_speed(element, state, forced_value if forced_value is not None else value)

    def _reset(self, element, state, value, forced_value):
        target = self._step(value, DEFAULT_SPEED)
        current = round_speed(_safe_float(element, "playback_rate", DEFAULT_SPEED))
        if current == round_speed(target):
            restore = state.reset_speed if state.reset_speed is not None else self.settings.last_speed
            if round_speed(restore) != current:
                self._apply_speed(element, state, restore)
            return
        state.reset_speed = current
        self._apply_speed(element, state, target)

    def _fast(self, element, state, value, forced_value):
        target = self._step(value, DEFAULT_FAST_SPEED)
        current = round_speed(_safe_float(element, "playback_rate", DEFAULT_SPEED))
        if current == round_speed(target):
            self._apply_speed(element, state, DEFAULT_SPEED)
        else:
            self._apply_speed(element, state, target)

    def _pause(self, element, state, value, forced_value):
        paused = bool(getattr(element, "paused", True))
        _safe_set(element, "paused", not paused)

    def _muted(self, element, state, value, forced_value):
        muted = bool(getattr(element, "muted", False))
        _safe_set(element, "muted", not muted)

    def _change_volume(self, element, delta: float):
        current = _safe_float(element, "volume", None)
        if current is None:
            return
        _safe_set(element, "volume", round(clamp(current + delta, 0.0, 1.0), 2))

    def _louder(self, element, state, value, forced_value):
        self._change_volume(element, self._step(value, DEFAULT_VOLUME_STEP))

    def _softer(self, element, state, value, forced_value):
        self._change_volume(element, -self._step(value, DEFAULT_VOLUME_STEP))

    def _seek(self, element, delta: float):
        current = _safe_float(element, "current_time", None)
        if current is None:
            return
        position = current + delta
        duration = known_duration(_safe_float(element, "duration", None))
        if duration is not None:
            position = clamp(position, 0.0, duration)
        _safe_set(element, "current_time", position)

    def _advance(self, element, state, value, forced_value):
        self._seek(element, self._step(value, DEFAULT_SEEK_STEP))

    def _rewind(self, element, state, value, forced_value):
        self._seek(element, -self._step(value, DEFAULT_SEEK_STEP))

    def _mark(self, element, state, value, forced_value):
        position = _safe_float(element, "current_time", None)
        if position is not None:
            state.mark = position

    def _jump(self, element, state, value, forced_value):
        if state.mark is None:
            return
        _safe_set(element, "current_time", state.mark)

    def _display(self, element, state, value, forced_value):
        state.hidden = not state.hidden
        state.manual = True
        state.apply_visibility()
