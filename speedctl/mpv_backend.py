import logging
import math

from .tree import Node


def create_mpv_player(**options):
    """Create an ``mpv.MPV`` instance with mpv's own key handling turned off."""
    import mpv

    defaults = {
        "input_default_bindings": False,
        "input_vo_keyboard": False,
        "hr_seek": "yes",
    }
    defaults.update(options)
    player = mpv.MPV(**defaults)
    logging.info("mpv player created: options=%s", sorted(defaults))
    return player


class MpvMediaElement(Node):
    """Media element backed by a python-mpv player.

    mpv reports volume in 0..100 and has no value for position or duration
    until a file is loaded; reads fall back to defaults instead of raising.
    """

    def __init__(self, player, tag: str = "video"):
        super().__init__(tag)
        self.player = player

    def _read(self, attr: str, default=None):
        try:
            value = getattr(self.player, attr, None)
        except (AttributeError, RuntimeError, TypeError) as e:
            logging.debug("mpv read %s failed: %s", attr, e)
            return default
        return default if value is None else value

    def _read_float(self, attr: str, default: float) -> float:
        raw = self._read(attr, default)
        try:
            return float(raw)
        except (TypeError, ValueError):
            return float(default)

    def _write(self, attr: str, value) -> None:
        try:
            setattr(self.player, attr, value)
        except (AttributeError, RuntimeError, TypeError) as e:
            logging.warning("mpv rejected %s=%r: %s", attr, value, e)

    @property
    def playback_rate(self) -> float:
        return self._read_float("speed", 1.0)

    @playback_rate.setter
    def playback_rate(self, value: float):
        self._write("speed", float(value))

    @property
    def current_time(self) -> float:
        return self._read_float("time_pos", 0.0)

    @current_time.setter
    def current_time(self, value: float):
        self._write("time_pos", max(0.0, float(value)))

    @property
    def duration(self) -> float:
        return self._read_float("duration", math.nan)

    @property
    def volume(self) -> float:
        return max(0.0, min(1.0, self._read_float("volume", 100.0) / 100.0))

    @volume.setter
    def volume(self, value: float):
        self._write("volume", round(max(0.0, min(1.0, float(value))) * 100.0, 2))

    @property
    def muted(self) -> bool:
        return bool(self._read("mute", False))

    @muted.setter
    def muted(self, value: bool):
        self._write("mute", bool(value))

    @property
    def paused(self) -> bool:
        return bool(self._read("pause", True))

    @paused.setter
    def paused(self, value: bool):
        self._write("pause", bool(value))
