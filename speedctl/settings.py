import logging

from PySide6.QtCore import QSettings

from .utils import (
    DEFAULT_SPEED,
    KEY_J,
    KEY_M,
    MAX_SPEED,
    MIN_SPEED,
    MODIFIER_NAMES,
    get_user_data_path,
    normalize_action,
    to_number,
)

LAST_SPEED_KEY = "playback/last_speed"
MIN_SPEED_KEY = "playback/min_speed"
MAX_SPEED_KEY = "playback/max_speed"
ENABLED_KEY = "controller/enabled"
START_HIDDEN_KEY = "controller/start_hidden"
KEY_BINDINGS_KEY = "key_bindings"


def _to_float(value, default: float, min_value: float | None = None, max_value: float | None = None) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float(default)
    if number != number:
        number = float(default)
    if min_value is not None:
        number = max(min_value, number)
    if max_value is not None:
        number = min(max_value, number)
    return number


def _to_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def parse_modifiers(value) -> frozenset:
    """Accepts "ctrl+shift", ["ctrl", "shift"] or a set; unknown names are dropped."""
    if not value:
        return frozenset()
    if isinstance(value, str):
        parts = value.replace(",", "+").split("+")
    else:
        parts = list(value)
    names = {str(p).strip().lower() for p in parts}
    if "control" in names:
        names.add("ctrl")
    return frozenset(n for n in names if n in MODIFIER_NAMES)


class Binding:
    def __init__(self, key_code: int, action: str, value=None, modifiers=()):
        self.key_code = int(key_code)
        self.action = str(action)
        self.value = value
        self.modifiers = parse_modifiers(modifiers)

    def __repr__(self):
        mods = "+".join(m for m in MODIFIER_NAMES if m in self.modifiers)
        return f"Binding({mods + '+' if mods else ''}{self.key_code} -> {self.action} {self.value!r})"

    def __eq__(self, other):
        if not isinstance(other, Binding):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def matches(self, key_code: int, modifiers) -> bool:
        return self.key_code == key_code and self.modifiers == frozenset(modifiers)

    @property
    def signature(self) -> tuple:
        return self.key_code, self.modifiers

    def to_dict(self) -> dict:
        return {
            "key": self.key_code,
            "modifiers": [m for m in MODIFIER_NAMES if m in self.modifiers],
            "action": self.action,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Binding":
        key = data.get("key", data.get("key_code"))
        action = data.get("action")
        if key is None or not action or isinstance(key, bool):
            raise ValueError(f"binding needs a key and an action: {data!r}")
        return cls(int(key), str(action), to_number(data.get("value")), data.get("modifiers"))


def default_key_bindings() -> list[Binding]:
    return [
        Binding(83, "slower", 0.1),  # S
        Binding(68, "faster", 0.1),  # D
        Binding(90, "rewind", 10),  # Z
        Binding(88, "advance", 10),  # X
        Binding(82, "reset", 1.0),  # R
        Binding(71, "fast", 1.8),  # G
        Binding(86, "display"),  # V
        Binding(KEY_M, "mark"),
        Binding(KEY_J, "jump"),
    ]


class SettingsSnapshot:
    """In-memory settings shared by the dispatcher, the router and the registry.

    Loaded once by ``SettingsStore.load``. During a session the only write is
    ``last_speed``, done by the dispatcher on every speed change.
    """

    def __init__(
        self,
        last_speed: float = DEFAULT_SPEED,
        key_bindings: list[Binding] | None = None,
        min_speed: float = MIN_SPEED,
        max_speed: float = MAX_SPEED,
        enabled: bool = True,
        start_hidden: bool = False,
    ):
        self.last_speed = last_speed
        self.key_bindings = default_key_bindings() if key_bindings is None else list(key_bindings)
        self.min_speed = min_speed
        self.max_speed = max_speed
        self.enabled = enabled
        self.start_hidden = start_hidden

    def find_binding(self, key_code: int, modifiers=frozenset()) -> Binding | None:
        modifiers = frozenset(modifiers)
        for binding in self.key_bindings:
            if binding.matches(key_code, modifiers):
                return binding
        return None

    def get_binding_for_action(self, action: str) -> Binding | None:
        wanted = normalize_action(action)
        for binding in self.key_bindings:
            if normalize_action(binding.action) == wanted:
                return binding
        return None

    def duplicate_bindings(self) -> list[Binding]:
        """Bindings that can never fire because an earlier one has the same keys."""
        seen = set()
        shadowed = []
        for binding in self.key_bindings:
            if binding.signature in seen:
                shadowed.append(binding)
            seen.add(binding.signature)
        return shadowed


class SettingsStore:
    def __init__(self, path: str | None = None):
        self.path = str(path) if path else get_user_data_path("settings.ini")

    def _settings(self) -> QSettings:
        return QSettings(self.path, QSettings.IniFormat)

    def load(self) -> SettingsSnapshot:
        settings = self._settings()
        min_speed = _to_float(settings.value(MIN_SPEED_KEY, MIN_SPEED), MIN_SPEED, MIN_SPEED, MAX_SPEED)
        max_speed = _to_float(settings.value(MAX_SPEED_KEY, MAX_SPEED), MAX_SPEED, min_speed, MAX_SPEED)
        snapshot = SettingsSnapshot(
            last_speed=_to_float(settings.value(LAST_SPEED_KEY, DEFAULT_SPEED), DEFAULT_SPEED, min_speed, max_speed),
            key_bindings=self._load_bindings(settings),
            min_speed=min_speed,
            max_speed=max_speed,
            enabled=_to_bool(settings.value(ENABLED_KEY, True), True),
            start_hidden=_to_bool(settings.value(START_HIDDEN_KEY, False), False),
        )
        for binding in snapshot.duplicate_bindings():
            logging.warning("Key binding %r is shadowed by an earlier binding and will never fire", binding)
        logging.info(
            "Settings loaded: path=%s last_speed=%.2f bindings=%d",
            self.path,
            snapshot.last_speed,
            len(snapshot.key_bindings),
        )
        return snapshot

    def _load_bindings(self, settings: QSettings) -> list[Binding]:
        entries = []
        size = settings.beginReadArray(KEY_BINDINGS_KEY)
        for index in range(size):
            settings.setArrayIndex(index)
            entries.append({
                "key": settings.value("key"),
                "action": settings.value("action"),
                "value": settings.value("value"),
                "modifiers": settings.value("modifiers", ""),
            })
        settings.endArray()
        if not entries:
            return default_key_bindings()

        bindings = []
        for entry in entries:
            try:
                bindings.append(Binding.from_dict(entry))
            except (TypeError, ValueError) as e:
                logging.warning("Skipping malformed key binding %r: %s", entry, e)
        if not bindings:
            logging.warning("No usable key bindings in %s; using defaults", self.path)
            return default_key_bindings()
        return bindings

    def save(self, snapshot: SettingsSnapshot) -> None:
        settings = self._settings()
        settings.setValue(LAST_SPEED_KEY, float(snapshot.last_speed))
        settings.setValue(MIN_SPEED_KEY, float(snapshot.min_speed))
        settings.setValue(MAX_SPEED_KEY, float(snapshot.max_speed))
        settings.setValue(ENABLED_KEY, bool(snapshot.enabled))
        settings.setValue(START_HIDDEN_KEY, bool(snapshot.start_hidden))
        settings.remove(KEY_BINDINGS_KEY)
        settings.beginWriteArray(KEY_BINDINGS_KEY, len(snapshot.key_bindings))
        for index, binding in enumerate(snapshot.key_bindings):
            settings.setArrayIndex(index)
            settings.setValue("key", binding.key_code)
            settings.setValue("action", binding.action)
            settings.setValue("value", "" if binding.value is None else float(binding.value))
            settings.setValue("modifiers", "+".join(binding.to_dict()["modifiers"]))
        settings.endArray()
        settings.sync()

    def save_last_speed(self, speed: float) -> None:
        settings = self._settings()
        settings.setValue(LAST_SPEED_KEY, float(speed))
        settings.sync()
