import pytest
from PySide6.QtCore import QEvent, Qt

from speedctl.qt_bridge import QtKeyForwarder, key_code_from_qt, key_event_from_qt


class FakeKeyEvent:
    def __init__(self, key, modifiers=Qt.NoModifier, event_type=QEvent.KeyPress):
        self._key = key
        self._modifiers = modifiers
        self._type = event_type

    def key(self):
        return self._key

    def modifiers(self):
        return self._modifiers

    def type(self):
        return self._type


@pytest.mark.parametrize(
    "key, expected",
    [
        (Qt.Key_D, 68),
        (Qt.Key_M, 77),
        (Qt.Key_J, 74),
        (Qt.Key_5, 53),
        (Qt.Key_Left, 37),
        (Qt.Key_Space, 32),
        (Qt.Key_F5, 116),
        (Qt.Key_Period, 190),
        (Qt.Key_Shift, None),
    ],
)
def test_key_code_from_qt(key, expected):
    assert key_code_from_qt(key) == expected


def test_key_event_carries_modifiers():
    event = key_event_from_qt(FakeKeyEvent(Qt.Key_D, Qt.ControlModifier | Qt.ShiftModifier), target="node")

    assert event.key_code == 68
    assert event.target == "node"
    assert event.ctrl_key and event.shift_key
    assert not event.alt_key and not event.meta_key


def test_unmapped_key_gives_no_event():
    assert key_event_from_qt(FakeKeyEvent(Qt.Key_Control)) is None


def test_forwarder_consumes_handled_presses(router, document, video):
    forwarder = QtKeyForwarder(router, target=document.body)

    assert forwarder.eventFilter(None, FakeKeyEvent(Qt.Key_D)) is True
    assert video.playback_rate == 1.1

    assert forwarder.eventFilter(None, FakeKeyEvent(Qt.Key_Q)) is False
    assert forwarder.eventFilter(None, FakeKeyEvent(Qt.Key_D, event_type=QEvent.KeyRelease)) is False
    assert video.playback_rate == 1.1


def test_forwarder_resolves_target_per_object(router, registry, document, video):
    seen = []

    def target_for(obj):
        seen.append(obj)
        return video

    forwarder = QtKeyForwarder(router, target=target_for)
    forwarder.eventFilter("widget", FakeKeyEvent(Qt.Key_S))

    assert seen == ["widget"]
    assert video.playback_rate == 0.9
