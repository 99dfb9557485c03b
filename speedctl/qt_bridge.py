"""Feed Qt key presses into the key router.

Qt letter and digit key values already equal the DOM key codes the
bindings use; everything else goes through ``_SPECIAL_KEYS``.
"""

import logging

from PySide6.QtCore import QEvent, QObject, Qt

from .events import KeyEvent

_SPECIAL_KEYS = {
    int(Qt.Key_Backspace): 8,
    int(Qt.Key_Tab): 9,
    int(Qt.Key_Enter): 13,
    int(Qt.Key_Return): 13,
    int(Qt.Key_Escape): 27,
    int(Qt.Key_Space): 32,
    int(Qt.Key_PageUp): 33,
    int(Qt.Key_PageDown): 34,
    int(Qt.Key_End): 35,
    int(Qt.Key_Home): 36,
    int(Qt.Key_Left): 37,
    int(Qt.Key_Up): 38,
    int(Qt.Key_Right): 39,
    int(Qt.Key_Down): 40,
    int(Qt.Key_Insert): 45,
    int(Qt.Key_Delete): 46,
    int(Qt.Key_Semicolon): 186,
    int(Qt.Key_Equal): 187,
    int(Qt.Key_Plus): 187,
    int(Qt.Key_Comma): 188,
    int(Qt.Key_Minus): 189,
    int(Qt.Key_Period): 190,
    int(Qt.Key_Slash): 191,
    int(Qt.Key_BracketLeft): 219,
    int(Qt.Key_Backslash): 220,
    int(Qt.Key_BracketRight): 221,
}


def key_code_from_qt(key) -> int | None:
    key = int(key)
    if int(Qt.Key_A) <= key <= int(Qt.Key_Z) or int(Qt.Key_0) <= key <= int(Qt.Key_9):
        return key
    if int(Qt.Key_F1) <= key <= int(Qt.Key_F12):
        return 112 + key - int(Qt.Key_F1)
    return _SPECIAL_KEYS.get(key)


def key_event_from_qt(qevent, target=None) -> KeyEvent | None:
    key_code = key_code_from_qt(qevent.key())
    if key_code is None:
        return None
    mods = qevent.modifiers()
    return KeyEvent(
        key_code,
        target=target,
        ctrl_key=bool(mods & Qt.ControlModifier),
        shift_key=bool(mods & Qt.ShiftModifier),
        alt_key=bool(mods & Qt.AltModifier),
        meta_key=bool(mods & Qt.MetaModifier),
    )


class QtKeyForwarder(QObject):
    """Event filter that hands key presses to an ``EventManager``.

    ``target`` is the node key presses are attributed to, or a callable
    taking the watched object and returning one. Presses the router handled
    are consumed.
    """

    def __init__(self, router, target=None, parent=None):
        super().__init__(parent)
        self.router = router
        self.target = target

    def _target_for(self, obj):
        if callable(self.target):
            return self.target(obj)
        return self.target

    def eventFilter(self, obj, event):
        if event.type() != QEvent.KeyPress:
            return False
        key_event = key_event_from_qt(event, self._target_for(obj))
        if key_event is None:
            return False
        self.router.handle_keydown(key_event)
        if key_event.default_prevented:
            logging.debug("Qt key press consumed: %r", key_event)
            return True
        return False
