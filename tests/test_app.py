import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from speedctl import app_logging
from speedctl.app import create_app
from speedctl.events import KEYDOWN, KeyEvent
from speedctl.media import MediaElement
from speedctl.tree import Document, Node


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.ini"


def test_end_to_end_key_press_and_flush(settings_path):
    control = create_app(settings_path)
    document = Document()
    host = document.body.append_child(Node("div"))
    shadow = host.attach_shadow()
    video = shadow.append_child(MediaElement())
    control.attach(document)
    control.add_media_element(video, shadow_root=shadow)

    document.body.dispatch_event(KEYDOWN, KeyEvent(68))
    document.body.dispatch_event(KEYDOWN, KeyEvent(68))

    assert video.playback_rate == 1.2
    assert control.settings.last_speed == 1.2
    assert control.flush() is True
    assert control.flush() is False

    reloaded = create_app(settings_path)
    late = MediaElement()
    reloaded.add_media_element(late)
    assert late.playback_rate == 1.2


def test_run_action_and_shutdown(settings_path):
    control = create_app(settings_path)
    document = Document()
    video = document.body.append_child(MediaElement())
    control.attach(document)
    state = control.add_media_element(video)

    control.run_action("setSpeed", None, 3.0)
    control.handle_keydown(KeyEvent(86, target=document.body))
    assert video.playback_rate == 3.0
    assert state.hidden

    control.shutdown()

    assert document.listeners(KEYDOWN) == []
    assert len(control.registry) == 0
    assert create_app(settings_path).settings.last_speed == 3.0


def test_remove_media_element(settings_path):
    control = create_app(settings_path)
    video = MediaElement()
    control.add_media_element(video)

    assert control.remove_media_element(video)
    control.run_action("faster", 0.5)
    assert video.playback_rate == 1.0


@pytest.fixture
def clean_logging(monkeypatch):
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield root
    for handler in list(root.handlers):
        if isinstance(handler, RotatingFileHandler) and handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_app_logging_is_idempotent(tmp_path, clean_logging):
    log_path = tmp_path / "logs" / "log.txt"

    assert app_logging.setup_app_logging(log_path) == log_path
    app_logging.setup_app_logging(log_path)

    rotating = [h for h in clean_logging.handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].maxBytes == 1_000_000
    assert rotating[0].backupCount == 3
    rotating[0].flush()
    assert "Speed control logging to" in log_path.read_text(encoding="utf-8")


def test_unhandled_exceptions_are_logged(tmp_path, clean_logging, caplog):
    app_logging.setup_app_logging(tmp_path / "log.txt")

    try:
        raise KeyError("lost")
    except KeyError:
        sys.excepthook(*sys.exc_info())

    assert "Unhandled exception" in caplog.text


def test_create_app_with_logging(tmp_path, settings_path, clean_logging):
    log_path = tmp_path / "app.log"

    control = create_app(settings_path, log=True, log_path=log_path)

    assert log_path.exists()
    assert control.settings.enabled
