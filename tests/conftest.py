import pytest

from speedctl.actions import ActionHandler
from speedctl.events import EventManager
from speedctl.media import MediaElement, MediaRegistry
from speedctl.settings import SettingsSnapshot
from speedctl.tree import Document


@pytest.fixture(autouse=True)
def _user_data_home(tmp_path, monkeypatch):
    monkeypatch.setenv("SPEEDCTL_HOME", str(tmp_path / "home"))


@pytest.fixture
def settings():
    return SettingsSnapshot()


@pytest.fixture
def registry(settings):
    return MediaRegistry(settings)


@pytest.fixture
def handler(settings, registry):
    return ActionHandler(settings, registry)


@pytest.fixture
def router(settings, handler, registry):
    return EventManager(settings, handler, registry)


@pytest.fixture
def document():
    return Document()


@pytest.fixture
def video(document, registry):
    element = MediaElement()
    document.body.append_child(element)
    registry.add_media_element(element)
    return element
