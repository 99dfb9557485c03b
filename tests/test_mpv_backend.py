import math
import sys
import types

import pytest

from speedctl.mpv_backend import MpvMediaElement, create_mpv_player


class FakePlayer:
    def __init__(self):
        self.speed = 1.0
        self.time_pos = None
        self.duration = None
        self.volume = 50.0
        self.mute = False
        self.pause = True


class StubbornPlayer(FakePlayer):
    def __setattr__(self, name, value):
        if name == "speed" and hasattr(self, "speed"):
            raise RuntimeError("property unavailable")
        super().__setattr__(name, value)


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def element(player, registry, document):
    media = document.body.append_child(MpvMediaElement(player))
    registry.add_media_element(media)
    return media


def test_reads_fall_back_before_file_is_loaded(player):
    media = MpvMediaElement(player)

    assert media.current_time == 0.0
    assert math.isnan(media.duration)
    assert media.volume == 0.5
    assert media.paused is True


def test_actions_drive_player_properties(handler, player, element):
    handler.run_action("faster", 0.25)
    handler.run_action("louder", 0.1)
    handler.run_action("muted")
    handler.run_action("pause")
    handler.run_action("advance", 10)

    assert player.speed == 1.25
    assert player.volume == 60.0
    assert player.mute is True
    assert player.pause is False
    assert player.time_pos == 10.0


def test_seek_clamps_to_player_duration(handler, player, element):
    player.duration = 30.0
    player.time_pos = 25.0

    handler.run_action("advance", 10)
    assert player.time_pos == 30.0

    handler.run_action("mark")
    player.time_pos = 3.0
    handler.run_action("jump")
    assert player.time_pos == 30.0


def test_rejected_write_is_logged_not_raised(handler, registry, caplog):
    player = StubbornPlayer()
    media = MpvMediaElement(player)
    registry.add_media_element(media)

    handler.set_speed(media, 2.0)

    assert player.speed == 1.0
    assert "mpv rejected speed" in caplog.text


def test_create_mpv_player_disables_mpv_key_handling(monkeypatch):
    created = {}

    class FakeMPV:
        def __init__(self, **options):
            created.update(options)

    monkeypatch.setitem(sys.modules, "mpv", types.SimpleNamespace(MPV=FakeMPV))

    player = create_mpv_player(vo="null")

    assert isinstance(player, FakeMPV)
    assert created["input_default_bindings"] is False
    assert created["input_vo_keyboard"] is False
    assert created["vo"] == "null"
