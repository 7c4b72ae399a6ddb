import pytest

from config import Config, parse_color


@pytest.mark.parametrize("value, expected", [
    ("#b300ff", 0xB300FF),
    ("0x1DB954", 0x1DB954),
    ("ff0000", 0xFF0000),
    (0x123456, 0x123456),
    ("", 0),
    ("not-a-colour", 0),
])
def test_parse_color(value, expected):
    assert parse_color(value) == expected


def test_parse_color_custom_default():
    assert parse_color(None, default=0xABCDEF) == 0xABCDEF


def test_unknown_selection_mode_falls_back_to_auto(monkeypatch):
    monkeypatch.setattr(Config, "PLAY_SELECTION_MODE", "carousel")

    assert Config().PLAY_SELECTION_MODE == "auto"


def test_buttons_selection_mode_kept(monkeypatch):
    monkeypatch.setattr(Config, "PLAY_SELECTION_MODE", "buttons")

    assert Config().PLAY_SELECTION_MODE == "buttons"


def test_command_permissions_are_per_instance():
    first, second = Config(), Config()
    first.COMMAND_PERMISSIONS["play"] = 0

    assert second.COMMAND_PERMISSIONS["play"] == 0x800
    assert Config.COMMAND_PERMISSIONS["play"] == 0x800


def test_verify_requires_bot_token(monkeypatch):
    monkeypatch.setattr(Config, "BOT_TOKEN", None)

    with pytest.raises(ValueError, match="BOT_TOKEN"):
        Config().verify()

    monkeypatch.setattr(Config, "BOT_TOKEN", "token")
    Config().verify()
