# tests/test_config.py
import pytest

from vgo.config import Properties, format_board_size, parse_board_size
from vgo.runtime import Runtime


@pytest.mark.parametrize("value, expected", [
    (19, (19, 19)),
    ("19", (19, 19)),
    ("9x13", (9, 13)),
    ("9:13", (9, 13)),
    (" 13 ", (13, 13)),
    ("52", (52, 52)),
])
def test_parse_board_size(value, expected):
    assert parse_board_size(value) == expected


@pytest.mark.parametrize("value", ["", "0", "53", "9x", "x9", "nine", "9x13x2", -1])
def test_parse_board_size_rejects(value):
    with pytest.raises(ValueError):
        parse_board_size(value)


def test_format_board_size():
    assert format_board_size(19, 19) == "19"
    assert format_board_size(9, 13) == "9:13"


def test_defaults_come_from_environment(monkeypatch):
    monkeypatch.setenv("VGO_BOARD_SIZE", "13")
    monkeypatch.setenv("VGO_KO", "yes")
    monkeypatch.setenv("VGO_APPLICATION", "envapp:2")
    props = Properties()
    assert (props.x, props.y) == (13, 13)
    assert props.ko is True
    assert props.application == "envapp:2"


def test_explicit_options_win(monkeypatch):
    monkeypatch.setenv("VGO_BOARD_SIZE", "13")
    monkeypatch.setenv("VGO_KO", "true")
    props = Properties(board_size="9x13", ko=False, encoding="latin-1")
    assert (props.x, props.y) == (9, 13)
    assert props.ko is False
    assert props.encoding == "latin-1"
    assert Properties(x=7).board_size == "7"
    assert Properties(x=7, y=5).board_size == "7:5"


def test_bad_board_size_option():
    with pytest.raises(ValueError):
        Properties(board_size="100")
    with pytest.raises(ValueError):
        Properties(x=0)


def test_metadata_and_update():
    props = Properties(board_size=9, application="a:1", file_format=4, game_mode=1)
    meta = props.metadata()
    assert meta["board_size"] == "9"
    assert (meta["width"], meta["height"]) == (9, 9)
    assert meta["application"] == "a:1"
    props.update({"width": 5, "height": 7, "application": "b:2"})
    assert props.board_size == "5:7"
    assert props.application == "b:2"
    assert props.file_format == 4


def test_runtime_board_follows_properties():
    rt = Runtime(board_size="9x13")
    assert (rt.board.width, rt.board.height) == (9, 13)
    assert rt.rule.ko is False
    assert Runtime(board_size=9, ko=True).rule.ko is True
