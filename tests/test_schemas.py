import pytest
from pydantic import ValidationError

from core.controller import (
    ClearRegion,
    GestureEnd,
    GestureMove,
    GestureStart,
    Hover,
    Leave,
    ResetZoom,
    SelectRegion,
    SelectYear,
    ZoomIn,
    ZoomOut,
)
from core.schemas import parse_control


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"type": "year", "year": "2019"}, SelectYear(2019)),
        ({"type": "region", "region": "Asia"}, SelectRegion("Asia")),
        ({"type": "region"}, SelectRegion("all")),
        ({"type": "clear_region"}, ClearRegion()),
        ({"type": "zoom", "direction": "in"}, ZoomIn()),
        ({"type": "zoom", "direction": "out"}, ZoomOut()),
        ({"type": "zoom", "direction": "reset"}, ResetZoom()),
        ({"type": "gesture", "phase": "start"}, GestureStart()),
        ({"type": "gesture", "phase": "move", "dx": 4, "dy": -2}, GestureMove(dx=4.0, dy=-2.0)),
        ({"type": "gesture", "phase": "end"}, GestureEnd()),
        ({"type": "pointer", "action": "enter", "index": 3}, Hover(3)),
        ({"type": "pointer", "action": "leave"}, Leave()),
    ],
)
def test_parse_control(raw, expected):
    assert parse_control(raw) == expected


def test_parse_control_gesture_center():
    event = parse_control({"type": "gesture", "phase": "move", "factor": 1.5, "center": [10, 20]})
    assert event == GestureMove(factor=1.5, center=(10.0, 20.0))


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "year", "year": "next"},
        {"type": "zoom", "direction": "sideways"},
        {"type": "gesture", "phase": "move", "factor": 0},
        {"type": "pointer", "action": "enter", "index": -1},
        {"type": "teleport"},
        {},
    ],
)
def test_parse_control_rejects_bad_input(raw):
    with pytest.raises(ValidationError):
        parse_control(raw)
