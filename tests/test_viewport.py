#!/usr/bin/env -S uv run
# /// script
# requires-python = ">=3.10"
# dependencies = [
#   "pytest",
# ]
# ///
"""Test the pan/zoom/hover state machine."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from qsomap.viewport import (
    Mode, ViewState, ZoomLimits, transition, event_from_dict,
    PointerDown, PointerMove, PointerUp, PointerLeave, Wheel,
    ZoomIn, ZoomOut, ZoomTo, ZoomReset, FrameChanged,
)


def run(events, state=None, limits=ZoomLimits()):
    state = state or ViewState()
    for event in events:
        state = transition(state, event, limits)
    return state


class TestPan:

    def test_drag_pans_by_pointer_delta(self):
        state = run([PointerDown(100, 100), PointerMove(130, 90), PointerMove(150, 120)])
        assert state.mode is Mode.PANNING
        assert state.pan == (50, 20)

    def test_pointer_up_ends_pan(self):
        state = run([PointerDown(100, 100), PointerMove(110, 100), PointerUp()])
        assert state.mode is Mode.IDLE
        assert state.anchor is None
        assert state.pan == (10, 0)

    def test_pan_accumulates_across_drags(self):
        state = run([PointerDown(0, 0), PointerMove(10, 0), PointerUp(),
                     PointerDown(50, 50), PointerMove(50, 75), PointerUp()])
        assert state.pan == (10, 25)

    def test_pan_unclamped(self):
        state = run([PointerDown(0, 0), PointerMove(-10000, 10000)])
        assert state.pan == (-10000, 10000)

    def test_pointer_leave_ends_pan(self):
        state = run([PointerDown(0, 0), PointerMove(5, 5), PointerLeave()])
        assert state.mode is Mode.IDLE
        assert state.pan == (5, 5)
        # A later move without a press does not pan
        state = transition(state, PointerMove(50, 50))
        assert state.pan == (5, 5)

    def test_no_hover_while_panning(self):
        state = run([PointerDown(0, 0), PointerMove(5, 5, target=3)])
        assert state.mode is Mode.PANNING
        assert state.hover is None


class TestHover:

    def test_move_onto_line(self):
        state = run([PointerMove(20, 30, target=2)])
        assert state.mode is Mode.HOVER_ACTIVE
        assert state.hover == 2
        assert state.pointer == (20, 30)

    def test_move_off_line(self):
        state = run([PointerMove(20, 30, target=2), PointerMove(200, 300)])
        assert state.mode is Mode.IDLE
        assert state.hover is None
        assert state.pointer is None

    def test_switch_lines(self):
        state = run([PointerMove(20, 30, target=2), PointerMove(21, 31, target=5)])
        assert state.hover == 5

    def test_pointer_down_clears_hover(self):
        state = run([PointerMove(20, 30, target=2), PointerDown(20, 30)])
        assert state.mode is Mode.PANNING
        assert state.hover is None

    def test_leave_clears_hover(self):
        state = run([PointerMove(20, 30, target=2), PointerLeave()])
        assert state.mode is Mode.IDLE
        assert state.hover is None

    def test_frame_change_clears_hover(self):
        state = run([PointerMove(20, 30, target=2), FrameChanged()])
        assert state.mode is Mode.IDLE
        assert state.hover is None

    def test_frame_change_keeps_pan_zoom(self):
        state = run([PointerDown(0, 0), PointerMove(7, 8), PointerUp(), ZoomIn(), FrameChanged()])
        assert state.pan == (7, 8)
        assert state.zoom == pytest.approx(1.2)


class TestZoom:

    def test_wheel_direction(self):
        assert run([Wheel(-120)]).zoom == pytest.approx(1.1)
        assert run([Wheel(120)]).zoom == pytest.approx(0.9)
        assert run([Wheel(0)]) == ViewState()

    def test_buttons(self):
        assert run([ZoomIn()]).zoom == pytest.approx(1.2)
        assert run([ZoomOut()]).zoom == pytest.approx(1 / 1.2)
        assert run([ZoomIn(), ZoomOut()]).zoom == pytest.approx(1.0)

    def test_clamped(self):
        assert run([Wheel(-1)] * 100).zoom == 5.0
        assert run([Wheel(1)] * 100).zoom == 0.5
        assert run([ZoomTo(50)]).zoom == 5.0
        assert run([ZoomTo(0.01)]).zoom == 0.5
        assert run([ZoomTo(2.5)]).zoom == 2.5

    def test_nan_zoom_clamped(self):
        nan = float("nan")
        assert ZoomLimits().clamp(nan) == 0.5
        state = run([ZoomTo(nan)])
        assert state.zoom == 0.5
        assert run([ZoomTo(nan), Wheel(-1)]).zoom == pytest.approx(0.55)
        assert run([ZoomTo(float("inf"))]).zoom == 5.0

    def test_custom_limits(self):
        limits = ZoomLimits(1.0, 2.0)
        assert run([ZoomOut()], limits=limits).zoom == 1.0
        assert run([ZoomIn()] * 10, limits=limits).zoom == 2.0

    def test_zoom_always_in_bounds(self):
        events = [Wheel(-1), ZoomIn(), ZoomOut(), Wheel(3), ZoomTo(7), ZoomTo(-2), ZoomReset()]
        state = ViewState()
        for i in range(200):
            state = transition(state, events[(i * 7) % len(events)])
            assert 0.5 <= state.zoom <= 5.0

    def test_zoom_does_not_move_pan(self):
        state = run([PointerDown(0, 0), PointerMove(30, 40), PointerUp(), Wheel(-1)])
        assert state.pan == (30, 40)

    def test_zoom_clears_hover(self):
        state = run([PointerMove(1, 1, target=0), Wheel(-1)])
        assert state.mode is Mode.IDLE
        assert state.hover is None

    def test_reset(self):
        state = run([ZoomIn(), PointerDown(0, 0), PointerMove(30, 40), PointerUp(), ZoomReset()])
        assert state.zoom == 1.0
        assert state.pan == (0, 0)
        assert state.mode is Mode.IDLE


def test_screen_transform():
    state = ViewState(zoom=2.0, pan=(10.0, -5.0))
    assert state.to_screen(100, 50) == (210, 95)
    assert state.to_canvas(210, 95) == (100, 50)


def test_state_immutable():
    state = ViewState()
    after = transition(state, ZoomIn())
    assert state.zoom == 1.0
    assert after is not state
    with pytest.raises(AttributeError):
        state.zoom = 3.0


def test_unknown_event():
    with pytest.raises(TypeError):
        transition(ViewState(), "click")


def test_as_dict():
    state = run([PointerMove(1, 2, target=4)])
    assert state.as_dict() == {"zoom": 1.0, "pan": [0.0, 0.0], "mode": "hover", "hover": 4}


class TestEventFromDict:

    def test_known_types(self):
        assert event_from_dict({"type": "pointerdown", "x": 1, "y": "2"}) == PointerDown(1.0, 2.0)
        assert event_from_dict({"type": "PointerMove", "x": 3, "y": 4}) == PointerMove(3.0, 4.0)
        assert event_from_dict({"type": "wheel", "delta_y": -120}) == Wheel(-120.0)
        assert event_from_dict({"type": "zoomto", "value": 2}) == ZoomTo(2.0)
        assert event_from_dict({"type": "zoomreset"}) == ZoomReset()
        assert event_from_dict({"type": "pointerleave"}) == PointerLeave()

    def test_client_cannot_set_target(self):
        event = event_from_dict({"type": "pointermove", "x": 3, "y": 4, "target": 7})
        assert event.target is None

    @pytest.mark.parametrize("data", [
        {},
        {"type": "click"},
        {"type": "framechanged"},
        {"type": "wheel"},
        {"type": "pointerdown", "x": 1},
        {"type": "zoomto", "value": "big"},
        {"type": "pointermove", "x": None, "y": 1},
        {"type": "zoomto", "value": "nan"},
        {"type": "zoomto", "value": "inf"},
        {"type": "pointermove", "x": "nan", "y": 1},
        {"type": "pointerdown", "x": 1, "y": float("-inf")},
        {"type": "wheel", "delta_y": "NaN"},
    ])
    def test_invalid(self, data):
        with pytest.raises(ValueError):
            event_from_dict(data)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
