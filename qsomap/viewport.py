"""Pan/zoom/hover state for the map view.

The view is a small state machine. Every pointer, wheel or button action is
an event, and transition() returns the next ViewState without touching the
old one, so the result never depends on which handler happened to run first.

    IDLE <-> PANNING       pointer down / up
    IDLE <-> HOVER_ACTIVE  pointer moves onto / off a drawn QSO line

While PANNING, pointer moves only pan; hover is not tracked.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum


WHEEL_ZOOM_IN = 1.1
WHEEL_ZOOM_OUT = 0.9
BUTTON_ZOOM_STEP = 1.2


class Mode(Enum):
    IDLE = "idle"
    PANNING = "panning"
    HOVER_ACTIVE = "hover"


@dataclass(frozen=True)
class ZoomLimits:
    minimum: float = 0.5
    maximum: float = 5.0

    def clamp(self, zoom: float) -> float:
        if math.isnan(zoom):
            return self.minimum
        return min(max(zoom, self.minimum), self.maximum)


DEFAULT_LIMITS = ZoomLimits()


@dataclass(frozen=True)
class ViewState:
    zoom: float = 1.0
    pan: tuple[float, float] = (0.0, 0.0)
    mode: Mode = Mode.IDLE
    anchor: tuple[float, float] | None = None  # last pointer position while panning
    hover: int | None = None                   # index of hovered connection in the frame
    pointer: tuple[float, float] | None = None  # where the hover happened (tooltip anchor)

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        """Projected canvas point to screen point (scale, then translate)."""
        return self.pan[0] + self.zoom * x, self.pan[1] + self.zoom * y

    def to_canvas(self, x: float, y: float) -> tuple[float, float]:
        """Screen point back to projected canvas point."""
        return (x - self.pan[0]) / self.zoom, (y - self.pan[1]) / self.zoom

    def as_dict(self) -> dict:
        return {
            "zoom": self.zoom,
            "pan": list(self.pan),
            "mode": self.mode.value,
            "hover": self.hover,
        }


# ============================================================
# Events
# ============================================================

@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float
    target: int | None = None  # hit-test result for (x, y), filled in by the caller


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerLeave:
    pass


@dataclass(frozen=True)
class Wheel:
    delta_y: float  # positive scrolls down (zoom out)


@dataclass(frozen=True)
class ZoomIn:
    pass


@dataclass(frozen=True)
class ZoomOut:
    pass


@dataclass(frozen=True)
class ZoomTo:
    value: float


@dataclass(frozen=True)
class ZoomReset:
    pass


@dataclass(frozen=True)
class FrameChanged:
    """The drawn connections changed (new day, new log); hover indices are stale."""


def _clear_hover(state: ViewState) -> ViewState:
    if state.mode is Mode.HOVER_ACTIVE:
        return replace(state, mode=Mode.IDLE, hover=None, pointer=None)
    return state


def _zoom(state: ViewState, zoom: float, limits: ZoomLimits) -> ViewState:
    return _clear_hover(replace(state, zoom=limits.clamp(zoom)))


def transition(state: ViewState, event, limits: ZoomLimits = DEFAULT_LIMITS) -> ViewState:
    """Return the view state after applying one event.

    Raises:
        TypeError: for an object that isn't one of the events above
    """
    if isinstance(event, PointerDown):
        return replace(state, mode=Mode.PANNING, anchor=(event.x, event.y),
                       hover=None, pointer=None)

    if isinstance(event, PointerMove):
        if state.mode is Mode.PANNING:
            ax, ay = state.anchor or (event.x, event.y)
            pan = (state.pan[0] + event.x - ax, state.pan[1] + event.y - ay)
            return replace(state, pan=pan, anchor=(event.x, event.y))
        if event.target is not None:
            return replace(state, mode=Mode.HOVER_ACTIVE, hover=event.target,
                           pointer=(event.x, event.y))
        return replace(state, mode=Mode.IDLE, hover=None, pointer=None)

    if isinstance(event, PointerUp):
        if state.mode is Mode.PANNING:
            return replace(state, mode=Mode.IDLE, anchor=None)
        return state

    if isinstance(event, PointerLeave):
        return replace(state, mode=Mode.IDLE, anchor=None, hover=None, pointer=None)

    if isinstance(event, Wheel):
        if event.delta_y == 0:
            return state
        factor = WHEEL_ZOOM_OUT if event.delta_y > 0 else WHEEL_ZOOM_IN
        return _zoom(state, state.zoom * factor, limits)

    if isinstance(event, ZoomIn):
        return _zoom(state, state.zoom * BUTTON_ZOOM_STEP, limits)

    if isinstance(event, ZoomOut):
        return _zoom(state, state.zoom / BUTTON_ZOOM_STEP, limits)

    if isinstance(event, ZoomTo):
        return _zoom(state, event.value, limits)

    if isinstance(event, ZoomReset):
        return _clear_hover(replace(state, zoom=1.0, pan=(0.0, 0.0)))

    if isinstance(event, FrameChanged):
        return _clear_hover(state)

    raise TypeError(f"Not a view event: {event!r}")


EVENT_TYPES = {
    "pointerdown": PointerDown,
    "pointermove": PointerMove,
    "pointerup": PointerUp,
    "pointerleave": PointerLeave,
    "wheel": Wheel,
    "zoomin": ZoomIn,
    "zoomout": ZoomOut,
    "zoomto": ZoomTo,
    "zoomreset": ZoomReset,
}


def _number(data: dict, key: str) -> float:
    value = float(data[key])
    if not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got {value}")
    return value


def event_from_dict(data: dict):
    """Build an event from a JSON payload like {"type": "wheel", "delta_y": -120}.

    Raises:
        ValueError: for an unknown type or missing, non-numeric or non-finite fields
    """
    kind = str(data.get("type", "")).lower()
    cls = EVENT_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown event type '{kind}'. Valid: {list(EVENT_TYPES)}")
    try:
        if cls in (PointerDown, PointerMove):
            return cls(_number(data, "x"), _number(data, "y"))
        if cls is Wheel:
            return Wheel(_number(data, "delta_y"))
        if cls is ZoomTo:
            return ZoomTo(_number(data, "value"))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Bad '{kind}' event: {e}") from None
    return cls()
