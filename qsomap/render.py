"""Build the draw list for one map frame and hit-test the pointer against it.

A Frame is everything a backend needs to paint: country outlines first,
then for each QSO of the selected day one line and two markers, in log
order. All coordinates in a Frame are screen pixels with the current zoom
and pan already applied.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date

from .adif import get_field
from .locator import Connection, resolve_connection
from .projection import Projection
from .viewport import ViewState


logger = logging.getLogger(__name__)

MARKER_RADIUS = 4.0
LINE_WIDTH = 1.5
HIT_TOLERANCE = 4.0  # pixels either side of a line that still count as "on" it


@dataclass(frozen=True)
class PolygonItem:
    name: str
    points: list[tuple[float, float]]


@dataclass(frozen=True)
class LineItem:
    index: int
    start: tuple[float, float]
    end: tuple[float, float]


@dataclass(frozen=True)
class MarkerItem:
    index: int
    point: tuple[float, float]
    role: str  # "home" or "contacted"
    radius: float = MARKER_RADIUS


@dataclass(frozen=True)
class DrawnConnection:
    connection: Connection
    start: tuple[float, float]
    end: tuple[float, float]

    @property
    def record(self) -> dict:
        return self.connection.record


def point_segment_distance(px: float, py: float,
                           ax: float, ay: float, bx: float, by: float) -> float:
    """Shortest distance from point P to segment AB."""
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


@dataclass
class Frame:
    width: float
    height: float
    view: ViewState
    polygons: list[PolygonItem] = field(default_factory=list)
    connections: list[DrawnConnection] = field(default_factory=list)
    day: date | None = None
    omitted: int = 0           # QSOs on this day that couldn't be placed
    error: str | None = None   # background failure message, if any

    def items(self):
        """Yield draw items in paint order."""
        yield from self.polygons
        for index, drawn in enumerate(self.connections):
            yield LineItem(index, drawn.start, drawn.end)
            yield MarkerItem(index, drawn.start, "home")
            yield MarkerItem(index, drawn.end, "contacted")

    def hit_test(self, x: float, y: float, tolerance: float = HIT_TOLERANCE) -> int | None:
        """Index of the first connection (in draw order) under the pointer."""
        for index, drawn in enumerate(self.connections):
            (ax, ay), (bx, by) = drawn.start, drawn.end
            if point_segment_distance(x, y, ax, ay, bx, by) <= tolerance:
                return index
        return None

    def hovered(self) -> DrawnConnection | None:
        index = self.view.hover
        if index is None or not 0 <= index < len(self.connections):
            return None
        return self.connections[index]

    def as_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "day": self.day.isoformat() if self.day else None,
            "view": self.view.as_dict(),
            "error": self.error,
            "omitted": self.omitted,
            "polygons": [{"name": p.name, "points": p.points} for p in self.polygons],
            "connections": [
                {
                    "index": i,
                    "call": get_field(d.record, "CALL"),
                    "start": d.start,
                    "end": d.end,
                    "origin": list(d.connection.origin),
                    "destination": list(d.connection.destination),
                }
                for i, d in enumerate(self.connections)
            ],
        }


def project_background(rings: list[tuple[str, list]], projection: Projection) -> list[PolygonItem]:
    """Project (name, ring) pairs to canvas space. Done once per canvas size."""
    return [PolygonItem(name, projection.project_ring(ring)) for name, ring in rings]


def build_frame(records: list[dict], projection: Projection, view: ViewState,
                background: list[PolygonItem] | None = None, day: date | None = None,
                error: str | None = None, home_fallback: str | None = None) -> Frame:
    """Lay out one frame.

    Args:
        records: QSOs to draw (already filtered to the selected day)
        projection: Projection for the current canvas size
        view: Current zoom/pan/hover state
        background: Country outlines from project_background(), in canvas space
        day: Day being shown, carried through for display
        error: Message to show if the background couldn't be loaded
        home_fallback: Grid to use for QSOs with no home location

    Returns:
        Frame in screen coordinates
    """
    polygons = []
    for polygon in background or []:
        points = [view.to_screen(x, y) for x, y in polygon.points]
        polygons.append(PolygonItem(polygon.name, points))

    connections = []
    omitted = 0
    for record in records:
        connection = resolve_connection(record, home_fallback)
        if connection is None:
            omitted += 1
            continue
        start = view.to_screen(*projection.project(connection.origin.lon, connection.origin.lat))
        end = view.to_screen(*projection.project(connection.destination.lon, connection.destination.lat))
        connections.append(DrawnConnection(connection, start, end))

    if omitted:
        logger.debug("%d of %d QSOs omitted from frame (no location)", omitted, len(records))

    return Frame(projection.width, projection.height, view, polygons, connections,
                 day=day, omitted=omitted, error=error)
