"""One map view over one log: records, timeline, projection, view state.

MapSession is the glue the web app and CLI drive. Everything it holds is
rebuilt from its inputs; frames are cached only while nothing they depend
on has changed, so a resize or zoom always draws from the latest state.
"""

import logging
from dataclasses import replace
from datetime import date

from .adif import get_field, parse_adif, parse_adif_header
from .basemap import feature_rings, fetch_geometry, load_geometry, validate_feature_collection
from .config import DEFAULT_CONFIG
from .errors import GeometryError
from .projection import make_projection
from .render import Frame, build_frame, project_background
from .timeline import Timeline, build_timeline
from .tooltip import Tooltip, build_tooltip
from .viewport import FrameChanged, Mode, PointerMove, ViewState, ZoomLimits, ZoomReset, transition


logger = logging.getLogger(__name__)


class MapSession:
    def __init__(self, config: dict | None = None):
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self.limits = ZoomLimits(self.config["zoom_min"], self.config["zoom_max"])
        self.projection = make_projection(self.config["projection"],
                                          self.config["width"], self.config["height"])
        self.view = ViewState()

        self.records: list[dict] = []
        self.header: dict[str, str] = {}
        self.timeline: Timeline = build_timeline([])
        self.selected: date = self.timeline.initial_date

        self.geometry_error: str | None = None
        self._rings: list | None = None        # (name, ring) pairs, lon/lat
        self._background: list | None = None   # rings projected for self.projection
        self._generation = 0
        self._frame: Frame | None = None
        self._frame_key = None

    # ============================================================
    # Inputs
    # ============================================================

    def load_text(self, text: str) -> None:
        """Parse ADIF text and show it. AdifParseError propagates to the caller."""
        records = parse_adif(text, self.config["normalize_tags"])
        self.header = parse_adif_header(text)
        self.load_records(records)

    def load_records(self, records: list[dict]) -> None:
        self.records = list(records)
        self.timeline = build_timeline(self.records)
        self.selected = self.timeline.initial_date
        self._generation += 1
        self.view = transition(self.view, FrameChanged(), self.limits)
        logger.info("Loaded %d QSOs (%d without a usable date), %s to %s",
                    len(self.records), self.timeline.skipped,
                    self.timeline.start, self.timeline.end)

    def set_geometry(self, data: dict) -> None:
        """Use an already-loaded FeatureCollection as the background.

        Unusable data is recorded in geometry_error and the background left
        empty; connections are still drawn.
        """
        self._background = None
        self._frame = None
        try:
            rings = feature_rings(validate_feature_collection(data))
            if not rings:
                raise GeometryError("Invalid map data format: no drawable polygons")
        except GeometryError as e:
            self._geometry_failed(e)
            return
        self._rings = rings
        self.geometry_error = None

    def reload_geometry(self) -> None:
        """Forget the background (and any error) so the next frame fetches it again."""
        self._rings = None
        self._background = None
        self.geometry_error = None
        self._frame = None

    def _geometry_failed(self, error: Exception) -> None:
        logger.error("Map background unavailable: %s", error)
        self.geometry_error = str(error)
        self._rings = []
        self._background = []
        self._frame = None

    def _ensure_background(self) -> list:
        if self._rings is None:
            self._rings = []
            try:
                if self.config.get("geometry_file"):
                    self.set_geometry(load_geometry(self.config["geometry_file"]))
                elif self.config.get("geometry_url"):
                    self.set_geometry(fetch_geometry(self.config["geometry_url"]))
            except GeometryError as e:
                self._geometry_failed(e)
        if self._background is None:
            try:
                self._background = project_background(self._rings, self.projection)
            except (TypeError, ValueError) as e:
                self._geometry_failed(GeometryError(f"Invalid map data format: {e}"))
        return self._background

    def resize(self, width: float, height: float) -> bool:
        """Rebuild the projection for a new canvas size.

        Returns:
            True if the size changed; repeated calls with the same size do nothing
        """
        if (width, height) == self.projection.size:
            return False
        self.projection = make_projection(self.config["projection"], width, height)
        self._background = None
        self.view = transition(self.view, FrameChanged(), self.limits)
        return True

    # ============================================================
    # Time selection
    # ============================================================

    def select_date(self, day: date) -> None:
        if day != self.selected:
            self.selected = day
            self.view = transition(self.view, FrameChanged(), self.limits)

    def select_percent(self, percent: float) -> date:
        day = self.timeline.slider_to_date(percent)
        self.select_date(day)
        return day

    def selected_records(self) -> list[dict]:
        return self.timeline.records_on(self.selected)

    # ============================================================
    # Drawing and interaction
    # ============================================================

    def frame(self) -> Frame:
        """The frame for the current state; hover changes reuse the cached layout."""
        key = (self._generation, self.projection.size, self.view.zoom, self.view.pan, self.selected)
        background = self._ensure_background()
        if self._frame is None or key != self._frame_key:
            self._frame = build_frame(self.selected_records(), self.projection, self.view,
                                      background=background, day=self.selected,
                                      error=self.geometry_error,
                                      home_fallback=self.config.get("home_grid"))
            self._frame_key = key
        elif self._frame.view is not self.view:
            self._frame = replace(self._frame, view=self.view)
        return self._frame

    def handle(self, event) -> ViewState:
        """Apply a view event. Pointer moves are hit-tested against the current frame."""
        if isinstance(event, PointerMove) and self.view.mode is not Mode.PANNING:
            target = self.frame().hit_test(event.x, event.y, self.config["hit_tolerance"])
            event = PointerMove(event.x, event.y, target)
        self.view = transition(self.view, event, self.limits)
        return self.view

    def reset_view(self) -> ViewState:
        return self.handle(ZoomReset())

    def tooltip(self) -> Tooltip | None:
        drawn = self.frame().hovered()
        if drawn is None:
            return None
        return build_tooltip(drawn.record, drawn.connection)

    def summary(self) -> dict:
        """Timeline and selection state for display."""
        return {
            "records": len(self.records),
            "dated": len(self.timeline),
            "skipped": self.timeline.skipped,
            "start": self.timeline.start.isoformat(),
            "end": self.timeline.end.isoformat(),
            "selected": self.selected.isoformat(),
            "percent": self.timeline.date_to_slider(self.selected),
            "selected_count": len(self.selected_records()),
            "days": [{"date": d.isoformat(), "count": n} for d, n in self.timeline.days()],
            "station_callsign": get_field(self.records[0], "STATION_CALLSIGN") if self.records else None,
        }
