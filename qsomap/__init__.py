"""QSO Map - ADIF log parsing, grid conversion and a day-by-day contact map."""

from .adif import parse_adif, parse_adif_header, load_adif, get_field
from .locator import (LatLon, Connection, grid_to_latlon, latlon_to_grid, parse_sexagesimal,
                      sexagesimal_to_latlon, resolve_station, resolve_connection)
from .timeline import Timeline, build_timeline, parse_qso_date
from .viewport import Mode, ViewState, ZoomLimits, transition
from .render import Frame, build_frame
from .session import MapSession
from .errors import QsoMapError, AdifParseError, BoundaryError, UploadError, GeometryError

__all__ = [
    # Parsing
    'parse_adif',
    'parse_adif_header',
    'load_adif',
    'get_field',
    # Locations
    'LatLon',
    'Connection',
    'grid_to_latlon',
    'latlon_to_grid',
    'parse_sexagesimal',
    'sexagesimal_to_latlon',
    'resolve_station',
    'resolve_connection',
    # Timeline
    'Timeline',
    'build_timeline',
    'parse_qso_date',
    # Map view
    'Mode',
    'ViewState',
    'ZoomLimits',
    'transition',
    'Frame',
    'build_frame',
    'MapSession',
    # Errors
    'QsoMapError',
    'AdifParseError',
    'BoundaryError',
    'UploadError',
    'GeometryError',
]
