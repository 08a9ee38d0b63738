"""Station location from Maidenhead grids and ADIF LAT/LON strings.

Conversions return None on bad input instead of raising: a log with a few
garbled locators should still map everything else.
"""

import logging
import re
from dataclasses import dataclass
from typing import NamedTuple

from .adif import get_field
from .geo_utils import calc_bearing, calc_distance_km


logger = logging.getLogger(__name__)

FIELD_LETTERS = "ABCDEFGHIJKLMNOPQR"          # 18 fields, 20° x 10°
SUBSQUARE_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWX"  # 24 subsquares, 5' x 2.5'
DIGITS = "0123456789"

SUBSQUARE_LON = 5 / 60
SUBSQUARE_LAT = 2.5 / 60

# "N045 26.250", "W122 03.500"
SEXAGESIMAL_PATTERN = re.compile(r'^([NSEW])\s*(\d{1,3})\s+(\d{1,2}(?:\.\d*)?)$', re.IGNORECASE)

# side -> (lat field, lon field, grid field)
STATION_FIELDS = {
    "home": ("MY_LAT", "MY_LON", "MY_GRIDSQUARE"),
    "contacted": ("LAT", "LON", "GRIDSQUARE"),
}


class LatLon(NamedTuple):
    lat: float
    lon: float


@dataclass(frozen=True)
class Connection:
    """A QSO drawn as a line from the home station to the contacted station."""
    origin: LatLon
    destination: LatLon
    record: dict

    @property
    def distance_km(self) -> float:
        return calc_distance_km(self.origin.lat, self.origin.lon,
                                self.destination.lat, self.destination.lon)

    @property
    def bearing(self) -> float:
        return calc_bearing(self.origin.lat, self.origin.lon,
                            self.destination.lat, self.destination.lon)


def _index(ch: str, alphabet: str) -> int | None:
    if len(ch) != 1 or not ch.isascii():
        return None
    idx = alphabet.find(ch.upper())
    return idx if idx >= 0 else None


def grid_to_latlon(grid: str | None, center: bool = False) -> LatLon | None:
    """Convert Maidenhead grid to lat/lon.

    Args:
        grid: Maidenhead grid square (4 or 6 characters, any case). An
            8-character extended locator is accepted; its last pair is
            checked but does not add precision.
        center: Return the middle of the cell rather than its south-west
            corner

    Returns:
        LatLon or None if invalid
    """
    if not grid:
        return None
    grid = grid.strip()
    if len(grid) not in (4, 6, 8):
        return None

    lon_field = _index(grid[0], FIELD_LETTERS)
    lat_field = _index(grid[1], FIELD_LETTERS)
    lon_square = DIGITS.find(grid[2])
    lat_square = DIGITS.find(grid[3])
    if lon_field is None or lat_field is None or lon_square < 0 or lat_square < 0:
        return None

    lon_sub = lat_sub = 0
    if len(grid) >= 6:
        lon_sub = _index(grid[4], SUBSQUARE_LETTERS)
        lat_sub = _index(grid[5], SUBSQUARE_LETTERS)
        if lon_sub is None or lat_sub is None:
            return None
    if len(grid) == 8 and not (grid[6] in DIGITS and grid[7] in DIGITS):
        return None

    lon = -180 + lon_field * 20 + lon_square * 2 + lon_sub * SUBSQUARE_LON
    lat = -90 + lat_field * 10 + lat_square * 1 + lat_sub * SUBSQUARE_LAT

    if center:
        if len(grid) >= 6:
            lon += SUBSQUARE_LON / 2
            lat += SUBSQUARE_LAT / 2
        else:
            lon += 1  # center of 2° x 1° square
            lat += 0.5

    return LatLon(lat, lon)


def latlon_to_grid(lat: float, lon: float, precision: int = 6) -> str:
    """Encode lat/lon as a Maidenhead grid (4 or 6 characters).

    Raises:
        ValueError: for out-of-range coordinates or an unsupported precision
    """
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        raise ValueError(f"Coordinate out of range: {lat}, {lon}")
    if precision not in (4, 6):
        raise ValueError(f"Unsupported grid precision: {precision}")

    # The north pole and the antimeridian belong to the last cell
    lon_adj = min(lon + 180, 360 - 1e-9)
    lat_adj = min(lat + 90, 180 - 1e-9)

    lon_field, lon_rem = divmod(lon_adj, 20)
    lat_field, lat_rem = divmod(lat_adj, 10)
    lon_square, lon_rem = divmod(lon_rem, 2)
    lat_square, lat_rem = divmod(lat_rem, 1)

    grid = (FIELD_LETTERS[int(lon_field)] + FIELD_LETTERS[int(lat_field)]
            + str(int(lon_square)) + str(int(lat_square)))
    if precision == 6:
        lon_sub = min(int(lon_rem * 12), 23)
        lat_sub = min(int(lat_rem * 24), 23)
        grid += (SUBSQUARE_LETTERS[lon_sub] + SUBSQUARE_LETTERS[lat_sub]).lower()
    return grid


def parse_sexagesimal(value: str | None, axis: str) -> float | None:
    """Convert an ADIF location string like "N045 26.250" to decimal degrees.

    Args:
        value: Hemisphere letter, degrees, space, minutes
        axis: "lat" (expects N/S) or "lon" (expects E/W)

    Returns:
        Decimal degrees, negative for S and W, or None if malformed
    """
    if not value:
        return None
    match = SEXAGESIMAL_PATTERN.match(value.strip())
    if not match:
        return None

    hemi, deg_str, min_str = match.groups()
    hemi = hemi.upper()
    if axis == "lat":
        if hemi not in "NS":
            return None
        limit = 90
    else:
        if hemi not in "EW":
            return None
        limit = 180

    try:
        degrees = int(deg_str)
        minutes = float(min_str)
    except ValueError:
        return None
    if minutes >= 60:
        return None

    decimal = degrees + minutes / 60
    if decimal > limit:
        return None
    return -decimal if hemi in "SW" else decimal


def sexagesimal_to_latlon(lat: str | None, lon: str | None) -> LatLon | None:
    """Convert an ADIF LAT/LON pair; both halves must parse."""
    lat_deg = parse_sexagesimal(lat, "lat")
    lon_deg = parse_sexagesimal(lon, "lon")
    if lat_deg is None or lon_deg is None:
        return None
    return LatLon(lat_deg, lon_deg)


def resolve_station(record: dict, side: str, fallback: str | None = None) -> LatLon | None:
    """Work out where one end of a QSO was.

    Precedence: the LAT/LON pair (MY_LAT/MY_LON for the home side) when both
    parse, then the grid square, then the fallback grid if one is given.

    Args:
        record: Parsed ADIF record
        side: "home" or "contacted"
        fallback: Grid to use when the record has nothing usable

    Returns:
        LatLon or None if the side can't be placed
    """
    lat_field, lon_field, grid_field = STATION_FIELDS[side]

    coords = sexagesimal_to_latlon(get_field(record, lat_field), get_field(record, lon_field))
    if coords is None:
        coords = grid_to_latlon(get_field(record, grid_field))
    if coords is None and fallback:
        coords = grid_to_latlon(fallback)
    return coords


def resolve_connection(record: dict, home_fallback: str | None = None) -> Connection | None:
    """Build the home -> contacted Connection for a record, or None."""
    origin = resolve_station(record, "home", home_fallback)
    destination = resolve_station(record, "contacted")
    if origin is None or destination is None:
        logger.debug("Unresolved location for %s (home=%s, contacted=%s)",
                     get_field(record, "CALL", "?"), origin, destination)
        return None
    return Connection(origin, destination, record)
