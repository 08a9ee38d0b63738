"""Hover tooltip contents for a QSO."""

import re
from dataclasses import dataclass

from .adif import get_field
from .band_utils import band_from_field
from .geo_utils import bearing_to_direction
from .locator import Connection
from .timeline import parse_qso_date


TIME_PATTERN = re.compile(r'^(\d{2})(\d{2})(\d{2})?$')

# Shown only when present on the record, in this order
OPTIONAL_FIELDS = [
    ("NAME", "Name"),
    ("QTH", "QTH"),
    ("COUNTRY", "Country"),
    ("COMMENT", "Comment"),
]


def format_qso_date(value: str | None) -> str:
    """20220115 -> "Jan 15, 2022"."""
    day = parse_qso_date(value)
    if day is None:
        return "Invalid date"
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def format_qso_time(value: str | None) -> str:
    """123456 -> "12:34:56". ADIF also allows HHMM, shown as HH:MM:00."""
    if not value:
        return ""
    match = TIME_PATTERN.match(value)
    if not match:
        return value
    hh, mm, ss = match.groups()
    return f"{hh}:{mm}:{ss or '00'}"


@dataclass(frozen=True)
class Tooltip:
    title: str
    lines: list[str]

    def as_dict(self) -> dict:
        return {"title": self.title, "lines": self.lines}

    def __str__(self):
        return "\n".join([self.title, *self.lines])


def build_tooltip(record: dict, connection: Connection | None = None) -> Tooltip:
    """Lay out the tooltip for a hovered QSO.

    Args:
        record: The QSO
        connection: Its resolved line, if known; adds distance and bearing

    Returns:
        Tooltip with the callsign as title and one line per detail
    """
    band = get_field(record, "BAND") or band_from_field(get_field(record, "FREQ")) or ""
    mode = get_field(record, "MODE", "")

    lines = [
        f"Date: {format_qso_date(get_field(record, 'QSO_DATE'))}",
        f"Time: {format_qso_time(get_field(record, 'TIME_ON'))}",
        f"Band: {band} - Mode: {mode}",
    ]
    for name, label in OPTIONAL_FIELDS:
        value = get_field(record, name)
        if value:
            lines.append(f"{label}: {value}")
    lines.append(f"RST: {get_field(record, 'RST_SENT', '')}/{get_field(record, 'RST_RCVD', '')}")

    if connection is not None:
        bearing = connection.bearing
        lines.append(f"Distance: {connection.distance_km:,.0f} km, "
                     f"{bearing:.0f}° {bearing_to_direction(bearing)}")

    return Tooltip(get_field(record, "CALL", "?"), lines)
