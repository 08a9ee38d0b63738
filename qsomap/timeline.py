"""Day-by-day index of QSOs for the map's date slider."""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta

from .adif import get_field


logger = logging.getLogger(__name__)


def parse_qso_date(value: str | None) -> date | None:
    """Parse an ADIF QSO_DATE (YYYYMMDD).

    Month must be 1-12 and day 1-31. A day past the end of its month rolls
    over the way calendar arithmetic does, so 20220230 is 2 March 2022.

    Returns:
        date or None if missing or malformed
    """
    if not value or len(value) != 8 or not value.isascii() or not value.isdigit():
        return None

    year, month, day = int(value[:4]), int(value[4:6]), int(value[6:8])
    if year < 1 or not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return date(year, month, 1) + timedelta(days=day - 1)


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


@dataclass
class Timeline:
    """QSOs sorted by date, plus the range the slider covers.

    entries holds (date, record) pairs in ascending date order; records that
    share a date keep their log order.
    """
    entries: list[tuple[date, dict]]
    start: date
    end: date
    skipped: int = 0
    _by_day: dict[date, list[dict]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        by_day: dict[date, list[dict]] = {}
        for day, record in self.entries:
            by_day.setdefault(day, []).append(record)
        self._by_day = by_day

    @property
    def initial_date(self) -> date:
        return self.start

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days

    def __len__(self) -> int:
        return len(self.entries)

    def records_on(self, day: date) -> list[dict]:
        """All QSOs logged on exactly this day, in log order."""
        return list(self._by_day.get(day, []))

    def days(self) -> list[tuple[date, int]]:
        """Distinct QSO dates with the number of contacts on each."""
        counts = Counter(day for day, _record in self.entries)
        return sorted(counts.items())

    def slider_to_date(self, percent: float) -> date:
        """Map a slider position (0-100) to a day in the range.

        Raises:
            ValueError: if percent is NaN or infinite
        """
        if not math.isfinite(percent):
            raise ValueError(f"Slider position must be a finite number, got {percent}")
        percent = min(max(percent, 0.0), 100.0)
        offset = round_half_up(self.total_days * percent / 100)
        return self.start + timedelta(days=offset)

    def date_to_slider(self, day: date) -> float:
        """Inverse of slider_to_date; days outside the range clamp to the ends."""
        if self.total_days == 0:
            return 0.0
        offset = (day - self.start).days
        offset = min(max(offset, 0), self.total_days)
        return offset * 100 / self.total_days


def build_timeline(records: list[dict], today: date | None = None) -> Timeline:
    """Index records by QSO_DATE.

    Records without a usable date are logged and left out. If none have one,
    the range falls back to the current month so the slider still has
    something to show.

    Args:
        records: Parsed ADIF records
        today: Override for "now" (tests)

    Returns:
        Timeline
    """
    dated = []
    skipped = 0
    for record in records:
        day = parse_qso_date(get_field(record, "QSO_DATE"))
        if day is None:
            skipped += 1
            logger.warning("Skipping QSO with %s QSO_DATE: %s",
                           "missing" if get_field(record, "QSO_DATE") is None else "invalid",
                           get_field(record, "CALL", "?"))
            continue
        dated.append((day, record))

    # sorted() is stable, so same-day QSOs stay in log order
    dated.sort(key=lambda entry: entry[0])

    if dated:
        return Timeline(dated, dated[0][0], dated[-1][0], skipped)

    if records:
        logger.warning("No valid dates found in %d QSO records", len(records))
    today = today or date.today()
    return Timeline([], today.replace(day=1), today, skipped)
