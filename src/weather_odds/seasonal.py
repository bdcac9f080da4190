# Project: weather-odds
# Owner: GreenUnicorn
"""
seasonal.py — Restrict a daily series to a day-of-year window around a target day.

The window wraps across the year boundary, so a window around 1 January also
picks up late December. The wrap uses a fixed 365-day year.
"""

from __future__ import annotations

from datetime import date

from weather_odds.models import WeatherRecord
from weather_odds.variables import POLICY


def day_of_year(date_str: str | None) -> int | None:
    """Return the 1-based day of year for an ISO date, or None if unparsable.

    Leap years give 366 for 31 December.
    """
    if not date_str:
        return None
    try:
        return date.fromisoformat(date_str).timetuple().tm_yday
    except (TypeError, ValueError):
        return None


def in_window(
    doy: int,
    target_day: int,
    window_days: int,
    year_days: int = POLICY.seasonal_year_days,
) -> bool:
    """True if *doy* lies within *window_days* of *target_day*, wrapping the year."""
    diff = abs(doy - target_day)
    return diff <= window_days or (year_days - diff) <= window_days


def filter_seasonal(
    records: list[WeatherRecord],
    target_day: int,
    window_days: int = POLICY.default_window_days,
    enabled: bool = True,
) -> list[WeatherRecord]:
    """Keep the records whose date falls inside the seasonal window.

    Records without a parsable ``date_formatted`` are kept so that a few bad
    timestamps never empty the dataset. Input order is preserved.
    """
    if not enabled:
        return list(records)

    kept = []
    for record in records:
        doy = day_of_year(record.date_formatted)
        if doy is None or in_window(doy, target_day, window_days):
            kept.append(record)
    return kept
