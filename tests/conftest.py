# Project: weather-odds
# Owner: GreenUnicorn
"""Shared record builders for the analysis tests (no API calls)."""

from datetime import date, timedelta

import pytest

from weather_odds.models import WeatherRecord


def make_record(
    date_formatted="2023-01-01",
    temperature=None,
    humidity=None,
    precipitation=None,
    wind_speed=None,
) -> WeatherRecord:
    raw = date_formatted.replace("-", "") if date_formatted else "unknown"
    return WeatherRecord(
        date=raw,
        date_formatted=date_formatted,
        temperature=temperature,
        humidity=humidity,
        precipitation=precipitation,
        wind_speed=wind_speed,
    )


def year_of_records(year: int = 2023) -> list[WeatherRecord]:
    """One record per day; temperature equals the day of year."""
    start = date(year, 1, 1)
    records = []
    day = start
    while day.year == year:
        doy = (day - start).days + 1
        records.append(make_record(
            day.isoformat(),
            temperature=float(doy),
            humidity=60.0,
            precipitation=1.0,
            wind_speed=10.0,
        ))
        day += timedelta(days=1)
    return records


@pytest.fixture
def year_2023() -> list[WeatherRecord]:
    return year_of_records(2023)
