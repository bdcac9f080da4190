# Project: weather-odds
# Owner: GreenUnicorn
"""
export.py — Serialise the raw historical series to CSV or JSON.

Both formats carry a small metadata block (location, variables, source,
timestamp, units) so an exported file is self-describing.
"""

import csv
import io
import json
import re
from datetime import date, datetime, timezone

from weather_odds.models import WeatherRecord

TITLE = "Weather Probability Analysis"

UNITS = {
    "temperature": "°C",
    "humidity": "%",
    "precipitation": "mm",
    "windSpeed": "km/h",
    "airQuality": "AQI",
}

CSV_HEADER = [
    "Date", "Date_Formatted", "Location",
    "Temperature", "Humidity", "Precipitation", "WindSpeed", "AirQuality",
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _cell(value) -> str:
    return "" if value is None else str(value)


def to_csv(
    records: list[WeatherRecord],
    location: str,
    variables: list[str],
    source: str = "NASA POWER",
    generated: str | None = None,
) -> str:
    """Render records as CSV preceded by '#' metadata lines.

    Every field is quoted; missing values are written as empty strings.
    """
    generated = generated or _now_iso()
    metadata = [
        f"# {TITLE}",
        f"# Location: {location}",
        f"# Variables: {', '.join(variables)}",
        f"# Data Source: {source}",
        f"# Generated: {generated}",
        "# Units: Temperature (°C), Humidity (%), Precipitation (mm), Wind Speed (km/h)",
    ]

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in records:
        writer.writerow([
            r.date,
            _cell(r.date_formatted),
            location,
            _cell(r.temperature),
            _cell(r.humidity),
            _cell(r.precipitation),
            _cell(r.wind_speed),
            _cell(r.air_quality),
        ])
    return "\n".join(metadata) + "\n" + buf.getvalue()


def to_json(
    records: list[WeatherRecord],
    location: str,
    variables: list[str],
    source: str = "NASA POWER",
    generated: str | None = None,
) -> str:
    """Render records as an indented JSON document with a metadata block."""
    payload = {
        "metadata": {
            "title": TITLE,
            "location": location,
            "variables": list(variables),
            "dataSource": source,
            "generated": generated or _now_iso(),
            "units": UNITS,
            "totalRecords": len(records),
        },
        "data": [r.to_dict() for r in records],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_filename(location: str, extension: str, today: date | None = None) -> str:
    """Build 'weather_odds_<location>_<YYYY-MM-DD>.<ext>' with a filesystem-safe location."""
    safe = re.sub(r"[^a-zA-Z0-9]", "_", location)
    day = (today or date.today()).isoformat()
    return f"weather_odds_{safe}_{day}.{extension}"
