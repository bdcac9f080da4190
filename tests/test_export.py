# Project: weather-odds
# Owner: GreenUnicorn
"""Tests for export.py — CSV/JSON rendering of the historical series."""

import csv
import io
import json
from datetime import date

from conftest import make_record
from weather_odds.export import CSV_HEADER, export_filename, to_csv, to_json

GENERATED = "2026-02-23T20:00:00+00:00"


def _records():
    return [
        make_record("2024-01-01", temperature=21.5, humidity=60.0, precipitation=0.0, wind_speed=12.0),
        make_record("2024-01-02", temperature=None, humidity=55.0, precipitation=1.2, wind_speed=None),
    ]


def test_csv_metadata_block():
    text = to_csv(_records(), "Pune, India", ["temperature", "humidity"], generated=GENERATED)
    lines = text.splitlines()
    assert lines[0] == "# Weather Probability Analysis"
    assert lines[1] == "# Location: Pune, India"
    assert lines[2] == "# Variables: temperature, humidity"
    assert lines[3] == "# Data Source: NASA POWER"
    assert lines[4] == f"# Generated: {GENERATED}"
    assert lines[5].startswith("# Units:")


def test_csv_rows_quoted_with_blank_missing_values():
    text = to_csv(_records(), "Pune, India", ["temperature"], generated=GENERATED)
    body = "\n".join(line for line in text.splitlines() if not line.startswith("#"))
    rows = list(csv.reader(io.StringIO(body)))

    assert rows[0] == CSV_HEADER
    assert rows[1] == ["20240101", "2024-01-01", "Pune, India", "21.5", "60.0", "0.0", "12.0", ""]
    assert rows[2][3] == ""
    assert '"Pune, India"' in text


def test_csv_source_label():
    text = to_csv([], "X", [], source="Open-Meteo-Archive", generated=GENERATED)
    assert "# Data Source: Open-Meteo-Archive" in text


def test_json_document():
    doc = json.loads(to_json(_records(), "Pune", ["temperature"], generated=GENERATED))

    meta = doc["metadata"]
    assert meta["location"] == "Pune"
    assert meta["variables"] == ["temperature"]
    assert meta["dataSource"] == "NASA POWER"
    assert meta["totalRecords"] == 2
    assert meta["units"]["windSpeed"] == "km/h"

    first = doc["data"][0]
    assert first["dateFormatted"] == "2024-01-01"
    assert first["windSpeed"] == 12.0
    assert doc["data"][1]["temperature"] is None


def test_export_filename_is_filesystem_safe():
    name = export_filename("Pune, India", "csv", today=date(2026, 2, 23))
    assert name == "weather_odds_Pune__India_2026-02-23.csv"
