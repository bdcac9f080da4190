# Project: weather-odds
# Owner: GreenUnicorn
"""
variables.py — The fixed set of analysable weather variables and the tuning
constants shared by the analysis modules.

Every place that needs "which field of a record holds this variable" goes
through FIELD_ACCESSORS, so adding a variable means touching this file only.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from operator import attrgetter
from typing import Any

from weather_odds.models import WeatherRecord


class VariableId(StrEnum):
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    PRECIPITATION = "precipitation"
    WIND_SPEED = "windSpeed"
    AIR_QUALITY = "airQuality"


@dataclass(frozen=True)
class VariableConfig:
    """Static metadata for one variable: display name, unit, default threshold."""

    id: VariableId
    name: str
    unit: str
    default_threshold: float


VARIABLES: dict[VariableId, VariableConfig] = {
    VariableId.TEMPERATURE:   VariableConfig(VariableId.TEMPERATURE,   "Temperature",       "°C",   35.0),
    VariableId.HUMIDITY:      VariableConfig(VariableId.HUMIDITY,      "Humidity",          "%",    80.0),
    VariableId.PRECIPITATION: VariableConfig(VariableId.PRECIPITATION, "Precipitation",     "mm",   10.0),
    VariableId.WIND_SPEED:    VariableConfig(VariableId.WIND_SPEED,    "Wind Speed",        "km/h", 25.0),
    VariableId.AIR_QUALITY:   VariableConfig(VariableId.AIR_QUALITY,   "Air Quality Index", "AQI",  100.0),
}

# airQuality stays selectable but has no data source yet
DEFAULT_SELECTION: tuple[VariableId, ...] = (
    VariableId.TEMPERATURE,
    VariableId.HUMIDITY,
    VariableId.PRECIPITATION,
    VariableId.WIND_SPEED,
)

FIELD_ACCESSORS: dict[VariableId, Callable[[WeatherRecord], Any]] = {
    VariableId.TEMPERATURE:   attrgetter("temperature"),
    VariableId.HUMIDITY:      attrgetter("humidity"),
    VariableId.PRECIPITATION: attrgetter("precipitation"),
    VariableId.WIND_SPEED:    attrgetter("wind_speed"),
    VariableId.AIR_QUALITY:   attrgetter("air_quality"),
}


def default_thresholds() -> dict[VariableId, float]:
    """Return a fresh manual threshold set seeded from the variable defaults."""
    return {vid: cfg.default_threshold for vid, cfg in VARIABLES.items()}


def parse_variable_ids(names) -> tuple[VariableId, ...]:
    """Convert an iterable of id strings into VariableIds, keeping order.

    Raises:
        ValueError: If a name is not one of the known variable ids.
    """
    ids = []
    for name in names:
        try:
            vid = VariableId(name)
        except ValueError:
            known = ", ".join(v.value for v in VariableId)
            raise ValueError(f"Unknown variable '{name}'. Choose from: {known}") from None
        if vid not in ids:
            ids.append(vid)
    return tuple(ids)


@dataclass(frozen=True)
class Policy:
    """Tuning constants for thresholds, tags and risk bands."""

    # nearest-rank percentile used for each auto threshold
    auto_percentiles: dict[VariableId, float] = field(default_factory=lambda: {
        VariableId.TEMPERATURE: 80,
        VariableId.HUMIDITY: 70,
        VariableId.PRECIPITATION: 80,
        VariableId.WIND_SPEED: 80,
    })
    very_cold_max_temp: float = 10.0          # °C
    exceedance_tag_min: float = 40.0          # % for "very windy" / "very wet"
    heat_index_uncomfortable: float = 100.0   # °F
    seasonal_year_days: int = 365
    default_window_days: int = 30
    high_risk_min: float = 70.0
    moderate_risk_min: float = 40.0


POLICY = Policy()
