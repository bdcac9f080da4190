# Project: weather-odds
# Owner: GreenUnicorn
"""
models.py — Record types passed between the fetchers and the analysis core.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from weather_odds.variables import VariableConfig


@dataclass(frozen=True)
class WeatherRecord:
    """One daily observation.

    ``date`` is the provider's raw key (e.g. '20240115'); ``date_formatted``
    is the ISO 'YYYY-MM-DD' form, or None when the provider gave no usable date.
    Units: °C, %, mm, km/h, AQI.
    """

    date: str
    date_formatted: str | None
    temperature: float | None = None
    humidity: float | None = None
    precipitation: float | None = None
    wind_speed: float | None = None
    air_quality: float | None = None

    def to_dict(self) -> dict:
        """Return the record with the camelCase keys used by the JSON export."""
        return {
            "date":          self.date,
            "dateFormatted": self.date_formatted,
            "temperature":   self.temperature,
            "humidity":      self.humidity,
            "precipitation": self.precipitation,
            "windSpeed":     self.wind_speed,
            "airQuality":    self.air_quality,
        }


@dataclass(frozen=True)
class ProbabilityResult:
    """Exceedance statistics for one variable over one dataset."""

    mean: float
    threshold: float
    exceedance_probability: float
    values: tuple[float, ...]
    config: VariableConfig
