# Project: weather-odds
# Owner: GreenUnicorn
"""
weather.py — Current weather conditions for a location.

NASA POWER has no real-time feed, so "current" means the most recent day in
the last week of daily data; rain chance is estimated from the last three
days of precipitation. If NASA fails we use the Open-Meteo forecast API.

API docs: https://open-meteo.com/en/docs
"""

from datetime import date, timedelta
from pathlib import Path

from weather_odds.history import NASA_SOURCE, fetch_nasa_daily
from weather_odds.models import WeatherRecord
from weather_odds.utils import DEFAULT_LOG_PATH, fetch_json

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_SOURCE = "Open-Meteo"

HOURLY_VARIABLES = [
    "temperature_2m",
    "relativehumidity_2m",
    "precipitation_probability",
]

DEFAULT_HUMIDITY = 70
RECENT_DAYS = 7


def rain_chance(records: list[WeatherRecord]) -> int:
    """Rough rain chance (%) from the mean precipitation of the last 3 days.

    Args:
        records: Daily records sorted oldest first.

    Returns:
        One of 80, 60, 40, 20, 10 (or 0 for no records).
    """
    if not records:
        return 0
    recent = records[-3:]
    avg = sum(r.precipitation or 0 for r in recent) / len(recent)
    if avg > 5:
        return 80
    if avg > 2:
        return 60
    if avg > 0.5:
        return 40
    if avg > 0.1:
        return 20
    return 10


def _round(value: float | None) -> int | None:
    return round(value) if value is not None else None


def fetch_nasa_current(
    latitude: float,
    longitude: float,
    today: date | None = None,
    log_path: Path = DEFAULT_LOG_PATH,
) -> dict:
    """Latest daily NASA POWER observation within the last week.

    Raises:
        RuntimeError: If the API fails or returns no data.
    """
    end = today or date.today()
    start = end - timedelta(days=RECENT_DAYS)
    records = fetch_nasa_daily(latitude, longitude, start, end, log_path=log_path)
    if not records:
        raise RuntimeError("No NASA POWER data available for the last week")

    latest = records[-1]
    return {
        "temp": _round(latest.temperature),
        "humidity": _round(latest.humidity),
        "rain_chance": rain_chance(records),
        "wind_speed": _round(latest.wind_speed),
        "precipitation": latest.precipitation,
        "source": NASA_SOURCE,
        "date": latest.date_formatted,
    }


def fetch_open_meteo_current(
    latitude: float,
    longitude: float,
    log_path: Path = DEFAULT_LOG_PATH,
) -> dict:
    """Current conditions from the Open-Meteo forecast API.

    Raises:
        RuntimeError: If the API call fails.
    """
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(HOURLY_VARIABLES),
        "current_weather": "true",
        "timezone": "UTC",
    }
    data = fetch_json(OPEN_METEO_URL, params, label="Open-Meteo forecast API", log_path=log_path)

    current = data.get("current_weather") or {}
    hourly = data.get("hourly") or {}
    humidity = (hourly.get("relativehumidity_2m") or [None])[0]
    precip_prob = (hourly.get("precipitation_probability") or [None])[0]

    return {
        "temp": _round(current.get("temperature")),
        "humidity": _round(humidity if humidity is not None else DEFAULT_HUMIDITY),
        "rain_chance": _round(precip_prob if precip_prob is not None else 0),
        "wind_speed": _round(current.get("windspeed")),
        "precipitation": None,
        "source": OPEN_METEO_SOURCE,
        "date": date.today().isoformat(),
    }


def fetch_current(
    latitude: float,
    longitude: float,
    location: str,
    log_path: Path = DEFAULT_LOG_PATH,
) -> dict:
    """Fetch current conditions, NASA POWER first then Open-Meteo.

    Args:
        latitude: Location latitude in decimal degrees.
        longitude: Location longitude in decimal degrees.
        location: Display name echoed back in the result.
        log_path: Log file that receives failed API calls.

    Returns:
        Dict with keys location, temp, humidity, rain_chance, wind_speed,
        precipitation, source, date.

    Raises:
        RuntimeError: If both providers fail.
    """
    try:
        current = fetch_nasa_current(latitude, longitude, log_path=log_path)
    except RuntimeError:
        print("[weather-odds] NASA POWER current data unavailable. Using Open-Meteo.")
        current = fetch_open_meteo_current(latitude, longitude, log_path=log_path)
    return {"location": location, **current}
