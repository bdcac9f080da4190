# Project: weather-odds
# Owner: GreenUnicorn
"""
history.py — Fetch historical daily weather for the probability analysis.

NASA POWER is tried first; if it errors or returns no rows we fall back to the
Open-Meteo ERA5 archive.

API docs:
    https://power.larc.nasa.gov/docs/services/api/temporal/daily/
    https://open-meteo.com/en/docs/historical-weather-api
"""

import math
from datetime import date, timedelta
from pathlib import Path

from weather_odds.models import WeatherRecord
from weather_odds.utils import DEFAULT_LOG_PATH, fetch_json

NASA_POWER_URL = "https://power.larc.nasa.gov/api/temporal/daily/point"
ARCHIVE_API_URL = "https://archive-api.open-meteo.com/v1/era5"

NASA_PARAMETERS = "PRECTOT,T2M,RH2M,WS2M"  # precipitation, temperature, humidity, wind
NASA_FILL_VALUE = -999.0
MS_TO_KMH = 3.6

NASA_SOURCE = "NASA POWER"
ARCHIVE_SOURCE = "Open-Meteo-Archive"

DAILY_VARIABLES = [
    "temperature_2m_mean",
    "precipitation_sum",
    "relative_humidity_2m_mean",
    "windspeed_10m_max",
]


def default_date_range(today: date | None = None) -> tuple[date, date]:
    """Return (start_date, end_date) covering the past year up to today."""
    end = today or date.today()
    try:
        start = end.replace(year=end.year - 1)
    except ValueError:
        # 29 Feb has no counterpart last year
        start = end - timedelta(days=365)
    return start, end


def _num(value) -> float | None:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def _nasa_value(raw) -> float | None:
    value = _num(raw)
    if value == NASA_FILL_VALUE:
        return None
    return value


def _iso_from_key(key: str) -> str | None:
    """'20240115' -> '2024-01-15'; None if the key is not a valid compact date."""
    try:
        return date(int(key[0:4]), int(key[4:6]), int(key[6:8])).isoformat()
    except (TypeError, ValueError):
        return None


def fetch_nasa_daily(
    latitude: float,
    longitude: float,
    start: date,
    end: date,
    community: str = "AG",
    log_path: Path = DEFAULT_LOG_PATH,
) -> list[WeatherRecord]:
    """Fetch daily records from NASA POWER for an inclusive date range.

    If the response carries an empty parameter block we ask once more with
    the RE community, which often returns the meteorological variables.

    Returns:
        Records sorted by date. Wind speed is converted from m/s to km/h;
        missing precipitation becomes 0.0, other missing values None.

    Raises:
        RuntimeError: If the API call fails.
    """
    def _call(c: str) -> dict:
        params = {
            "parameters": NASA_PARAMETERS,
            "community": c,
            "longitude": longitude,
            "latitude": latitude,
            "start": start.strftime("%Y%m%d"),
            "end": end.strftime("%Y%m%d"),
            "format": "JSON",
        }
        data = fetch_json(NASA_POWER_URL, params, label=f"NASA POWER daily ({c})", log_path=log_path)
        return (data.get("properties") or {}).get("parameter") or {}

    parameter = _call(community)
    if not parameter and community != "RE":
        print(f"[weather-odds] NASA POWER returned no parameters for community {community}, trying RE")
        parameter = _call("RE")

    return _parse_nasa(parameter)


def _parse_nasa(parameter: dict) -> list[WeatherRecord]:
    """Turn the NASA POWER parameter block into WeatherRecords."""
    precip = parameter.get("PRECTOT") or parameter.get("PRECTOTCORR") or {}
    temps = parameter.get("T2M") or {}
    humidity = parameter.get("RH2M") or {}
    wind = parameter.get("WS2M") or {}

    records = []
    for key in sorted(precip):
        wind_ms = _nasa_value(wind.get(key))
        records.append(WeatherRecord(
            date=key,
            date_formatted=_iso_from_key(key),
            precipitation=_nasa_value(precip.get(key)) or 0.0,
            temperature=_nasa_value(temps.get(key)),
            humidity=_nasa_value(humidity.get(key)),
            wind_speed=wind_ms * MS_TO_KMH if wind_ms is not None else None,
        ))
    return records


def fetch_archive_daily(
    latitude: float,
    longitude: float,
    start: date,
    end: date,
    log_path: Path = DEFAULT_LOG_PATH,
) -> list[WeatherRecord]:
    """Fetch daily records from the Open-Meteo ERA5 archive.

    Raises:
        RuntimeError: If the API call fails.
    """
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "daily": ",".join(DAILY_VARIABLES),
        "timezone": "UTC",
    }
    data = fetch_json(
        ARCHIVE_API_URL,
        params,
        label="Open-Meteo historical archive API",
        timeout=60,
        log_path=log_path,
    )
    return _parse_archive(data)


def _parse_archive(data: dict) -> list[WeatherRecord]:
    """Parse the Open-Meteo archive response into WeatherRecords."""
    daily = data.get("daily") or {}
    dates = daily.get("time") or []

    def column(name: str) -> list:
        values = daily.get(name) or []
        return values + [None] * (len(dates) - len(values))

    temps = column("temperature_2m_mean")
    precip = column("precipitation_sum")
    humidity = column("relative_humidity_2m_mean")
    wind = column("windspeed_10m_max")  # already km/h

    records = []
    for i, date_str in enumerate(dates):
        records.append(WeatherRecord(
            date=date_str.replace("-", ""),
            date_formatted=date_str,
            temperature=_num(temps[i]),
            humidity=_num(humidity[i]),
            precipitation=_num(precip[i]),
            wind_speed=_num(wind[i]),
        ))
    return records


def fetch_historical(
    latitude: float,
    longitude: float,
    start: date | None = None,
    end: date | None = None,
    log_path: Path = DEFAULT_LOG_PATH,
) -> tuple[str, list[WeatherRecord]]:
    """Fetch a daily historical series, NASA POWER first then Open-Meteo.

    Args:
        latitude: Location latitude in decimal degrees.
        longitude: Location longitude in decimal degrees.
        start: First day (inclusive). Defaults to one year before *end*.
        end: Last day (inclusive). Defaults to today.
        log_path: Log file that receives failed API calls.

    Returns:
        (source label, records).

    Raises:
        RuntimeError: If both providers fail.
    """
    default_start, default_end = default_date_range(end)
    end = end or default_end
    start = start or default_start

    try:
        records = fetch_nasa_daily(latitude, longitude, start, end, log_path=log_path)
        if records:
            return NASA_SOURCE, records
        print("[weather-odds] NASA POWER returned 0 rows. Falling back to Open-Meteo archive.")
    except RuntimeError:
        print("[weather-odds] NASA POWER unavailable. Falling back to Open-Meteo archive.")

    return ARCHIVE_SOURCE, fetch_archive_daily(latitude, longitude, start, end, log_path=log_path)
