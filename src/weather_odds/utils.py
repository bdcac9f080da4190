# Project: weather-odds
# Owner: GreenUnicorn
"""
utils.py — Shared utilities: HTTP JSON helper, failure logging and the query log.
"""

from collections import deque
from datetime import datetime
from pathlib import Path
from typing import Any

import requests


def fmt_day(date_str: str) -> str:
    """Format a date string as a short human-readable label.

    Args:
        date_str: Date in 'YYYY-MM-DD' format.

    Returns:
        Formatted string like 'Mon 24 Feb'.
    """
    dt = datetime.strptime(date_str, "%Y-%m-%d")
    return dt.strftime("%a %d %b")


DEFAULT_LOG_PATH = Path("logs/weather_odds.log")
DEFAULT_LOG_DIR = Path("logs")
QUERY_LOG_NAME = "queries.txt"
USER_AGENT = "weather-odds/1.0"


def fetch_json(
    url: str,
    params: dict,
    label: str = "API call",
    timeout: float = 10,
    log_path: Path = DEFAULT_LOG_PATH,
) -> Any:
    """GET *url* with *params* and return the decoded JSON body.

    One attempt only; callers decide whether to fall back to another provider.

    Args:
        url: Endpoint URL.
        params: Query-string parameters.
        label: Human-readable name for the call, used in messages.
        timeout: Request timeout in seconds.
        log_path: Path to the log file for recording failures.

    Returns:
        The parsed JSON payload.

    Raises:
        RuntimeError: If the request fails, returns an error status, or the
            body is not valid JSON.
    """
    try:
        r = requests.get(url, params=params, timeout=timeout, headers={"User-Agent": USER_AGENT})
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        msg = f"{label} failed: {e}"
        print(f"[weather-odds] {msg}")
        _log_error(msg, log_path=log_path)
        raise RuntimeError(msg) from e


def _log_error(message: str, log_path: Path = DEFAULT_LOG_PATH) -> None:
    """Append a timestamped ERROR line to the log file.

    Args:
        message: Error description to log.
        log_path: Destination log file path.
    """
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(log_path, "a") as f:
            f.write(f"{timestamp} [ERROR] {message}\n")
    except OSError:
        pass  # Never crash on logging failure


def _fmt_value(value: Any) -> str:
    return "" if value is None else str(value)


def log_query(
    location: str,
    temperature: float | None,
    humidity: float | None,
    wind_speed: float | None,
    log_dir: Path = DEFAULT_LOG_DIR,
) -> None:
    """Append one current-conditions query to logs/queries.txt.

    Format: ``2026-02-23 20:00:01|pune|31|64|12``

    Args:
        location: Place name as typed; stored lower-cased.
        temperature: Current temperature in °C.
        humidity: Current relative humidity in %.
        wind_speed: Current wind speed in km/h.
        log_dir: Directory containing queries.txt.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        name = location.lower().replace("|", "-")
        fields = [timestamp, name, _fmt_value(temperature), _fmt_value(humidity), _fmt_value(wind_speed)]
        with open(log_dir / QUERY_LOG_NAME, "a") as f:
            f.write("|".join(fields) + "\n")
    except OSError:
        pass


def _parse_number(text: str) -> float | None:
    if text == "":
        return None
    try:
        return float(text)
    except ValueError:
        return None


def read_query_history(
    location: str | None = None,
    limit: int = 10,
    log_dir: Path = DEFAULT_LOG_DIR,
) -> list[dict]:
    """Read the most recent queries from logs/queries.txt, newest first.

    Args:
        location: Only return queries for this place (case-insensitive).
        limit: Maximum number of entries to return.
        log_dir: Directory containing queries.txt.

    Returns:
        List of dicts with keys timestamp, location, temperature, humidity,
        wind_speed. Empty if the file is missing or unreadable; malformed
        lines are skipped.
    """
    path = log_dir / QUERY_LOG_NAME
    if limit <= 0 or not path.exists():
        return []
    wanted = location.lower() if location else None
    try:
        with open(path) as f:
            lines = list(f)
    except OSError:
        return []

    buf: deque[dict] = deque(maxlen=limit)
    for line in lines:
        parts = line.rstrip("\n").split("|")
        if len(parts) != 5:
            continue
        if wanted is not None and parts[1] != wanted:
            continue
        buf.append({
            "timestamp":   parts[0],
            "location":    parts[1],
            "temperature": _parse_number(parts[2]),
            "humidity":    _parse_number(parts[3]),
            "wind_speed":  _parse_number(parts[4]),
        })
    return list(reversed(buf))
