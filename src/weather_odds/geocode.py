# Project: weather-odds
# Owner: GreenUnicorn
"""
geocode.py — Look up coordinates for a place name using Open-Meteo Geocoding API.

Free, no API key required.
API docs: https://open-meteo.com/en/docs/geocoding-api
"""

from pathlib import Path

from weather_odds.utils import DEFAULT_LOG_PATH, fetch_json

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

# Used when neither a usable place name nor coordinates are given (Pune, India)
DEFAULT_COORDINATES = (18.5204, 73.8567)


class LocationNotFoundError(Exception):
    """Raised when the geocoding API has no match for a place name."""


def geocode(place: str, log_path: Path = DEFAULT_LOG_PATH) -> dict:
    """Look up coordinates for a place name using Open-Meteo Geocoding.

    Args:
        place: Human-readable place name, e.g. 'Pune' or 'London, UK'.
        log_path: Log file that receives a failed API call.

    Returns:
        Dict with keys: latitude (float), longitude (float), name (str).
        The name is a canonical 'City, Region, Country' string.

    Raises:
        LocationNotFoundError: If no results are found for the place name.
        RuntimeError: If the API call fails.
    """
    params = {
        "name": place,
        "count": 1,
        "language": "en",
        "format": "json",
    }

    data = fetch_json(GEOCODING_URL, params, label=f"Geocoding API for '{place}'", log_path=log_path)

    results = data.get("results")
    if not results:
        raise LocationNotFoundError(f'Location "{place}" not found. Try a more specific name.')

    result = results[0]
    # Build a human-readable canonical name: "City, Country" (include admin1 region if available)
    name_parts = [result.get("name", place)]
    if result.get("admin1"):
        name_parts.append(result["admin1"])
    if result.get("country"):
        name_parts.append(result["country"])
    canonical_name = ", ".join(name_parts)

    return {
        "latitude": result["latitude"],
        "longitude": result["longitude"],
        "name": canonical_name,
    }


def resolve_location(
    place: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    log_path: Path = DEFAULT_LOG_PATH,
) -> dict:
    """Pick coordinates from explicit lat/lon, a place name, or the default.

    Explicit coordinates win over the place name; the place name (if any) is
    kept as the display name. With neither, DEFAULT_COORDINATES is used.

    Raises:
        LocationNotFoundError: If only a place name is given and it has no match.
    """
    if latitude is not None and longitude is not None:
        name = place or f"{latitude}, {longitude}"
        return {"latitude": latitude, "longitude": longitude, "name": name}
    if place:
        return geocode(place, log_path=log_path)
    lat, lon = DEFAULT_COORDINATES
    return {"latitude": lat, "longitude": lon, "name": "Pune, India"}
