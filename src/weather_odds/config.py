# Project: weather-odds
# Owner: GreenUnicorn
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The config path defaults to "config.toml" in the current working directory,
but can be overridden for testing.
"""

import copy
import tomllib
from pathlib import Path

from weather_odds.pipeline import AnalysisRequest
from weather_odds.variables import POLICY, VariableId, parse_variable_ids

DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULT_CONFIG = {
    "location": {"name": "Pune, India", "latitude": 18.5204, "longitude": 73.8567},
    "thresholds": {},
    "analysis": {
        "variables": ["temperature", "humidity", "precipitation", "windSpeed"],
        "threshold_mode": "manual",
        "seasonal_window": True,
        "window_days": POLICY.default_window_days,
    },
    "log": {"path": "logs/weather_odds.log"},
}


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load and validate a TOML configuration file.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If required keys or sections are missing or invalid.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml and fill in your location."
        )

    with open(path, "rb") as f:
        config = tomllib.load(f)

    _validate(config)
    config.setdefault("thresholds", {})
    return config


def load_config_or_default(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Like load_config, but fall back to a copy of DEFAULT_CONFIG when the file is absent."""
    if not path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    return load_config(path)


def _validate(config: dict) -> None:
    """Validate that all required config sections and keys are present.

    Expected config schema::

        [location]
        name      = <str>     # display name, e.g. "Pune, India"
        latitude  = <float>   # decimal degrees
        longitude = <float>   # decimal degrees

        [thresholds]          # optional; any subset of the variable ids
        temperature = <float> # °C

        [analysis]
        variables       = [<str>, ...]   # e.g. ["temperature", "humidity"]
        threshold_mode  = <str>          # "manual" or "auto"
        seasonal_window = <bool>
        window_days     = <int>          # ± days around the target day

        [log]
        path = <str>     # relative or absolute path to the log file

    Args:
        config: Parsed TOML config dict.

    Raises:
        ValueError: If any required section or key is absent, or a value is invalid.
    """
    required_sections = ["location", "analysis", "log"]
    for section in required_sections:
        if section not in config:
            raise ValueError(f"Missing required config section: [{section}]")

    location = config["location"]
    for key in ("latitude", "longitude", "name"):
        if key not in location:
            raise ValueError(f"Missing required config key: [location].{key}")

    analysis = config["analysis"]
    for key in ("variables", "threshold_mode", "seasonal_window", "window_days"):
        if key not in analysis:
            raise ValueError(f"Missing required config key: [analysis].{key}")
    parse_variable_ids(analysis["variables"])
    if analysis["threshold_mode"] not in ("manual", "auto"):
        raise ValueError(
            f"Invalid [analysis].threshold_mode: {analysis['threshold_mode']!r} "
            "(expected 'manual' or 'auto')"
        )

    for name in config.get("thresholds", {}):
        if name not in set(VariableId):
            raise ValueError(f"Unknown variable in [thresholds]: {name}")

    if "path" not in config["log"]:
        raise ValueError("Missing required config key: [log].path")


def request_from_config(config: dict, target_day: int | None = None) -> AnalysisRequest:
    """Build an AnalysisRequest from the [analysis] and [thresholds] sections."""
    analysis = config["analysis"]
    return AnalysisRequest(
        selected=parse_variable_ids(analysis["variables"]),
        threshold_mode=analysis["threshold_mode"],
        manual_thresholds=config.get("thresholds", {}),
        seasonal_window=analysis["seasonal_window"],
        window_days=analysis["window_days"],
        target_day=target_day,
    )
