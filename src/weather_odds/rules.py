# Project: weather-odds
# Owner: GreenUnicorn
"""
rules.py — Derive qualitative condition tags from the exceedance analysis.

Each check_* function receives the analysis results (and a threshold where
relevant) and returns its tag if the condition holds, or None otherwise.

condition_tags() runs every check in a fixed order and returns the tags that
fired. The checks are independent: contradictory inputs can yield both
"very hot" and "very cold".
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Optional

from weather_odds.models import ProbabilityResult
from weather_odds.variables import POLICY, VARIABLES, Policy, VariableId


class ConditionTag(StrEnum):
    VERY_HOT = "very hot"
    VERY_COLD = "very cold"
    VERY_WINDY = "very windy"
    VERY_WET = "very wet"
    VERY_UNCOMFORTABLE = "very uncomfortable"


NO_CONDITIONS_LABEL = "no extreme conditions detected"

Results = Mapping[str, ProbabilityResult]


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 9 / 5 + 32


def heat_index(temp_c: float, humidity: float) -> float:
    """Heat index in °F from the Rothfusz regression.

    Applied as a single formula: no low-humidity or low-temperature
    adjustments, so values well outside hot/humid conditions are rough.

    Args:
        temp_c: Air temperature in °C.
        humidity: Relative humidity in percent (0-100).

    Returns:
        Heat index in °F.
    """
    t = celsius_to_fahrenheit(temp_c)
    rh = humidity
    return (
        -42.379
        + 2.04901523 * t
        + 10.14333127 * rh
        - 0.22475541 * t * rh
        - 0.00683783 * t * t
        - 0.05481717 * rh * rh
        + 0.00122874 * t * t * rh
        + 0.00085282 * t * rh * rh
        - 0.00000199 * t * t * rh * rh
    )


def check_very_hot(results: Results, max_temp: float) -> Optional[ConditionTag]:
    """Trigger if the mean temperature reaches the user's temperature threshold."""
    temp = results.get(VariableId.TEMPERATURE)
    if temp is not None and temp.mean >= max_temp:
        return ConditionTag.VERY_HOT
    return None


def check_very_cold(results: Results, policy: Policy = POLICY) -> Optional[ConditionTag]:
    """Trigger if the mean temperature is at or below the cold cutoff (10°C)."""
    temp = results.get(VariableId.TEMPERATURE)
    if temp is not None and temp.mean <= policy.very_cold_max_temp:
        return ConditionTag.VERY_COLD
    return None


def check_very_windy(
    results: Results, threshold: float, policy: Policy = POLICY
) -> Optional[ConditionTag]:
    """Trigger on a frequent exceedance or a mean wind speed above the threshold."""
    wind = results.get(VariableId.WIND_SPEED)
    if wind is not None and (
        wind.exceedance_probability >= policy.exceedance_tag_min or wind.mean >= threshold
    ):
        return ConditionTag.VERY_WINDY
    return None


def check_very_wet(
    results: Results, threshold: float, policy: Policy = POLICY
) -> Optional[ConditionTag]:
    """Trigger on a frequent exceedance or a mean precipitation above the threshold."""
    precip = results.get(VariableId.PRECIPITATION)
    if precip is not None and (
        precip.exceedance_probability >= policy.exceedance_tag_min or precip.mean >= threshold
    ):
        return ConditionTag.VERY_WET
    return None


def check_very_uncomfortable(results: Results, policy: Policy = POLICY) -> Optional[ConditionTag]:
    """Trigger if the heat index of mean temperature and humidity reaches 100°F."""
    temp = results.get(VariableId.TEMPERATURE)
    hum = results.get(VariableId.HUMIDITY)
    if temp is None or hum is None:
        return None
    if heat_index(temp.mean, hum.mean) >= policy.heat_index_uncomfortable:
        return ConditionTag.VERY_UNCOMFORTABLE
    return None


def _manual(manual_thresholds: Mapping[str, float], variable: VariableId) -> float:
    value = manual_thresholds.get(variable)
    if value is None:
        return VARIABLES[variable].default_threshold
    return float(value)


def condition_tags(
    results: Results,
    manual_thresholds: Mapping[str, float],
    policy: Policy = POLICY,
) -> list[ConditionTag]:
    """
    Run all checks against the analysis results.
    Returns the triggered tags in check order (empty list = nothing extreme).
    """
    checks = [
        check_very_hot(results, max_temp=_manual(manual_thresholds, VariableId.TEMPERATURE)),
        check_very_cold(results, policy=policy),
        check_very_windy(
            results,
            threshold=_manual(manual_thresholds, VariableId.WIND_SPEED),
            policy=policy,
        ),
        check_very_wet(
            results,
            threshold=_manual(manual_thresholds, VariableId.PRECIPITATION),
            policy=policy,
        ),
        check_very_uncomfortable(results, policy=policy),
    ]

    # Filter out None values (checks that didn't trigger)
    return [tag for tag in checks if tag is not None]
