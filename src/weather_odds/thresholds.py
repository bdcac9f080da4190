# Project: weather-odds
# Owner: GreenUnicorn
"""
thresholds.py — Percentile-based auto thresholds and threshold resolution.

Percentiles use the nearest-rank rule on the ascending sample, zero-indexed,
with no interpolation: index = floor(p/100 * (n - 1)). Keep it that way so
auto thresholds stay reproducible across runs and ports.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from weather_odds.analysis import sample_values
from weather_odds.models import WeatherRecord
from weather_odds.variables import POLICY, VARIABLES, Policy, VariableId


def percentile(values: list[float], p: float) -> float | None:
    """Return the nearest-rank *p*-th percentile of *values*, or None if empty."""
    if not values:
        return None
    ordered = sorted(values)
    index = math.floor((p / 100) * (len(ordered) - 1))
    return ordered[index]


def estimate_thresholds(
    records: list[WeatherRecord],
    policy: Policy = POLICY,
) -> dict[VariableId, float]:
    """Compute an auto threshold per variable from the policy's percentiles.

    Variables with no finite samples are left out; callers fall back to the
    variable's default threshold for those.
    """
    thresholds: dict[VariableId, float] = {}
    for variable, p in policy.auto_percentiles.items():
        value = percentile(sample_values(records, variable), p)
        if value is not None:
            thresholds[variable] = value
    return thresholds


def resolve_thresholds(
    mode: str,
    manual: Mapping[str, float],
    auto: Mapping[str, float],
) -> dict[VariableId, float]:
    """Return the threshold set that applies for *mode* ("manual" or "auto").

    Every known variable gets a value: gaps in the chosen set are filled with
    the variable's default threshold.
    """
    chosen = auto if mode == "auto" else manual
    resolved: dict[VariableId, float] = {}
    for variable, config in VARIABLES.items():
        value = chosen.get(variable)
        resolved[variable] = float(value) if value is not None else config.default_threshold
    return resolved
