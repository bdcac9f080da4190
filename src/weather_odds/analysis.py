# Project: weather-odds
# Owner: GreenUnicorn
"""
analysis.py — Exceedance statistics over historical daily weather records.

All calculations use the Python standard library only (no numpy/scipy).
For each selected variable we report the mean of the usable samples and the
percentage of samples strictly above the threshold.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from weather_odds.models import ProbabilityResult, WeatherRecord
from weather_odds.rules import NO_CONDITIONS_LABEL
from weather_odds.variables import FIELD_ACCESSORS, POLICY, VARIABLES, Policy, VariableId


def to_number(value: Any) -> float | None:
    """Coerce a raw field value to a finite float, or None if that is not possible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def sample_values(records: Iterable[WeatherRecord], variable: VariableId) -> list[float]:
    """Extract the usable numeric samples for *variable*, in record order."""
    accessor = FIELD_ACCESSORS[variable]
    values = []
    for record in records:
        number = to_number(accessor(record))
        if number is not None:
            values.append(number)
    return values


def exceedance_probability(values: list[float], threshold: float) -> float:
    """Percentage (0-100) of *values* strictly greater than *threshold*.

    Callers must not pass an empty list.
    """
    count = sum(1 for v in values if v > threshold)
    return count / len(values) * 100


def analyze(
    records: list[WeatherRecord],
    selected: Iterable[str],
    thresholds: Mapping[str, float],
    configs: Mapping[str, Any] = VARIABLES,
) -> dict[VariableId, ProbabilityResult]:
    """Compute mean and exceedance probability for each selected variable.

    Args:
        records: Daily records to analyse (already seasonally filtered).
        selected: Variable ids to analyse. Ids missing from *configs* are skipped.
        thresholds: Threshold per variable id. Missing entries fall back to
            the variable's default threshold.
        configs: VariableConfig per id.

    Returns:
        Dict of VariableId -> ProbabilityResult. Variables without a single
        usable sample are left out entirely; an absent key means
        "insufficient data", not "zero risk".
    """
    results: dict[VariableId, ProbabilityResult] = {}
    for name in selected:
        config = configs.get(name)
        if config is None:
            continue
        variable = VariableId(config.id)
        values = sample_values(records, variable)
        if not values:
            continue

        threshold = thresholds.get(variable)
        if threshold is None:
            threshold = config.default_threshold
        threshold = float(threshold)

        results[variable] = ProbabilityResult(
            mean=sum(values) / len(values),
            threshold=threshold,
            exceedance_probability=exceedance_probability(values, threshold),
            values=tuple(values),
            config=config,
        )
    return results


def risk_level(probability: float, policy: Policy = POLICY) -> str:
    """Bucket an exceedance probability into a human-readable risk label."""
    if probability >= policy.high_risk_min:
        return "High Risk"
    if probability >= policy.moderate_risk_min:
        return "Moderate Risk"
    return "Low Risk"


def terminal_summary(location_name: str, current: dict | None, result) -> str:
    """Return a formatted multi-line terminal summary for one analysis run.

    Example:
        📍 Pune, India — Weather Probability Analysis
        ──────────────────────────────────────────────────────────────
        📅  Day of year:        196 (±30 days, 62 records)
        ...
    """
    sep = "─" * 62
    request = result.request
    if request.seasonal_window:
        window = f"{request.target_day} (±{request.window_days} days, {len(result.dataset)} records)"
    else:
        window = f"all year ({len(result.dataset)} records)"

    lines = [
        f"📍 {location_name} — Weather Probability Analysis",
        sep,
    ]
    if current:
        lines += [
            f"🌡  Now:                {current['temp']}°C, {current['humidity']}% humidity, "
            f"{current['wind_speed']} km/h wind",
            f"🌧  Rain chance:        {current['rain_chance']}%  (source: {current['source']})",
            "",
        ]
    lines += [
        f"📅  Day of year:        {window}",
        f"🎚  Threshold mode:     {request.threshold_mode}",
    ]
    if not result.results:
        lines.append("⚠️  Not enough historical data to analyse the selected variables.")

    tags = ", ".join(result.tags) if result.tags else NO_CONDITIONS_LABEL
    lines += [
        f"🏷  Conditions:         {tags}",
        sep,
    ]
    return "\n".join(lines)
