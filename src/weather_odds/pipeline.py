# Project: weather-odds
# Owner: GreenUnicorn
"""
pipeline.py — Wire the analysis steps together.

run_analysis() is a pure function of (request, records):

    records -> filter_seasonal -> estimate_thresholds -> resolve_thresholds
            -> analyze -> condition_tags

AnalysisSession holds the current dataset and request for a UI or CLI run and
recomputes the whole pipeline on every change. Nothing is cached between
passes; each result replaces the previous one.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from types import MappingProxyType

from weather_odds.analysis import analyze
from weather_odds.models import ProbabilityResult, WeatherRecord
from weather_odds.rules import ConditionTag, condition_tags
from weather_odds.seasonal import filter_seasonal
from weather_odds.thresholds import estimate_thresholds, resolve_thresholds
from weather_odds.variables import (
    DEFAULT_SELECTION,
    POLICY,
    Policy,
    VariableId,
    default_thresholds,
    parse_variable_ids,
)


class ThresholdMode(StrEnum):
    MANUAL = "manual"
    AUTO = "auto"


def today_day_of_year(today: date | None = None) -> int:
    """Day of year (1-366) for *today*, defaulting to the local date."""
    return (today or date.today()).timetuple().tm_yday


@dataclass(frozen=True)
class AnalysisRequest:
    """Everything the user controls for one analysis pass.

    ``selected`` may be empty, meaning "use the default selection".
    ``target_day`` defaults to today's day of year when left as None.
    ``manual_thresholds`` is stored as a read-only mapping.

    Raises:
        ValueError: On an unknown variable id, threshold mode, a negative
            window, or a target day outside 1-366.
    """

    selected: tuple[VariableId, ...] = DEFAULT_SELECTION
    threshold_mode: ThresholdMode = ThresholdMode.MANUAL
    manual_thresholds: Mapping[VariableId, float] = field(default_factory=default_thresholds)
    seasonal_window: bool = True
    window_days: int = POLICY.default_window_days
    target_day: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "selected", parse_variable_ids(self.selected))
        try:
            object.__setattr__(self, "threshold_mode", ThresholdMode(self.threshold_mode))
        except ValueError:
            raise ValueError(
                f"Unknown threshold mode '{self.threshold_mode}'. Use 'manual' or 'auto'."
            ) from None

        manual = default_thresholds()
        for name, value in self.manual_thresholds.items():
            (vid,) = parse_variable_ids([name])
            manual[vid] = float(value)
        object.__setattr__(self, "manual_thresholds", MappingProxyType(manual))

        if self.window_days < 0:
            raise ValueError(f"window_days must be >= 0, got {self.window_days}")
        if self.target_day is None:
            object.__setattr__(self, "target_day", today_day_of_year())
        elif not 1 <= self.target_day <= 366:
            raise ValueError(f"target_day must be between 1 and 366, got {self.target_day}")

    @property
    def variables(self) -> tuple[VariableId, ...]:
        """The variables to analyse: the explicit selection or the defaults."""
        return self.selected or DEFAULT_SELECTION


@dataclass(frozen=True)
class AnalysisResult:
    request: AnalysisRequest
    dataset: list[WeatherRecord]
    auto_thresholds: dict[VariableId, float]
    thresholds: dict[VariableId, float]
    results: dict[VariableId, ProbabilityResult]
    tags: list[ConditionTag]


def run_analysis(
    request: AnalysisRequest,
    records: list[WeatherRecord],
    policy: Policy = POLICY,
) -> AnalysisResult:
    """Run the full analysis pipeline for one request over one dataset."""
    dataset = filter_seasonal(
        records,
        target_day=request.target_day,
        window_days=request.window_days,
        enabled=request.seasonal_window,
    )
    # Auto thresholds are computed in both modes so a UI can show them.
    auto = estimate_thresholds(dataset, policy=policy)
    thresholds = resolve_thresholds(request.threshold_mode, request.manual_thresholds, auto)
    results = analyze(dataset, request.variables, thresholds)
    tags = condition_tags(results, request.manual_thresholds, policy=policy)
    return AnalysisResult(
        request=request,
        dataset=dataset,
        auto_thresholds=auto,
        thresholds=thresholds,
        results=results,
        tags=tags,
    )


class AnalysisSession:
    """Current dataset + request, with a freshly computed result after every change."""

    def __init__(
        self,
        records: list[WeatherRecord] | None = None,
        request: AnalysisRequest | None = None,
        policy: Policy = POLICY,
    ):
        self.records: list[WeatherRecord] = list(records or [])
        self.request = request or AnalysisRequest()
        self.policy = policy
        self.source: str | None = None
        self.result = self._recompute()

    def _recompute(self) -> AnalysisResult:
        self.result = run_analysis(self.request, self.records, policy=self.policy)
        return self.result

    def set_dataset(self, records: list[WeatherRecord], source: str | None = None) -> AnalysisResult:
        """Replace the historical dataset (e.g. after a fetch completes)."""
        self.records = list(records)
        self.source = source
        return self._recompute()

    def update(self, **changes) -> AnalysisResult:
        """Replace one or more AnalysisRequest fields and recompute."""
        self.request = dataclasses.replace(self.request, **changes)
        return self._recompute()

    def toggle_variable(self, variable: str) -> AnalysisResult:
        """Add *variable* to the selection, or remove it if already selected."""
        (vid,) = parse_variable_ids([variable])
        selected = list(self.request.selected)
        if vid in selected:
            selected.remove(vid)
        else:
            selected.append(vid)
        return self.update(selected=tuple(selected))

    def set_manual_threshold(self, variable: str, value: float) -> AnalysisResult:
        manual = dict(self.request.manual_thresholds)
        (vid,) = parse_variable_ids([variable])
        manual[vid] = float(value)
        return self.update(manual_thresholds=manual)
