# Project: weather-odds
# Owner: GreenUnicorn
"""
test_pipeline.py — AnalysisRequest validation, run_analysis and AnalysisSession.

Uses in-memory records only.
"""

from datetime import date

import pytest

from conftest import make_record
from weather_odds.pipeline import (
    AnalysisRequest,
    AnalysisSession,
    ThresholdMode,
    run_analysis,
    today_day_of_year,
)
from weather_odds.rules import ConditionTag
from weather_odds.variables import DEFAULT_SELECTION, VariableId


def undated(values: list[float]) -> list:
    """Records without dates, so the seasonal filter keeps them all."""
    return [
        make_record(None, temperature=v, humidity=v, precipitation=v / 10, wind_speed=v / 2)
        for v in values
    ]


# ---------------------------------------------------------------------------
# AnalysisRequest
# ---------------------------------------------------------------------------

class TestAnalysisRequest:

    def test_defaults(self):
        req = AnalysisRequest(target_day=100)
        assert req.selected == DEFAULT_SELECTION
        assert req.threshold_mode == ThresholdMode.MANUAL
        assert req.manual_thresholds[VariableId.TEMPERATURE] == 35.0
        assert req.seasonal_window is True
        assert req.window_days == 30

    def test_target_day_defaults_to_today(self):
        assert AnalysisRequest().target_day == today_day_of_year()

    def test_today_day_of_year(self):
        assert today_day_of_year(date(2024, 12, 31)) == 366

    def test_empty_selection_falls_back_to_defaults(self):
        req = AnalysisRequest(selected=(), target_day=1)
        assert req.selected == ()
        assert req.variables == DEFAULT_SELECTION

    def test_string_inputs_are_coerced(self):
        req = AnalysisRequest(
            selected=["windSpeed", "airQuality"],
            threshold_mode="auto",
            manual_thresholds={"temperature": "30"},
            target_day=5,
        )
        assert req.selected == (VariableId.WIND_SPEED, VariableId.AIR_QUALITY)
        assert req.threshold_mode is ThresholdMode.AUTO
        assert req.manual_thresholds[VariableId.TEMPERATURE] == 30.0
        assert req.manual_thresholds[VariableId.HUMIDITY] == 80.0

    def test_unknown_variable_rejected(self):
        with pytest.raises(ValueError, match="pressure"):
            AnalysisRequest(selected=["pressure"], target_day=1)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError, match="threshold mode"):
            AnalysisRequest(threshold_mode="median", target_day=1)

    @pytest.mark.parametrize("day", [0, 367, -5])
    def test_target_day_out_of_range(self, day):
        with pytest.raises(ValueError, match="target_day"):
            AnalysisRequest(target_day=day)

    def test_negative_window_rejected(self):
        with pytest.raises(ValueError, match="window_days"):
            AnalysisRequest(window_days=-1, target_day=1)

    def test_manual_thresholds_are_read_only(self):
        req = AnalysisRequest(target_day=1)
        with pytest.raises(TypeError):
            req.manual_thresholds[VariableId.TEMPERATURE] = 1.0
        assert req.manual_thresholds[VariableId.TEMPERATURE] == 35.0

    def test_caller_dict_is_not_shared(self):
        source = {"temperature": 30.0}
        req = AnalysisRequest(manual_thresholds=source, target_day=1)
        source["temperature"] = 10.0
        assert req.manual_thresholds[VariableId.TEMPERATURE] == 30.0


# ---------------------------------------------------------------------------
# run_analysis
# ---------------------------------------------------------------------------

def test_manual_mode_end_to_end():
    records = undated([30.0, 36.0, 40.0])
    result = run_analysis(AnalysisRequest(selected=["temperature"], target_day=1), records)
    assert result.thresholds[VariableId.TEMPERATURE] == 35.0
    assert result.results[VariableId.TEMPERATURE].exceedance_probability == pytest.approx(200 / 3)
    assert result.tags == [ConditionTag.VERY_HOT]


def test_auto_mode_uses_percentile_thresholds():
    records = undated([10.0, 20.0, 30.0, 40.0, 50.0])
    req = AnalysisRequest(threshold_mode="auto", target_day=1)
    result = run_analysis(req, records)
    assert result.thresholds[VariableId.TEMPERATURE] == 40.0
    assert result.thresholds[VariableId.HUMIDITY] == 30.0
    assert result.results[VariableId.TEMPERATURE].exceedance_probability == 20.0


def test_auto_thresholds_computed_in_manual_mode_but_not_applied():
    records = undated([10.0, 20.0, 30.0, 40.0, 50.0])
    result = run_analysis(AnalysisRequest(target_day=1), records)
    assert result.auto_thresholds[VariableId.TEMPERATURE] == 40.0
    assert result.thresholds[VariableId.TEMPERATURE] == 35.0


def test_tags_use_manual_thresholds_even_in_auto_mode():
    """Mean 30°C: auto threshold is 30 but the manual 35 decides 'very hot'."""
    records = undated([20.0, 30.0, 40.0])
    result = run_analysis(AnalysisRequest(threshold_mode="auto", target_day=1), records)
    assert ConditionTag.VERY_HOT not in result.tags


def test_seasonal_window_filters_dataset(year_2023):
    result = run_analysis(AnalysisRequest(target_day=1, window_days=30), year_2023)
    assert len(result.dataset) == 61


def test_seasonal_disabled_uses_all_records(year_2023):
    result = run_analysis(AnalysisRequest(target_day=1, seasonal_window=False), year_2023)
    assert len(result.dataset) == 365


def test_empty_dataset_is_not_an_error():
    result = run_analysis(AnalysisRequest(target_day=100), [])
    assert result.dataset == []
    assert result.auto_thresholds == {}
    assert result.results == {}
    assert result.tags == []


def test_run_analysis_is_idempotent(year_2023):
    req = AnalysisRequest(target_day=200, threshold_mode="auto")
    assert run_analysis(req, year_2023) == run_analysis(req, year_2023)


def test_run_analysis_does_not_mutate_input():
    records = undated([1.0, 2.0])
    copy = list(records)
    run_analysis(AnalysisRequest(target_day=1), records)
    assert records == copy


# ---------------------------------------------------------------------------
# AnalysisSession
# ---------------------------------------------------------------------------

class TestAnalysisSession:

    def test_starts_empty(self):
        session = AnalysisSession(request=AnalysisRequest(target_day=1))
        assert session.result.results == {}
        assert session.source is None

    def test_set_dataset_recomputes(self):
        session = AnalysisSession(request=AnalysisRequest(target_day=1))
        result = session.set_dataset(undated([36.0, 38.0]), source="NASA POWER")
        assert session.source == "NASA POWER"
        assert result is session.result
        assert result.tags[0] == ConditionTag.VERY_HOT

    def test_update_switches_mode(self):
        session = AnalysisSession(undated([10.0, 20.0, 30.0, 40.0, 50.0]), AnalysisRequest(target_day=1))
        result = session.update(threshold_mode=ThresholdMode.AUTO)
        assert session.request.threshold_mode is ThresholdMode.AUTO
        assert result.thresholds[VariableId.TEMPERATURE] == 40.0

    def test_update_rejects_bad_values(self):
        session = AnalysisSession(request=AnalysisRequest(target_day=1))
        with pytest.raises(ValueError):
            session.update(target_day=400)

    def test_toggle_variable_off_and_on(self):
        session = AnalysisSession(undated([20.0]), AnalysisRequest(target_day=1))
        result = session.toggle_variable("humidity")
        assert VariableId.HUMIDITY not in result.results
        result = session.toggle_variable("humidity")
        assert session.request.selected[-1] == VariableId.HUMIDITY
        assert VariableId.HUMIDITY in result.results

    def test_toggle_everything_off_uses_defaults(self):
        session = AnalysisSession(undated([20.0]), AnalysisRequest(selected=["temperature"], target_day=1))
        result = session.toggle_variable("temperature")
        assert session.request.selected == ()
        assert list(result.results) == list(DEFAULT_SELECTION)

    def test_set_manual_threshold(self):
        session = AnalysisSession(undated([30.0, 36.0, 40.0]), AnalysisRequest(target_day=1))
        result = session.set_manual_threshold("temperature", 29)
        assert result.thresholds[VariableId.TEMPERATURE] == 29.0
        assert result.results[VariableId.TEMPERATURE].exceedance_probability == 100.0

    def test_repeated_recompute_is_stable(self):
        session = AnalysisSession(undated([30.0, 36.0]), AnalysisRequest(target_day=1))
        first = session.result
        assert session.update() == first
