# Project: weather-odds
# Owner: GreenUnicorn
"""
test_analysis.py — Unit tests for analysis.py.

Records are built in memory — no API calls.
"""

import pytest

from conftest import make_record
from weather_odds.analysis import (
    analyze,
    exceedance_probability,
    risk_level,
    sample_values,
    terminal_summary,
    to_number,
)
from weather_odds.pipeline import AnalysisRequest, run_analysis
from weather_odds.variables import VARIABLES, VariableId


# ---------------------------------------------------------------------------
# to_number / sample_values
# ---------------------------------------------------------------------------

def test_to_number_accepts_ints_floats_and_numeric_strings():
    assert to_number(3) == 3.0
    assert to_number(2.5) == 2.5
    assert to_number("4.5") == 4.5


def test_to_number_rejects_missing_and_non_finite():
    assert to_number(None) is None
    assert to_number("n/a") is None
    assert to_number(float("nan")) is None
    assert to_number(float("-inf")) is None
    assert to_number(True) is None


def test_sample_values_skips_unusable_entries():
    records = [
        make_record(temperature=30.0),
        make_record(temperature=None),
        make_record(temperature=float("nan")),
        make_record(temperature=40.0),
    ]
    assert sample_values(records, VariableId.TEMPERATURE) == [30.0, 40.0]


def test_exceedance_is_strictly_greater():
    assert exceedance_probability([10.0, 20.0, 30.0, 40.0], 20.0) == 50.0


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------

class TestAnalyze:

    def _records(self):
        return [
            make_record(temperature=30.0, humidity=50.0),
            make_record(temperature=36.0, humidity=None),
            make_record(temperature=40.0, humidity=90.0),
            make_record(temperature=None, humidity=70.0),
        ]

    def test_mean_and_exceedance(self):
        results = analyze(self._records(), ["temperature"], {VariableId.TEMPERATURE: 35.0})
        temp = results[VariableId.TEMPERATURE]
        assert temp.mean == pytest.approx(106 / 3)
        assert temp.exceedance_probability == pytest.approx(200 / 3)
        assert temp.threshold == 35.0
        assert temp.values == (30.0, 36.0, 40.0)
        assert temp.config is VARIABLES[VariableId.TEMPERATURE]

    def test_values_equal_to_threshold_do_not_count(self):
        records = [make_record(wind_speed=25.0), make_record(wind_speed=25.0)]
        results = analyze(records, ["windSpeed"], {"windSpeed": 25.0})
        assert results[VariableId.WIND_SPEED].exceedance_probability == 0.0

    def test_missing_threshold_uses_variable_default(self):
        results = analyze(self._records(), ["humidity"], {})
        assert results[VariableId.HUMIDITY].threshold == 80.0
        assert results[VariableId.HUMIDITY].exceedance_probability == pytest.approx(100 / 3)

    def test_variable_without_samples_is_omitted(self):
        results = analyze(self._records(), ["temperature", "precipitation"], {})
        assert VariableId.TEMPERATURE in results
        assert VariableId.PRECIPITATION not in results

    def test_unknown_id_is_skipped(self):
        results = analyze(self._records(), ["temperature", "pressure"], {})
        assert list(results) == [VariableId.TEMPERATURE]

    def test_empty_dataset_yields_empty_results(self):
        assert analyze([], ["temperature", "humidity"], {}) == {}

    def test_probability_bounds(self):
        records = [make_record(temperature=float(t)) for t in range(-10, 50, 3)]
        for threshold in (-100.0, 0.0, 20.0, 100.0):
            results = analyze(records, ["temperature"], {"temperature": threshold})
            p = results[VariableId.TEMPERATURE].exceedance_probability
            assert 0.0 <= p <= 100.0

    def test_result_order_follows_selection(self):
        records = [make_record(temperature=20.0, humidity=50.0, wind_speed=5.0)]
        results = analyze(records, ["windSpeed", "temperature", "humidity"], {})
        assert list(results) == [
            VariableId.WIND_SPEED, VariableId.TEMPERATURE, VariableId.HUMIDITY,
        ]


# ---------------------------------------------------------------------------
# risk_level
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("probability, expected", [
    (0.0, "Low Risk"),
    (39.9, "Low Risk"),
    (40.0, "Moderate Risk"),
    (69.9, "Moderate Risk"),
    (70.0, "High Risk"),
    (100.0, "High Risk"),
])
def test_risk_level_buckets(probability, expected):
    assert risk_level(probability) == expected


# ---------------------------------------------------------------------------
# terminal_summary
# ---------------------------------------------------------------------------

def test_summary_includes_current_conditions_and_tags():
    records = [make_record(None, temperature=38.0), make_record(None, temperature=40.0)]
    result = run_analysis(AnalysisRequest(target_day=10, selected=("temperature",)), records)
    current = {"temp": 31, "humidity": 64, "wind_speed": 12, "rain_chance": 20, "source": "NASA POWER"}

    text = terminal_summary("Pune, India", current, result)

    assert "Pune, India" in text
    assert "31°C" in text
    assert "very hot" in text
    assert "±30 days, 2 records" in text


def test_summary_without_data_says_so():
    result = run_analysis(AnalysisRequest(target_day=10), [])
    text = terminal_summary("Nowhere", None, result)
    assert "Not enough historical data" in text
    assert "no extreme conditions detected" in text
    assert "Now:" not in text


def test_summary_all_year_mode():
    result = run_analysis(AnalysisRequest(target_day=10, seasonal_window=False), [])
    assert "all year (0 records)" in terminal_summary("X", None, result)
