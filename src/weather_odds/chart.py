# Project: weather-odds
# Owner: GreenUnicorn
"""
chart.py — ASCII table and bar rendering for probability results.

Uses only the Python standard library (os).
All rendering functions return strings ready to print.
"""

import os

from weather_odds.analysis import risk_level
from weather_odds.models import ProbabilityResult

FALLBACK_TERMINAL_WIDTH: int = 80
BAR_LABEL_RESERVE: int = 30  # characters reserved for label + value outside the bar


def render_probability_table(results: dict[str, ProbabilityResult]) -> str:
    """Render per-variable mean, threshold and exceedance as a fixed-width table.

    Args:
        results: Mapping of variable id -> ProbabilityResult.

    Returns:
        Multi-line string containing the formatted table.
    """
    sep = "─" * 70
    header_row = "  ".join([
        f"{'Variable':<18}", f"{'Mean':>10}", f"{'Threshold':>11}", f"{'Exceed%':>8}", "Risk",
    ])
    lines = [sep, header_row, sep]

    if not results:
        lines.append("  No variable had enough data to analyse.")

    for res in results.values():
        unit = res.config.unit
        lines.append("  ".join([
            f"{res.config.name:<18}",
            f"{res.mean:>6.1f} {unit:<3}",
            f"{res.threshold:>7.1f} {unit:<3}",
            f"{res.exceedance_probability:>7.1f}%",
            risk_level(res.exceedance_probability),
        ]))

    lines.append(sep)
    return "\n".join(lines)


# ─────────────────────────────────────────────────────────────
# Bar chart helpers
# ─────────────────────────────────────────────────────────────

def _bar(value: float, max_value: float, bar_width: int) -> str:
    """Render a single filled/empty bar scaled to bar_width.

    Args:
        value: The data value to represent.
        max_value: The maximum value (maps to full bar width).
        bar_width: Total character width of the bar.

    Returns:
        String of '█' and '░' characters of length bar_width.
    """
    if max_value == 0:
        filled = 0
    else:
        filled = round((value / max_value) * bar_width)
    filled = max(0, min(filled, bar_width))
    return "█" * filled + "░" * (bar_width - filled)


def _terminal_bar_width() -> int:
    try:
        terminal_width = os.get_terminal_size().columns
    except OSError:
        terminal_width = FALLBACK_TERMINAL_WIDTH
    return max(10, terminal_width - BAR_LABEL_RESERVE)


def render_bar_chart(
    labels: list[str],
    values: list[float],
    title: str,
    unit: str = "",
    bar_width: int | None = None,
    max_value: float | None = None,
) -> str:
    """Render a labelled horizontal bar chart.

    Args:
        labels: List of row label strings.
        values: List of numeric values corresponding to each label.
        title: Chart title printed above the bars.
        unit: Optional unit suffix appended to each value (e.g. '%').
        bar_width: Width of the bar in characters. Auto-detected from terminal if None.
        max_value: Value that maps to a full bar. Defaults to the largest value.

    Returns:
        Multi-line string containing the chart.
    """
    if bar_width is None:
        bar_width = _terminal_bar_width()

    max_val = max_value if max_value is not None else (max(values) if values else 1)
    if max_val == 0:
        max_val = 1  # avoid division by zero

    label_w = max(len(lbl) for lbl in labels) if labels else 3
    lines = [title]
    for label, value in zip(labels, values):
        bar = _bar(value, max_val, bar_width)
        val_str = f"{value:.0f}{unit}"
        lines.append(f"  {label:<{label_w}} │{bar}│ {val_str:>6}")

    return "\n".join(lines)


def render_probability_chart(
    results: dict[str, ProbabilityResult],
    bar_width: int | None = None,
) -> str:
    """Bar chart of exceedance probabilities on a fixed 0-100% scale."""
    labels = [res.config.name for res in results.values()]
    values = [res.exceedance_probability for res in results.values()]
    return render_bar_chart(
        labels,
        values,
        "Exceedance probability (%)",
        unit="%",
        bar_width=bar_width,
        max_value=100,
    )
