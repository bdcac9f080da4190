# Project: weather-odds
# Owner: GreenUnicorn
"""
app.py — Streamlit weather probability dashboard.

Run with:
    streamlit run app/app.py

Requires: pip install -e ".[ui]"
Data sources: NASA POWER daily point API, Open-Meteo (fallback). No API key.
"""

import sys
from pathlib import Path

# Ensure the src/ package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from datetime import date

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from weather_odds.analysis import risk_level
from weather_odds.export import export_filename, to_csv, to_json
from weather_odds.geocode import LocationNotFoundError, resolve_location
from weather_odds.history import fetch_historical
from weather_odds.pipeline import AnalysisSession, ThresholdMode, today_day_of_year
from weather_odds.rules import NO_CONDITIONS_LABEL
from weather_odds.utils import log_query
from weather_odds.variables import DEFAULT_SELECTION, POLICY, VARIABLES
from weather_odds.weather import fetch_current


# ─────────────────────────────────────────────────────────────
# Page config — must be first Streamlit call
# ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Weather Odds",
    page_icon="🌍",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ─────────────────────────────────────────────────────────────
# CSS injection
# ─────────────────────────────────────────────────────────────

CUSTOM_CSS = """
<style>
  #MainMenu, footer { visibility: hidden; }
  .block-container { padding-top: 2rem; padding-bottom: 4rem; max-width: 1080px; }

  .stat-pill {
    background: #2c2c2e;
    border-radius: 12px;
    padding: 14px 18px;
    width: 100%;
  }
  .stat-label {
    font-size: 0.68rem;
    text-transform: uppercase;
    letter-spacing: 0.08em;
    color: #8e8e93;
    font-weight: 500;
  }
  .stat-value { font-size: 1.6rem; font-weight: 700; color: #f5f5f7; line-height: 1.2; }
  .stat-unit { font-size: 0.9rem; color: #8e8e93; font-weight: 400; }

  .tag-pill {
    border-radius: 980px;
    display: inline-block;
    font-size: 0.8rem;
    font-weight: 600;
    margin: 0 6px 6px 0;
    padding: 4px 12px;
  }

  .error-card {
    background: rgba(255, 69, 58, 0.1);
    border: 1px solid rgba(255, 69, 58, 0.3);
    border-radius: 12px;
    color: #ff453a;
    padding: 20px 24px;
    text-align: center;
    margin: 1rem 0;
  }

  .section-label {
    font-size: 0.72rem;
    text-transform: uppercase;
    letter-spacing: 0.1em;
    color: #636366;
    font-weight: 600;
    margin: 1.5rem 0 0.75rem;
  }

  .wo-footer { text-align: center; color: #48484a; font-size: 0.8rem; padding: 3rem 0 1rem; }
</style>
"""

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)


PLOTLY_LAYOUT = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(color="#8e8e93", size=12),
    margin=dict(l=8, r=8, t=32, b=8),
    xaxis=dict(showgrid=False, zeroline=False),
    yaxis=dict(gridcolor="#2c2c2e", zeroline=False, range=[0, 100], ticksuffix="%"),
)

TAG_COLORS = {
    "very hot":           ("#ff453a", "#ffffff"),
    "very cold":          ("#0a84ff", "#ffffff"),
    "very windy":         ("#bf5af2", "#ffffff"),
    "very wet":           ("rgba(10,132,255,0.15)", "#0a84ff"),
    "very uncomfortable": ("#ff9f0a", "#ffffff"),
}

RISK_COLORS = {
    "High Risk": "#ff453a",
    "Moderate Risk": "#ffd60a",
    "Low Risk": "#30d158",
}


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────


def stat_html(label: str, value: str, unit: str = "") -> str:
    """Render a stat pill as HTML."""
    return f"""
    <div class="stat-pill">
      <div class="stat-label">{label}</div>
      <div class="stat-value">{value}<span class="stat-unit"> {unit}</span></div>
    </div>
    """


def tag_html(tag: str) -> str:
    bg, fg = TAG_COLORS.get(tag, ("#2c2c2e", "#8e8e93"))
    return f'<span class="tag-pill" style="background:{bg};color:{fg};">{tag}</span>'


def fill_auto_slots(slots: dict, auto_thresholds: dict) -> None:
    """Write the auto threshold captions into placeholders reserved in the sidebar."""
    for vid, slot in slots.items():
        value = auto_thresholds.get(vid)
        shown = f"{value:.1f}" if value is not None else "—"
        slot.caption(f"Auto threshold: {shown} {VARIABLES[vid].unit}")


def _session() -> AnalysisSession:
    if "session" not in st.session_state:
        st.session_state["session"] = AnalysisSession()
    return st.session_state["session"]


# ─────────────────────────────────────────────────────────────
# Cached data loader
# ─────────────────────────────────────────────────────────────


@st.cache_data(ttl=3600)
def load_data(place: str, latitude: float | None, longitude: float | None) -> dict:
    """Resolve the location, fetch current conditions and one year of history.

    Returns a dict with keys location, current, source, records.
    On any error returns {"error": str}.
    """
    try:
        loc = resolve_location(place or None, latitude, longitude)
    except LocationNotFoundError as exc:
        return {"error": str(exc)}
    except RuntimeError as exc:
        return {"error": f"Geocoding error: {exc}"}

    try:
        current = fetch_current(loc["latitude"], loc["longitude"], loc["name"])
    except RuntimeError as exc:
        return {"error": f"Failed to fetch weather data: {exc}"}
    log_query(loc["name"], current["temp"], current["humidity"], current["wind_speed"])

    try:
        source, records = fetch_historical(loc["latitude"], loc["longitude"])
    except RuntimeError as exc:
        return {"error": f"Historical data fetch failed: {exc}"}

    if not records:
        return {"error": "No historical data returned for this location/date range."}

    return {"location": loc, "current": current, "source": source, "records": records}


# ─────────────────────────────────────────────────────────────
# Main dashboard
# ─────────────────────────────────────────────────────────────


def main() -> None:
    """Render the full probability dashboard."""
    session = _session()

    st.markdown(
        '<h2 style="font-size:1.6rem;font-weight:700;">🌍 Weather Probability Dashboard</h2>',
        unsafe_allow_html=True,
    )

    # ── SECTION 1: Sidebar controls ──────────────────────────

    with st.sidebar:
        st.markdown('<div class="section-label">Location &amp; Time</div>', unsafe_allow_html=True)
        place = st.text_input("City name", placeholder="e.g. Pune, Mumbai")
        lat_col, lon_col = st.columns(2)
        with lat_col:
            lat_text = st.text_input("Latitude", placeholder="18.5204")
        with lon_col:
            lon_text = st.text_input("Longitude", placeholder="73.8567")
        target_day = st.number_input(
            "Day of year",
            min_value=1,
            max_value=366,
            value=today_day_of_year(),
            step=1,
        )
        analyse_clicked = st.button("Analyze Weather Conditions", use_container_width=True)

        st.markdown('<div class="section-label">Analysis</div>', unsafe_allow_html=True)
        auto_mode = st.checkbox("Auto thresholds (percentile-based)", value=False)
        seasonal = st.checkbox(
            f"Seasonal window (±{POLICY.default_window_days} days around selected day)",
            value=True,
        )

        st.markdown('<div class="section-label">Variables</div>', unsafe_allow_html=True)
        selected = []
        manual = {}
        auto_slots = {}
        for vid, cfg in VARIABLES.items():
            if st.checkbox(f"{cfg.name} ({cfg.unit})", value=vid in DEFAULT_SELECTION, key=f"var_{vid}"):
                selected.append(vid)
            if auto_mode:
                auto_slots[vid] = st.empty()
            else:
                manual[vid] = st.number_input(
                    f"{cfg.name} threshold",
                    value=float(session.request.manual_thresholds.get(vid, cfg.default_threshold)),
                    step=0.1,
                    key=f"thr_{vid}",
                )

    # ── SECTION 2: Fetch when asked ──────────────────────────

    if analyse_clicked:
        try:
            latitude = float(lat_text) if lat_text.strip() else None
            longitude = float(lon_text) if lon_text.strip() else None
        except ValueError:
            st.markdown('<div class="error-card">⚠️ Latitude and longitude must be numbers.</div>',
                        unsafe_allow_html=True)
            return
        if not place.strip() and (latitude is None or longitude is None):
            st.markdown(
                '<div class="error-card">⚠️ Please provide either a city name or coordinates</div>',
                unsafe_allow_html=True,
            )
            return
        with st.spinner("Analyzing weather data…"):
            data = load_data(place.strip(), latitude, longitude)
        if "error" in data:
            st.markdown(f'<div class="error-card">⚠️ {data["error"]}</div>', unsafe_allow_html=True)
            return
        st.session_state["data"] = data
        session.set_dataset(data["records"], source=data["source"])

    data = st.session_state.get("data")
    if data is None:
        fill_auto_slots(auto_slots, {})
        st.markdown(
            '<div class="section-label" style="text-align:center;margin-top:3rem;">'
            "Enter a location in the sidebar and click Analyze Weather Conditions"
            "</div>",
            unsafe_allow_html=True,
        )
        return

    # Every widget change feeds a fresh request into the session.
    changes = {
        "selected": tuple(selected),
        "threshold_mode": ThresholdMode.AUTO if auto_mode else ThresholdMode.MANUAL,
        "seasonal_window": seasonal,
        "target_day": int(target_day),
    }
    if manual:
        changes["manual_thresholds"] = manual
    result = session.update(**changes)
    fill_auto_slots(auto_slots, result.auto_thresholds)

    # ── SECTION 3: Current conditions ────────────────────────

    current = data["current"]
    st.markdown('<div class="section-label">Current Weather Conditions</div>', unsafe_allow_html=True)
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.markdown(stat_html("Temperature", f"{current['temp']}", "°C"), unsafe_allow_html=True)
    with c2:
        st.markdown(stat_html("Humidity", f"{current['humidity']}", "%"), unsafe_allow_html=True)
    with c3:
        st.markdown(stat_html("Rain Chance", f"{current['rain_chance']}", "%"), unsafe_allow_html=True)
    with c4:
        st.markdown(stat_html("Wind", f"{current['wind_speed']}", "km/h"), unsafe_allow_html=True)
    st.caption(f"{data['location']['name']} · {current['date']} · source: {current['source']}")

    # ── SECTION 4: Condition summary ─────────────────────────

    st.markdown('<div class="section-label">Condition Summary</div>', unsafe_allow_html=True)
    if result.tags:
        st.markdown("".join(tag_html(t) for t in result.tags), unsafe_allow_html=True)
    else:
        st.markdown(
            f'<span class="tag-pill" style="background:#2c2c2e;color:#8e8e93;">{NO_CONDITIONS_LABEL}</span>',
            unsafe_allow_html=True,
        )

    # ── SECTION 5: Probability analysis ──────────────────────

    st.markdown('<div class="section-label">Weather Probability Analysis</div>', unsafe_allow_html=True)
    if not result.results:
        st.markdown(
            '<div class="error-card">⚠️ Not enough historical data for the selected variables.</div>',
            unsafe_allow_html=True,
        )
    else:
        cols = st.columns(len(result.results))
        for col, res in zip(cols, result.results.values()):
            with col:
                st.markdown(
                    stat_html(res.config.name, f"{res.exceedance_probability:.1f}", "%"),
                    unsafe_allow_html=True,
                )
                st.caption(f"mean {res.mean:.1f} {res.config.unit} · {risk_level(res.exceedance_probability)}")

        rows = []
        for res in result.results.values():
            rows.append({
                "Variable": res.config.name,
                "Mean": f"{res.mean:.1f} {res.config.unit}",
                "Threshold": f"{res.threshold:g} {res.config.unit}",
                "Exceedance": f"{res.exceedance_probability:.1f}%",
                "Risk": risk_level(res.exceedance_probability),
                "Samples": len(res.values),
            })
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

        labels = [res.config.name for res in result.results.values()]
        probs = [res.exceedance_probability for res in result.results.values()]
        colors = [RISK_COLORS[risk_level(p)] for p in probs]
        fig = go.Figure(
            go.Bar(
                x=labels,
                y=probs,
                marker_color=colors,
                marker_line_width=0,
                text=[f"{p:.1f}%" for p in probs],
                textposition="outside",
            )
        )
        fig.update_layout(**{
            **PLOTLY_LAYOUT,
            "title": dict(text="Exceedance Probability", font=dict(color="#8e8e93", size=13)),
            "height": 320,
        })
        st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})

    window_note = (
        f"±{result.request.window_days} days around day {result.request.target_day}"
        if result.request.seasonal_window else "all year"
    )
    st.caption(f"{len(result.dataset)} of {len(session.records)} daily records used ({window_note}).")

    # ── SECTION 6: Downloads ─────────────────────────────────

    st.markdown('<div class="section-label">Download Weather Data</div>', unsafe_allow_html=True)
    location_name = data["location"]["name"]
    variables = [v.value for v in result.request.variables]
    dl_csv, dl_json = st.columns(2)
    with dl_csv:
        st.download_button(
            "📄 Download CSV",
            data=to_csv(session.records, location_name, variables, source=data["source"]),
            file_name=export_filename(location_name, "csv", date.today()),
            mime="text/csv",
            use_container_width=True,
        )
    with dl_json:
        st.download_button(
            "📋 Download JSON",
            data=to_json(session.records, location_name, variables, source=data["source"]),
            file_name=export_filename(location_name, "json", date.today()),
            mime="application/json",
            use_container_width=True,
        )

    st.markdown(
        '<div class="wo-footer">'
        f"Historical data: {data['source']} · {len(session.records)} daily records"
        " &nbsp;·&nbsp; No API key required"
        "</div>",
        unsafe_allow_html=True,
    )


main()
