# Project: weather-odds
# Owner: GreenUnicorn
"""
cli.py — Command-line interface for weather-odds.

We use argparse (stdlib) rather than click because:
- No extra dependency to install
- Sufficient for 4 simple subcommands

Commands:
  weather-odds analyze   — fetch history + current conditions, print probabilities
  weather-odds current   — print current conditions only
  weather-odds export    — write the raw historical series to CSV or JSON
  weather-odds history   — show recently logged queries
"""

import argparse
import dataclasses
from pathlib import Path

from weather_odds.analysis import terminal_summary
from weather_odds.chart import render_probability_chart, render_probability_table
from weather_odds.config import load_config_or_default, request_from_config
from weather_odds.export import export_filename, to_csv, to_json
from weather_odds.geocode import LocationNotFoundError, resolve_location
from weather_odds.history import fetch_historical
from weather_odds.pipeline import AnalysisSession, ThresholdMode
from weather_odds.utils import fmt_day, log_query, read_query_history
from weather_odds.variables import VARIABLES, parse_variable_ids
from weather_odds.weather import fetch_current


def _log_path(config: dict) -> Path:
    return Path(config["log"]["path"])


def _location(args, config: dict) -> dict:
    """Resolve the location from CLI flags, falling back to the config file."""
    if args.location or (args.lat is not None and args.lon is not None):
        return resolve_location(args.location, args.lat, args.lon, log_path=_log_path(config))
    loc = config["location"]
    return {"latitude": loc["latitude"], "longitude": loc["longitude"], "name": loc["name"]}


def _build_request(args, config: dict):
    request = request_from_config(config, target_day=args.day)
    changes = {}
    if args.auto:
        changes["threshold_mode"] = ThresholdMode.AUTO
    if args.no_seasonal:
        changes["seasonal_window"] = False
    if args.window is not None:
        changes["window_days"] = args.window
    if args.variables:
        changes["selected"] = parse_variable_ids(v.strip() for v in args.variables.split(",") if v.strip())
    if changes:
        request = dataclasses.replace(request, **changes)
    return request


def _print_current(current: dict) -> None:
    day = fmt_day(current["date"]) if current.get("date") else "today"
    print(f"\n📍 {current['location']} — {day} ({current['source']})")
    print(f"🌡  Temperature:    {current['temp']}°C")
    print(f"💧 Humidity:        {current['humidity']}%")
    print(f"🌧  Rain chance:    {current['rain_chance']}%")
    print(f"💨 Wind:            {current['wind_speed']} km/h")


def cmd_analyze(args) -> None:
    """Fetch current + historical weather, run the analysis, print the report."""
    config = load_config_or_default()
    loc = _location(args, config)
    request = _build_request(args, config)

    current = None
    print(f"Fetching current conditions for {loc['name']}...")
    try:
        current = fetch_current(loc["latitude"], loc["longitude"], loc["name"], log_path=_log_path(config))
        log_query(loc["name"], current["temp"], current["humidity"], current["wind_speed"])
    except RuntimeError as e:
        print(f"[weather-odds] Current conditions unavailable: {e}")

    print(f"Fetching one year of daily history for {loc['name']}...")
    source, records = fetch_historical(loc["latitude"], loc["longitude"], log_path=_log_path(config))
    if not records:
        print("[error] No historical data returned for this location/date range.")
        raise SystemExit(1)

    session = AnalysisSession(request=request)
    result = session.set_dataset(records, source=source)

    print()
    print(terminal_summary(loc["name"], current, result))
    print(f"Source: {source} ({len(records)} daily records)")
    print()
    print(render_probability_table(result.results))
    if result.results:
        print()
        print(render_probability_chart(result.results))

    if request.threshold_mode == ThresholdMode.AUTO:
        print()
        print("Auto thresholds (percentile-based):")
        for vid in request.variables:
            cfg = VARIABLES[vid]
            value = result.auto_thresholds.get(vid)
            shown = f"{value:.1f}" if value is not None else "—"
            print(f"  {cfg.name:<18} {shown} {cfg.unit}")


def cmd_current(args) -> None:
    """Print current conditions for the location and log the query."""
    config = load_config_or_default()
    loc = _location(args, config)
    print(f"Fetching current conditions for {loc['name']}...")
    current = fetch_current(loc["latitude"], loc["longitude"], loc["name"], log_path=_log_path(config))
    log_query(loc["name"], current["temp"], current["humidity"], current["wind_speed"])
    _print_current(current)


def cmd_export(args) -> None:
    """Write one year of daily history to a CSV or JSON file."""
    config = load_config_or_default()
    loc = _location(args, config)
    variables = [v.value for v in request_from_config(config).variables]

    print(f"Fetching one year of daily history for {loc['name']}...")
    source, records = fetch_historical(loc["latitude"], loc["longitude"], log_path=_log_path(config))
    if not records:
        print("[error] No historical data returned for this location/date range.")
        raise SystemExit(1)

    render = to_json if args.format == "json" else to_csv
    content = render(records, loc["name"], variables, source=source)
    output = Path(args.output) if args.output else Path(export_filename(loc["name"], args.format))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    print(f"[export] Wrote {len(records)} records to {output}")


def cmd_history(args) -> None:
    """Show the most recent logged queries."""
    entries = read_query_history(location=args.location, limit=args.limit)
    if not entries:
        print("No queries logged yet.")
        return

    sep = "─" * 62
    print(f"{'When':<20}  {'Location':<20}  {'Temp':>5}  {'Hum':>4}  {'Wind':>5}")
    print(sep)
    for e in entries:
        temp = "—" if e["temperature"] is None else f"{e['temperature']:.0f}"
        hum = "—" if e["humidity"] is None else f"{e['humidity']:.0f}"
        wind = "—" if e["wind_speed"] is None else f"{e['wind_speed']:.0f}"
        print(f"{e['timestamp']:<20}  {e['location'][:20]:<20}  {temp:>5}  {hum:>4}  {wind:>5}")
    print(sep)


def _add_location_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--location",
        metavar="PLACE",
        default=None,
        help='Look up coordinates by place name, e.g. "Pune" or "London, UK"',
    )
    p.add_argument("--lat", type=float, default=None, help="Latitude in decimal degrees")
    p.add_argument("--lon", type=float, default=None, help="Longitude in decimal degrees")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-odds",
        description="Weather probability dashboard using NASA POWER and Open-Meteo",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    p_analyze = subparsers.add_parser("analyze", help="Compute exceedance probabilities for a location")
    _add_location_args(p_analyze)
    p_analyze.add_argument(
        "--day",
        type=int,
        default=None,
        help="Target day of year (1-366). Default: today.",
    )
    p_analyze.add_argument("--auto", action="store_true", help="Use percentile-based thresholds")
    p_analyze.add_argument(
        "--no-seasonal",
        action="store_true",
        help="Use the whole year instead of a window around the target day",
    )
    p_analyze.add_argument("--window", type=int, default=None, help="Seasonal window half-width in days")
    p_analyze.add_argument(
        "--variables",
        metavar="LIST",
        default=None,
        help="Comma-separated variable ids, e.g. temperature,windSpeed",
    )

    p_current = subparsers.add_parser("current", help="Show current conditions")
    _add_location_args(p_current)

    p_export = subparsers.add_parser("export", help="Export one year of daily history")
    _add_location_args(p_export)
    p_export.add_argument("--format", choices=["csv", "json"], default="csv")
    p_export.add_argument("--output", metavar="PATH", default=None)

    p_history = subparsers.add_parser("history", help="Show recently logged queries")
    p_history.add_argument("--location", metavar="PLACE", default=None)
    p_history.add_argument("--limit", type=int, default=10)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "analyze": cmd_analyze,
        "current": cmd_current,
        "export": cmd_export,
        "history": cmd_history,
    }
    try:
        commands[args.command](args)
    except (RuntimeError, LocationNotFoundError, ValueError, FileNotFoundError) as e:
        print(f"[error] {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
