"""Typer CLI for the vacation block optimizer."""

from __future__ import annotations

import datetime
import json
import logging
import pathlib
import sys
from typing import Any

import typer

from vacationmax.export import to_ics
from vacationmax.holidays import fetch_country_data, holiday_map, list_countries
from vacationmax.optimizer import (
    DAILY_VALUE_USD,
    OptimizationResult,
    VacationOptimizer,
    format_calendar_view,
    format_plan,
)
from vacationmax.preferences import Preferences, Strategy, Timeframe, sanitize_preferences
from vacationmax.regions import resolve_region

app = typer.Typer(
    name="vacationmax",
    help="Vacation block optimizer — turn a handful of leave days into the "
    "longest possible breaks around weekends and public holidays.",
    add_completion=False,
)

STRATEGY_CHOICES = [s.slug for s in Strategy]
DEFAULT_COUNTRY = "United States"


def _current_year() -> int:
    return datetime.date.today().year


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: str) -> dict[str, Any]:
    """Load and validate a JSON preferences file."""
    p = pathlib.Path(path)
    if not p.exists():
        typer.echo(f"Error: Config file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        data = json.loads(p.read_text())
    except json.JSONDecodeError as exc:
        typer.echo(f"Error: Invalid JSON in config file: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if not isinstance(data, dict):
        typer.echo("Error: Config file must contain a JSON object.", err=True)
        raise typer.Exit(code=1)

    return data


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def optimize(
    leave_days: int = typer.Option(
        None,
        "--leave-days",
        "-d",
        help="Number of leave days available.",
        min=0,
    ),
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        help="Target calendar year. Defaults to the current year.",
    ),
    rolling: bool = typer.Option(
        False,
        "--rolling",
        help="Plan the next 12 months starting today instead of a calendar year.",
    ),
    strategy: str = typer.Option(
        None,
        "--strategy",
        "-s",
        help=f"Strategy: {', '.join(STRATEGY_CHOICES)}.",
    ),
    country: str = typer.Option(
        None,
        "--country",
        "-c",
        help=f"Country ({', '.join(list_countries())}). Defaults to {DEFAULT_COUNTRY}.",
    ),
    region: str = typer.Option(
        None,
        "--region",
        "-r",
        help="State, province or region (fuzzy matched).",
    ),
    partner: bool | None = typer.Option(
        None,
        "--partner/--no-partner",
        help="Plan shared time off with a partner.",
    ),
    partner_leave_days: int = typer.Option(
        None,
        "--partner-leave-days",
        help="Partner's leave days.",
        min=0,
    ),
    partner_country: str | None = typer.Option(None, "--partner-country", help="Partner's country."),
    partner_region: str | None = typer.Option(None, "--partner-region", help="Partner's region."),
    daily_value: int = typer.Option(
        DAILY_VALUE_USD,
        "--daily-value",
        help="Value of one day off, used for the recovered-value totals.",
        min=0,
    ),
    calendar: bool = typer.Option(
        True,
        "--calendar/--no-calendar",
        help="Show month-by-month calendar view.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON.",
    ),
    ics: str | None = typer.Option(
        None,
        "--ics",
        help="Also write the plan as an iCalendar file to this path.",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        help="Path to a JSON preferences file. Command-line options override it.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Find the best vacation blocks for your leave days."""
    _configure_logging(verbose)

    raw: dict[str, Any] = _load_config(config) if config is not None else {}

    if strategy is not None:
        if strategy not in STRATEGY_CHOICES:
            typer.echo(
                f"Error: Invalid strategy {strategy!r}. Choose from: {', '.join(STRATEGY_CHOICES)}",
                err=True,
            )
            raise typer.Exit(code=1)
        raw["strategy"] = strategy

    overrides = {
        "leave_days": leave_days,
        "country": country,
        "region": region,
        "has_partner": partner,
        "partner_leave_days": partner_leave_days,
        "partner_country": partner_country,
        "partner_region": partner_region,
    }
    raw.update({k: v for k, v in overrides.items() if v is not None})

    if not any(k in raw for k in ("leave_days", "leaveDays", "pto_days", "ptoDays")):
        typer.echo("Error: --leave-days is required (or provide it via --config).", err=True)
        raise typer.Exit(code=1)

    if rolling:
        raw["timeframe"] = Timeframe.rolling()
    elif year is not None:
        raw["timeframe"] = Timeframe.calendar_year(year)
    elif "timeframe" not in raw:
        raw["timeframe"] = Timeframe.calendar_year(_current_year())

    raw.setdefault("country", DEFAULT_COUNTRY)
    if partner is None and (partner_leave_days is not None or partner_country is not None):
        raw["has_partner"] = True

    prefs = sanitize_preferences(raw)
    optimizer = VacationOptimizer(daily_value=daily_value)

    try:
        result = optimizer.plan(prefs)
    except Exception as exc:
        logging.getLogger(__name__).debug("Optimization failed", exc_info=True)
        typer.echo(f"Error: Could not generate a plan: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if ics is not None:
        pathlib.Path(ics).write_text(to_ics(result.vacation_blocks), newline="")

    if output_json:
        _print_json(result, prefs)
    else:
        _print_text(result, prefs, calendar)
        if ics is not None:
            typer.echo(f"  Calendar file written to {ics}")


def _print_text(result: OptimizationResult, prefs: Preferences, show_calendar: bool) -> None:
    w = 64
    start, end, _ = prefs.timeframe.resolve(result.timeline_start_date)
    typer.echo("=" * w)
    typer.echo("  VACATION BLOCK OPTIMIZER")
    typer.echo("=" * w)
    typer.echo(f"  Window:      {start.isoformat()} -> {end.isoformat()}")
    typer.echo(f"  Strategy:    {prefs.strategy.value}")
    typer.echo(f"  Leave days:  {prefs.leave_days}")
    location = prefs.country or "(none)"
    if prefs.region:
        location += f" / {prefs.region}"
    typer.echo(f"  Country:     {location}")
    if prefs.has_partner:
        partner_location = prefs.partner_country or "(none)"
        if prefs.partner_region:
            partner_location += f" / {prefs.partner_region}"
        typer.echo(f"  Partner:     {prefs.partner_leave_days} leave days, {partner_location}")

    typer.echo(format_plan(result))
    if show_calendar:
        typer.echo(format_calendar_view(result))

    typer.echo("=" * w)
    n = len(result.vacation_blocks)
    typer.echo(f"  Selected {n} vacation block{'s' if n != 1 else ''}.")
    typer.echo("=" * w)


def _serialize_result(result: OptimizationResult) -> dict[str, object]:
    return {
        "plan_name": result.plan_name,
        "target_year": result.target_year,
        "timeline_start_date": result.timeline_start_date.isoformat(),
        "summary": result.summary,
        "blocks": [
            {
                "id": b.id,
                "start_date": b.start_iso,
                "end_date": b.end_iso,
                "total_days_off": b.total_days_off,
                "pto_days_used": b.pto_days_used,
                "partner_pto_days_used": b.partner_pto_days_used,
                "holidays_used": [{"date": h.date, "name": h.name} for h in b.holidays_used],
                "description": b.description,
                "efficiency_score": round(b.efficiency_score, 3),
                "monetary_value": b.monetary_value,
            }
            for b in result.vacation_blocks
        ],
        "totals": {
            "days_off": result.total_days_off,
            "pto_used": result.total_pto_used,
            "partner_pto_used": result.total_partner_pto_used,
            "free_days": result.total_free_days,
            "value_recovered": result.total_value_recovered,
        },
    }


def _print_json(result: OptimizationResult, prefs: Preferences) -> None:
    output = {
        "preferences": {
            "leave_days": prefs.leave_days,
            "strategy": prefs.strategy.slug,
            "country": prefs.country,
            "region": prefs.region,
            "has_partner": prefs.has_partner,
            "partner_leave_days": prefs.partner_leave_days,
        },
        "plan": _serialize_result(result),
    }
    json.dump(output, sys.stdout, indent=2)
    typer.echo()


@app.command()
def holidays(
    country: str = typer.Option(
        DEFAULT_COUNTRY,
        "--country",
        "-c",
        help=f"Country ({', '.join(list_countries())}).",
    ),
    region: str = typer.Option("", "--region", "-r", help="State, province or region."),
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        help="Year to list holidays for. Defaults to the current year.",
    ),
) -> None:
    """List the public holidays used for a country and region."""
    resolved_year = year if year is not None else _current_year()

    data = fetch_country_data(country)
    if data is None:
        supported = ", ".join(list_countries())
        typer.echo(f"Error: Unknown country {country!r}. Supported: {supported}", err=True)
        raise typer.Exit(code=1)

    title = country
    if region:
        resolved = resolve_region(data, region, country)
        title += f" / {resolved}" if resolved else f" (region {region!r} not recognised)"

    typer.echo(f"  {title} — {resolved_year}")
    typer.echo()
    for date_str, name in sorted(holiday_map(country, region, resolved_year, resolved_year).items()):
        d = datetime.date.fromisoformat(date_str)
        typer.echo(f"    {d.strftime('%a, %b %d'):>12}  {name}")


def main() -> None:
    """Entry point for the CLI."""
    app()
