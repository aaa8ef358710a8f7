"""Public-holiday lookup tables.

The optimizer consumes holidays as a ``{"YYYY-MM-DD": name}`` mapping.
This module ships a small static dataset (country-wide holidays plus
additive regional holidays and a region alias table) and builds those
mappings on demand, memoised per ``country|region|start_year|end_year``.

For the United States, years missing from the static table fall back to
rule-based *observed* federal holidays: a holiday falling on Saturday is
observed the preceding Friday, one falling on Sunday the following Monday.
"""

from __future__ import annotations

import datetime
import logging
import types
from collections.abc import Mapping
from typing import NamedTuple

from vacationmax.cache import SharedLRUCache
from vacationmax.regions import resolve_region

logger = logging.getLogger(__name__)

HolidayMap = Mapping[str, str]


class CountryData(NamedTuple):
    """Holiday tables for one country.

    Every table maps a year (as a string) to ``"YYYY-MM-DD:Holiday Name"``
    entries.  Regional holidays are additive to the federal ones.
    """

    federal: dict[str, list[str]]
    regions: dict[str, dict[str, list[str]]]
    region_aliases: dict[str, str]


# ---------------------------------------------------------------------------
# Rule helpers
# ---------------------------------------------------------------------------


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> datetime.date:
    """Return the *n*-th occurrence of *weekday* in *month* of *year*.

    *weekday* follows ``datetime`` convention: 0 = Monday … 6 = Sunday.
    """
    first = datetime.date(year, month, 1)
    delta = (weekday - first.weekday()) % 7
    return first + datetime.timedelta(days=delta, weeks=n - 1)


def _last_weekday(year: int, month: int, weekday: int) -> datetime.date:
    """Return the last occurrence of *weekday* in *month* of *year*."""
    if month == 12:
        last = datetime.date(year, 12, 31)
    else:
        last = datetime.date(year, month + 1, 1) - datetime.timedelta(days=1)
    delta = (last.weekday() - weekday) % 7
    return last - datetime.timedelta(days=delta)


def _observed(d: datetime.date, name: str) -> tuple[datetime.date, str]:
    """Shift a fixed-date holiday to its observed weekday (Sat→Fri, Sun→Mon)."""
    if d.weekday() == 5:
        return d - datetime.timedelta(days=1), f"{name} (Observed)"
    if d.weekday() == 6:
        return d + datetime.timedelta(days=1), f"{name} (Observed)"
    return d, name


def us_federal_holidays(year: int) -> list[tuple[datetime.date, str]]:
    """US federal holidays (observed) for *year*."""
    return sorted(
        [
            _observed(datetime.date(year, 1, 1), "New Year's Day"),
            (_nth_weekday(year, 1, 0, 3), "Martin Luther King Jr. Day"),
            (_nth_weekday(year, 2, 0, 3), "Presidents' Day"),
            (_last_weekday(year, 5, 0), "Memorial Day"),
            _observed(datetime.date(year, 6, 19), "Juneteenth"),
            _observed(datetime.date(year, 7, 4), "Independence Day"),
            (_nth_weekday(year, 9, 0, 1), "Labor Day"),
            (_nth_weekday(year, 10, 0, 2), "Indigenous Peoples' Day"),
            _observed(datetime.date(year, 11, 11), "Veterans Day"),
            (_nth_weekday(year, 11, 3, 4), "Thanksgiving Day"),
            _observed(datetime.date(year, 12, 25), "Christmas Day"),
        ]
    )


# ---------------------------------------------------------------------------
# Static dataset
# ---------------------------------------------------------------------------

HOLIDAY_DB: dict[str, CountryData] = {
    "United States": CountryData(
        federal={
            "2025": [
                "2025-01-01:New Year's Day",
                "2025-01-20:Martin Luther King Jr. Day",
                "2025-02-17:Presidents' Day",
                "2025-05-26:Memorial Day",
                "2025-06-19:Juneteenth",
                "2025-07-04:Independence Day",
                "2025-09-01:Labor Day",
                "2025-10-13:Indigenous Peoples' Day",
                "2025-11-11:Veterans Day",
                "2025-11-27:Thanksgiving Day",
                "2025-12-25:Christmas Day",
            ],
            "2026": [
                "2026-01-01:New Year's Day",
                "2026-01-19:Martin Luther King Jr. Day",
                "2026-02-16:Presidents' Day",
                "2026-05-25:Memorial Day",
                "2026-06-19:Juneteenth",
                "2026-07-03:Independence Day (Observed)",
                "2026-09-07:Labor Day",
                "2026-10-12:Indigenous Peoples' Day",
                "2026-11-11:Veterans Day",
                "2026-11-26:Thanksgiving Day",
                "2026-12-25:Christmas Day",
            ],
            "2027": [
                "2027-01-01:New Year's Day",
                "2027-01-18:Martin Luther King Jr. Day",
                "2027-02-15:Presidents' Day",
                "2027-05-31:Memorial Day",
                "2027-06-18:Juneteenth (Observed)",
                "2027-07-05:Independence Day (Observed)",
                "2027-09-06:Labor Day",
                "2027-10-11:Indigenous Peoples' Day",
                "2027-11-11:Veterans Day",
                "2027-11-25:Thanksgiving Day",
                "2027-12-24:Christmas Day (Observed)",
            ],
        },
        regions={
            "Massachusetts": {
                "2025": ["2025-04-21:Patriots' Day"],
                "2026": ["2026-04-20:Patriots' Day"],
                "2027": ["2027-04-19:Patriots' Day"],
            },
            "California": {
                "2025": ["2025-03-31:Cesar Chavez Day", "2025-11-28:Day After Thanksgiving"],
                "2026": ["2026-03-31:Cesar Chavez Day", "2026-11-27:Day After Thanksgiving"],
                "2027": ["2027-03-31:Cesar Chavez Day", "2027-11-26:Day After Thanksgiving"],
            },
            "Texas": {
                "2025": [
                    "2025-01-19:Confederate Heroes Day",
                    "2025-03-02:Texas Independence Day",
                    "2025-04-21:San Jacinto Day",
                    "2025-08-27:LBJ Day",
                ],
                "2026": [
                    "2026-01-19:Confederate Heroes Day",
                    "2026-03-02:Texas Independence Day",
                    "2026-04-21:San Jacinto Day",
                    "2026-08-27:LBJ Day",
                ],
                "2027": [
                    "2027-01-19:Confederate Heroes Day",
                    "2027-03-02:Texas Independence Day",
                    "2027-04-21:San Jacinto Day",
                    "2027-08-27:LBJ Day",
                ],
            },
            "Illinois": {
                "2025": ["2025-02-12:Lincoln's Birthday", "2025-03-03:Pulaski Day"],
                "2026": ["2026-02-12:Lincoln's Birthday", "2026-03-02:Pulaski Day"],
                "2027": ["2027-02-12:Lincoln's Birthday", "2027-03-01:Pulaski Day"],
            },
            "New York": {
                "2025": ["2025-02-12:Lincoln's Birthday", "2025-06-19:Juneteenth"],
                "2026": ["2026-02-12:Lincoln's Birthday", "2026-06-19:Juneteenth"],
                "2027": ["2027-02-12:Lincoln's Birthday", "2027-06-19:Juneteenth"],
            },
        },
        region_aliases={
            "ny": "New York",
            "nyc": "New York",
            "new york": "New York",
            "ca": "California",
            "cali": "California",
            "california": "California",
            "ma": "Massachusetts",
            "mass": "Massachusetts",
            "boston": "Massachusetts",
            "tx": "Texas",
            "texas": "Texas",
            "il": "Illinois",
            "illinois": "Illinois",
            "chicago": "Illinois",
            "dc": "District of Columbia",
            "wash": "District of Columbia",
        },
    ),
    "United Kingdom": CountryData(
        federal={
            "2025": [
                "2025-01-01:New Year's Day",
                "2025-04-18:Good Friday",
                "2025-04-21:Easter Monday",
                "2025-05-05:Early May Bank Holiday",
                "2025-05-26:Spring Bank Holiday",
                "2025-08-25:Summer Bank Holiday",
                "2025-12-25:Christmas Day",
                "2025-12-26:Boxing Day",
            ],
            "2026": [
                "2026-01-01:New Year's Day",
                "2026-04-03:Good Friday",
                "2026-04-06:Easter Monday",
                "2026-05-04:Early May Bank Holiday",
                "2026-05-25:Spring Bank Holiday",
                "2026-08-31:Summer Bank Holiday",
                "2026-12-25:Christmas Day",
                "2026-12-28:Boxing Day (Observed)",
            ],
            "2027": [
                "2027-01-01:New Year's Day",
                "2027-03-26:Good Friday",
                "2027-03-29:Easter Monday",
                "2027-05-03:Early May Bank Holiday",
                "2027-05-31:Spring Bank Holiday",
                "2027-08-30:Summer Bank Holiday",
                "2027-12-27:Christmas Day (Substitute)",
                "2027-12-28:Boxing Day (Substitute)",
            ],
        },
        regions={
            "Scotland": {
                "2025": [
                    "2025-01-02:2nd January",
                    "2025-08-04:Summer Bank Holiday (Scotland)",
                    "2025-11-30:St Andrew's Day",
                ],
                "2026": [
                    "2026-01-02:2nd January",
                    "2026-08-03:Summer Bank Holiday (Scotland)",
                    "2026-11-30:St Andrew's Day",
                ],
                "2027": [
                    "2027-01-04:2nd January (Substitute)",
                    "2027-08-02:Summer Bank Holiday (Scotland)",
                    "2027-11-30:St Andrew's Day",
                ],
            },
            "Northern Ireland": {
                "2025": ["2025-03-17:St Patrick's Day", "2025-07-12:Battle of the Boyne"],
                "2026": ["2026-03-17:St Patrick's Day", "2026-07-13:Battle of the Boyne (Observed)"],
                "2027": ["2027-03-17:St Patrick's Day", "2027-07-12:Battle of the Boyne"],
            },
        },
        region_aliases={
            "scotland": "Scotland",
            "scot": "Scotland",
            "edinburgh": "Scotland",
            "glasgow": "Scotland",
            "ni": "Northern Ireland",
            "northern ireland": "Northern Ireland",
            "belfast": "Northern Ireland",
            "wales": "Wales",
            "cymru": "Wales",
        },
    ),
    "Canada": CountryData(
        federal={
            "2025": [
                "2025-01-01:New Year's Day",
                "2025-04-18:Good Friday",
                "2025-07-01:Canada Day",
                "2025-09-01:Labour Day",
                "2025-09-30:Truth & Reconciliation Day",
                "2025-10-13:Thanksgiving",
                "2025-11-11:Remembrance Day",
                "2025-12-25:Christmas Day",
                "2025-12-26:Boxing Day",
            ],
            "2026": [
                "2026-01-01:New Year's Day",
                "2026-04-03:Good Friday",
                "2026-07-01:Canada Day",
                "2026-09-07:Labour Day",
                "2026-09-30:Truth & Reconciliation Day",
                "2026-10-12:Thanksgiving",
                "2026-11-11:Remembrance Day",
                "2026-12-25:Christmas Day",
                "2026-12-26:Boxing Day",
            ],
            "2027": [
                "2027-01-01:New Year's Day",
                "2027-03-26:Good Friday",
                "2027-07-01:Canada Day",
                "2027-09-06:Labour Day",
                "2027-09-30:Truth & Reconciliation Day",
                "2027-10-11:Thanksgiving",
                "2027-11-11:Remembrance Day",
                "2027-12-27:Christmas Day (Observed)",
                "2027-12-28:Boxing Day (Observed)",
            ],
        },
        regions={
            "Ontario": {
                "2025": ["2025-02-17:Family Day", "2025-05-19:Victoria Day", "2025-08-04:Civic Holiday"],
                "2026": ["2026-02-16:Family Day", "2026-05-18:Victoria Day", "2026-08-03:Civic Holiday"],
                "2027": ["2027-02-15:Family Day", "2027-05-24:Victoria Day", "2027-08-02:Civic Holiday"],
            },
            "British Columbia": {
                "2025": ["2025-02-17:Family Day", "2025-05-19:Victoria Day", "2025-08-04:BC Day"],
                "2026": ["2026-02-16:Family Day", "2026-05-18:Victoria Day", "2026-08-03:BC Day"],
                "2027": ["2027-02-15:Family Day", "2027-05-24:Victoria Day", "2027-08-02:BC Day"],
            },
            "Alberta": {
                "2025": ["2025-02-17:Family Day", "2025-05-19:Victoria Day", "2025-08-04:Heritage Day"],
                "2026": ["2026-02-16:Family Day", "2026-05-18:Victoria Day", "2026-08-03:Heritage Day"],
                "2027": ["2027-02-15:Family Day", "2027-05-24:Victoria Day", "2027-08-02:Heritage Day"],
            },
            "Quebec": {
                "2025": [
                    "2025-04-21:Easter Monday",
                    "2025-05-19:National Patriots' Day",
                    "2025-06-24:St-Jean-Baptiste",
                ],
                "2026": [
                    "2026-04-06:Easter Monday",
                    "2026-05-18:National Patriots' Day",
                    "2026-06-24:St-Jean-Baptiste",
                ],
                "2027": [
                    "2027-03-29:Easter Monday",
                    "2027-05-24:National Patriots' Day",
                    "2027-06-24:St-Jean-Baptiste",
                ],
            },
        },
        region_aliases={
            "on": "Ontario",
            "ont": "Ontario",
            "ontario": "Ontario",
            "toronto": "Ontario",
            "bc": "British Columbia",
            "british columbia": "British Columbia",
            "vancouver": "British Columbia",
            "ab": "Alberta",
            "alberta": "Alberta",
            "calgary": "Alberta",
            "qc": "Quebec",
            "quebec": "Quebec",
            "québec": "Quebec",
            "montreal": "Quebec",
        },
    ),
    "Australia": CountryData(
        federal={
            "2025": [
                "2025-01-01:New Year's Day",
                "2025-01-27:Australia Day (Observed)",
                "2025-04-18:Good Friday",
                "2025-04-21:Easter Monday",
                "2025-04-25:Anzac Day",
                "2025-12-25:Christmas Day",
                "2025-12-26:Boxing Day",
            ],
            "2026": [
                "2026-01-01:New Year's Day",
                "2026-01-26:Australia Day",
                "2026-04-03:Good Friday",
                "2026-04-06:Easter Monday",
                "2026-04-25:Anzac Day",
                "2026-04-27:Anzac Day (Observed)",
                "2026-12-25:Christmas Day",
                "2026-12-26:Boxing Day",
            ],
            "2027": [
                "2027-01-01:New Year's Day",
                "2027-01-26:Australia Day",
                "2027-03-26:Good Friday",
                "2027-03-29:Easter Monday",
                "2027-04-26:Anzac Day (Observed)",
                "2027-12-27:Christmas Day (Observed)",
                "2027-12-28:Boxing Day (Observed)",
            ],
        },
        regions={
            "New South Wales": {
                "2025": ["2025-06-09:King's Birthday", "2025-10-06:Labour Day"],
                "2026": ["2026-06-08:King's Birthday", "2026-10-05:Labour Day"],
                "2027": ["2027-06-14:King's Birthday", "2027-10-04:Labour Day"],
            },
            "Victoria": {
                "2025": [
                    "2025-03-10:Labour Day",
                    "2025-04-19:Saturday before Easter",
                    "2025-04-20:Easter Sunday",
                    "2025-06-09:King's Birthday",
                    "2025-09-26:AFL Grand Final Friday",
                    "2025-11-04:Melbourne Cup",
                ],
                "2026": [
                    "2026-03-09:Labour Day",
                    "2026-04-04:Saturday before Easter",
                    "2026-04-05:Easter Sunday",
                    "2026-06-08:King's Birthday",
                    "2026-09-25:AFL Grand Final Friday (Est)",
                    "2026-11-03:Melbourne Cup",
                ],
                "2027": [
                    "2027-03-08:Labour Day",
                    "2027-03-27:Saturday before Easter",
                    "2027-03-28:Easter Sunday",
                    "2027-06-14:King's Birthday",
                    "2027-09-24:AFL Grand Final Friday (Est)",
                    "2027-11-02:Melbourne Cup",
                ],
            },
            "Queensland": {
                "2025": ["2025-05-05:Labour Day", "2025-10-06:King's Birthday"],
                "2026": ["2026-05-04:Labour Day", "2026-10-05:King's Birthday"],
                "2027": ["2027-05-03:Labour Day", "2027-10-04:King's Birthday"],
            },
            "Western Australia": {
                "2025": [
                    "2025-03-03:Labour Day",
                    "2025-06-02:Western Australia Day",
                    "2025-09-29:King's Birthday",
                ],
                "2026": [
                    "2026-03-02:Labour Day",
                    "2026-06-01:Western Australia Day",
                    "2026-09-28:King's Birthday",
                ],
                "2027": [
                    "2027-03-01:Labour Day",
                    "2027-06-07:Western Australia Day",
                    "2027-09-27:King's Birthday",
                ],
            },
        },
        region_aliases={
            "nsw": "New South Wales",
            "new south wales": "New South Wales",
            "sydney": "New South Wales",
            "vic": "Victoria",
            "victoria": "Victoria",
            "melbourne": "Victoria",
            "qld": "Queensland",
            "queensland": "Queensland",
            "brisbane": "Queensland",
            "wa": "Western Australia",
            "western australia": "Western Australia",
            "perth": "Western Australia",
            "sa": "South Australia",
            "south australia": "South Australia",
            "adelaide": "South Australia",
        },
    ),
}

# Years missing from the static table are computed from rules where possible.
_RULE_FALLBACKS = {
    "United States": us_federal_holidays,
}

_holiday_map_cache = SharedLRUCache(24)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def list_countries() -> list[str]:
    return sorted(HOLIDAY_DB)


def fetch_country_data(country: str) -> CountryData | None:
    """Return the dataset for *country*, matching the name case-insensitively."""
    data = HOLIDAY_DB.get(country)
    if data is not None:
        return data
    wanted = country.strip().lower()
    for name, candidate in HOLIDAY_DB.items():
        if name.lower() == wanted:
            return candidate
    return None


def _canonical_country(country: str) -> str:
    wanted = country.strip().lower()
    for name in HOLIDAY_DB:
        if name.lower() == wanted:
            return name
    return country


def parse_entry(entry: str) -> tuple[str, str] | None:
    """Split a ``"YYYY-MM-DD:Holiday Name"`` entry; ``None`` when malformed."""
    date_part, sep, name_part = entry.partition(":")
    date_str = date_part.strip()
    name = name_part.strip()
    if not sep or not date_str or not name:
        return None
    return date_str, name


def _federal_entries(country: str, data: CountryData, year: int) -> list[str]:
    entries = data.federal.get(str(year))
    if entries:
        return entries
    rule = _RULE_FALLBACKS.get(country)
    if rule is None:
        return []
    logger.debug("No static %s holidays for %d; using rule-based dates", country, year)
    return [f"{d.isoformat()}:{name}" for d, name in rule(year)]


def holiday_map(country: str, region: str, start_year: int, end_year: int) -> HolidayMap:
    """Return a read-only ``{"YYYY-MM-DD": name}`` mapping.

    Federal holidays for every year in ``[start_year, end_year]`` plus the
    holidays of the resolved *region*, when one resolves.  Unknown or empty
    countries produce an empty mapping rather than an error.
    """
    cache_key = f"{country}|{region}|{start_year}|{end_year}"
    cached = _holiday_map_cache.get(cache_key)
    if cached is not None:
        return cached

    result: dict[str, str] = {}
    data = fetch_country_data(country) if country else None
    if data is None:
        if country:
            logger.info("No holiday data for country %r; using weekends only", country)
        return types.MappingProxyType(result)

    canonical = _canonical_country(country)
    resolved_region = resolve_region(data, region, canonical) if region else None

    for year in range(start_year, end_year + 1):
        raw = list(_federal_entries(canonical, data, year))
        if resolved_region:
            raw.extend(data.regions.get(resolved_region, {}).get(str(year), []))
        for entry in raw:
            parsed = parse_entry(entry)
            if parsed is None:
                continue
            date_str, name = parsed
            result[date_str] = name

    mapping = types.MappingProxyType(result)
    _holiday_map_cache.put(cache_key, mapping)
    return mapping


def clear_cache() -> None:
    _holiday_map_cache.clear()
