"""User preferences: strategy, timeframe and input sanitisation.

Preference values arrive from forms, JSON files and command lines, so
nothing here raises on bad input.  Numbers are floored and clamped to
``[0, 365]`` (non-finite or non-numeric values become 0), strings are
trimmed, and partner fields are cleared when the partner is off.
"""

from __future__ import annotations

import datetime
import enum
import math
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

MAX_DAYS = 365
ROLLING_DAYS = 365
DEFAULT_YEAR = 2025


class Strategy(enum.Enum):
    BALANCED = "Balanced Mix"
    LONG_WEEKENDS = "Long Weekends"
    MINI_BREAKS = "Mini Breaks"
    WEEK_LONG = "Week-long Breaks"
    EXTENDED = "Extended Vacations"

    @property
    def slug(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def parse(cls, value: Any) -> Strategy:
        """Accept a member, display value, member name or CLI slug."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            for member in cls:
                if text in (member.value, member.name, member.slug):
                    return member
            key = text.lower().replace("-", "_").replace(" ", "_")
            for member in cls:
                if key in (member.name.lower(), member.value.lower().replace(" ", "_")):
                    return member
        return cls.BALANCED


class Timeframe(NamedTuple):
    """Either a calendar year or a rolling window starting today."""

    kind: str
    year: int | None = None

    @classmethod
    def calendar_year(cls, year: int) -> Timeframe:
        return cls("calendar", year)

    @classmethod
    def rolling(cls) -> Timeframe:
        return cls("rolling", None)

    @property
    def is_rolling(self) -> bool:
        return self.kind == "rolling"

    def resolve(
        self, today: datetime.date | None = None
    ) -> tuple[datetime.date, datetime.date, int]:
        """Return ``(start, end_inclusive, target_year)``."""
        if self.is_rolling:
            start = today or datetime.date.today()
            end = start + datetime.timedelta(days=ROLLING_DAYS - 1)
            return start, end, start.year
        year = self.year if self.year is not None else DEFAULT_YEAR
        return datetime.date(year, 1, 1), datetime.date(year, 12, 31), year

    @classmethod
    def parse(cls, value: Any) -> Timeframe:
        if isinstance(value, Timeframe):
            if value.is_rolling:
                return cls.rolling()
            return cls.calendar_year(_parse_year(value.year))
        if isinstance(value, bool):
            return cls.calendar_year(DEFAULT_YEAR)
        if isinstance(value, int):
            return cls.calendar_year(_parse_year(value))
        if isinstance(value, str):
            text = value.strip().lower()
            if text in ("rolling", "rolling12", "rolling-12", "next 12 months"):
                return cls.rolling()
            match = re.search(r"\d{4}", text)
            if match:
                return cls.calendar_year(_parse_year(int(match.group())))
        return cls.calendar_year(DEFAULT_YEAR)


def _parse_year(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 9998:
        return value
    return DEFAULT_YEAR


class Preferences(NamedTuple):
    """Sanitised, hashable optimisation inputs."""

    leave_days: int = 0
    timeframe: Timeframe = Timeframe.calendar_year(DEFAULT_YEAR)
    strategy: Strategy = Strategy.BALANCED
    country: str = ""
    region: str = ""
    has_partner: bool = False
    partner_leave_days: int = 0
    partner_country: str = ""
    partner_region: str = ""


# Accepted spellings for each field, including the camelCase wire format.
_ALIASES: dict[str, tuple[str, ...]] = {
    "leave_days": ("leave_days", "leaveDays", "pto_days", "ptoDays"),
    "timeframe": ("timeframe",),
    "strategy": ("strategy",),
    "country": ("country",),
    "region": ("region",),
    "has_partner": ("has_partner", "hasPartner", "has_buddy", "hasBuddy"),
    "partner_leave_days": (
        "partner_leave_days",
        "partnerLeaveDays",
        "buddy_pto_days",
        "buddyPtoDays",
    ),
    "partner_country": ("partner_country", "partnerCountry", "buddy_country", "buddyCountry"),
    "partner_region": ("partner_region", "partnerRegion", "buddy_region", "buddyRegion"),
}


def clamp_days(value: Any) -> int:
    """Floor *value* into ``[0, 365]``; anything unusable becomes 0."""
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, min(MAX_DAYS, math.floor(number)))


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


def _clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _lookup(raw: Mapping[str, Any], field: str) -> Any:
    for key in _ALIASES[field]:
        if key in raw:
            return raw[key]
    return None


def sanitize_preferences(raw: Preferences | Mapping[str, Any]) -> Preferences:
    """Return a clean :class:`Preferences` from a mapping or an existing instance."""
    if isinstance(raw, Preferences):
        raw = raw._asdict()

    has_partner = _parse_flag(_lookup(raw, "has_partner"))
    timeframe = _lookup(raw, "timeframe")

    return Preferences(
        leave_days=clamp_days(_lookup(raw, "leave_days")),
        timeframe=Timeframe.parse(timeframe if timeframe is not None else DEFAULT_YEAR),
        strategy=Strategy.parse(_lookup(raw, "strategy")),
        country=_clean_str(_lookup(raw, "country")),
        region=_clean_str(_lookup(raw, "region")),
        has_partner=has_partner,
        partner_leave_days=clamp_days(_lookup(raw, "partner_leave_days")) if has_partner else 0,
        partner_country=_clean_str(_lookup(raw, "partner_country")) if has_partner else "",
        partner_region=_clean_str(_lookup(raw, "partner_region")) if has_partner else "",
    )
