"""Dense per-day encoding of a planning window.

A :class:`Timeline` turns a date range plus one or two holiday mappings into
flat per-day arrays and running prefix sums, so that the cost and holiday
value of any contiguous window ``[start, stop)`` is a subtraction of two
array entries.

Day-of-week convention: 0 = Sunday … 6 = Saturday.
"""

from __future__ import annotations

import calendar
import datetime
import enum
from collections.abc import Mapping

HOLIDAY_SCORE = 20
"""Prefix-score points for a day that is a holiday for either party."""

JOINT_HOLIDAY_SCORE = 30
"""Extra points for a day that is a holiday for both parties."""

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class DayFlag(enum.IntFlag):
    NONE = 0
    WEEKEND = 1
    HOLIDAY = 2
    PARTNER_HOLIDAY = 4


class NamePool:
    """Interns holiday names as small integers; id 0 means "no name"."""

    def __init__(self) -> None:
        self._names: list[str] = [""]
        self._ids: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._names) - 1

    def intern(self, name: str) -> int:
        ident = self._ids.get(name)
        if ident is None:
            ident = len(self._names)
            self._names.append(name)
            self._ids[name] = ident
        return ident

    def name(self, ident: int) -> str:
        if 0 <= ident < len(self._names):
            return self._names[ident]
        return ""


class Timeline:
    """Per-day flags and prefix sums for ``total_days`` days from ``start_date``.

    Every prefix array has ``total_days + 1`` entries and ``prefix[k]`` holds
    the cumulative value over days ``[0, k)``.
    """

    def __init__(self, start_date: datetime.date, total_days: int, has_partner: bool):
        self.start_date = start_date
        self.total_days = total_days
        self.has_partner = has_partner
        self.start_weekday = (start_date.weekday() + 1) % 7

        self.flags: list[DayFlag] = [DayFlag.NONE] * total_days
        self.holiday_ids: list[int] = [0] * total_days
        self.partner_holiday_ids: list[int] = [0] * total_days
        self.names = NamePool()

        size = total_days + 1
        self.pto_prefix: list[int] = [0] * size
        self.partner_prefix: list[int] = [0] * size
        self.holiday_score_prefix: list[int] = [0] * size
        self.holiday_count_prefix: list[int] = [0] * size
        self.joint_score_prefix: list[int] = [0] * size

    # ------------------------------------------------------------------
    # Day accessors
    # ------------------------------------------------------------------

    def day_of_week(self, i: int) -> int:
        return (self.start_weekday + i) % 7

    def date_at(self, i: int) -> datetime.date:
        return self.start_date + datetime.timedelta(days=i)

    def iso_at(self, i: int) -> str:
        return self.date_at(i).isoformat()

    def is_weekend(self, i: int) -> bool:
        return DayFlag.WEEKEND in self.flags[i]

    def holiday_name(self, i: int) -> str:
        return self.names.name(self.holiday_ids[i])

    def partner_holiday_name(self, i: int) -> str:
        return self.names.name(self.partner_holiday_ids[i])

    # ------------------------------------------------------------------
    # Range queries over [start, stop)
    # ------------------------------------------------------------------

    def pto_cost(self, start: int, stop: int) -> int:
        return self.pto_prefix[stop] - self.pto_prefix[start]

    def partner_cost(self, start: int, stop: int) -> int:
        return self.partner_prefix[stop] - self.partner_prefix[start]

    def holiday_score(self, start: int, stop: int) -> int:
        return self.holiday_score_prefix[stop] - self.holiday_score_prefix[start]

    def holiday_count(self, start: int, stop: int) -> int:
        return self.holiday_count_prefix[stop] - self.holiday_count_prefix[start]

    def joint_score(self, start: int, stop: int) -> int:
        return self.joint_score_prefix[stop] - self.joint_score_prefix[start]


def encode_timeline(
    start: datetime.date,
    end: datetime.date,
    holidays: Mapping[str, str],
    partner_holidays: Mapping[str, str] | None = None,
    *,
    has_partner: bool = False,
) -> Timeline:
    """Encode the inclusive range ``start..end`` in a single pass.

    The date is advanced with a manual year/month/day cursor so that no date
    object is built per day; the cursor also yields the ``YYYY-MM-DD`` key
    used for holiday lookups.  Partner cost is only accumulated when
    *has_partner* is set; *partner_holidays* may be ``None`` for a partner
    without a country, in which case only weekends are free for them.
    """
    if end < start:
        raise ValueError(f"Timeline end {end} is before start {start}.")

    total_days = (end - start).days + 1
    tl = Timeline(start, total_days, has_partner)

    flags = tl.flags
    holiday_ids = tl.holiday_ids
    partner_ids = tl.partner_holiday_ids
    intern = tl.names.intern
    pto_prefix = tl.pto_prefix
    partner_prefix = tl.partner_prefix
    score_prefix = tl.holiday_score_prefix
    count_prefix = tl.holiday_count_prefix
    joint_prefix = tl.joint_score_prefix

    pto = partner = score = count = joint = 0
    year, month, day = start.year, start.month, start.day
    weekday = tl.start_weekday

    for i in range(total_days):
        key = f"{year:04d}-{month:02d}-{day:02d}"
        weekend = weekday == 0 or weekday == 6

        flag = DayFlag.WEEKEND if weekend else DayFlag.NONE

        name = holidays.get(key)
        own_holiday = bool(name)
        if own_holiday:
            flag |= DayFlag.HOLIDAY
            holiday_ids[i] = intern(name)

        partner_holiday = False
        if partner_holidays is not None:
            partner_name = partner_holidays.get(key)
            if partner_name:
                partner_holiday = True
                flag |= DayFlag.PARTNER_HOLIDAY
                partner_ids[i] = intern(partner_name)

        flags[i] = flag

        if not weekend and not own_holiday:
            pto += 1
        if has_partner and not weekend and not partner_holiday:
            partner += 1
        if own_holiday or partner_holiday:
            count += 1
            score += HOLIDAY_SCORE
        if own_holiday and partner_holiday:
            joint += JOINT_HOLIDAY_SCORE

        nxt = i + 1
        pto_prefix[nxt] = pto
        partner_prefix[nxt] = partner
        score_prefix[nxt] = score
        count_prefix[nxt] = count
        joint_prefix[nxt] = joint

        # Advance the cursor
        weekday = (weekday + 1) % 7
        month_len = 29 if month == 2 and calendar.isleap(year) else _DAYS_IN_MONTH[month - 1]
        day += 1
        if day > month_len:
            day = 1
            month += 1
            if month > 12:
                month = 1
                year += 1

    return tl
