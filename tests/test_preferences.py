from __future__ import annotations

import datetime

from vacationmax.preferences import (
    DEFAULT_YEAR,
    Preferences,
    Strategy,
    Timeframe,
    clamp_days,
    sanitize_preferences,
)


class TestClampDays:
    def test_valid_numbers(self) -> None:
        assert clamp_days(10) == 10
        assert clamp_days(12.7) == 12
        assert clamp_days("8") == 8

    def test_out_of_range(self) -> None:
        assert clamp_days(-5) == 0
        assert clamp_days(1000) == 365

    def test_unusable_values(self) -> None:
        assert clamp_days(float("nan")) == 0
        assert clamp_days(float("inf")) == 0
        assert clamp_days(float("-inf")) == 0
        assert clamp_days("lots") == 0
        assert clamp_days(None) == 0
        assert clamp_days([3]) == 0


class TestStrategy:
    def test_parse_spellings(self) -> None:
        assert Strategy.parse("Long Weekends") is Strategy.LONG_WEEKENDS
        assert Strategy.parse("long-weekends") is Strategy.LONG_WEEKENDS
        assert Strategy.parse("EXTENDED") is Strategy.EXTENDED
        assert Strategy.parse("Week-long Breaks") is Strategy.WEEK_LONG
        assert Strategy.parse(Strategy.MINI_BREAKS) is Strategy.MINI_BREAKS

    def test_unknown_is_balanced(self) -> None:
        assert Strategy.parse("nonsense") is Strategy.BALANCED
        assert Strategy.parse(None) is Strategy.BALANCED

    def test_slugs(self) -> None:
        assert [s.slug for s in Strategy] == [
            "balanced",
            "long-weekends",
            "mini-breaks",
            "week-long",
            "extended",
        ]


class TestTimeframe:
    def test_parse(self) -> None:
        assert Timeframe.parse(2026) == Timeframe.calendar_year(2026)
        assert Timeframe.parse("2027") == Timeframe.calendar_year(2027)
        assert Timeframe.parse("Calendar Year 2026") == Timeframe.calendar_year(2026)
        assert Timeframe.parse("rolling").is_rolling
        assert Timeframe.parse("Next 12 Months").is_rolling

    def test_parse_garbage_defaults(self) -> None:
        assert Timeframe.parse(None) == Timeframe.calendar_year(DEFAULT_YEAR)
        assert Timeframe.parse(True) == Timeframe.calendar_year(DEFAULT_YEAR)
        assert Timeframe.parse("soon") == Timeframe.calendar_year(DEFAULT_YEAR)
        assert Timeframe.parse(-4) == Timeframe.calendar_year(DEFAULT_YEAR)

    def test_resolve_calendar_year(self) -> None:
        start, end, year = Timeframe.calendar_year(2024).resolve()
        assert start == datetime.date(2024, 1, 1)
        assert end == datetime.date(2024, 12, 31)
        assert year == 2024

    def test_resolve_rolling(self) -> None:
        today = datetime.date(2026, 10, 19)
        start, end, year = Timeframe.rolling().resolve(today)
        assert start == today
        assert (end - start).days + 1 == 365
        assert year == 2026


class TestSanitize:
    def test_snake_case(self) -> None:
        prefs = sanitize_preferences(
            {
                "leave_days": 12,
                "timeframe": 2026,
                "strategy": "Mini Breaks",
                "country": "  Canada ",
                "region": "ON",
            }
        )
        assert prefs == Preferences(
            leave_days=12,
            timeframe=Timeframe.calendar_year(2026),
            strategy=Strategy.MINI_BREAKS,
            country="Canada",
            region="ON",
        )

    def test_camel_case_wire_format(self) -> None:
        prefs = sanitize_preferences(
            {
                "ptoDays": "15",
                "hasBuddy": True,
                "buddyPtoDays": 7.9,
                "buddyCountry": "United Kingdom",
                "buddyRegion": "Scotland",
            }
        )
        assert prefs.leave_days == 15
        assert prefs.has_partner is True
        assert prefs.partner_leave_days == 7
        assert prefs.partner_country == "United Kingdom"
        assert prefs.partner_region == "Scotland"

    def test_partner_fields_cleared_without_partner(self) -> None:
        prefs = sanitize_preferences(
            {
                "leave_days": 10,
                "has_partner": False,
                "partner_leave_days": 8,
                "partner_country": "Canada",
                "partner_region": "Quebec",
            }
        )
        assert prefs.partner_leave_days == 0
        assert prefs.partner_country == ""
        assert prefs.partner_region == ""

    def test_string_flags(self) -> None:
        assert sanitize_preferences({"has_partner": "false"}).has_partner is False
        assert sanitize_preferences({"has_partner": "yes"}).has_partner is True

    def test_bad_numbers(self) -> None:
        prefs = sanitize_preferences({"leave_days": float("nan"), "timeframe": "nope"})
        assert prefs.leave_days == 0
        assert prefs.timeframe == Timeframe.calendar_year(DEFAULT_YEAR)

    def test_defaults(self) -> None:
        assert sanitize_preferences({}) == Preferences()

    def test_key_order_does_not_matter(self) -> None:
        a = sanitize_preferences({"leave_days": 5, "country": "Canada", "strategy": "Extended"})
        b = sanitize_preferences({"strategy": "Extended", "country": "Canada", "leave_days": 5})
        assert a == b
        assert hash(a) == hash(b)

    def test_idempotent(self) -> None:
        prefs = sanitize_preferences({"leave_days": 400, "has_partner": True})
        assert sanitize_preferences(prefs) == prefs
