from __future__ import annotations

import datetime

import pytest

from vacationmax.holidays import (
    HOLIDAY_DB,
    fetch_country_data,
    holiday_map,
    list_countries,
    parse_entry,
    us_federal_holidays,
)


class TestParseEntry:
    def test_splits_on_first_colon(self) -> None:
        assert parse_entry("2025-07-04:Independence Day") == ("2025-07-04", "Independence Day")
        assert parse_entry("2025-01-01:Day: the First") == ("2025-01-01", "Day: the First")

    def test_malformed(self) -> None:
        assert parse_entry("2025-07-04") is None
        assert parse_entry(":Nameless") is None
        assert parse_entry("2025-07-04:") is None


class TestCountries:
    def test_bundled_countries(self) -> None:
        names = list_countries()
        assert "United States" in names
        assert "United Kingdom" in names
        assert names == sorted(names)

    def test_case_insensitive_lookup(self) -> None:
        assert fetch_country_data("united states") is HOLIDAY_DB["United States"]
        assert fetch_country_data("Atlantis") is None


class TestHolidayMap:
    def test_federal_holidays(self) -> None:
        hmap = holiday_map("United States", "", 2025, 2025)
        assert hmap["2025-07-04"] == "Independence Day"
        assert hmap["2025-12-25"] == "Christmas Day"
        assert len(hmap) == 11

    def test_region_adds_holidays(self) -> None:
        hmap = holiday_map("United States", "cali", 2025, 2025)
        assert hmap["2025-03-31"] == "Cesar Chavez Day"
        assert hmap["2025-07-04"] == "Independence Day"
        assert "2025-03-31" not in holiday_map("United States", "", 2025, 2025)

    def test_unresolved_region_falls_back_to_federal(self) -> None:
        assert dict(holiday_map("United States", "zzzzzz", 2025, 2025)) == dict(
            holiday_map("United States", "", 2025, 2025)
        )

    def test_spans_years(self) -> None:
        hmap = holiday_map("United States", "", 2025, 2026)
        assert "2025-01-01" in hmap
        assert "2026-07-03" in hmap

    def test_country_name_case_insensitive(self) -> None:
        assert "2025-07-04" in holiday_map("UNITED STATES", "", 2025, 2025)

    def test_unknown_or_empty_country_is_empty(self) -> None:
        assert len(holiday_map("Atlantis", "", 2025, 2025)) == 0
        assert len(holiday_map("", "", 2025, 2025)) == 0

    def test_mapping_is_read_only(self) -> None:
        hmap = holiday_map("United States", "", 2025, 2025)
        with pytest.raises(TypeError):
            hmap["2025-01-02"] = "Made Up"  # type: ignore[index]

    def test_repeated_calls_share_result(self) -> None:
        assert holiday_map("Canada", "", 2025, 2025) is holiday_map("Canada", "", 2025, 2025)

    def test_missing_us_year_uses_rules(self) -> None:
        hmap = holiday_map("United States", "", 2028, 2028)
        assert hmap["2028-07-04"] == "Independence Day"
        assert hmap["2028-11-23"] == "Thanksgiving Day"

    def test_missing_year_without_rules_is_empty(self) -> None:
        assert len(holiday_map("Canada", "", 2030, 2030)) == 0


class TestUSRules:
    def test_rules_match_static_table(self) -> None:
        computed = [f"{d.isoformat()}:{name}" for d, name in us_federal_holidays(2025)]
        assert computed == HOLIDAY_DB["United States"].federal["2025"]

    def test_observed_shift(self) -> None:
        computed = dict((d, name) for d, name in us_federal_holidays(2026))
        # July 4 2026 is a Saturday
        assert computed[datetime.date(2026, 7, 3)] == "Independence Day (Observed)"

    def test_sunday_moves_to_monday(self) -> None:
        computed = dict((d, name) for d, name in us_federal_holidays(2027))
        # July 4 2027 is a Sunday, Christmas 2027 a Saturday
        assert computed[datetime.date(2027, 7, 5)] == "Independence Day (Observed)"
        assert computed[datetime.date(2027, 12, 24)] == "Christmas Day (Observed)"

    def test_new_year_can_be_observed_in_previous_year(self) -> None:
        computed = dict((d, name) for d, name in us_federal_holidays(2028))
        # New Year's Day 2028 is a Saturday
        assert computed[datetime.date(2027, 12, 31)] == "New Year's Day (Observed)"
