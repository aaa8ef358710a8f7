from __future__ import annotations

import datetime

from vacationmax.export import event_details, event_title, google_calendar_link, to_ics
from vacationmax.optimizer import HolidayInfo, VacationBlock


def _block(holidays: tuple[HolidayInfo, ...] = (), description: str = "Long Weekend") -> VacationBlock:
    return VacationBlock(
        id="20251225-20251228",
        start_date=datetime.date(2025, 12, 25),
        end_date=datetime.date(2025, 12, 28),
        total_days_off=4,
        pto_days_used=1,
        partner_pto_days_used=None,
        holidays_used=holidays,
        description=description,
        efficiency_score=4.0,
        monetary_value=1380,
    )


_NOW = datetime.datetime(2025, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)


class TestEventText:
    def test_title(self) -> None:
        assert event_title(_block()) == "Vacation: Long Weekend"

    def test_details(self) -> None:
        assert event_details(_block()) == "Smart Bridge Plan."
        block = _block((HolidayInfo("2025-12-25", "Christmas Day"),))
        assert event_details(block) == "Smart Bridge Plan. Holidays used: Christmas Day"


class TestICS:
    def test_document_structure(self) -> None:
        ics = to_ics([_block()], now=_NOW)
        lines = ics.split("\r\n")
        assert lines[0] == "BEGIN:VCALENDAR"
        assert "VERSION:2.0" in lines
        assert lines[-2] == "END:VCALENDAR"
        assert lines[-1] == ""
        assert lines.count("BEGIN:VEVENT") == 1

    def test_all_day_event_has_exclusive_end(self) -> None:
        ics = to_ics([_block()], now=_NOW)
        assert "DTSTART;VALUE=DATE:20251225\r\n" in ics
        assert "DTEND;VALUE=DATE:20251229\r\n" in ics
        assert "DTSTAMP:20250102T030405Z\r\n" in ics
        assert "UID:20251225-20251228@vacationmax.app\r\n" in ics

    def test_text_is_escaped(self) -> None:
        block = _block(
            (HolidayInfo("2025-12-25", "Christmas Day"), HolidayInfo("2025-12-26", "Boxing Day")),
            description="Christmas Day Super Bridge; cozy",
        )
        ics = to_ics([block], now=_NOW)
        assert "SUMMARY:Vacation: Christmas Day Super Bridge\\; cozy\r\n" in ics
        assert "Holidays used: Christmas Day\\, Boxing Day" in ics

    def test_no_blocks(self) -> None:
        ics = to_ics([], now=_NOW)
        assert "BEGIN:VEVENT" not in ics
        assert ics.endswith("END:VCALENDAR\r\n")


class TestGoogleCalendarLink:
    def test_link(self) -> None:
        url = google_calendar_link(_block((HolidayInfo("2025-12-25", "Christmas Day"),)))
        assert url.startswith("https://calendar.google.com/calendar/render?action=TEMPLATE")
        assert "&dates=20251225/20251229" in url
        assert "&text=Vacation%3A%20Long%20Weekend" in url
        assert "Christmas%20Day" in url
