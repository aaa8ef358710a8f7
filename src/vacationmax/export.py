"""Calendar export for selected vacation blocks.

Each block becomes one all-day event.  All-day events use an exclusive end
date, so ``DTEND`` is the day after the block's last day.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from urllib.parse import quote

from vacationmax.optimizer import VacationBlock

PRODID = "-//VacationMax//Vacation Optimizer//EN"
UID_DOMAIN = "vacationmax.app"
GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"


def _compact(d: datetime.date) -> str:
    return d.strftime("%Y%m%d")


def _escape(text: str) -> str:
    """Escape an ICS TEXT value (RFC 5545 section 3.3.11)."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def event_title(block: VacationBlock) -> str:
    return f"Vacation: {block.description}"


def event_details(block: VacationBlock) -> str:
    names = ", ".join(h.name for h in block.holidays_used)
    if not names:
        return "Smart Bridge Plan."
    return f"Smart Bridge Plan. Holidays used: {names}"


def to_ics(blocks: Iterable[VacationBlock], *, now: datetime.datetime | None = None) -> str:
    """Render *blocks* as an iCalendar document with CRLF line endings."""
    stamp = (now or datetime.datetime.now(datetime.timezone.utc)).strftime("%Y%m%dT%H%M%SZ")
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
    ]
    for block in blocks:
        end = block.end_date + datetime.timedelta(days=1)
        lines.extend(
            [
                "BEGIN:VEVENT",
                f"DTSTAMP:{stamp}",
                f"DTSTART;VALUE=DATE:{_compact(block.start_date)}",
                f"DTEND;VALUE=DATE:{_compact(end)}",
                f"SUMMARY:{_escape(event_title(block))}",
                f"DESCRIPTION:{_escape(event_details(block))}",
                f"UID:{block.id}@{UID_DOMAIN}",
                "END:VEVENT",
            ]
        )
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


def google_calendar_link(block: VacationBlock) -> str:
    """Return a Google Calendar "add event" link for *block*."""
    end = block.end_date + datetime.timedelta(days=1)
    return (
        f"{GOOGLE_CALENDAR_URL}?action=TEMPLATE"
        f"&text={quote(event_title(block), safe='')}"
        f"&dates={_compact(block.start_date)}/{_compact(end)}"
        f"&details={quote(event_details(block), safe='')}"
    )
