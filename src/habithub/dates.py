# src/habithub/dates.py
"""Calendar arithmetic for Sunday to Saturday tracking weeks.

"Now" is always read in the anchor timezone (``config.TIMEZONE``). Once a
calendar date has been derived from it, every value in this module is a
naive date or datetime; nothing here touches storage.
"""
import calendar
import datetime as dt
import re
from typing import Dict, List, Optional, Union
from zoneinfo import ZoneInfo

from habithub import config
from habithub.errors import InvalidInput
from habithub.models import DAYS_ORDER, CalendarDay, DateInfo, Weekday

DateLike = Union[dt.date, dt.datetime]

END_OF_DAY = dt.time(23, 59, 59, 999000)

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Sunday-first month grids
_CALENDAR = calendar.Calendar(firstweekday=calendar.SUNDAY)


# -------------------------------
# NOW
# -------------------------------
def anchor_tz() -> dt.tzinfo:
    return ZoneInfo(config.TIMEZONE)


def now() -> dt.datetime:
    return dt.datetime.now(anchor_tz())


def current_date() -> dt.date:
    """Today's calendar date in the anchor timezone."""
    return now().date()


def today_name() -> str:
    return weekday_of(current_date()).value


# -------------------------------
# WEEKDAYS
# -------------------------------
def _as_date(value: DateLike) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def _day_number(day: dt.date) -> int:
    # Sunday = 0 ... Saturday = 6
    return day.isoweekday() % 7


def weekday_of(day: DateLike) -> Weekday:
    return Weekday(DAYS_ORDER[_day_number(_as_date(day))])


def parse_weekday(token) -> Weekday:
    try:
        return Weekday(token)
    except ValueError:
        raise InvalidInput(f"Invalid day {token!r}, expected one of {', '.join(DAYS_ORDER)}") from None


def day_index(day) -> int:
    return DAYS_ORDER.index(parse_weekday(day).value)


def parse_date(value: str) -> dt.date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise InvalidInput("Invalid date format. Use YYYY-MM-DD")
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInput(f"Invalid date: {value}") from exc


# -------------------------------
# WEEK BOUNDARIES
# -------------------------------
def week_start(day: Optional[DateLike] = None) -> dt.datetime:
    """Sunday at 00:00:00 on or before ``day`` (default: today)."""
    d = _as_date(day) if day is not None else current_date()
    start = d - dt.timedelta(days=_day_number(d))
    return dt.datetime.combine(start, dt.time.min)


def week_end(day: Optional[DateLike] = None) -> dt.datetime:
    """Saturday at 23:59:59.999 of the week containing ``day``."""
    start = week_start(day)
    return dt.datetime.combine(start.date() + dt.timedelta(days=6), END_OF_DAY)


def first_sunday(year: int) -> dt.date:
    jan1 = dt.date(year, 1, 1)
    return jan1 + dt.timedelta(days=(7 - _day_number(jan1)) % 7)


def week_id(day: Optional[DateLike] = None) -> str:
    """Identifier of the week containing ``day``, e.g. ``2026-W01``.

    The year is taken from the week's Saturday, so the week of
    Sun Dec 28, 2025 to Sat Jan 3, 2026 is ``2026-W01``. A week that starts
    before the year's first Sunday is week 01; when such a partial week
    exists, the weeks from the first Sunday on are numbered from 02.

    Counting from 01 at the first Sunday instead would give Dec 28, 2025
    and Jan 4, 2026 the same id ``2026-W01``; since a week is looked up by
    id, the Jan 4 week would then never be opened.
    """
    d = _as_date(day) if day is not None else current_date()
    start = week_start(d).date()
    year = week_end(d).year
    first = first_sunday(year)

    if start < first:
        number = 1
    else:
        offset = 1 if first.day == 1 else 2
        number = (start - first).days // 7 + offset
    return f"{year}-W{number:02d}"


def is_current_week(some_week_start: DateLike) -> bool:
    return _as_date(some_week_start) == week_start().date()


def week_dates(start: DateLike) -> Dict[str, str]:
    """Map each weekday token to its ISO date within the week."""
    first = _as_date(start)
    return {name: (first + dt.timedelta(days=i)).isoformat() for i, name in enumerate(DAYS_ORDER)}


# -------------------------------
# FORMATTING
# -------------------------------
def format_date(day: DateLike) -> str:
    d = _as_date(day)
    return f"{d:%b} {d.day}, {d.year}"


def format_week_range(start: DateLike, end: DateLike) -> str:
    return f"{format_date(start)} - {format_date(end)}"


# -------------------------------
# CALENDAR
# -------------------------------
def calendar_month(year: int, month: int) -> List[List[CalendarDay]]:
    """Sunday-first grid of 7-day rows covering the month.

    Leading and trailing cells come from the neighbouring months.
    """
    if not 1 <= month <= 12:
        raise InvalidInput("Month must be between 1 and 12")
    try:
        rows = _CALENDAR.monthdatescalendar(year, month)
    except (ValueError, OverflowError) as exc:
        raise InvalidInput(f"Invalid year: {year}") from exc

    today = current_date()
    return [
        [
            CalendarDay(
                day=d.day,
                full_date=d,
                day_name=weekday_of(d),
                is_current_month=(d.year, d.month) == (year, month),
                is_today=d == today,
            )
            for d in row
        ]
        for row in rows
    ]


def date_info(value: str) -> DateInfo:
    day = parse_date(value)
    try:
        return DateInfo(
            date=day,
            day_name=weekday_of(day),
            day_index=_day_number(day),
            week_id=week_id(day),
            week_start=week_start(day).date(),
            week_end=week_end(day).date(),
        )
    except (ValueError, OverflowError) as exc:
        raise InvalidInput(f"Date out of range: {value}") from exc
