"""
ISO-8601 week identifier helpers.

A week id looks like ``2026-05``: the four digit ISO week-numbering year and
the two digit ISO week. The ISO year is the year of the Thursday of the
Monday-Sunday week, so it can differ from the calendar year for dates around
New Year (2021-01-01 belongs to ``2020-53``).

All functions work on calendar dates only.
"""

import re
from datetime import MAXYEAR, UTC, date, datetime, timedelta
from typing import NamedTuple

WEEK_ID_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


class WeekSuggestion(NamedTuple):
    """Suggested id and date range for the next week to plan"""

    week_id: str
    start_date: date
    end_date: date


def today_utc() -> date:
    """Current calendar date in UTC"""
    return datetime.now(UTC).date()


def _anchor_thursday(d: date) -> date:
    """Thursday of the Monday-Sunday week containing ``d``"""
    return d + timedelta(days=3 - d.weekday())


def week_number(d: date) -> int:
    """
    ISO-8601 week number of a date.

    The date is shifted to the Thursday of its own week, and weeks are counted
    from the first Thursday of that Thursday's year.
    """
    thursday = _anchor_thursday(d)
    first_thursday = date(thursday.year, 1, 1)
    first_thursday += timedelta(days=(3 - first_thursday.weekday()) % 7)
    return 1 + (thursday - first_thursday).days // 7


def iso_year(d: date) -> int:
    """ISO week-numbering year owning the date"""
    return _anchor_thursday(d).year


def format_week_id(year: int, week: int) -> str:
    return f"{year:04d}-{week:02d}"


def week_id(d: date) -> str:
    """Week id (``YYYY-WW``) of the week containing ``d``"""
    return format_week_id(iso_year(d), week_number(d))


def current_week_id(today: date | None = None) -> str:
    return week_id(today or today_utc())


def parse_week_id(value: str) -> tuple[int, int]:
    """
    Split a week id into ``(year, week)``.

    Raises:
        ValueError: If the value is not of the form ``YYYY-WW``
    """
    match = WEEK_ID_PATTERN.match(value) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid week id: {value!r}")
    return int(match.group(1)), int(match.group(2))


def weeks_in_year(year: int) -> int:
    """Number of ISO weeks (52 or 53) in an ISO year"""
    last_week = week_number(date(year, 12, 31))
    if last_week == 1:
        # Dec 31 already belongs to week 1 of the next ISO year
        return week_number(date(year, 12, 24))
    return last_week


def is_valid_week_id(value: str) -> bool:
    """True if the value is well formed and the week exists in its year"""
    try:
        year, week = parse_week_id(value)
    except ValueError:
        return False
    if year < 1:
        return False
    return 1 <= week <= weeks_in_year(year)


def week_start_date(value: str) -> date:
    """Monday of the given ISO week"""
    year, week = parse_week_id(value)
    # January 4th is always in week 1
    jan4 = date(year, 1, 4)
    first_monday = jan4 - timedelta(days=jan4.weekday())
    try:
        return first_monday + timedelta(weeks=week - 1)
    except OverflowError as e:
        raise ValueError(f"Week id out of range: {value!r}") from e


def week_end_date(value: str) -> date:
    """Sunday of the given ISO week"""
    start = week_start_date(value)
    try:
        return start + timedelta(days=6)
    except OverflowError as e:
        raise ValueError(f"Week id out of range: {value!r}") from e


def next_week_id(value: str) -> str:
    year, week = parse_week_id(value)
    if week >= weeks_in_year(year):
        if year >= MAXYEAR:
            raise ValueError(f"No week after {value!r}")
        return format_week_id(year + 1, 1)
    return format_week_id(year, week + 1)


def previous_week_id(value: str) -> str:
    year, week = parse_week_id(value)
    if week <= 1:
        return format_week_id(year - 1, weeks_in_year(year - 1))
    return format_week_id(year, week - 1)


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def format_week_range(start: date, end: date) -> str:
    """Human readable range, e.g. ``Jan 27 - Feb 2, 2026``"""
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"


def suggest_next_week_dates(
    previous_week_id: str | None = None,
    previous_end_date: date | None = None,
    today: date | None = None,
) -> WeekSuggestion:
    """
    Suggest the id and date range of the next week to create.

    With a previous week, the suggestion chains off its actual end date rather
    than the canonical ISO mapping of the suggested id, so manually edited
    ranges carry forward. Without one, the current calendar week is used.

    Args:
        previous_week_id: Id of the most recent existing week
        previous_end_date: End date stored on that week
        today: Reference date when there is no previous week

    Returns:
        WeekSuggestion with week_id, start_date and end_date
    """
    if previous_week_id is not None:
        if previous_end_date is None:
            raise ValueError("previous_end_date is required with previous_week_id")
        start = add_days(previous_end_date, 1)
        return WeekSuggestion(next_week_id(previous_week_id), start, add_days(start, 6))

    current = current_week_id(today)
    return WeekSuggestion(current, week_start_date(current), week_end_date(current))
