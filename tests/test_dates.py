"""Tests for ISO week id helpers."""

from datetime import date, timedelta

import pytest

from weekly_goals_api import dates


def _days(start: date, count: int):
    return (start + timedelta(days=i) for i in range(count))


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2021, 1, 1), "2020-53"),
        (date(2022, 1, 1), "2021-52"),
        (date(2024, 6, 17), "2024-25"),
        (date(2024, 12, 30), "2025-01"),
        (date(2026, 1, 1), "2026-01"),
        (date(2027, 1, 3), "2026-53"),
        (date(2024, 2, 29), "2024-09"),
    ],
)
def test_week_id_boundaries(day, expected):
    assert dates.week_id(day) == expected


def test_week_number_matches_isocalendar():
    for day in _days(date(2015, 12, 20), 4000):
        iso = day.isocalendar()
        assert dates.week_number(day) == iso.week
        assert dates.iso_year(day) == iso.year


@pytest.mark.parametrize(
    "year, expected",
    [(2015, 53), (2020, 53), (2021, 52), (2024, 52), (2026, 53), (2027, 52)],
)
def test_weeks_in_year(year, expected):
    assert dates.weeks_in_year(year) == expected


def test_weeks_in_year_when_dec_31_is_next_years_week_one():
    # Dec 31 2024 is a Tuesday and belongs to 2025-01
    assert dates.week_id(date(2024, 12, 31)) == "2025-01"
    assert dates.weeks_in_year(2024) == 52


def test_week_start_and_end_contain_every_date():
    for day in _days(date(2019, 12, 1), 1200):
        wid = dates.week_id(day)
        assert dates.week_start_date(wid) <= day <= dates.week_end_date(wid)


def test_week_span_is_monday_to_sunday():
    wid = "2019-01"
    for _ in range(400):
        start = dates.week_start_date(wid)
        assert start.weekday() == 0
        assert dates.week_end_date(wid) == start + timedelta(days=6)
        wid = dates.next_week_id(wid)


def test_week_start_date_known_values():
    assert dates.week_start_date("2020-53") == date(2020, 12, 28)
    assert dates.week_start_date("2025-01") == date(2024, 12, 30)
    assert dates.week_end_date("2026-05") == date(2026, 2, 1)


def test_next_and_previous_are_inverse():
    wid = "2018-50"
    for _ in range(500):
        nxt = dates.next_week_id(wid)
        assert dates.is_valid_week_id(nxt)
        assert dates.previous_week_id(nxt) == wid
        wid = nxt


def test_next_week_rolls_over_year():
    assert dates.next_week_id("2020-53") == "2021-01"
    assert dates.next_week_id("2021-52") == "2022-01"
    assert dates.previous_week_id("2021-01") == "2020-53"
    assert dates.previous_week_id("2022-01") == "2021-52"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2020-53", True),
        ("2021-53", False),
        ("2021-52", True),
        ("2021-00", False),
        ("2021-1", False),
        ("21-01", False),
        ("2021-W01", False),
        ("", False),
        ("0000-01", False),
    ],
)
def test_is_valid_week_id(value, expected):
    assert dates.is_valid_week_id(value) is expected


def test_last_representable_year():
    assert dates.week_start_date("9999-52") == date(9999, 12, 27)
    assert dates.week_end_date("9999-52") == date(9999, 12, 31)
    with pytest.raises(ValueError):
        dates.next_week_id("9999-52")
    with pytest.raises(ValueError):
        dates.week_end_date("9999-53")
    with pytest.raises(ValueError):
        dates.week_start_date("9999-99")


def test_parse_week_id_rejects_malformed():
    assert dates.parse_week_id("2026-07") == (2026, 7)
    with pytest.raises(ValueError):
        dates.parse_week_id("2026/07")
    with pytest.raises(ValueError):
        dates.week_start_date("not-a-week")


def test_suggest_next_week_chains_off_previous_end_date():
    # Previous week was manually shifted to end on a Tuesday
    suggestion = dates.suggest_next_week_dates("2026-05", date(2026, 2, 3))

    assert suggestion.week_id == "2026-06"
    assert suggestion.start_date == date(2026, 2, 4)
    assert suggestion.end_date == date(2026, 2, 10)


def test_suggest_next_week_without_previous_uses_current_week():
    suggestion = dates.suggest_next_week_dates(today=date(2021, 1, 1))

    assert suggestion == dates.WeekSuggestion(
        "2020-53", date(2020, 12, 28), date(2021, 1, 3)
    )


def test_suggest_next_week_requires_end_date_with_previous_id():
    with pytest.raises(ValueError):
        dates.suggest_next_week_dates("2026-05")


def test_format_week_range():
    start = dates.week_start_date("2026-05")
    end = dates.week_end_date("2026-05")
    assert dates.format_week_range(start, end) == "Jan 26 - Feb 1, 2026"


def test_add_days_and_current_week_id():
    assert dates.add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
    assert dates.current_week_id(date(2024, 6, 17)) == "2024-25"
