from datetime import date

import pytest

from bikram_sambat.api import arithmetic
from bikram_sambat.api.calendar_data import load_default_table
from bikram_sambat.api.converter import BSDate, Weekday
from bikram_sambat.api.exceptions import InvalidDateError, YearOutOfRangeError


def test_days_between_consecutive_new_years_is_year_length():
    assert arithmetic.days_between(BSDate(2000, 1, 1), BSDate(2001, 1, 1)) == load_default_table().year_length(2000)
    assert arithmetic.days_between(BSDate(2081, 1, 1), BSDate(2082, 1, 1)) == 366


def test_days_between_is_signed():
    assert arithmetic.days_between(BSDate(2081, 2, 1), BSDate(2081, 1, 1)) == -31
    assert arithmetic.days_between("2081-01-01", "2081-01-01") == 0


def test_days_between_propagates_failures():
    with pytest.raises(YearOutOfRangeError):
        arithmetic.days_between(BSDate(1969, 1, 1), BSDate(2000, 1, 1))
    with pytest.raises(InvalidDateError):
        arithmetic.days_between(BSDate(2000, 1, 1), BSDate(2000, 13, 1))


@pytest.mark.parametrize(
    "start,days,expected",
    [
        (BSDate(2081, 1, 31), 1, BSDate(2081, 2, 1)),
        (BSDate(2081, 1, 1), -1, BSDate(2080, 12, 30)),
        (BSDate(2081, 1, 1), 366, BSDate(2082, 1, 1)),
        (BSDate(2000, 1, 1), 0, BSDate(2000, 1, 1)),
    ],
)
def test_add_days_crosses_irregular_boundaries(start, days, expected):
    assert arithmetic.add_days(start, days) == expected


def test_add_days_past_table_end_is_out_of_range():
    with pytest.raises(YearOutOfRangeError):
        arithmetic.add_days(BSDate(2100, 12, 30), 1)


@pytest.mark.parametrize(
    "start,months,expected",
    [
        (BSDate(2000, 1, 30), 1, BSDate(2000, 2, 30)),
        (BSDate(2000, 2, 32), 1, BSDate(2000, 3, 31)),
        (BSDate(2000, 5, 31), 4, BSDate(2000, 9, 29)),
        (BSDate(2081, 12, 15), 1, BSDate(2082, 1, 15)),
        (BSDate(2081, 1, 15), -1, BSDate(2080, 12, 15)),
        (BSDate(2081, 3, 32), 24, BSDate(2083, 3, 32)),
    ],
)
def test_add_months_clamps_day_to_target_month(start, months, expected):
    assert arithmetic.add_months(start, months) == expected


def test_add_months_clamps_to_table_month_length():
    start = BSDate(2000, 1, 30)
    result = arithmetic.add_months(start, 1)
    assert result.day == min(start.day, load_default_table().month_length(2000, 2))


def test_add_months_out_of_range_fails():
    with pytest.raises(YearOutOfRangeError):
        arithmetic.add_months(BSDate(2100, 12, 1), 1)


def test_add_months_rejects_invalid_start():
    with pytest.raises(InvalidDateError):
        arithmetic.add_months(BSDate(2000, 1, 31), 1)


def test_add_years_clamps_day():
    # Ashadh has 32 days in 2081 and 31 in 2082
    assert arithmetic.add_years(BSDate(2081, 3, 32), 1) == BSDate(2082, 3, 31)
    assert arithmetic.add_years(BSDate(2081, 1, 15), -81) == BSDate(2000, 1, 15)
    with pytest.raises(YearOutOfRangeError):
        arithmetic.add_years(BSDate(2081, 1, 1), 20)


def test_day_of_year_and_inverse():
    assert arithmetic.day_of_year(BSDate(2081, 1, 1)) == 1
    assert arithmetic.day_of_year(BSDate(2081, 2, 1)) == 32
    assert arithmetic.day_of_year(BSDate(2081, 12, 30)) == 366
    assert arithmetic.from_day_of_year(2081, 32) == BSDate(2081, 2, 1)
    for ordinal in range(1, 367):
        assert arithmetic.day_of_year(arithmetic.from_day_of_year(2081, ordinal)) == ordinal


@pytest.mark.parametrize("ordinal", [0, 367])
def test_from_day_of_year_rejects_out_of_bounds(ordinal):
    with pytest.raises(InvalidDateError):
        arithmetic.from_day_of_year(2081, ordinal)


def test_weekday_matches_gregorian():
    assert arithmetic.weekday(BSDate(2081, 1, 1)) is Weekday.SATURDAY
    assert arithmetic.weekday("2000-01-01") is Weekday.WEDNESDAY
    assert arithmetic.first_weekday_of_month(2081, 1) == 6
    assert arithmetic.first_weekday_of_month(2000, 1) == 3


def test_days_for_month():
    assert arithmetic.days_for_month(2081, 3) == range(1, 33)
    with pytest.raises(InvalidDateError):
        arithmetic.days_for_month(2081, 13)
    with pytest.raises(YearOutOfRangeError):
        arithmetic.days_for_month(1969, 1)


@pytest.mark.parametrize(
    "birth,reference,expected",
    [
        (BSDate(2050, 5, 10), BSDate(2081, 5, 10), 31),
        (BSDate(2050, 5, 10), BSDate(2081, 5, 9), 30),
        (BSDate(2050, 5, 10), BSDate(2081, 6, 1), 31),
        (BSDate(2050, 5, 10), BSDate(2050, 5, 10), 0),
        (BSDate(2081, 5, 10), BSDate(2050, 5, 10), 0),
    ],
)
def test_age(birth, reference, expected):
    assert arithmetic.age(birth, reference) == expected


def test_age_defaults_to_today():
    today = arithmetic.add_days(BSDate(2000, 1, 1), (date.today() - date(1943, 4, 14)).days)
    assert arithmetic.age(BSDate(2000, 1, 1)) == arithmetic.age(BSDate(2000, 1, 1), today)
