"""Tests for bulk date range expansion."""

from datetime import date

import pytest

from tiffin.errors import InvalidRange, InvalidWeekday, RangeTooLarge
from tiffin.services.scheduling.date_range import expand_date_range, parse_date, weekday_sun0


def test_plain_range_is_inclusive():
    assert expand_date_range("2024-01-01", "2024-01-03") == ["2024-01-01", "2024-01-02", "2024-01-03"]


def test_single_day_range():
    assert expand_date_range("2024-02-29", "2024-02-29") == ["2024-02-29"]


def test_accepts_date_objects():
    assert expand_date_range(date(2024, 1, 1), date(2024, 1, 2)) == ["2024-01-01", "2024-01-02"]


def test_skip_weekends_on_weekdays_only_range():
    assert expand_date_range("2024-01-15", "2024-01-19", skip_weekends=True) == [
        "2024-01-15",
        "2024-01-16",
        "2024-01-17",
        "2024-01-18",
        "2024-01-19",
    ]


def test_skip_weekends_drops_saturday_and_sunday():
    result = expand_date_range("2024-01-13", "2024-01-19", skip_weekends=True)
    assert "2024-01-13" not in result
    assert "2024-01-14" not in result
    assert result[0] == "2024-01-15"
    assert len(result) == 5


def test_days_of_week_filter_uses_sunday_zero():
    # 2024-01-14 is a Sunday, 2024-01-17 a Wednesday
    result = expand_date_range("2024-01-13", "2024-01-20", days_of_week=[0, 3])
    assert result == ["2024-01-14", "2024-01-17"]


def test_contradictory_filters_give_empty_result():
    assert expand_date_range("2024-01-01", "2024-01-31", days_of_week=[0], skip_weekends=True) == []


def test_skip_weekends_over_single_saturday_is_empty():
    assert expand_date_range("2024-01-13", "2024-01-13", skip_weekends=True) == []


def test_start_after_end():
    with pytest.raises(InvalidRange):
        expand_date_range("2024-01-10", "2024-01-09")


def test_ninety_day_difference_is_allowed():
    result = expand_date_range("2024-01-01", "2024-03-31")
    assert len(result) == 91


def test_range_too_large():
    with pytest.raises(RangeTooLarge) as exc:
        expand_date_range("2024-01-01", "2024-04-01")
    assert "91 days" in str(exc.value)


@pytest.mark.parametrize("bad", [[7], [-1], [1, 2, 9]])
def test_invalid_weekday(bad):
    with pytest.raises(InvalidWeekday):
        expand_date_range("2024-01-01", "2024-01-07", days_of_week=bad)


def test_weekday_sun0():
    assert weekday_sun0(date(2024, 1, 14)) == 0
    assert weekday_sun0(date(2024, 1, 15)) == 1
    assert weekday_sun0(date(2024, 1, 13)) == 6


def test_parse_date_accepts_iso_datetimes():
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date(" 2024-01-15 ") == date(2024, 1, 15)
    assert parse_date("2024-01-15T18:30:00Z") == date(2024, 1, 15)


@pytest.mark.parametrize("value", ["2024-01-15garbage", "2024-13-01", "15/01/2024", ""])
def test_parse_date_rejects_trailing_or_malformed_input(value):
    with pytest.raises(InvalidRange):
        parse_date(value)


def test_range_with_malformed_bound():
    with pytest.raises(InvalidRange):
        expand_date_range("2024-01-01", "2024-01-05junk")
