"""Expand a calendar date range into the concrete dates a bulk order covers."""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from tiffin.config import settings
from tiffin.errors import InvalidRange, InvalidWeekday, RangeTooLarge

DateLike = Union[str, date]

SUNDAY = 0
SATURDAY = 6
WEEKEND = (SUNDAY, SATURDAY)


def parse_date(value: DateLike) -> date:
    """Accept a date, a YYYY-MM-DD string or a full ISO-8601 datetime string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    try:
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError as e:
        raise InvalidRange(f"Invalid date: {value!r}") from e


def weekday_sun0(day: date) -> int:
    """Weekday numbered 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def expand_date_range(
    start_date: DateLike,
    end_date: DateLike,
    days_of_week: Optional[Iterable[int]] = None,
    skip_weekends: bool = False,
    max_days: Optional[int] = None,
) -> list[str]:
    """
    Return ISO date strings from start_date to end_date inclusive.

    skip_weekends and days_of_week are applied together: a date is kept only if
    it passes both. Contradictory filters yield an empty list, not an error.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    limit = settings.max_bulk_range_days if max_days is None else max_days

    if start > end:
        raise InvalidRange(
            f"Invalid date range: startDate ({start.isoformat()}) must be before or equal to endDate ({end.isoformat()})"
        )

    span = (end - start).days
    if span > limit:
        raise RangeTooLarge(f"Date range too large: {span} days. Maximum allowed is {limit} days")

    allowed: Optional[set[int]] = None
    if days_of_week is not None:
        allowed = set(days_of_week)
        invalid = sorted(d for d in allowed if d < SUNDAY or d > SATURDAY)
        if invalid:
            raise InvalidWeekday(
                f"Invalid daysOfWeek values: {invalid}. Must be between 0 (Sunday) and 6 (Saturday)"
            )

    dates: list[str] = []
    current = start
    while current <= end:
        weekday = weekday_sun0(current)
        include = True
        if skip_weekends and weekday in WEEKEND:
            include = False
        if allowed is not None and weekday not in allowed:
            include = False
        if include:
            dates.append(current.isoformat())
        current += timedelta(days=1)
    return dates
