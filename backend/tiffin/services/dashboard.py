"""Spending dashboards over a user's active meals.

Week numbers use a plain offset from January 1st (week N starts
``(N - 1) * 7`` days after Jan 1); they are not ISO-8601 weeks, and existing
clients encode weeks this way.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Any, Optional

from sqlmodel import Session

from tiffin.errors import InvalidPeriod
from tiffin.logging import get_logger
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.services.aggregation import (
    bucket_by_day,
    bucket_by_week_of_month,
    buckets_payload,
    days_with_meals,
    summarize,
    summary_payload,
)
from tiffin.storage.repositories import find_active_meals
from tiffin.utils.timing import time_span

logger = get_logger(__name__)

MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
WEEK_RE = re.compile(r"^(\d{4})-W(\d{2})$")


def parse_month(month: str) -> tuple[int, int]:
    match = MONTH_RE.match(month or "")
    if not match:
        raise InvalidPeriod("month must be in YYYY-MM format")
    year, month_no = int(match.group(1)), int(match.group(2))
    if not 1 <= month_no <= 12:
        raise InvalidPeriod(f"month out of range: {month}")
    return year, month_no


def parse_week(week: str) -> tuple[int, int]:
    match = WEEK_RE.match(week or "")
    if not match:
        raise InvalidPeriod("week must be in YYYY-Www format")
    year, week_no = int(match.group(1)), int(match.group(2))
    if week_no < 1:
        raise InvalidPeriod(f"week out of range: {week}")
    return year, week_no


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def week_bounds(year: int, week: int) -> tuple[date, date]:
    start = date(year, 1, 1) + timedelta(days=(week - 1) * 7)
    return start, start + timedelta(days=6)


def current_week_number(today: date) -> int:
    return (today - date(today.year, 1, 1)).days // 7 + 1


def month_window(month: Optional[str] = None, today: Optional[date] = None) -> tuple[str, date, date]:
    """(label, start, end) for a YYYY-MM month, end capped at today."""
    today = today or date.today()
    if month:
        year, month_no = parse_month(month)
    else:
        year, month_no = today.year, today.month
    start, end = month_bounds(year, month_no)
    return f"{year:04d}-{month_no:02d}", start, min(end, today)


def week_window(week: Optional[str] = None, today: Optional[date] = None) -> tuple[str, date, date]:
    """(label, start, end) for a YYYY-Www week, end capped at today."""
    today = today or date.today()
    if week:
        year, week_no = parse_week(week)
    else:
        year, week_no = today.year, current_week_number(today)
    start, end = week_bounds(year, week_no)
    return f"{year:04d}-W{week_no:02d}", start, min(end, today)


def calendar_window(
    month: Optional[str] = None, week: Optional[str] = None, today: Optional[date] = None
) -> tuple[date, date]:
    """Calendar month or week, not capped: future orders show up on the calendar."""
    if month:
        return month_bounds(*parse_month(month))
    if week:
        return week_bounds(*parse_week(week))
    today = today or date.today()
    return month_bounds(today.year, today.month)


def get_user_dashboard(session: Session, principal: AuthenticatedPrincipal) -> dict[str, Any]:
    meals = find_active_meals(session, principal.id)
    logger.info("dashboard.summary user_id=%s records=%s", principal.id, len(meals))
    return summary_payload(summarize(meals))


def get_monthly_dashboard(
    session: Session, principal: AuthenticatedPrincipal, month: Optional[str] = None, today: Optional[date] = None
) -> dict[str, Any]:
    label, start, end = month_window(month, today)
    with time_span("dashboard.monthly", user_id=principal.id, month=label):
        # a month entirely in the future has start > end and matches nothing
        meals = find_active_meals(session, principal.id, start_date=start, end_date=end)
        payload = summary_payload(summarize(meals))
        payload.update(
            {
                "month": label,
                "startDate": start.isoformat(),
                "endDate": end.isoformat(),
                "daysWithMeals": days_with_meals(meals),
                "byWeek": buckets_payload(bucket_by_week_of_month(meals)),
            }
        )
    return payload


def get_weekly_dashboard(
    session: Session, principal: AuthenticatedPrincipal, week: Optional[str] = None, today: Optional[date] = None
) -> dict[str, Any]:
    label, start, end = week_window(week, today)
    with time_span("dashboard.weekly", user_id=principal.id, week=label):
        meals = find_active_meals(session, principal.id, start_date=start, end_date=end)
        payload = summary_payload(summarize(meals))
        payload.update(
            {
                "week": label,
                "startDate": start.isoformat(),
                "endDate": end.isoformat(),
                "byDay": buckets_payload(bucket_by_day(meals)),
            }
        )
    return payload
