"""
Meal scheduling: single-date and bulk upserts, listing, owner-checked updates
and cancellation, range-wide bulk edits and the calendar view.

Price is captured into ``price_at_time`` whenever a record is upserted and is
never recomputed afterwards.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from tiffin.errors import Forbidden, InvalidBulkRequest, InvalidMealCount, NoMatchingRecords, NotFound
from tiffin.logging import get_logger
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.services.aggregation import group_by_date
from tiffin.services.dashboard import calendar_window
from tiffin.services.pricing import resolve_price
from tiffin.services.scheduling.date_range import DateLike, expand_date_range, parse_date
from tiffin.storage.models import MealRecord, MealStatus, MealType
from tiffin.storage.repositories import (
    find_active_meals,
    get_meal_record,
    save_meal_records,
    upsert_meal_record,
)
from tiffin.utils.timing import time_span

logger = get_logger(__name__)


@dataclass
class BulkDateSpec:
    dates: Optional[list[DateLike]] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None
    days_of_week: Optional[list[int]] = None
    skip_weekends: bool = False


@dataclass
class BulkResult:
    created: int = 0
    meals: list[MealRecord] = field(default_factory=list)


def check_count(count: Optional[int]) -> None:
    if count is not None and count < 1:
        raise InvalidMealCount(f"Invalid meal count: {count}. Must be a positive integer")


def resolve_dates(spec: BulkDateSpec) -> list[date]:
    if spec.dates is not None:
        seen: set[date] = set()
        resolved: list[date] = []
        for value in spec.dates:
            day = parse_date(value)
            if day not in seen:
                seen.add(day)
                resolved.append(day)
        return resolved
    if spec.start_date is not None and spec.end_date is not None:
        expanded = expand_date_range(spec.start_date, spec.end_date, spec.days_of_week, spec.skip_weekends)
        return [parse_date(value) for value in expanded]
    raise InvalidBulkRequest(
        'Invalid bulk meal request: Provide either "dates" array or "startDate" and "endDate"'
    )


def create_or_update_meal(
    session: Session,
    principal: AuthenticatedPrincipal,
    meal_date: DateLike,
    meal_type: MealType,
    count: int,
    note: Optional[str] = None,
) -> MealRecord:
    check_count(count)
    price = resolve_price(session, principal.id, meal_type)
    return upsert_meal_record(
        session,
        user_id=principal.id,
        meal_date=parse_date(meal_date),
        meal_type=meal_type,
        count=count,
        note=note,
        price_at_time=price,
        is_bulk_scheduled=False,
    )


def create_bulk_meals(
    session: Session,
    principal: AuthenticatedPrincipal,
    spec: BulkDateSpec,
    meal_type: MealType,
    count: int,
    note: Optional[str] = None,
) -> BulkResult:
    """
    Upsert one record per resolved date.

    Dates are committed independently: a storage error on one date is logged
    and skipped, earlier dates stay written. Callers compare ``created`` with
    the number of dates they asked for to detect partial application.
    """
    check_count(count)
    dates = resolve_dates(spec)
    price = resolve_price(session, principal.id, meal_type)
    result = BulkResult()
    with time_span("meals.bulk_create", user_id=principal.id, dates=len(dates), type=meal_type.value):
        for day in dates:
            try:
                record = upsert_meal_record(
                    session,
                    user_id=principal.id,
                    meal_date=day,
                    meal_type=meal_type,
                    count=count,
                    note=note,
                    price_at_time=price,
                    is_bulk_scheduled=True,
                )
            except SQLAlchemyError as e:
                session.rollback()
                logger.warning(
                    "meals.bulk_create.date_failed user_id=%s date=%s error=%s", principal.id, day, e
                )
                continue
            result.meals.append(record)
    result.created = len(result.meals)
    if result.created < len(dates):
        logger.warning(
            "meals.bulk_create.partial user_id=%s requested=%s created=%s",
            principal.id,
            len(dates),
            result.created,
        )
    return result


def list_meals(
    session: Session,
    principal: AuthenticatedPrincipal,
    meal_date: Optional[DateLike] = None,
    meal_type: Optional[MealType] = None,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
) -> list[MealRecord]:
    """Active meals, newest date first. A range bound, when given, replaces the exact date filter."""
    exact = parse_date(meal_date) if meal_date else None
    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None
    if start is not None or end is not None:
        exact = None
    return find_active_meals(
        session,
        principal.id,
        exact_date=exact,
        meal_type=meal_type,
        start_date=start,
        end_date=end,
        descending=True,
    )


def _owned_meal(session: Session, principal: AuthenticatedPrincipal, meal_id: int, action: str) -> MealRecord:
    meal = get_meal_record(session, meal_id)
    if meal is None:
        raise NotFound(f"Meal with ID '{meal_id}' not found")
    if meal.user_id != principal.id:
        logger.warning("meals.%s.forbidden meal_id=%s caller=%s", action, meal_id, principal.id)
        raise Forbidden(f"You do not have permission to {action} this meal")
    return meal


def update_meal(
    session: Session,
    principal: AuthenticatedPrincipal,
    meal_id: int,
    count: Optional[int] = None,
    note: Optional[str] = None,
) -> MealRecord:
    check_count(count)
    meal = _owned_meal(session, principal, meal_id, "update")
    if count is not None:
        meal.count = count
    if note is not None:
        meal.note = note
    save_meal_records(session, [meal])
    session.refresh(meal)
    logger.info("meal.updated id=%s count=%s", meal.id, meal.count)
    return meal


def cancel_meal(session: Session, principal: AuthenticatedPrincipal, meal_id: int) -> MealRecord:
    meal = _owned_meal(session, principal, meal_id, "cancel")
    if meal.status != MealStatus.CANCELLED:
        meal.status = MealStatus.CANCELLED
        save_meal_records(session, [meal])
        session.refresh(meal)
        logger.info("meal.cancelled id=%s user_id=%s", meal.id, meal.user_id)
    return meal


def _range_label(start: date, end: date, meal_type: Optional[MealType]) -> str:
    label = f"between {start.isoformat()} and {end.isoformat()}"
    if meal_type is not None:
        label += f" for meal type {meal_type.value}"
    return label


def _meals_in_range(
    session: Session,
    principal: AuthenticatedPrincipal,
    start_date: DateLike,
    end_date: DateLike,
    meal_type: Optional[MealType],
) -> tuple[list[MealRecord], date, date]:
    start = parse_date(start_date)
    end = parse_date(end_date)
    # date column comparison includes the whole end day
    meals = find_active_meals(session, principal.id, meal_type=meal_type, start_date=start, end_date=end)
    return meals, start, end


def bulk_update_meals(
    session: Session,
    principal: AuthenticatedPrincipal,
    start_date: DateLike,
    end_date: DateLike,
    meal_type: Optional[MealType] = None,
    count: Optional[int] = None,
    note: Optional[str] = None,
) -> dict[str, int]:
    check_count(count)
    meals, start, end = _meals_in_range(session, principal, start_date, end_date, meal_type)
    if not meals:
        raise NoMatchingRecords(f"No active meals found {_range_label(start, end, meal_type)}")
    for meal in meals:
        if count is not None:
            meal.count = count
        if note is not None:
            meal.note = note
    updated = save_meal_records(session, meals)
    logger.info("meals.bulk_update user_id=%s updated=%s", principal.id, updated)
    return {"updated": updated}


def bulk_cancel_meals(
    session: Session,
    principal: AuthenticatedPrincipal,
    start_date: DateLike,
    end_date: DateLike,
    meal_type: Optional[MealType] = None,
) -> dict[str, int]:
    meals, start, end = _meals_in_range(session, principal, start_date, end_date, meal_type)
    if not meals:
        raise NoMatchingRecords(f"No active meals found to cancel {_range_label(start, end, meal_type)}")
    for meal in meals:
        meal.status = MealStatus.CANCELLED
    cancelled = save_meal_records(session, meals)
    logger.info("meals.bulk_cancel user_id=%s cancelled=%s", principal.id, cancelled)
    return {"cancelled": cancelled}


def get_calendar(
    session: Session,
    principal: AuthenticatedPrincipal,
    month: Optional[str] = None,
    week: Optional[str] = None,
    today: Optional[date] = None,
) -> dict[str, list[dict[str, Any]]]:
    start, end = calendar_window(month=month, week=week, today=today)
    meals = find_active_meals(session, principal.id, start_date=start, end_date=end)
    return group_by_date(meals)
