"""Totals and groupings over meal records that were already fetched.

Everything here is a pure function of its input. Money stays Decimal until
``to_display`` at the response boundary.
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from tiffin.storage.models import MealRecord

CENT = Decimal("0.01")


@dataclass
class MealSummary:
    total_meals: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    total_amount: Decimal = Decimal("0")
    amount_by_type: dict[str, Decimal] = field(default_factory=dict)


@dataclass
class Bucket:
    meals: int = 0
    amount: Decimal = Decimal("0")


def record_amount(record: MealRecord) -> Decimal:
    return Decimal(record.price_at_time) * record.count


def to_display(amount: Decimal) -> float:
    return float(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def summarize(records: Iterable[MealRecord]) -> MealSummary:
    summary = MealSummary()
    for record in records:
        key = record.meal_type.value
        amount = record_amount(record)
        summary.total_meals += record.count
        summary.by_type[key] = summary.by_type.get(key, 0) + record.count
        summary.total_amount += amount
        summary.amount_by_type[key] = summary.amount_by_type.get(key, Decimal("0")) + amount
    return summary


def summary_payload(summary: MealSummary) -> dict[str, Any]:
    return {
        "totalMeals": summary.total_meals,
        "byType": dict(summary.by_type),
        "totalAmount": to_display(summary.total_amount),
        "amountByType": {k: to_display(v) for k, v in summary.amount_by_type.items()},
    }


def group_by_date(records: Iterable[MealRecord]) -> dict[str, list[dict[str, Any]]]:
    """Calendar view: one list of entries per ISO date, in input order."""
    calendar: dict[str, list[dict[str, Any]]] = {}
    for record in records:
        calendar.setdefault(record.date.isoformat(), []).append(
            {
                "id": record.id,
                "mealType": record.meal_type.value,
                "count": record.count,
                "note": record.note,
                "priceAtTime": to_display(record.price_at_time),
                "amount": to_display(record_amount(record)),
            }
        )
    return calendar


def week_of_month(day_of_month: int) -> int:
    return math.ceil(day_of_month / 7)


def bucket_by_week_of_month(records: Iterable[MealRecord]) -> dict[int, Bucket]:
    buckets: dict[int, Bucket] = {}
    for record in records:
        bucket = buckets.setdefault(week_of_month(record.date.day), Bucket())
        bucket.meals += record.count
        bucket.amount += record_amount(record)
    return buckets


def bucket_by_day(records: Iterable[MealRecord]) -> dict[str, Bucket]:
    buckets: dict[str, Bucket] = {}
    for record in records:
        bucket = buckets.setdefault(record.date.isoformat(), Bucket())
        bucket.meals += record.count
        bucket.amount += record_amount(record)
    return buckets


def days_with_meals(records: Iterable[MealRecord]) -> int:
    return len({record.date for record in records})


def buckets_payload(buckets: dict[Any, Bucket]) -> dict[str, dict[str, Any]]:
    return {
        str(key): {"meals": bucket.meals, "amount": to_display(bucket.amount)}
        for key, bucket in buckets.items()
    }
