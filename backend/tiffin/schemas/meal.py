import datetime as dt
from decimal import Decimal

from pydantic import Field, field_serializer

from tiffin.schemas.common import CamelModel
from tiffin.storage.models import MealStatus, MealType


class CreateMealRequest(CamelModel):
    date: dt.date
    meal_type: MealType
    count: int = Field(ge=1)
    note: str | None = None


class BulkMealRequest(CamelModel):
    """Either explicit ``dates`` or a ``startDate``/``endDate`` range with optional weekday filters."""

    dates: list[dt.date] | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    days_of_week: list[int] | None = None  # 0=Sunday .. 6=Saturday
    skip_weekends: bool = False
    meal_type: MealType
    count: int = Field(ge=1)
    note: str | None = None


class UpdateMealRequest(CamelModel):
    count: int | None = Field(default=None, ge=1)
    note: str | None = None


class BulkCancelRequest(CamelModel):
    start_date: dt.date
    end_date: dt.date
    meal_type: MealType | None = None


class BulkUpdateRequest(BulkCancelRequest):
    count: int | None = Field(default=None, ge=1)
    note: str | None = None


class MealOut(CamelModel):
    id: int
    user_id: int
    date: dt.date
    meal_type: MealType
    count: int
    price_at_time: Decimal
    status: MealStatus
    is_bulk_scheduled: bool
    note: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @field_serializer("price_at_time")
    def _price_as_number(self, value: Decimal) -> float:
        return float(value)


class BulkMealResponse(CamelModel):
    created: int
    meals: list[MealOut]
