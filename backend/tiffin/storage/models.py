from datetime import date as date_type, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class MealType(str, Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    CUSTOM = "CUSTOM"


class MealStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str
    mobile: Optional[str] = None
    password_hash: str
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=utcnow)


class PriceSetting(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True)
    breakfast: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    lunch: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    dinner: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    custom: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    updated_at: datetime = Field(default_factory=utcnow)


class MealRecord(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "date", "meal_type", name="uq_meal_user_date_type"),
        CheckConstraint("count > 0", name="ck_meal_count_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    date: date_type = Field(index=True)
    meal_type: MealType
    count: int
    price_at_time: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    status: MealStatus = MealStatus.ACTIVE
    is_bulk_scheduled: bool = False  # provenance only; never affects totals
    note: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
