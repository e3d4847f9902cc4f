from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tiffin.logging import get_logger
from tiffin.storage.models import MealRecord, MealStatus, MealType, PriceSetting, User, utcnow

logger = get_logger(__name__)

PRICE_FIELDS = ("breakfast", "lunch", "dinner", "custom")


# Users

def create_user(session: Session, user: User) -> User:
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("user.created id=%s email=%s role=%s", user.id, user.email, user.role.value)
    return user


def get_user_by_id(session: Session, user_id: int) -> User | None:
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> User | None:
    return session.exec(select(User).where(User.email == email)).first()


def list_users(session: Session) -> list[User]:
    return list(session.exec(select(User).order_by(User.id)))


def save_user(session: Session, user: User) -> User:
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


# Price settings

def get_price_setting(session: Session, user_id: int) -> PriceSetting | None:
    return session.exec(select(PriceSetting).where(PriceSetting.user_id == user_id)).first()


def get_or_create_price_setting(session: Session, user_id: int) -> PriceSetting:
    price = get_price_setting(session, user_id)
    if price:
        return price
    price = PriceSetting(user_id=user_id)
    session.add(price)
    session.commit()
    session.refresh(price)
    logger.info("price_setting.created user_id=%s", user_id)
    return price


def merge_price_setting(session: Session, user_id: int, changes: dict[str, Decimal]) -> PriceSetting:
    """Apply only the supplied price fields, creating the row when missing."""
    price = get_price_setting(session, user_id) or PriceSetting(user_id=user_id)
    for field, value in changes.items():
        if field not in PRICE_FIELDS:
            raise ValueError(f"unknown price field: {field}")
        setattr(price, field, Decimal(str(value)))
    price.updated_at = utcnow()
    session.add(price)
    session.commit()
    session.refresh(price)
    logger.info("price_setting.updated user_id=%s fields=%s", user_id, ",".join(sorted(changes)))
    return price


# Meal records

def get_meal_record(session: Session, meal_id: int) -> MealRecord | None:
    return session.get(MealRecord, meal_id)


def get_meal_by_identity(
    session: Session, user_id: int, meal_date: date, meal_type: MealType
) -> MealRecord | None:
    return session.exec(
        select(MealRecord).where(
            MealRecord.user_id == user_id,
            MealRecord.date == meal_date,
            MealRecord.meal_type == meal_type,
        )
    ).first()


def _overwrite(
    record: MealRecord, count: int, note: Optional[str], price_at_time: Decimal, is_bulk_scheduled: bool
) -> None:
    record.count = count
    record.note = note
    record.price_at_time = price_at_time
    record.status = MealStatus.ACTIVE
    record.is_bulk_scheduled = is_bulk_scheduled
    record.updated_at = utcnow()


def upsert_meal_record(
    session: Session,
    user_id: int,
    meal_date: date,
    meal_type: MealType,
    count: int,
    note: Optional[str],
    price_at_time: Decimal,
    is_bulk_scheduled: bool,
) -> MealRecord:
    """Create or overwrite the record keyed by (user, date, meal type).

    An existing record gets the new count, note and price, and is forced back
    to ACTIVE. A concurrent insert of the same key surfaces as an
    IntegrityError on commit; the row it wrote is re-read and overwritten
    (last write wins).
    """
    record = get_meal_by_identity(session, user_id, meal_date, meal_type)
    if record:
        _overwrite(record, count, note, price_at_time, is_bulk_scheduled)
        session.add(record)
        session.commit()
    else:
        record = MealRecord(
            user_id=user_id,
            date=meal_date,
            meal_type=meal_type,
            count=count,
            note=note,
            price_at_time=price_at_time,
            is_bulk_scheduled=is_bulk_scheduled,
        )
        session.add(record)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            record = get_meal_by_identity(session, user_id, meal_date, meal_type)
            if record is None:
                raise
            logger.info(
                "meal.upsert_conflict user_id=%s date=%s type=%s", user_id, meal_date, meal_type.value
            )
            _overwrite(record, count, note, price_at_time, is_bulk_scheduled)
            session.add(record)
            session.commit()
    session.refresh(record)
    logger.info(
        "meal.upserted id=%s user_id=%s date=%s type=%s count=%s price=%s bulk=%s",
        record.id,
        user_id,
        meal_date,
        meal_type.value,
        count,
        price_at_time,
        is_bulk_scheduled,
    )
    return record


def find_active_meals(
    session: Session,
    user_id: int,
    exact_date: Optional[date] = None,
    meal_type: Optional[MealType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    descending: bool = False,
) -> list[MealRecord]:
    query = select(MealRecord).where(
        MealRecord.user_id == user_id,
        MealRecord.status == MealStatus.ACTIVE,
    )
    if exact_date is not None:
        query = query.where(MealRecord.date == exact_date)
    if meal_type is not None:
        query = query.where(MealRecord.meal_type == meal_type)
    if start_date is not None:
        query = query.where(MealRecord.date >= start_date)
    if end_date is not None:
        query = query.where(MealRecord.date <= end_date)
    if descending:
        query = query.order_by(MealRecord.date.desc(), MealRecord.id.desc())
    else:
        query = query.order_by(MealRecord.date.asc(), MealRecord.id.asc())
    return list(session.exec(query))


def save_meal_records(session: Session, records: Iterable[MealRecord]) -> int:
    items = list(records)
    now = utcnow()
    for record in items:
        record.updated_at = now
        session.add(record)
    session.commit()
    return len(items)

