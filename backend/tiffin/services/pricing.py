"""Per-user unit prices for each meal type."""

from decimal import Decimal

from sqlmodel import Session

from tiffin.logging import get_logger
from tiffin.storage.models import MealType, PriceSetting
from tiffin.storage.repositories import get_or_create_price_setting, get_price_setting, merge_price_setting

logger = get_logger(__name__)

ZERO = Decimal("0")


def price_field(meal_type: MealType) -> str:
    return meal_type.value.lower()


def resolve_price(session: Session, user_id: int, meal_type: MealType) -> Decimal:
    """Current unit price for meal_type; zero when the user has no price row or the field is unset."""
    setting = get_price_setting(session, user_id)
    if setting is None:
        return ZERO
    value = getattr(setting, price_field(meal_type), None)
    if value is None:
        return ZERO
    return Decimal(value)


def get_prices(session: Session, user_id: int) -> PriceSetting:
    return get_or_create_price_setting(session, user_id)


def update_prices(session: Session, user_id: int, changes: dict[str, Decimal]) -> PriceSetting:
    supplied = {field: value for field, value in changes.items() if value is not None}
    logger.info("prices.update user_id=%s fields=%s", user_id, sorted(supplied))
    return merge_price_setting(session, user_id, supplied)
