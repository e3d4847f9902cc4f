"""Admin monitoring: per-user meal statistics."""

from typing import Any

from sqlmodel import Session

from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.services.aggregation import summarize, to_display
from tiffin.services.pricing import get_prices
from tiffin.services.users import get_user_or_404, require_admin
from tiffin.storage.models import PriceSetting, User
from tiffin.storage.repositories import find_active_meals, list_users
from tiffin.utils.timing import time_span


def _user_fields(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "mobile": user.mobile,
        "role": user.role,
        "created_at": user.created_at,
    }


def list_users_with_stats(session: Session, principal: AuthenticatedPrincipal) -> list[dict[str, Any]]:
    require_admin(principal)
    rows: list[dict[str, Any]] = []
    with time_span("admin.users_with_stats"):
        for user in list_users(session):
            summary = summarize(find_active_meals(session, user.id))
            rows.append(
                {
                    **_user_fields(user),
                    "meal_count": summary.total_meals,
                    "total_amount": to_display(summary.total_amount),
                }
            )
    return rows


def get_user_summary(session: Session, principal: AuthenticatedPrincipal, user_id: int) -> dict[str, Any]:
    require_admin(principal)
    user = get_user_or_404(session, user_id)
    summary = summarize(find_active_meals(session, user.id))
    return {
        "user": _user_fields(user),
        "total_meals": summary.total_meals,
        "by_type": summary.by_type,
        "total_amount": to_display(summary.total_amount),
    }


def get_user_prices(session: Session, principal: AuthenticatedPrincipal, user_id: int) -> PriceSetting:
    require_admin(principal)
    get_user_or_404(session, user_id)
    return get_prices(session, user_id)
