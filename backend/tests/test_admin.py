import pytest

from tiffin.errors import Forbidden, NotFound
from tiffin.services import admin as admin_service
from tiffin.services import meals as meal_service
from tiffin.services import users as user_service
from tiffin.storage.models import MealType


def test_admin_only_operations_reject_regular_users(session, principal):
    with pytest.raises(Forbidden):
        admin_service.list_users_with_stats(session, principal)
    with pytest.raises(Forbidden):
        admin_service.get_user_summary(session, principal, principal.id)
    with pytest.raises(Forbidden):
        user_service.list_all_users(session, principal)


def test_users_with_stats_counts_active_meals(session, principal, admin_principal, prices):
    meal_service.create_or_update_meal(session, principal, "2024-01-15", MealType.LUNCH, 2)
    cancelled = meal_service.create_or_update_meal(session, principal, "2024-01-16", MealType.DINNER, 1)
    meal_service.cancel_meal(session, principal, cancelled.id)

    rows = {row["id"]: row for row in admin_service.list_users_with_stats(session, admin_principal)}
    assert rows[principal.id]["meal_count"] == 2
    assert rows[principal.id]["total_amount"] == 160.0
    assert rows[admin_principal.id]["meal_count"] == 0


def test_user_summary(session, principal, admin_principal, prices):
    meal_service.create_or_update_meal(session, principal, "2024-01-15", MealType.BREAKFAST, 1)
    summary = admin_service.get_user_summary(session, admin_principal, principal.id)
    assert summary["total_meals"] == 1
    assert summary["by_type"] == {"BREAKFAST": 1}
    assert summary["total_amount"] == 40.0

    with pytest.raises(NotFound):
        admin_service.get_user_summary(session, admin_principal, 999)


def test_update_profile_keeps_unsupplied_fields(session, principal, user):
    updated = user_service.update_profile(session, principal, mobile="+910000000000")
    assert updated.mobile == "+910000000000"
    assert updated.name == "Demo User"
