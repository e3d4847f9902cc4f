from datetime import date
from decimal import Decimal

import pytest

from tiffin.errors import InvalidPeriod
from tiffin.services import dashboard
from tiffin.services import meals as meal_service
from tiffin.storage.models import MealType


def _order(session, principal, day, meal_type="LUNCH", count=1):
    return meal_service.create_or_update_meal(session, principal, day, MealType(meal_type), count)


def test_month_window_caps_at_today():
    label, start, end = dashboard.month_window("2024-01", today=date(2024, 1, 10))
    assert label == "2024-01"
    assert (start, end) == (date(2024, 1, 1), date(2024, 1, 10))


def test_month_window_past_month_is_full():
    _, start, end = dashboard.month_window("2024-02", today=date(2024, 6, 1))
    assert (start, end) == (date(2024, 2, 1), date(2024, 2, 29))


def test_month_window_defaults_to_current_month():
    label, start, end = dashboard.month_window(today=date(2024, 3, 15))
    assert label == "2024-03"
    assert (start, end) == (date(2024, 3, 1), date(2024, 3, 15))


def test_week_window_is_offset_from_january_first():
    # 2024-01-01 is a Monday; 2023-01-01 is a Sunday. Weeks still start on Jan 1 + 7n.
    assert dashboard.week_window("2024-W03", today=date(2024, 12, 31))[1:] == (date(2024, 1, 15), date(2024, 1, 21))
    assert dashboard.week_window("2023-W01", today=date(2024, 1, 1))[1:] == (date(2023, 1, 1), date(2023, 1, 7))


def test_week_window_caps_at_today_and_defaults_to_current_week():
    label, start, end = dashboard.week_window(today=date(2024, 1, 17))
    assert label == "2024-W03"
    assert (start, end) == (date(2024, 1, 15), date(2024, 1, 17))


@pytest.mark.parametrize("month", ["2024-13", "2024-00", "24-01", "2024/01"])
def test_invalid_month(month):
    with pytest.raises(InvalidPeriod):
        dashboard.month_window(month, today=date(2024, 1, 1))


@pytest.mark.parametrize("week", ["2024-W00", "2024-3", "2024W03"])
def test_invalid_week(week):
    with pytest.raises(InvalidPeriod):
        dashboard.week_window(week, today=date(2024, 1, 1))


def test_user_dashboard_uses_stored_prices(session, principal, prices):
    _order(session, principal, "2024-01-15", "LUNCH")
    _order(session, principal, "2024-01-16", "LUNCH")
    _order(session, principal, "2024-01-16", "DINNER")
    cancelled = _order(session, principal, "2024-01-17", "DINNER")
    meal_service.cancel_meal(session, principal, cancelled.id)

    prices.lunch = Decimal("500")
    session.add(prices)
    session.commit()

    result = dashboard.get_user_dashboard(session, principal)
    assert result == {
        "totalMeals": 3,
        "byType": {"LUNCH": 2, "DINNER": 1},
        "totalAmount": 230.0,
        "amountByType": {"LUNCH": 160.0, "DINNER": 70.0},
    }


def test_user_dashboard_scoped_to_user(session, principal, other_principal, prices):
    _order(session, other_principal, "2024-01-15", "LUNCH", 3)
    result = dashboard.get_user_dashboard(session, principal)
    assert result["totalMeals"] == 0
    assert result["byType"] == {}


def test_monthly_dashboard(session, principal, prices):
    _order(session, principal, "2024-01-01", "LUNCH")
    _order(session, principal, "2024-01-01", "DINNER")
    _order(session, principal, "2024-01-08", "LUNCH", 2)
    _order(session, principal, "2024-01-29", "BREAKFAST")
    _order(session, principal, "2024-02-01", "LUNCH")

    result = dashboard.get_monthly_dashboard(session, principal, "2024-01", today=date(2024, 3, 1))
    assert result["month"] == "2024-01"
    assert result["startDate"] == "2024-01-01"
    assert result["endDate"] == "2024-01-31"
    assert result["totalMeals"] == 5
    assert result["totalAmount"] == 350.0
    assert result["daysWithMeals"] == 3
    assert result["byWeek"] == {
        "1": {"meals": 2, "amount": 150.0},
        "2": {"meals": 2, "amount": 160.0},
        "5": {"meals": 1, "amount": 40.0},
    }


def test_monthly_dashboard_ignores_days_after_today(session, principal, prices):
    _order(session, principal, "2024-01-05", "LUNCH")
    _order(session, principal, "2024-01-25", "LUNCH")
    result = dashboard.get_monthly_dashboard(session, principal, "2024-01", today=date(2024, 1, 10))
    assert result["endDate"] == "2024-01-10"
    assert result["totalMeals"] == 1


def test_monthly_dashboard_for_future_month_is_empty(session, principal, prices):
    _order(session, principal, "2024-05-05", "LUNCH")
    result = dashboard.get_monthly_dashboard(session, principal, "2024-05", today=date(2024, 1, 10))
    assert result["totalMeals"] == 0
    assert result["byWeek"] == {}


def test_weekly_dashboard(session, principal, prices):
    _order(session, principal, "2024-01-14", "LUNCH")
    _order(session, principal, "2024-01-15", "LUNCH")
    _order(session, principal, "2024-01-15", "DINNER", 2)
    _order(session, principal, "2024-01-21", "BREAKFAST")

    result = dashboard.get_weekly_dashboard(session, principal, "2024-W03", today=date(2024, 2, 1))
    assert result["week"] == "2024-W03"
    assert (result["startDate"], result["endDate"]) == ("2024-01-15", "2024-01-21")
    assert result["totalMeals"] == 4
    assert result["byDay"] == {
        "2024-01-15": {"meals": 3, "amount": 220.0},
        "2024-01-21": {"meals": 1, "amount": 40.0},
    }
