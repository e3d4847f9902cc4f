"""HTTP client for the Tiffin API.

Credentials are never stored on the client: every authenticated call takes a
``RequestContext`` that carries the bearer token for that call only.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from tiffin.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class RequestContext:
    access_token: str

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


class TiffinClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._http = httpx.Client(base_url=base_url.rstrip("/") + "/api", timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TiffinClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        ctx: Optional[RequestContext] = None,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        headers = ctx.headers() if ctx else None
        resp = self._http.request(
            method,
            path,
            headers=headers,
            json=json,
            params=_drop_none(params) if params else None,
        )
        logger.debug("client.%s path=%s status=%s", method.lower(), path, resp.status_code)
        resp.raise_for_status()
        return resp.json()

    # auth

    def register(self, email: str, password: str, name: str, role: Optional[str] = None) -> dict:
        body = _drop_none({"email": email, "password": password, "name": name, "role": role})
        return self._request("POST", "/auth/register", json=body)

    def login(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def refresh(self, refresh_token: str) -> dict:
        return self._request("POST", "/auth/refresh", json={"refreshToken": refresh_token})

    def me(self, ctx: RequestContext) -> dict:
        return self._request("GET", "/auth/me", ctx)

    # meals

    def create_meal(self, ctx: RequestContext, date: str, meal_type: str, count: int, note: Optional[str] = None) -> dict:
        body = _drop_none({"date": date, "mealType": meal_type, "count": count, "note": note})
        return self._request("POST", "/meals", ctx, json=body)

    def create_bulk_meals(
        self,
        ctx: RequestContext,
        meal_type: str,
        count: int,
        dates: Optional[list[str]] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        days_of_week: Optional[list[int]] = None,
        skip_weekends: bool = False,
        note: Optional[str] = None,
    ) -> dict:
        body = _drop_none(
            {
                "dates": dates,
                "startDate": start_date,
                "endDate": end_date,
                "daysOfWeek": days_of_week,
                "skipWeekends": skip_weekends,
                "mealType": meal_type,
                "count": count,
                "note": note,
            }
        )
        return self._request("POST", "/meals/bulk", ctx, json=body)

    def list_meals(
        self,
        ctx: RequestContext,
        date: Optional[str] = None,
        meal_type: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[dict]:
        params = {"date": date, "mealType": meal_type, "startDate": start_date, "endDate": end_date}
        return self._request("GET", "/meals", ctx, params=params)

    def update_meal(self, ctx: RequestContext, meal_id: int, count: Optional[int] = None, note: Optional[str] = None) -> dict:
        return self._request("PATCH", f"/meals/{meal_id}", ctx, json=_drop_none({"count": count, "note": note}))

    def cancel_meal(self, ctx: RequestContext, meal_id: int) -> dict:
        return self._request("DELETE", f"/meals/{meal_id}", ctx)

    def bulk_update_meals(
        self,
        ctx: RequestContext,
        start_date: str,
        end_date: str,
        meal_type: Optional[str] = None,
        count: Optional[int] = None,
        note: Optional[str] = None,
    ) -> dict:
        body = _drop_none(
            {"startDate": start_date, "endDate": end_date, "mealType": meal_type, "count": count, "note": note}
        )
        return self._request("PATCH", "/meals/bulk", ctx, json=body)

    def bulk_cancel_meals(self, ctx: RequestContext, start_date: str, end_date: str, meal_type: Optional[str] = None) -> dict:
        body = _drop_none({"startDate": start_date, "endDate": end_date, "mealType": meal_type})
        return self._request("DELETE", "/meals/bulk", ctx, json=body)

    def calendar(self, ctx: RequestContext, month: Optional[str] = None, week: Optional[str] = None) -> dict:
        return self._request("GET", "/meals/calendar", ctx, params={"month": month, "week": week})

    # dashboards

    def dashboard(self, ctx: RequestContext) -> dict:
        return self._request("GET", "/dashboard", ctx)

    def monthly_dashboard(self, ctx: RequestContext, month: Optional[str] = None) -> dict:
        return self._request("GET", "/dashboard/monthly", ctx, params={"month": month})

    def weekly_dashboard(self, ctx: RequestContext, week: Optional[str] = None) -> dict:
        return self._request("GET", "/dashboard/weekly", ctx, params={"week": week})

    # prices and profile

    def get_price(self, ctx: RequestContext) -> dict:
        return self._request("GET", "/users/me/price", ctx)

    def update_price(self, ctx: RequestContext, **prices: float) -> dict:
        return self._request("PATCH", "/users/me/price", ctx, json=_drop_none(prices))

    def get_profile(self, ctx: RequestContext) -> dict:
        return self._request("GET", "/users/profile", ctx)

    def update_profile(self, ctx: RequestContext, name: Optional[str] = None, mobile: Optional[str] = None) -> dict:
        return self._request("PATCH", "/users/profile", ctx, json=_drop_none({"name": name, "mobile": mobile}))

    # admin

    def admin_users(self, ctx: RequestContext) -> list[dict]:
        return self._request("GET", "/admin/users", ctx)

    def admin_user_summary(self, ctx: RequestContext, user_id: int) -> dict:
        return self._request("GET", f"/admin/users/{user_id}/summary", ctx)
