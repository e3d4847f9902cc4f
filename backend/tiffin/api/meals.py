import datetime as dt
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from tiffin.api.deps import get_db, get_principal
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.schemas.meal import (
    BulkCancelRequest,
    BulkMealRequest,
    BulkMealResponse,
    BulkUpdateRequest,
    CreateMealRequest,
    MealOut,
    UpdateMealRequest,
)
from tiffin.services import meals as meal_service
from tiffin.storage.models import MealType

router = APIRouter(prefix="/meals", tags=["meals"])


@router.post("", response_model=MealOut)
def create_meal(
    body: CreateMealRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    meal = meal_service.create_or_update_meal(
        session, principal, body.date, body.meal_type, body.count, body.note
    )
    return MealOut.model_validate(meal)


@router.post("/bulk", response_model=BulkMealResponse)
def create_bulk_meals(
    body: BulkMealRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    spec = meal_service.BulkDateSpec(
        dates=body.dates,
        start_date=body.start_date,
        end_date=body.end_date,
        days_of_week=body.days_of_week,
        skip_weekends=body.skip_weekends,
    )
    result = meal_service.create_bulk_meals(session, principal, spec, body.meal_type, body.count, body.note)
    return BulkMealResponse(created=result.created, meals=[MealOut.model_validate(m) for m in result.meals])


@router.get("", response_model=list[MealOut])
def list_meals(
    date: dt.date | None = None,
    meal_type: MealType | None = Query(default=None, alias="mealType"),
    start_date: dt.date | None = Query(default=None, alias="startDate"),
    end_date: dt.date | None = Query(default=None, alias="endDate"),
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    meals = meal_service.list_meals(session, principal, date, meal_type, start_date, end_date)
    return [MealOut.model_validate(m) for m in meals]


@router.get("/calendar")
def get_calendar(
    month: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    week: str | None = Query(default=None, pattern=r"^\d{4}-W\d{2}$"),
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
) -> dict[str, list[dict[str, Any]]]:
    return meal_service.get_calendar(session, principal, month=month, week=week)


@router.patch("/bulk")
def bulk_update_meals(
    body: BulkUpdateRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
) -> dict[str, int]:
    return meal_service.bulk_update_meals(
        session, principal, body.start_date, body.end_date, body.meal_type, body.count, body.note
    )


@router.delete("/bulk")
def bulk_cancel_meals(
    body: BulkCancelRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
) -> dict[str, int]:
    return meal_service.bulk_cancel_meals(session, principal, body.start_date, body.end_date, body.meal_type)


@router.patch("/{meal_id}", response_model=MealOut)
def update_meal(
    meal_id: int,
    body: UpdateMealRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return MealOut.model_validate(meal_service.update_meal(session, principal, meal_id, body.count, body.note))


@router.delete("/{meal_id}", response_model=MealOut)
def cancel_meal(
    meal_id: int,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return MealOut.model_validate(meal_service.cancel_meal(session, principal, meal_id))
