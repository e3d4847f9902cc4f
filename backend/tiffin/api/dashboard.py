from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from tiffin.api.deps import get_db, get_principal
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.services import dashboard as dashboard_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
def get_dashboard(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
) -> dict[str, Any]:
    return dashboard_service.get_user_dashboard(session, principal)


@router.get("/monthly")
def get_monthly_dashboard(
    month: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
) -> dict[str, Any]:
    return dashboard_service.get_monthly_dashboard(session, principal, month=month)


@router.get("/weekly")
def get_weekly_dashboard(
    week: str | None = Query(default=None, pattern=r"^\d{4}-W\d{2}$"),
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
) -> dict[str, Any]:
    return dashboard_service.get_weekly_dashboard(session, principal, week=week)
