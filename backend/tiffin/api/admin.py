from fastapi import APIRouter, Depends
from sqlmodel import Session

from tiffin.api.deps import get_db, get_principal
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.schemas.user import UserSummary, UserWithStats
from tiffin.services import admin as admin_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserWithStats])
def get_all_users(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return admin_service.list_users_with_stats(session, principal)


@router.get("/users/{user_id}/summary", response_model=UserSummary)
def get_user_summary(
    user_id: int,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return admin_service.get_user_summary(session, principal, user_id)
