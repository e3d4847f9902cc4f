from fastapi import APIRouter, Depends
from sqlmodel import Session

from tiffin.api.deps import get_db, get_principal
from tiffin.schemas.auth import AuthenticatedPrincipal, UserOut
from tiffin.schemas.user import UpdateProfileRequest
from tiffin.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserOut)
def get_profile(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return UserOut.model_validate(user_service.get_profile(session, principal))


@router.patch("/profile", response_model=UserOut)
def update_profile(
    body: UpdateProfileRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    user = user_service.update_profile(session, principal, name=body.name, mobile=body.mobile)
    return UserOut.model_validate(user)


@router.get("", response_model=list[UserOut])
def list_users(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return [UserOut.model_validate(u) for u in user_service.list_all_users(session, principal)]
