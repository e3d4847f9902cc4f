from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from tiffin.api.deps import get_db, get_principal
from tiffin.config import settings
from tiffin.schemas.auth import (
    AuthenticatedPrincipal,
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserOut,
)
from tiffin.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, session: Session = Depends(get_db)) -> AuthResponse:
    role = body.role if settings.allow_self_assigned_role else None
    user, tokens = auth_service.register(session, body.email, body.password, body.name, role)
    return AuthResponse(user=UserOut.model_validate(user), **tokens)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, session: Session = Depends(get_db)) -> AuthResponse:
    user, tokens = auth_service.login(session, body.email, body.password)
    return AuthResponse(user=UserOut.model_validate(user), **tokens)


@router.post("/refresh", response_model=TokenPair)
def refresh(body: RefreshRequest, session: Session = Depends(get_db)) -> TokenPair:
    return TokenPair(**auth_service.refresh(session, body.refresh_token))


@router.get("/me", response_model=UserOut)
def me(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return UserOut.model_validate(auth_service.current_user(session, principal))
