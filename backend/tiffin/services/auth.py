"""Registration, login and JWT access/refresh tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import JWTError, jwt
from sqlmodel import Session

from tiffin.config import settings
from tiffin.errors import Conflict, Unauthenticated
from tiffin.logging import get_logger
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.storage.models import Role, User
from tiffin.storage.repositories import create_user, get_user_by_email, get_user_by_id

logger = get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def _secret(token_type: str) -> str:
    return settings.jwt_refresh_secret if token_type == REFRESH else settings.jwt_secret


def _encode(user: User, token_type: str, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "type": token_type,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, _secret(token_type), algorithm=settings.jwt_algorithm)


def issue_tokens(user: User) -> dict[str, str]:
    return {
        "access_token": _encode(user, ACCESS, timedelta(minutes=settings.jwt_access_ttl_minutes)),
        "refresh_token": _encode(user, REFRESH, timedelta(days=settings.jwt_refresh_ttl_days)),
    }


def decode_token(token: str, token_type: str = ACCESS) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, _secret(token_type), algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise Unauthenticated(f"Invalid token: {e}") from e
    if payload.get("type") != token_type:
        raise Unauthenticated(f"Expected a {token_type} token")
    if not payload.get("sub"):
        raise Unauthenticated("Token missing 'sub' claim")
    return payload


def principal_from_token(token: str) -> AuthenticatedPrincipal:
    payload = decode_token(token, ACCESS)
    try:
        return AuthenticatedPrincipal(id=int(payload["sub"]), role=Role(payload.get("role", Role.USER.value)))
    except ValueError as e:
        raise Unauthenticated("Malformed token claims") from e


def register(
    session: Session, email: str, password: str, name: str, role: Optional[Role] = None
) -> tuple[User, dict[str, str]]:
    if get_user_by_email(session, email):
        raise Conflict("Email already registered")
    user = create_user(
        session,
        User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role or Role.USER,
        ),
    )
    return user, issue_tokens(user)


def authenticate(session: Session, email: str, password: str) -> User:
    user = get_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("auth.login_failed email=%s", email)
        raise Unauthenticated("Invalid credentials")
    return user


def login(session: Session, email: str, password: str) -> tuple[User, dict[str, str]]:
    user = authenticate(session, email, password)
    logger.info("auth.login user_id=%s", user.id)
    return user, issue_tokens(user)


def refresh(session: Session, refresh_token: str) -> dict[str, str]:
    payload = decode_token(refresh_token, REFRESH)
    user = get_user_by_id(session, int(payload["sub"]))
    if user is None:
        raise Unauthenticated("User not found")
    return issue_tokens(user)


def current_user(session: Session, principal: AuthenticatedPrincipal) -> User:
    user = get_user_by_id(session, principal.id)
    if user is None:
        raise Unauthenticated("User not found")
    return user
