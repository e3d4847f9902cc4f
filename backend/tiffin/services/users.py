from typing import Optional

from sqlmodel import Session

from tiffin.errors import Forbidden, NotFound
from tiffin.logging import get_logger
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.storage.models import User
from tiffin.storage.repositories import get_user_by_id, list_users, save_user

logger = get_logger(__name__)


def require_admin(principal: AuthenticatedPrincipal) -> None:
    if not principal.is_admin:
        logger.warning("auth.admin_required caller=%s role=%s", principal.id, principal.role.value)
        raise Forbidden("Admin role required")


def get_user_or_404(session: Session, user_id: int) -> User:
    user = get_user_by_id(session, user_id)
    if user is None:
        raise NotFound(f"User with ID '{user_id}' not found")
    return user


def get_profile(session: Session, principal: AuthenticatedPrincipal) -> User:
    return get_user_or_404(session, principal.id)


def update_profile(
    session: Session,
    principal: AuthenticatedPrincipal,
    name: Optional[str] = None,
    mobile: Optional[str] = None,
) -> User:
    user = get_user_or_404(session, principal.id)
    if name is not None:
        user.name = name
    if mobile is not None:
        user.mobile = mobile
    user = save_user(session, user)
    logger.info("user.profile_updated id=%s", user.id)
    return user


def list_all_users(session: Session, principal: AuthenticatedPrincipal) -> list[User]:
    require_admin(principal)
    return list_users(session)
