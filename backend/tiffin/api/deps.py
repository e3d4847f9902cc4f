"""Request-scoped dependencies: DB session and the authenticated principal."""

from typing import Iterator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from tiffin.errors import Unauthenticated
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.services.auth import principal_from_token
from tiffin.storage import db

bearer = HTTPBearer(auto_error=False)


def get_db() -> Iterator[Session]:
    with db.get_session() as session:
        yield session


def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> AuthenticatedPrincipal:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Missing bearer token")
    return principal_from_token(credentials.credentials)
