from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tiffin.schemas.common import CamelModel
from tiffin.storage.models import Role


class AuthenticatedPrincipal(BaseModel):
    """The verified caller, built once per request from the access token."""

    model_config = ConfigDict(frozen=True)

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str
    role: Role | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class RefreshRequest(CamelModel):
    refresh_token: str


class UserOut(CamelModel):
    id: int
    email: str
    name: str
    mobile: str | None = None
    role: Role
    created_at: datetime | None = None


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class AuthResponse(TokenPair):
    user: UserOut
