from pydantic import BaseModel

from tiffin.schemas.auth import UserOut
from tiffin.schemas.common import CamelModel


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    mobile: str | None = None


class UserWithStats(UserOut):
    meal_count: int
    total_amount: float


class UserSummary(CamelModel):
    user: UserOut
    total_meals: int
    by_type: dict[str, int]
    total_amount: float
