from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer

from tiffin.schemas.common import CamelModel


class UpdatePriceRequest(BaseModel):
    breakfast: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    lunch: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    dinner: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    custom: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class PriceOut(CamelModel):
    user_id: int
    breakfast: Decimal
    lunch: Decimal
    dinner: Decimal
    custom: Decimal

    @field_serializer("breakfast", "lunch", "dinner", "custom")
    def _as_number(self, value: Decimal) -> float:
        return float(value)
