from fastapi import APIRouter, Depends
from sqlmodel import Session

from tiffin.api.deps import get_db, get_principal
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.schemas.price import PriceOut, UpdatePriceRequest
from tiffin.services import admin as admin_service
from tiffin.services import pricing

router = APIRouter(tags=["prices"])


@router.get("/users/me/price", response_model=PriceOut)
def get_my_price(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return PriceOut.model_validate(pricing.get_prices(session, principal.id))


@router.patch("/users/me/price", response_model=PriceOut)
def update_my_price(
    body: UpdatePriceRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    price = pricing.update_prices(session, principal.id, body.model_dump(exclude_none=True))
    return PriceOut.model_validate(price)


@router.get("/admin/users/{user_id}/price", response_model=PriceOut)
def get_user_price(
    user_id: int,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    session: Session = Depends(get_db),
):
    return PriceOut.model_validate(admin_service.get_user_prices(session, principal, user_id))
