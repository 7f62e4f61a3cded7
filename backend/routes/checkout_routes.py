from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.payments import service as checkout_service
from backend.payments.stripe_client import StripeNotConfiguredError
from backend.routes.book_routes import request_origin

router = APIRouter(tags=['checkout'])


class CheckoutItemRequest(BaseModel):
    bookId: int
    quantity: int | None = None


class CheckoutAddressRequest(BaseModel):
    fullName: str | None = None
    email: str | None = None
    phone: str | None = None
    addressLine1: str | None = None
    addressLine2: str | None = None
    city: str | None = None
    state: str | None = None
    postalCode: str | None = None
    country: str | None = None


class CreateCheckoutSessionRequest(BaseModel):
    items: list[CheckoutItemRequest] | None = None
    address: CheckoutAddressRequest = Field(default_factory=CheckoutAddressRequest)


class CreateCheckoutSessionResponse(BaseModel):
    url: str


@router.post('/create-session', response_model=CreateCheckoutSessionResponse)
def create_session(
    payload: CreateCheckoutSessionRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    items = [(item.bookId, item.quantity) for item in payload.items or []]

    try:
        url = checkout_service.create_checkout_session(
            db,
            items,
            payload.address.model_dump(),
            request_origin(request),
        )
    except StripeNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except checkout_service.CheckoutError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return {'url': url}
