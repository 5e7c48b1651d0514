from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.dependencies import get_current_user
from storefront.models import User, get_db
from storefront.schemas.orders import OrderResponse
from storefront.schemas.payments import PaymentInitResponse
from storefront.services import checkout as checkout_service

router = APIRouter()


@router.post(
    "/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Checkout cart into an order",
)
def checkout(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """
    Converts the current cart into a pending order. Prices and stock are
    re-read server-side; the cart is emptied only if the order is committed.
    """
    return checkout_service.checkout(db, current_user.id)


@router.post(
    "/payments",
    response_model=PaymentInitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a payment for the current cart",
)
def initiate_payment(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Opens a payment session with a fixed amount and a 30 minute deadline by default."""
    payment = checkout_service.initiate_payment(db, current_user.id)
    return PaymentInitResponse(
        paymentId=payment.id,
        reference=payment.reference,
        amount=payment.amount,
        expiresAt=payment.expires_at,
    )
