from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.dependencies import get_current_user
from storefront.models import User, get_db
from storefront.schemas.payments import PaymentConfirmRequest, PaymentConfirmResponse, PaymentResponse
from storefront.services import payments as payment_service

router = APIRouter()


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Get payment session",
)
def get_payment(
    payment_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Returns the payment session of the current user. Expired sessions are reported as expired."""
    return payment_service.get_payment(db, current_user.id, payment_id)


@router.post(
    "/{payment_id}/confirm",
    response_model=PaymentConfirmResponse,
    summary="Confirm payment (simulated)",
)
def confirm_payment(
    payment_id: int,
    body: PaymentConfirmRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    order = payment_service.confirm_payment(db, current_user.id, payment_id, method=body.method)
    return PaymentConfirmResponse(
        orderId=order.id,
        message="Payment completed, order is being processed",
    )
