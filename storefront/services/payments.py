"""
Payment sessions.

A session is opened by ``checkout.initiate_payment`` and leaves ``pending``
at most once: either to ``completed`` through ``confirm_payment`` or to
``expired`` when it is inspected after its deadline. Expiry is evaluated
lazily on read and confirm; there is no background sweep, so a stale session
stays ``pending`` in storage until someone looks at it.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from storefront.config import settings
from storefront.errors import (
    CheckoutFailed,
    PaymentExpired,
    PaymentNotFound,
    StoreUnavailable,
    StorefrontError,
)
from storefront.models import Order, Payment
from storefront.services.cart import clear_cart
from storefront.services.clock import as_utc, db_datetime, utcnow
from storefront.services.order_status import OrderStatus
from storefront.services.orders import place_order

logger = logging.getLogger(__name__)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"


@dataclass(frozen=True)
class PaymentLine:
    product_id: int
    product_name: str
    quantity: int
    price: int


def is_expired(payment: Payment, now: datetime) -> bool:
    return as_utc(now) > as_utc(payment.expires_at)


def _expire(db: Session, payment_id: int) -> bool:
    """Move a pending session to expired. Returns False if it already left pending."""
    updated = (
        db.query(Payment)
        .filter(Payment.id == payment_id, Payment.status == PaymentStatus.PENDING.value)
        .update({Payment.status: PaymentStatus.EXPIRED.value}, synchronize_session=False)
    )
    db.commit()
    if updated:
        logger.warning("Payment %s expired", payment_id)
    return bool(updated)


def get_payment(db: Session, user_id: int, payment_id: int, now: datetime | None = None) -> Payment:
    """Return the user's payment session, expiring it first if its deadline passed."""
    try:
        payment = (
            db.query(Payment)
            .options(joinedload(Payment.items))
            .filter(Payment.id == payment_id, Payment.user_id == user_id)
            .first()
        )
        if not payment:
            raise PaymentNotFound(payment_id)

        if payment.status == PaymentStatus.PENDING.value and is_expired(payment, now or utcnow()):
            _expire(db, payment.id)
            db.refresh(payment)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to load payment %s", payment_id)
        raise StoreUnavailable() from exc
    return payment


def _load_pending(db: Session, user_id: int, payment_id: int, now: datetime) -> tuple[int, list[PaymentLine]]:
    """Read a pending, unexpired session and end the read transaction."""
    try:
        payment = (
            db.query(Payment)
            .options(joinedload(Payment.items))
            .filter(
                Payment.id == payment_id,
                Payment.user_id == user_id,
                Payment.status == PaymentStatus.PENDING.value,
            )
            .first()
        )
        if not payment:
            raise PaymentNotFound(payment_id)

        if is_expired(payment, now):
            _expire(db, payment.id)
            raise PaymentExpired(payment_id)

        amount = payment.amount
        lines = [
            PaymentLine(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
            )
            for item in payment.items
        ]
        db.commit()
    except StorefrontError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to load payment %s", payment_id)
        raise StoreUnavailable() from exc
    return amount, lines


def confirm_payment(
    db: Session,
    user_id: int,
    payment_id: int,
    method: str | None = None,
    processing_delay: float | None = None,
    now: datetime | None = None,
) -> Order:
    """
    Complete a pending payment and turn its line snapshot into an order.

    The session is claimed with a conditional update on ``status = 'pending'``
    inside the same transaction that creates the order, reserves stock and
    clears the cart, so a session produces at most one order.
    """
    # The read transaction is closed before the simulated processing delay.
    amount, lines = _load_pending(db, user_id, payment_id, now or utcnow())

    delay = settings.PAYMENT_PROCESSING_DELAY_SECONDS if processing_delay is None else processing_delay
    if delay > 0:
        time.sleep(delay)

    method = method or settings.DEFAULT_PAYMENT_METHOD
    try:
        claimed = (
            db.query(Payment)
            .filter(
                Payment.id == payment_id,
                Payment.user_id == user_id,
                Payment.status == PaymentStatus.PENDING.value,
            )
            .update(
                {
                    Payment.status: PaymentStatus.COMPLETED.value,
                    Payment.method: method,
                    Payment.paid_at: db_datetime(db, now or utcnow()),
                },
                synchronize_session=False,
            )
        )
        if claimed != 1:
            raise PaymentNotFound(payment_id)

        order = place_order(
            db,
            user_id,
            amount,
            OrderStatus.PROCESSING.value,
            lines,
            payment_id=payment_id,
        )
        clear_cart(db, user_id)
        db.commit()
    except StorefrontError as exc:
        db.rollback()
        logger.warning("Payment %s confirmation rolled back: %s", payment_id, exc.message)
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Payment %s confirmation transaction failed", payment_id)
        raise CheckoutFailed("Payment could not be completed, please retry") from exc

    db.refresh(order)
    logger.info(
        "Payment %s completed via %s, order %s created for user %s",
        payment_id,
        method,
        order.id,
        user_id,
    )
    return order
