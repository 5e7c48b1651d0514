import logging
import secrets
import string
import time
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.errors import (
    CheckoutFailed,
    EmptyCart,
    InsufficientStock,
    StoreUnavailable,
    StorefrontError,
)
from storefront.models import CartItem, Order, Payment, PaymentItem, Product
from storefront.services.clock import db_datetime, utcnow
from storefront.services.order_status import OrderStatus
from storefront.services.orders import place_order
from storefront.services.payments import PaymentStatus

logger = logging.getLogger(__name__)

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class CartLineSnapshot:
    cart_item_id: int
    product_id: int
    product_name: str
    quantity: int
    price: int
    stock: int

    @property
    def subtotal(self) -> int:
        return self.quantity * self.price


def snapshot_cart(db: Session, user_id: int) -> list[CartLineSnapshot]:
    """Read the user's cart joined with current product price and stock."""
    rows = (
        db.query(CartItem, Product)
        .join(Product, Product.id == CartItem.product_id)
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.id)
        .all()
    )
    return [
        CartLineSnapshot(
            cart_item_id=item.id,
            product_id=product.id,
            product_name=product.name,
            quantity=item.quantity,
            price=product.price,
            stock=product.stock,
        )
        for item, product in rows
    ]


def _read_cart(db: Session, user_id: int) -> list[CartLineSnapshot]:
    try:
        return snapshot_cart(db, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to read cart of user %s", user_id)
        raise StoreUnavailable() from exc


def validate_cart(lines: list[CartLineSnapshot]) -> None:
    if not lines:
        raise EmptyCart()
    for line in lines:
        if line.quantity > line.stock:
            raise InsufficientStock(line.product_name, available=line.stock, requested=line.quantity)


def cart_total(lines: list[CartLineSnapshot]) -> int:
    return sum(line.subtotal for line in lines)


def _consume_cart(db: Session, user_id: int, lines: list[CartLineSnapshot]) -> None:
    cart_item_ids = [line.cart_item_id for line in lines]
    deleted = (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id, CartItem.id.in_(cart_item_ids))
        .delete(synchronize_session=False)
    )
    if deleted != len(cart_item_ids):
        # Another checkout for the same cart committed first.
        logger.warning(
            "Cart of user %s changed during checkout: expected %s lines, deleted %s",
            user_id,
            len(cart_item_ids),
            deleted,
        )
        raise CheckoutFailed("Cart changed during checkout, please retry")


def checkout(db: Session, user_id: int) -> Order:
    """
    Turn the user's cart into an order.

    Order, order lines, stock decrements and cart deletion are committed
    together; on any failure the transaction is rolled back and nothing from
    the attempt is persisted.
    """
    lines = _read_cart(db, user_id)
    try:
        validate_cart(lines)
    except StorefrontError as exc:
        db.rollback()
        logger.warning("Checkout rejected for user %s: %s", user_id, exc.message)
        raise

    total = cart_total(lines)
    try:
        order = place_order(db, user_id, total, OrderStatus.PENDING.value, lines)
        _consume_cart(db, user_id, lines)
        db.commit()
    except StorefrontError as exc:
        db.rollback()
        logger.warning("Checkout rolled back for user %s: %s", user_id, exc.message)
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Checkout transaction failed for user %s", user_id)
        raise CheckoutFailed() from exc

    db.refresh(order)
    logger.info("Order %s created for user %s, total=%s", order.id, user_id, total)
    return order


def generate_payment_reference() -> str:
    suffix = "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(5))
    return f"INV-{int(time.time() * 1000)}-{suffix}"


def initiate_payment(db: Session, user_id: int) -> Payment:
    """
    Open a pending payment session for the current cart.

    Amount and line prices are fixed now; stock and cart are untouched until
    the payment is confirmed.
    """
    lines = _read_cart(db, user_id)
    try:
        validate_cart(lines)
    except StorefrontError as exc:
        db.rollback()
        logger.warning("Payment initiation rejected for user %s: %s", user_id, exc.message)
        raise

    amount = cart_total(lines)
    expires_at = utcnow() + timedelta(minutes=settings.PAYMENT_EXPIRE_MINUTES)
    payment = Payment(
        user_id=user_id,
        reference=generate_payment_reference(),
        amount=amount,
        status=PaymentStatus.PENDING.value,
        expires_at=db_datetime(db, expires_at),
        items=[
            PaymentItem(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                price=line.price,
            )
            for line in lines
        ],
    )
    try:
        db.add(payment)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create payment session for user %s", user_id)
        raise CheckoutFailed("Payment session could not be created, please retry") from exc

    db.refresh(payment)
    logger.info(
        "Payment %s (%s) opened for user %s, amount=%s, expires_at=%s",
        payment.id,
        payment.reference,
        user_id,
        amount,
        expires_at.isoformat(),
    )
    return payment
