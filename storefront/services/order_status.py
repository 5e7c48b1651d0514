"""
Order lifecycle.

    pending -> processing -> shipped -> delivered
       |           |
       +-----------+--> cancelled

``delivered`` and ``cancelled`` are terminal. Single updates enforce the
transition table. Bulk updates are an administrative path: with ``force`` they
overwrite the status of every selected order, without it they only touch
orders whose current status allows the move.
"""

import logging
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.errors import (
    InvalidStatus,
    InvalidTransition,
    OrderNotFound,
    StoreUnavailable,
    StorefrontError,
    ValidationError,
)
from storefront.models import Order
from storefront.services.clock import db_datetime, utcnow
from storefront.services.orders import get_order

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(value) from None


def can_transition(current, target) -> bool:
    return parse_status(target) in ALLOWED_TRANSITIONS[parse_status(current)]


def ensure_transition(current, target) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(OrderStatus(current).value, OrderStatus(target).value)


def is_terminal(status) -> bool:
    return not ALLOWED_TRANSITIONS[parse_status(status)]


def set_order_status(db: Session, order_id: int, new_status) -> Order:
    """Move one order to ``new_status`` if the transition table allows it."""
    target = parse_status(new_status)

    try:
        order = db.query(Order).filter(Order.id == order_id).with_for_update().first()
        if not order:
            raise OrderNotFound(order_id)

        ensure_transition(order.status, target)

        previous = order.status
        order.status = target.value
        order.updated_at = db_datetime(db, utcnow())
        db.commit()
    except InvalidTransition as exc:
        db.rollback()
        logger.warning(
            "Rejected status change for order %s: %s -> %s",
            order_id,
            exc.current,
            exc.target,
        )
        raise
    except StorefrontError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Status change for order %s failed", order_id)
        raise StoreUnavailable() from exc

    logger.info("Order %s status changed: %s -> %s", order_id, previous, target.value)
    return get_order(db, order_id)


def set_order_status_bulk(db: Session, order_ids, new_status, force: bool = True) -> int:
    """
    Set ``new_status`` on every order in ``order_ids`` and return how many rows changed.

    Unknown ids are ignored. With ``force`` the transition table is bypassed;
    otherwise orders whose current status does not allow the move are skipped.
    """
    target = parse_status(new_status)
    ids = set(order_ids)
    if not ids:
        raise ValidationError("Order IDs are required")

    try:
        query = db.query(Order).filter(Order.id.in_(ids))
        if not force:
            sources = [status.value for status in OrderStatus if target in ALLOWED_TRANSITIONS[status]]
            query = query.filter(Order.status.in_(sources))

        count = query.update(
            {Order.status: target.value, Order.updated_at: db_datetime(db, utcnow())},
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Bulk status update to %s failed", target.value)
        raise StoreUnavailable() from exc

    logger.info(
        "Bulk status update to %s: %s of %s orders changed (force=%s)",
        target.value,
        count,
        len(ids),
        force,
    )
    return count
