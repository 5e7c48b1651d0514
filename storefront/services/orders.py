from sqlalchemy.orm import Session, joinedload

from storefront.errors import OrderNotFound
from storefront.models import Order, OrderItem
from storefront.services.inventory import reserve


def place_order(db: Session, user_id: int, total: int, status: str, lines, payment_id: int | None = None) -> Order:
    """
    Stage an order, its lines and the matching stock reservations.

    ``lines`` are objects exposing ``product_id``, ``product_name``,
    ``quantity`` and ``price``. Nothing is committed; the caller owns the
    transaction.
    """
    order = Order(user_id=user_id, total=total, status=status, payment_id=payment_id)
    db.add(order)
    db.flush()
    for line in lines:
        db.add(
            OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.price,
            )
        )
        reserve(db, line.product_id, line.quantity, line.product_name)
    return order


def _with_projections(query):
    return query.options(
        joinedload(Order.items).joinedload(OrderItem.product),
        joinedload(Order.user),
        joinedload(Order.payment),
    )


def get_order(db: Session, order_id: int) -> Order:
    order = _with_projections(db.query(Order)).filter(Order.id == order_id).first()
    if not order:
        raise OrderNotFound(order_id)
    return order


def list_orders_for_buyer(db: Session, user_id: int) -> list[Order]:
    query = _with_projections(db.query(Order)).filter(Order.user_id == user_id)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def list_all_orders(db: Session) -> list[Order]:
    return _with_projections(db.query(Order)).order_by(Order.created_at.desc(), Order.id.desc()).all()
