from sqlalchemy.orm import Session, joinedload

from storefront.errors import CartItemNotFound, ValidationError
from storefront.models import CartItem
from storefront.services.inventory import get_product


def list_cart(db: Session, user_id: int) -> list[CartItem]:
    return (
        db.query(CartItem)
        .options(joinedload(CartItem.product))
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.id)
        .all()
    )


def _get_cart_item(db: Session, user_id: int, product_id: int) -> CartItem | None:
    return (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
        .first()
    )


def add_to_cart(db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    """Add a product to the cart, increasing the quantity of an existing line."""
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    get_product(db, product_id)

    item = _get_cart_item(db, user_id, product_id)
    if item:
        item.quantity += quantity
    else:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_cart_item(db: Session, user_id: int, product_id: int, quantity: int) -> CartItem | None:
    """Set the quantity of a cart line. A quantity of zero or less removes it."""
    item = _get_cart_item(db, user_id, product_id)
    if not item:
        raise CartItemNotFound(product_id)

    if quantity <= 0:
        db.delete(item)
        db.commit()
        return None

    item.quantity = quantity
    db.commit()
    db.refresh(item)
    return item


def remove_from_cart(db: Session, user_id: int, product_id: int) -> None:
    item = _get_cart_item(db, user_id, product_id)
    if not item:
        raise CartItemNotFound(product_id)
    db.delete(item)
    db.commit()


def clear_cart(db: Session, user_id: int) -> int:
    """Delete every cart line of the user. Does not commit."""
    return (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id)
        .delete(synchronize_session=False)
    )
