import logging

from sqlalchemy.orm import Session

from storefront.errors import InsufficientStock, ProductNotFound
from storefront.models import Product

logger = logging.getLogger(__name__)


def list_products(db: Session) -> list[Product]:
    return db.query(Product).order_by(Product.id).all()


def get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise ProductNotFound(product_id)
    return product


def reserve(db: Session, product_id: int, quantity: int, product_name: str | None = None) -> None:
    """
    Decrement stock for a purchase inside the caller's open transaction.

    The decrement is a single conditional UPDATE, so concurrent reservations
    against the same row serialize on the row lock and the predicate is
    re-checked against the committed value. Nothing is committed here; the
    caller owns the atomic unit and must roll it back on failure.
    """
    updated = (
        db.query(Product)
        .filter(Product.id == product_id, Product.stock >= quantity)
        .update({Product.stock: Product.stock - quantity}, synchronize_session=False)
    )
    if updated == 1:
        return

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise ProductNotFound(product_id)
    logger.warning(
        "Stock reservation rejected for product %s: requested=%s, available=%s",
        product_id,
        quantity,
        product.stock,
    )
    raise InsufficientStock(product_name or product.name, available=product.stock, requested=quantity)
