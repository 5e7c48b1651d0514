from storefront.models.database import Base, get_db
from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem
from storefront.models.payment import Payment, PaymentItem

__all__ = [
    "Base",
    "get_db",
    "User",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "Payment",
    "PaymentItem",
]
