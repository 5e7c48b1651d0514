"""Structured error kinds raised by the order/payment engine.

Every error carries a stable ``code`` so callers can tell "out of stock" from
"session expired" without parsing messages. The HTTP layer maps them to
responses in ``storefront.main``.
"""

from fastapi import status


class StorefrontError(Exception):
    code = "storefront_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, "retryable": self.retryable}


class ValidationError(StorefrontError):
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(StorefrontError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(StorefrontError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ExpiredError(StorefrontError):
    code = "expired"
    status_code = status.HTTP_410_GONE


class TransientError(StorefrontError):
    code = "transient"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True


class EmptyCart(ValidationError):
    code = "empty_cart"

    def __init__(self):
        super().__init__("Cart is empty")


class InvalidStatus(ValidationError):
    code = "invalid_status"

    def __init__(self, value):
        super().__init__(f"Invalid status value: {value}")
        self.value = value


class InsufficientStock(ConflictError):
    code = "insufficient_stock"

    def __init__(self, product_name: str, available: int | None = None, requested: int | None = None):
        message = f"Insufficient stock for {product_name}"
        if available is not None:
            message = f"{message}. Available: {available}"
        super().__init__(message)
        self.product_name = product_name
        self.available = available
        self.requested = requested


class InvalidTransition(ConflictError):
    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot change order status from {current} to {target}")
        self.current = current
        self.target = target


class OrderNotFound(NotFoundError):
    code = "order_not_found"

    def __init__(self, order_id: int):
        super().__init__("Order not found")
        self.order_id = order_id


class PaymentNotFound(NotFoundError):
    code = "payment_not_found"

    def __init__(self, payment_id: int):
        super().__init__("Payment not found or already processed")
        self.payment_id = payment_id


class ProductNotFound(NotFoundError):
    code = "product_not_found"

    def __init__(self, product_id: int):
        super().__init__("Product not found")
        self.product_id = product_id


class CartItemNotFound(NotFoundError):
    code = "cart_item_not_found"

    def __init__(self, product_id: int):
        super().__init__("Item not found in cart")
        self.product_id = product_id


class PaymentExpired(ExpiredError):
    code = "payment_expired"

    def __init__(self, payment_id: int):
        super().__init__("Payment session has expired")
        self.payment_id = payment_id


class CheckoutFailed(TransientError):
    code = "checkout_failed"

    def __init__(self, message: str = "Checkout could not be completed, please retry"):
        super().__init__(message)


class StoreUnavailable(TransientError):
    code = "store_unavailable"

    def __init__(self, message: str = "Store is temporarily unavailable, please retry"):
        super().__init__(message)
