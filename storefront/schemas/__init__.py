from storefront.schemas.cart import CartAddRequest, CartItemResponse, CartRemoveRequest, CartUpdateRequest
from storefront.schemas.orders import (
    AdminOrderResponse,
    OrderBulkStatusRequest,
    OrderBulkStatusResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
)
from storefront.schemas.payments import (
    PaymentConfirmRequest,
    PaymentConfirmResponse,
    PaymentInitResponse,
    PaymentResponse,
)
from storefront.schemas.products import ProductResponse

__all__ = [
    "CartAddRequest",
    "CartItemResponse",
    "CartRemoveRequest",
    "CartUpdateRequest",
    "AdminOrderResponse",
    "OrderBulkStatusRequest",
    "OrderBulkStatusResponse",
    "OrderResponse",
    "OrderStatusUpdateRequest",
    "PaymentConfirmRequest",
    "PaymentConfirmResponse",
    "PaymentInitResponse",
    "PaymentResponse",
    "ProductResponse",
]
