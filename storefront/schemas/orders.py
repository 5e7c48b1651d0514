from datetime import datetime

from pydantic import Field

from storefront.schemas.common import CamelModel
from storefront.schemas.products import ProductSummary
from storefront.services.order_status import OrderStatus


class OrderItemResponse(CamelModel):
    id: int
    product_id: int = Field(alias="productId")
    quantity: int
    price: int
    product: ProductSummary | None = None


class OrderBuyerResponse(CamelModel):
    id: int
    display_name: str | None = Field(default=None, alias="name")
    email: str


class OrderPaymentResponse(CamelModel):
    id: int
    method: str | None = None
    status: str
    paid_at: datetime | None = Field(default=None, alias="paidAt")


class OrderResponse(CamelModel):
    id: int
    user_id: int = Field(alias="userId")
    total: int
    status: OrderStatus
    payment_id: int | None = Field(default=None, alias="paymentId")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    items: list[OrderItemResponse] = []


class AdminOrderResponse(OrderResponse):
    user: OrderBuyerResponse | None = None
    payment: OrderPaymentResponse | None = None


class OrderStatusUpdateRequest(CamelModel):
    status: str


class OrderBulkStatusRequest(CamelModel):
    order_ids: list[int] = Field(alias="orderIds")
    status: str
    force: bool = True

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [{"orderIds": [1, 2, 3], "status": "shipped", "force": True}]
        },
    }


class OrderBulkStatusResponse(CamelModel):
    message: str
    count: int
