from datetime import datetime

from pydantic import Field

from storefront.schemas.common import CamelModel
from storefront.services.payments import PaymentStatus


class PaymentItemResponse(CamelModel):
    id: int
    product_id: int = Field(alias="productId")
    product_name: str = Field(alias="productName")
    quantity: int
    price: int


class PaymentInitResponse(CamelModel):
    payment_id: int = Field(alias="paymentId")
    reference: str
    amount: int
    expires_at: datetime = Field(alias="expiresAt")


class PaymentResponse(CamelModel):
    id: int
    reference: str
    amount: int
    status: PaymentStatus
    method: str | None = None
    expires_at: datetime = Field(alias="expiresAt")
    paid_at: datetime | None = Field(default=None, alias="paidAt")
    items: list[PaymentItemResponse] = []


class PaymentConfirmRequest(CamelModel):
    method: str | None = Field(default=None, max_length=50)

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"method": "bank_transfer"}]},
    }


class PaymentConfirmResponse(CamelModel):
    success: bool = True
    order_id: int = Field(alias="orderId")
    message: str
