from pydantic import Field

from storefront.schemas.common import CamelModel
from storefront.schemas.products import ProductResponse


class CartAddRequest(CamelModel):
    product_id: int = Field(alias="productId")
    quantity: int = Field(default=1, ge=1)


class CartUpdateRequest(CamelModel):
    product_id: int = Field(alias="productId")
    quantity: int


class CartRemoveRequest(CamelModel):
    product_id: int = Field(alias="productId")


class CartItemResponse(CamelModel):
    id: int
    product_id: int = Field(alias="productId")
    quantity: int
    product: ProductResponse


class CartUpdateResponse(CamelModel):
    ok: bool = True
    removed: bool = False
    item: CartItemResponse | None = None
