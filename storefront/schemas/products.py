from storefront.schemas.common import CamelModel


class ProductResponse(CamelModel):
    id: int
    name: str
    description: str = ""
    price: int
    stock: int


class ProductSummary(CamelModel):
    id: int
    name: str
    price: int


