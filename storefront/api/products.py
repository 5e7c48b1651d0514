from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.models import get_db
from storefront.schemas.products import ProductResponse
from storefront.services import inventory

router = APIRouter()


@router.get(
    "",
    response_model=list[ProductResponse],
    summary="List products",
)
def list_products(
    db: Annotated[Session, Depends(get_db)],
):
    """Returns the catalog with current price and stock."""
    return inventory.list_products(db)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
)
def get_product(
    product_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    return inventory.get_product(db, product_id)
