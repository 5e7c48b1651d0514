from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.dependencies import get_current_user
from storefront.models import User, get_db
from storefront.schemas.cart import (
    CartAddRequest,
    CartItemResponse,
    CartRemoveRequest,
    CartUpdateRequest,
    CartUpdateResponse,
)
from storefront.schemas.common import MessageResponse
from storefront.services import cart as cart_service

router = APIRouter()


@router.get(
    "",
    response_model=list[CartItemResponse],
    summary="List my cart",
)
def get_cart(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    return cart_service.list_cart(db, current_user.id)


@router.post(
    "",
    response_model=CartItemResponse,
    summary="Add product to cart",
)
def add_item(
    body: CartAddRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Adds the product, or increases the quantity if it is already in the cart."""
    return cart_service.add_to_cart(db, current_user.id, body.product_id, body.quantity)


@router.put(
    "",
    response_model=CartUpdateResponse,
    summary="Set cart item quantity",
)
def update_item(
    body: CartUpdateRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Sets the quantity of a cart line. Quantity 0 or less removes the line."""
    item = cart_service.update_cart_item(db, current_user.id, body.product_id, body.quantity)
    if item is None:
        return CartUpdateResponse(removed=True)
    return CartUpdateResponse(item=CartItemResponse.model_validate(item))


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Remove product from cart",
)
def remove_item(
    body: CartRemoveRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    cart_service.remove_from_cart(db, current_user.id, body.product_id)
    return MessageResponse(message="Item removed")
