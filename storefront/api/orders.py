from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.dependencies import get_current_user
from storefront.errors import OrderNotFound
from storefront.models import User, get_db
from storefront.schemas.orders import OrderResponse
from storefront.services import orders as order_service

router = APIRouter()


@router.get(
    "/me",
    response_model=list[OrderResponse],
    summary="List my orders",
)
def my_orders(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Returns the orders of the current user, newest first."""
    return order_service.list_orders_for_buyer(db, current_user.id)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get my order",
)
def my_order(
    order_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    order = order_service.get_order(db, order_id)
    if order.user_id != current_user.id:
        raise OrderNotFound(order_id)
    return order
