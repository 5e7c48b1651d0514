from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.dependencies import get_current_admin
from storefront.models import User, get_db
from storefront.schemas.orders import (
    AdminOrderResponse,
    OrderBulkStatusRequest,
    OrderBulkStatusResponse,
    OrderStatusUpdateRequest,
)
from storefront.services import order_status
from storefront.services import orders as order_service

router = APIRouter()


@router.get(
    "",
    response_model=list[AdminOrderResponse],
    summary="List all orders",
)
def list_orders(
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Returns every order with buyer, lines and payment, newest first."""
    return order_service.list_all_orders(db)


@router.put(
    "/bulk",
    response_model=OrderBulkStatusResponse,
    summary="Bulk update order status",
)
def bulk_update_status(
    body: OrderBulkStatusRequest,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """
    Applies one status to many orders. With ``force`` (default) the current
    status of each order is overwritten regardless of the transition rules;
    with ``force=false`` orders that cannot legally move are skipped.
    """
    count = order_status.set_order_status_bulk(db, body.order_ids, body.status, force=body.force)
    return OrderBulkStatusResponse(message=f"Successfully updated {count} orders", count=count)


@router.put(
    "/{order_id}/status",
    response_model=AdminOrderResponse,
    summary="Update order status",
)
def update_status(
    order_id: int,
    body: OrderStatusUpdateRequest,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    return order_status.set_order_status(db, order_id, body.status)
