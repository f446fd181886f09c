"""
Orders API endpoints
"""

from fastapi import APIRouter, Depends, status
from typing import Optional
import structlog
import uuid

from tableside.core.config import get_settings
from tableside.core.dependencies import get_storage, get_user_role, require_permission
from tableside.core.permissions import Permission, ensure_permission, required_permission_for
from tableside.models.order import Order, OrderStatus
from tableside.schemas.order import (
    BillRead, Cart, OrderDetail, OrderListResponse, OrderRead, OrderStatusUpdate
)
from tableside.services.storage import Storage

logger = structlog.get_logger(__name__)
router = APIRouter()
settings = get_settings()


def _order_detail(storage: Storage, order: Order) -> OrderDetail:
    bill = storage.bill_for(order)
    return OrderDetail(
        **OrderRead.model_validate(order).model_dump(),
        bill=BillRead(**bill._asdict()),
    )


@router.post("/", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
async def create_order(
    cart: Cart,
    role: str = Depends(require_permission(Permission.ORDER_CREATE)),
    storage: Storage = Depends(get_storage),
):
    """Place an order for a table from a cart"""
    order = storage.create_order_from_cart(cart)
    return _order_detail(storage, order)


@router.get("/", response_model=OrderListResponse)
async def list_orders(
    restaurant_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
    role: str = Depends(require_permission(Permission.ORDER_ADVANCE_KITCHEN)),
    storage: Storage = Depends(get_storage),
):
    """Order queue, optionally filtered by status"""
    orders = storage.list_orders(restaurant_id, status)
    return OrderListResponse(
        items=[OrderRead.model_validate(order) for order in orders],
        total=len(orders),
        poll_interval_seconds=settings.ORDER_POLL_INTERVAL_SECONDS,
    )


@router.get("/{order_id}", response_model=OrderDetail)
async def get_order(
    order_id: uuid.UUID,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    """Get an order with its bill breakdown"""
    return _order_detail(storage, storage.get_order(order_id))


@router.patch("/{order_id}/status", response_model=OrderDetail)
async def update_order_status(
    order_id: uuid.UUID,
    update: OrderStatusUpdate,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    """Advance an order to its next status"""
    ensure_permission(role, required_permission_for(update.status))
    order = storage.advance_order(order_id, update.status, expected_version=update.version)

    logger.info(f"Order {order_id} moved to {update.status.value} by {role}")
    return _order_detail(storage, order)
