"""
Order, cart and bill schemas
"""

from sqlmodel import SQLModel
from datetime import datetime
from typing import Optional, List
import uuid

from tableside.models.order import OrderStatus


class CartLine(SQLModel):
    menu_item_id: uuid.UUID
    quantity: int


class Cart(SQLModel):
    """Items a customer submits against a table in one go"""
    restaurant_id: int
    table_id: uuid.UUID
    lines: List[CartLine]


class OrderLineRead(SQLModel):
    id: uuid.UUID
    menu_item_id: uuid.UUID
    name: str
    description: Optional[str] = None
    quantity: int
    price: int


class OrderRead(SQLModel):
    id: uuid.UUID
    restaurant_id: int
    table_id: uuid.UUID
    status: OrderStatus
    items: List[OrderLineRead] = []
    created_at: datetime
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    total_amount: int
    version: int


class OrderStatusUpdate(SQLModel):
    status: OrderStatus
    version: Optional[int] = None


class BillRead(SQLModel):
    subtotal: int
    tax: int
    service_charge: int
    total: int


class OrderDetail(OrderRead):
    bill: BillRead


class OrderListResponse(SQLModel):
    items: List[OrderRead]
    total: int
    poll_interval_seconds: int
