"""
Order lifecycle: order creation, status advancement, occupancy projection
and bill policy.

All functions here work on in-memory model instances and never touch a
database session; persistence is handled by ``tableside.services.storage``.
Statuses move strictly forward through

    placed -> under_process -> served -> completed -> paid

and ``paid`` is terminal.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, NamedTuple, Optional, Sequence
import uuid

from tableside.core.config import get_settings
from tableside.core.exceptions import ConflictError, ValidationError
from tableside.models.order import Order, OrderStatus
from tableside.models.order_line import OrderLine


class OccupancyLabel(str, Enum):
    """How a table is shown on the floor, derived from its order"""
    VACANT = "vacant"
    NEW_ORDER = "new_order"
    PREPARING = "preparing"
    SERVED = "served"
    AWAITING_PAYMENT = "awaiting_payment"


OCCUPANCY_BY_STATUS = {
    OrderStatus.PLACED: OccupancyLabel.NEW_ORDER,
    OrderStatus.UNDER_PROCESS: OccupancyLabel.PREPARING,
    OrderStatus.SERVED: OccupancyLabel.SERVED,
    OrderStatus.COMPLETED: OccupancyLabel.AWAITING_PAYMENT,
    OrderStatus.PAID: OccupancyLabel.VACANT,
}


class Bill(NamedTuple):
    """Payable breakdown in cents"""
    subtotal: int
    tax: int
    service_charge: int
    total: int


def find_open_order(table_id: uuid.UUID, orders: Iterable[Order]) -> Optional[Order]:
    """First non-terminal order for the table among orders, if any"""
    for order in orders:
        if order.table_id == table_id and not order.is_terminal():
            return order
    return None


def create_order(
    table_id: uuid.UUID,
    lines: Sequence[OrderLine],
    existing_orders: Iterable[Order] = (),
    restaurant_id: int = 0,
    created_at: Optional[datetime] = None,
) -> Order:
    """Create a ``placed`` order for a table.

    Args:
        table_id: Table the order is placed against
        lines: Order lines with their price snapshots; copied onto the order
        existing_orders: Orders already recorded for the restaurant (or at
            least for this table); used to enforce one open order per table
        restaurant_id: Owning restaurant
        created_at: Creation timestamp, defaults to now

    Raises:
        ValidationError: lines is empty or a line has a non-positive quantity
            or a negative price
        ConflictError: the table already has a non-terminal order
    """
    lines = list(lines)
    if not lines:
        raise ValidationError("Order must contain at least one line")
    for line in lines:
        if line.quantity is None or line.quantity <= 0:
            raise ValidationError(
                f"Quantity must be positive for menu item {line.menu_item_id}"
            )
        if line.price is None or line.price < 0:
            raise ValidationError(
                f"Price must not be negative for menu item {line.menu_item_id}"
            )

    blocking = find_open_order(table_id, existing_orders)
    if blocking is not None:
        raise ConflictError(
            "There is already an active order for this table",
            order_id=blocking.id,
        )

    order = Order(
        restaurant_id=restaurant_id,
        table_id=table_id,
        status=OrderStatus.PLACED,
        created_at=created_at or datetime.now(),
        total_amount=sum(line.price * line.quantity for line in lines),
    )
    order.items = [
        OrderLine(
            menu_item_id=line.menu_item_id,
            name=line.name,
            description=line.description,
            quantity=line.quantity,
            price=line.price,
            position=position,
        )
        for position, line in enumerate(lines)
    ]
    return order


def parse_status(value) -> OrderStatus:
    """Coerce a status name into OrderStatus"""
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown order status: {value}")


def advance(order: Order, requested_status) -> Order:
    """Move an order to the immediate successor of its current status.

    Raises InvalidTransitionError for the same status, a predecessor, a skip,
    or any request on a ``paid`` order. Lines and total are left untouched.
    """
    order.transition_to(parse_status(requested_status))
    return order


def derive_table_occupancy(order: Optional[Order] = None) -> OccupancyLabel:
    """Occupancy label for a table given its current order (or none)"""
    if order is None:
        return OccupancyLabel.VACANT
    return OCCUPANCY_BY_STATUS[OrderStatus(order.status)]


def _apply_rate(amount: int, rate: Decimal) -> int:
    return int((Decimal(amount) * Decimal(rate)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_bill(
    lines: Iterable[OrderLine],
    tax_rate: Optional[Decimal] = None,
    service_charge_rate: Optional[Decimal] = None,
) -> Bill:
    """Subtotal plus tax and service charge, each rounded half-up to the cent"""
    settings = get_settings()
    if tax_rate is None:
        tax_rate = settings.TAX_RATE
    if service_charge_rate is None:
        service_charge_rate = settings.SERVICE_CHARGE_RATE

    subtotal = sum(line.price * line.quantity for line in lines)
    tax = _apply_rate(subtotal, tax_rate)
    service_charge = _apply_rate(subtotal, service_charge_rate)
    return Bill(subtotal, tax, service_charge, subtotal + tax + service_charge)


def calculate_bill_for(order: Order, **rates) -> Bill:
    """Bill for an order's lines"""
    return calculate_bill(order.items, **rates)
