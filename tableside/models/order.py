"""
Order model with the order lifecycle state machine
"""

from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime
from typing import Optional, TYPE_CHECKING, List
from enum import Enum
import uuid

from tableside.core.exceptions import InvalidTransitionError

if TYPE_CHECKING:
    from tableside.models.order_line import OrderLine


class OrderStatus(str, Enum):
    """Status of an order, in lifecycle order"""
    PLACED = "placed"                  # Submitted by the customer
    UNDER_PROCESS = "under_process"    # Kitchen is preparing
    SERVED = "served"                  # Food is at the table
    COMPLETED = "completed"            # Bill issued, awaiting payment
    PAID = "paid"                      # Settled; terminal


ORDER_SEQUENCE = (
    OrderStatus.PLACED,
    OrderStatus.UNDER_PROCESS,
    OrderStatus.SERVED,
    OrderStatus.COMPLETED,
    OrderStatus.PAID,
)

TERMINAL_STATUSES = frozenset({OrderStatus.PAID})


def next_status(status: OrderStatus) -> Optional[OrderStatus]:
    """Immediate successor of a status, or None for the terminal status"""
    position = ORDER_SEQUENCE.index(OrderStatus(status))
    if position + 1 < len(ORDER_SEQUENCE):
        return ORDER_SEQUENCE[position + 1]
    return None


class Order(SQLModel, table=True):
    """Order placed against a table"""

    __tablename__ = "orders"

    # Primary key
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    restaurant_id: int = Field(index=True, description="Restaurant the order belongs to")

    # Order linkage
    table_id: uuid.UUID = Field(
        foreign_key="tables.id",
        index=True,
        description="Table the order was placed against"
    )

    # Order status
    status: OrderStatus = Field(
        default=OrderStatus.PLACED,
        index=True,
        description="Current status of the order"
    )

    # Status timestamps
    created_at: datetime = Field(
        default_factory=datetime.now,
        index=True,
        description="When the order was submitted"
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        nullable=True,
        description="When order was last updated"
    )
    completed_at: Optional[datetime] = Field(
        default=None,
        nullable=True,
        description="When the bill was issued"
    )
    paid_at: Optional[datetime] = Field(
        default=None,
        nullable=True,
        description="When the order was paid"
    )

    # Sum of price x quantity over the lines, in cents
    total_amount: int = Field(
        default=0,
        description="Subtotal of all lines in cents"
    )

    # Optimistic concurrency control
    version: int = Field(
        default=1,
        description="Version number for optimistic concurrency control"
    )

    # Relationships
    items: List["OrderLine"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "OrderLine.position",
        }
    )

    # State machine methods
    def can_transition_to(self, new_status: OrderStatus) -> tuple[bool, str]:
        """Check if order can transition to new status"""
        current = OrderStatus(self.status)
        if current in TERMINAL_STATUSES:
            return False, f"Order is {current.value}; no further transitions"

        successor = next_status(current)
        if OrderStatus(new_status) != successor:
            return False, f"Cannot transition from {current.value} to {OrderStatus(new_status).value}"
        return True, "Can transition"

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move to the next status; anything else raises InvalidTransitionError"""
        can_transition, _ = self.can_transition_to(new_status)
        if not can_transition:
            raise InvalidTransitionError(self.status, new_status)

        new_status = OrderStatus(new_status)
        now = datetime.now()
        self.status = new_status
        self.updated_at = now
        if new_status == OrderStatus.COMPLETED:
            self.completed_at = now
        elif new_status == OrderStatus.PAID:
            self.paid_at = now
        self.version += 1

    def is_terminal(self) -> bool:
        """Check if the order has reached its final status"""
        return OrderStatus(self.status) in TERMINAL_STATUSES
