"""
Order line model
Individual items in an order with price snapshots
"""

from sqlmodel import Field, SQLModel, Relationship
from typing import Optional, TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from tableside.models.order import Order


class OrderLine(SQLModel, table=True):
    """Line in an order; never changed once the order exists"""

    __tablename__ = "order_lines"

    # Primary key
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="orders.id",
        index=True,
        description="Order this line belongs to"
    )
    menu_item_id: uuid.UUID = Field(
        index=True,
        description="Menu item this line represents"
    )

    # Item details (snapshot from menu at time of order)
    name: str = Field(
        default="",
        max_length=255,
        description="Item name (snapshot from menu)"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=2000,
        description="Item description (snapshot from menu)"
    )

    # Quantity and pricing (snapshot from menu)
    quantity: int = Field(
        default=1,
        description="Quantity ordered"
    )
    price: int = Field(
        default=0,
        description="Unit price in cents at time of order (snapshot)"
    )

    # Sorting for display
    position: int = Field(
        default=0,
        description="Position of the line within its order"
    )

    # Relationships
    order: Optional["Order"] = Relationship(back_populates="items")

    @property
    def line_total(self) -> int:
        """Line total in cents"""
        return self.price * self.quantity
