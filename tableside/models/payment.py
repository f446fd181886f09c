"""
Payment model
Bill issued when an order is completed and settled when it is paid
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid


class PaymentStatus(str, Enum):
    """Status of a bill"""
    PENDING = "pending"
    PAID = "paid"


class Payment(SQLModel, table=True):
    """Bill for an order, amounts in cents"""

    __tablename__ = "payments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True, unique=True)
    restaurant_id: int = Field(index=True)

    # Bill breakdown
    subtotal: int = Field(default=0)
    tax_amount: int = Field(default=0)
    service_charge: int = Field(default=0)
    amount: int = Field(default=0, description="Total payable: subtotal + tax + service charge")

    status: PaymentStatus = Field(default=PaymentStatus.PENDING, index=True)
    payment_url: Optional[str] = Field(default=None, max_length=500, nullable=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.now)
    paid_at: Optional[datetime] = None

    def mark_paid(self) -> None:
        """Settle the bill"""
        self.status = PaymentStatus.PAID
        self.paid_at = datetime.now()
