"""
Table model for restaurant seating
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint
from datetime import datetime
from typing import Optional
import uuid


class Table(SQLModel, table=True):
    """A physical table customers order from"""

    __tablename__ = "tables"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "floor_number", "table_number", name="uq_table_number_per_floor"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    restaurant_id: int = Field(index=True, description="Restaurant this table belongs to")

    # Table details
    table_number: int = Field(description="Table number, unique within a floor")
    floor_number: int = Field(index=True, description="Floor this table is on")
    qr_code_url: Optional[str] = Field(default=None, max_length=500, nullable=True, description="Scan target for guest ordering")

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
