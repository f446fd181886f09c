"""
Floor plan model: the bounded grid tables are laid out on
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid


class FloorPlan(SQLModel, table=True):
    """Floor plan for one floor of a restaurant, measured in grid units"""

    __tablename__ = "floor_plans"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    restaurant_id: int = Field(index=True, description="Restaurant this floor plan belongs to")

    # Floor details
    floor_number: int = Field(index=True, description="Floor number the plan describes")
    name: str = Field(max_length=100, description="Floor name (e.g., 'Main Floor', 'Terrace')")
    description: Optional[str] = Field(default=None, max_length=500, nullable=True)

    # Bounds in grid units
    width: int = Field(description="Floor width in grid units")
    height: int = Field(description="Floor height in grid units")

    # Status
    is_active: bool = Field(default=True, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
