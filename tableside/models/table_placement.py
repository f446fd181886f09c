"""
Table placement model: a table's position and size on a floor plan
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from tableside.core.geometry import Rect


class TableShape(str, Enum):
    """Drawn shape of a table"""
    RECTANGLE = "rectangle"
    ROUND = "round"
    BOOTH = "booth"


class TablePlacement(SQLModel, table=True):
    """Position and size of a table within a floor plan"""

    __tablename__ = "table_placements"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    table_id: uuid.UUID = Field(foreign_key="tables.id", index=True, description="Table being placed")
    floor_plan_id: uuid.UUID = Field(foreign_key="floor_plans.id", index=True, description="Floor plan the table is placed on")

    # Position (grid units)
    x_position: int = Field(default=0, description="X coordinate of the top-left corner")
    y_position: int = Field(default=0, description="Y coordinate of the top-left corner")
    width: int = Field(default=1, description="Width in grid units")
    height: int = Field(default=1, description="Height in grid units")

    # Table details
    shape: TableShape = Field(default=TableShape.RECTANGLE)
    seats: int = Field(default=4, description="Number of seats at the table")

    # Status
    is_active: bool = Field(default=True, index=True)

    # Timestamps
    updated_at: Optional[datetime] = None

    @property
    def rect(self) -> Rect:
        """Area covered by this placement"""
        return Rect(self.x_position, self.y_position, self.width, self.height)
