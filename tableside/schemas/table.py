"""
Table, floor plan and placement schemas
"""

from sqlmodel import SQLModel
from datetime import datetime
from typing import Optional, Literal
import uuid

from tableside.models.table_placement import TableShape


class TableCreate(SQLModel):
    restaurant_id: int
    table_number: int
    floor_number: int
    qr_code_url: Optional[str] = None


class TableRead(SQLModel):
    id: uuid.UUID
    restaurant_id: int
    table_number: int
    floor_number: int
    qr_code_url: Optional[str] = None


class FloorPlanCreate(SQLModel):
    restaurant_id: int
    floor_number: int
    name: str
    description: Optional[str] = None
    width: int
    height: int


class FloorPlanUpdate(SQLModel):
    name: Optional[str] = None
    description: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    is_active: Optional[bool] = None


class TablePlacementCreate(SQLModel):
    table_id: uuid.UUID
    x_position: int
    y_position: int
    width: int = 1
    height: int = 1
    shape: TableShape = TableShape.RECTANGLE
    seats: int = 4
    is_active: bool = True


class TablePlacementUpdate(SQLModel):
    x_position: Optional[int] = None
    y_position: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


class TableMove(SQLModel):
    direction: Literal["up", "down", "left", "right"]
    step: Optional[int] = None


class TablePlacementRead(SQLModel):
    id: uuid.UUID
    table_id: uuid.UUID
    floor_plan_id: uuid.UUID
    x_position: int
    y_position: int
    width: int
    height: int
    shape: TableShape
    seats: int
    is_active: bool


class FloorPlanRead(SQLModel):
    id: uuid.UUID
    restaurant_id: int
    floor_number: int
    name: str
    description: Optional[str] = None
    width: int
    height: int
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class FloorPlanWithPlacements(FloorPlanRead):
    placements: list[TablePlacementRead] = []
