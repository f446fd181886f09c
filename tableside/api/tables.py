"""
Tables API endpoints
"""

from fastapi import APIRouter, Depends, status
from typing import List, Optional
import uuid

from tableside.core.config import get_settings
from tableside.core.dependencies import (
    get_occupancy_board, get_storage, get_user_role, require_permission
)
from tableside.core.permissions import Permission
from tableside.schemas.order import OrderRead
from tableside.schemas.table import TableCreate, TableRead
from tableside.schemas.views import TableOccupancyResponse, TableViewListResponse
from tableside.services.storage import Storage
from tableside.services.table_views import OccupancyBoard

router = APIRouter()
settings = get_settings()


@router.post("/", response_model=TableRead, status_code=status.HTTP_201_CREATED)
async def create_table(
    table_data: TableCreate,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Create a new table"""
    return TableRead.model_validate(storage.create_table(table_data))


@router.get("/", response_model=List[TableRead])
async def list_tables(
    restaurant_id: int,
    floor_number: Optional[int] = None,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    """List tables of a restaurant, optionally for one floor"""
    return [TableRead.model_validate(table) for table in storage.list_tables(restaurant_id, floor_number)]


@router.get("/with-orders", response_model=TableViewListResponse)
async def list_tables_with_orders(
    restaurant_id: int,
    floor_number: Optional[int] = None,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    """Tables joined with their placement, open order and occupancy"""
    return TableViewListResponse(
        items=storage.list_tables_with_orders(restaurant_id, floor_number),
        poll_interval_seconds=settings.ORDER_POLL_INTERVAL_SECONDS,
    )


@router.get("/occupancy", response_model=TableOccupancyResponse)
async def get_occupancy(
    restaurant_id: int,
    floor_number: Optional[int] = None,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
    board: OccupancyBoard = Depends(get_occupancy_board),
):
    """Occupancy of every table as last reported by order events"""
    tables = storage.list_tables(restaurant_id, floor_number)
    return TableOccupancyResponse(
        items={table.id: board.occupancy_for(table.id) for table in tables},
        poll_interval_seconds=settings.ORDER_POLL_INTERVAL_SECONDS,
    )


@router.get("/{table_id}", response_model=TableRead)
async def get_table(
    table_id: uuid.UUID,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    """Get table by ID"""
    return TableRead.model_validate(storage.get_table(table_id))


@router.get("/{table_id}/active-order", response_model=Optional[OrderRead])
async def get_active_order(
    table_id: uuid.UUID,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    """The table's open order, or null when the table is free"""
    storage.get_table(table_id)
    order = storage.get_active_order(table_id)
    return OrderRead.model_validate(order) if order else None


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_table(
    table_id: uuid.UUID,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Delete a table that no order refers to"""
    storage.delete_table(table_id)
