"""
Read-only aggregate views for dashboards and table selection
"""

from sqlmodel import SQLModel
from typing import Dict, Optional, List
import uuid

from tableside.schemas.table import TableRead, TablePlacementRead
from tableside.schemas.order import OrderRead
from tableside.services.order_lifecycle import OccupancyLabel


class TableView(SQLModel):
    """A table joined with its placement and its open order, if any"""
    table: TableRead
    placement: Optional[TablePlacementRead] = None
    order: Optional[OrderRead] = None
    occupancy: OccupancyLabel


class TableViewListResponse(SQLModel):
    items: List[TableView]
    poll_interval_seconds: int


class DashboardStats(SQLModel):
    active_orders: int
    completed_orders: int
    occupied_tables: int
    total_tables: int
    todays_revenue: int


class TableOccupancyResponse(SQLModel):
    """Live occupancy per table, vacant tables included"""
    items: Dict[uuid.UUID, OccupancyLabel]
    poll_interval_seconds: int
