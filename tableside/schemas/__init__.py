"""
Schemas module
"""

from tableside.schemas.table import (
    TableCreate, TableRead, FloorPlanCreate, FloorPlanUpdate, FloorPlanRead,
    FloorPlanWithPlacements, TablePlacementCreate, TablePlacementUpdate,
    TablePlacementRead, TableMove,
)
from tableside.schemas.order import (
    Cart, CartLine, OrderLineRead, OrderRead, OrderStatusUpdate, BillRead,
    OrderDetail, OrderListResponse,
)
from tableside.schemas.menu import MenuItemCreate, MenuItemRead
from tableside.schemas.views import (
    TableView, TableViewListResponse, TableOccupancyResponse, DashboardStats
)

__all__ = [
    "TableCreate",
    "TableRead",
    "FloorPlanCreate",
    "FloorPlanUpdate",
    "FloorPlanRead",
    "FloorPlanWithPlacements",
    "TablePlacementCreate",
    "TablePlacementUpdate",
    "TablePlacementRead",
    "TableMove",
    "Cart",
    "CartLine",
    "OrderLineRead",
    "OrderRead",
    "OrderStatusUpdate",
    "BillRead",
    "OrderDetail",
    "OrderListResponse",
    "MenuItemCreate",
    "MenuItemRead",
    "TableView",
    "TableViewListResponse",
    "TableOccupancyResponse",
    "DashboardStats",
]
