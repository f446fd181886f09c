"""
Table/order aggregation for dashboards and table selection

Joins tables with their active placement and their single open order. Views
are rebuilt on demand from whatever the caller loaded; nothing here writes.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional
import uuid

from tableside.core.events import EventBus, OrderPlaced, OrderStatusChanged
from tableside.core.exceptions import InvariantViolationError
from tableside.models.order import Order, OrderStatus
from tableside.models.table import Table
from tableside.models.table_placement import TablePlacement
from tableside.schemas.order import OrderRead
from tableside.schemas.table import TableRead, TablePlacementRead
from tableside.schemas.views import TableView, DashboardStats
from tableside.services.order_lifecycle import (
    OccupancyLabel, derive_table_occupancy
)

ACTIVE_STATUSES = frozenset({OrderStatus.PLACED, OrderStatus.UNDER_PROCESS, OrderStatus.SERVED})
CLOSED_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.PAID})


def open_orders_by_table(orders: Iterable[Order]) -> Dict[uuid.UUID, Order]:
    """Map each table to its non-terminal order.

    Raises InvariantViolationError when a table has more than one.
    """
    grouped = defaultdict(list)
    for order in orders:
        if not order.is_terminal():
            grouped[order.table_id].append(order)

    result = {}
    for table_id, table_orders in grouped.items():
        if len(table_orders) > 1:
            raise InvariantViolationError(
                f"Table {table_id} has {len(table_orders)} open orders",
                table_id=table_id,
                order_ids=[order.id for order in table_orders],
            )
        result[table_id] = table_orders[0]
    return result


def build_table_view(table: Table, placement: Optional[TablePlacement] = None,
                     order: Optional[Order] = None) -> TableView:
    return TableView(
        table=TableRead.model_validate(table),
        placement=TablePlacementRead.model_validate(placement) if placement is not None else None,
        order=OrderRead.model_validate(order) if order is not None else None,
        occupancy=derive_table_occupancy(order),
    )


def list_tables_with_orders(
    tables: Iterable[Table],
    placements: Iterable[TablePlacement],
    orders: Iterable[Order],
    restaurant_id: int,
    floor_number: Optional[int] = None,
) -> List[TableView]:
    """Views for every table of a restaurant, optionally limited to one floor"""
    placement_by_table = {}
    for placement in placements:
        if placement.is_active:
            placement_by_table.setdefault(placement.table_id, placement)

    in_scope = [
        table for table in tables
        if table.restaurant_id == restaurant_id
        and (floor_number is None or table.floor_number == floor_number)
    ]
    in_scope_ids = {table.id for table in in_scope}
    open_orders = open_orders_by_table(
        order for order in orders
        if order.restaurant_id == restaurant_id and order.table_id in in_scope_ids
    )

    views = []
    for table in sorted(in_scope, key=lambda t: (t.floor_number, t.table_number)):
        views.append(build_table_view(
            table,
            placement_by_table.get(table.id),
            open_orders.get(table.id),
        ))
    return views


def todays_window(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Local midnight-to-midnight bounds of the day containing now"""
    now = now or datetime.now()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def compute_stats(
    restaurant_id: int,
    tables: Iterable[Table],
    orders: Iterable[Order],
    now: Optional[datetime] = None,
) -> DashboardStats:
    """Dashboard counters for a restaurant"""
    orders = [order for order in orders if order.restaurant_id == restaurant_id]
    tables = [table for table in tables if table.restaurant_id == restaurant_id]
    start, end = todays_window(now)

    def created_today(order: Order) -> bool:
        return start <= order.created_at < end

    views = list_tables_with_orders(tables, (), orders, restaurant_id)
    return DashboardStats(
        active_orders=sum(1 for order in orders if OrderStatus(order.status) in ACTIVE_STATUSES),
        completed_orders=sum(
            1 for order in orders
            if OrderStatus(order.status) in CLOSED_STATUSES and created_today(order)
        ),
        occupied_tables=sum(1 for view in views if view.occupancy != OccupancyLabel.VACANT),
        total_tables=len(tables),
        todays_revenue=sum(
            order.total_amount for order in orders
            if OrderStatus(order.status) == OrderStatus.PAID and created_today(order)
        ),
    )


class OccupancyBoard:
    """Live table occupancy kept up to date from order events"""

    def __init__(self):
        self._labels: Dict[uuid.UUID, OccupancyLabel] = {}

    def attach(self, bus: EventBus) -> None:
        bus.subscribe(OrderPlaced.__name__, self.handle)
        bus.subscribe(OrderStatusChanged.__name__, self.handle)

    def detach(self, bus: EventBus) -> None:
        bus.unsubscribe(OrderPlaced.__name__, self.handle)
        bus.unsubscribe(OrderStatusChanged.__name__, self.handle)

    def seed(self, views: Iterable[TableView]) -> None:
        """Start from a freshly computed set of views"""
        self._labels = {
            view.table.id: view.occupancy
            for view in views
            if view.occupancy != OccupancyLabel.VACANT
        }

    def seed_orders(self, orders: Iterable[Order]) -> None:
        """Start from the open orders currently stored"""
        self._labels = {
            table_id: derive_table_occupancy(order)
            for table_id, order in open_orders_by_table(orders).items()
        }

    def handle(self, event) -> None:
        # Order events carry the new status the same way an Order does
        label = derive_table_occupancy(event)
        if label == OccupancyLabel.VACANT:
            self._labels.pop(event.table_id, None)
        else:
            self._labels[event.table_id] = label

    def occupancy_for(self, table_id: uuid.UUID) -> OccupancyLabel:
        return self._labels.get(table_id, OccupancyLabel.VACANT)

    def occupied_table_ids(self) -> List[uuid.UUID]:
        return list(self._labels)


# Global occupancy board, attached to the event bus on application startup
occupancy_board = OccupancyBoard()
