"""
Persistence collaborator for the ordering and floor-plan core

Loads rows through a SQLModel session, hands in-memory instances to the
layout engine and the order lifecycle, commits only after they accept a
change and then publishes the matching domain event.
"""

from datetime import datetime
from typing import List, Optional
import uuid

from sqlalchemy import or_
from sqlmodel import Session, col, select
import structlog

from tableside.core.config import get_settings
from tableside.core.events import (
    EventBus, OrderPlaced, OrderStatusChanged, TablePlacementChanged,
    TablePlacementRemoved, event_bus
)
from tableside.core.exceptions import (
    ConflictError, InvariantViolationError, NotFoundError, ValidationError
)
from tableside.models import (
    FloorPlan, MenuItem, Order, OrderLine, OrderStatus, Payment, Table, TablePlacement
)
from tableside.schemas.menu import MenuItemCreate
from tableside.schemas.order import Cart
from tableside.schemas.table import (
    FloorPlanCreate, FloorPlanUpdate, TableCreate, TablePlacementCreate, TablePlacementUpdate
)
from tableside.schemas.views import DashboardStats, TableView
from tableside.services.floor_layout import FloorPlanLayout
from tableside.services.order_lifecycle import (
    Bill, advance, calculate_bill_for, create_order, find_open_order, parse_status
)
from tableside.services.table_views import (
    compute_stats, list_tables_with_orders, todays_window
)

logger = structlog.get_logger(__name__)


class Storage:
    """Database-backed access to tables, floor plans, menu items and orders"""

    def __init__(self, session: Session, bus: EventBus = event_bus):
        self.session = session
        self.bus = bus
        self.settings = get_settings()

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def create_table(self, data: TableCreate) -> Table:
        existing = self.session.exec(
            select(Table).where(
                Table.restaurant_id == data.restaurant_id,
                Table.floor_number == data.floor_number,
                Table.table_number == data.table_number,
            )
        ).first()
        if existing:
            raise ConflictError(
                f"Table {data.table_number} already exists on floor {data.floor_number}"
            )

        table = Table(**data.model_dump())
        self.session.add(table)
        self.session.commit()
        self.session.refresh(table)

        logger.info(f"Table created: {table.id}")
        return table

    def get_table(self, table_id: uuid.UUID) -> Table:
        table = self.session.get(Table, table_id)
        if not table:
            raise NotFoundError(f"Table {table_id} not found")
        return table

    def list_tables(self, restaurant_id: int, floor_number: Optional[int] = None) -> List[Table]:
        query = select(Table).where(Table.restaurant_id == restaurant_id)
        if floor_number is not None:
            query = query.where(Table.floor_number == floor_number)
        query = query.order_by(Table.floor_number, Table.table_number)
        return list(self.session.exec(query).all())

    def delete_table(self, table_id: uuid.UUID) -> None:
        """Delete a table and its placements; refused while any order references it"""
        table = self.get_table(table_id)
        referencing = self.orders_for_table(table_id)
        if referencing:
            blocking = find_open_order(table_id, referencing) or referencing[0]
            raise ConflictError(
                f"Table {table_id} is referenced by {len(referencing)} order(s)",
                order_id=blocking.id,
            )

        placements = self.session.exec(
            select(TablePlacement).where(TablePlacement.table_id == table_id)
        ).all()
        for placement in placements:
            self.session.delete(placement)
        self.session.delete(table)
        self.session.commit()
        logger.info(f"Table deleted: {table_id}")

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        if data.price < 0:
            raise ValidationError("Menu item price must not be negative")
        menu_item = MenuItem(**data.model_dump())
        self.session.add(menu_item)
        self.session.commit()
        self.session.refresh(menu_item)
        logger.info(f"Menu item created: {menu_item.id}")
        return menu_item

    def list_menu_items(self, restaurant_id: int, category: Optional[str] = None) -> List[MenuItem]:
        query = select(MenuItem).where(MenuItem.restaurant_id == restaurant_id)
        if category and category != "all":
            query = query.where(MenuItem.category == category)
        return list(self.session.exec(query.order_by(MenuItem.name)).all())

    # ------------------------------------------------------------------
    # Floor plans
    # ------------------------------------------------------------------

    def create_floor_plan(self, data: FloorPlanCreate) -> FloorPlan:
        if data.width < 1 or data.height < 1:
            raise ValidationError("Floor plan width and height must be positive")
        floor_plan = FloorPlan(**data.model_dump())
        self.session.add(floor_plan)
        self.session.commit()
        self.session.refresh(floor_plan)
        logger.info(f"Floor plan created: {floor_plan.id}")
        return floor_plan

    def get_floor_plan(self, floor_plan_id: uuid.UUID) -> FloorPlan:
        floor_plan = self.session.get(FloorPlan, floor_plan_id)
        if not floor_plan:
            raise NotFoundError(f"Floor plan {floor_plan_id} not found")
        return floor_plan

    def list_floor_plans(self, restaurant_id: int) -> List[FloorPlan]:
        return list(self.session.exec(
            select(FloorPlan)
            .where(FloorPlan.restaurant_id == restaurant_id)
            .order_by(FloorPlan.floor_number)
        ).all())

    def list_placements(self, floor_plan_id: uuid.UUID) -> List[TablePlacement]:
        return list(self.session.exec(
            select(TablePlacement).where(TablePlacement.floor_plan_id == floor_plan_id)
        ).all())

    def load_layout(self, floor_plan_id: uuid.UUID) -> FloorPlanLayout:
        floor_plan = self.get_floor_plan(floor_plan_id)
        return FloorPlanLayout(
            floor_plan,
            self.list_placements(floor_plan_id),
            margin_distance=self.settings.FLOOR_MARGIN_DISTANCE,
        )

    def update_floor_plan(self, floor_plan_id: uuid.UUID, data: FloorPlanUpdate) -> FloorPlan:
        """Rename or resize a floor plan; resizing re-validates every placed table"""
        layout = self.load_layout(floor_plan_id)
        floor_plan = layout.floor_plan
        updates = data.model_dump(exclude_unset=True, exclude_none=True)

        width = updates.pop("width", floor_plan.width)
        height = updates.pop("height", floor_plan.height)
        if (width, height) != (floor_plan.width, floor_plan.height):
            layout.resize_floor(width, height)

        for key, value in updates.items():
            setattr(floor_plan, key, value)
        floor_plan.updated_at = datetime.now()

        self.session.add(floor_plan)
        self.session.commit()
        self.session.refresh(floor_plan)
        logger.info(f"Floor plan updated: {floor_plan_id}")
        return floor_plan

    def add_table_placement(self, floor_plan_id: uuid.UUID, data: TablePlacementCreate) -> TablePlacement:
        layout = self.load_layout(floor_plan_id)
        table = self.get_table(data.table_id)
        if table.restaurant_id != layout.floor_plan.restaurant_id:
            raise ValidationError("Table belongs to a different restaurant")
        if table.floor_number != layout.floor_plan.floor_number:
            raise ValidationError(
                f"Table {table.table_number} is on floor {table.floor_number}, "
                f"not floor {layout.floor_plan.floor_number}"
            )

        # A table is placed on at most one floor plan
        existing = self.session.exec(
            select(TablePlacement).where(
                TablePlacement.table_id == table.id,
                TablePlacement.is_active == True,
            )
        ).first()
        if existing:
            raise ConflictError(
                f"Table {table.table_number} is already placed on floor plan {existing.floor_plan_id}"
            )

        placement = layout.add_table(TablePlacement(**data.model_dump()))
        return self._save_placement(placement)

    def move_table(self, floor_plan_id: uuid.UUID, table_id: uuid.UUID,
                   direction: str, step: Optional[int] = None) -> TablePlacement:
        layout = self.load_layout(floor_plan_id)
        return self._save_placement(layout.move(table_id, direction, step))

    def update_table_placement(self, floor_plan_id: uuid.UUID, table_id: uuid.UUID,
                               data: TablePlacementUpdate) -> TablePlacement:
        layout = self.load_layout(floor_plan_id)
        placement = layout.place(
            table_id,
            x=data.x_position,
            y=data.y_position,
            width=data.width,
            height=data.height,
        )
        return self._save_placement(placement)

    def remove_table_placement(self, floor_plan_id: uuid.UUID, table_id: uuid.UUID) -> None:
        layout = self.load_layout(floor_plan_id)
        placement = layout.remove_table(table_id)
        if placement is None:
            raise NotFoundError(f"Table {table_id} is not placed on floor plan {floor_plan_id}")

        self.session.delete(placement)
        self.session.commit()
        logger.info(f"Table {table_id} removed from floor plan {floor_plan_id}")
        self.bus.publish(TablePlacementRemoved(floor_plan_id=floor_plan_id, table_id=table_id))

    def _save_placement(self, placement: TablePlacement) -> TablePlacement:
        self.session.add(placement)
        self.session.commit()
        self.session.refresh(placement)

        logger.info(
            f"Table {placement.table_id} placed at ({placement.x_position}, {placement.y_position}) "
            f"size {placement.width}x{placement.height}"
        )
        self.bus.publish(TablePlacementChanged(
            floor_plan_id=placement.floor_plan_id,
            table_id=placement.table_id,
            x_position=placement.x_position,
            y_position=placement.y_position,
            width=placement.width,
            height=placement.height,
        ))
        return placement

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def get_order(self, order_id: uuid.UUID) -> Order:
        order = self.session.get(Order, order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def list_orders(self, restaurant_id: Optional[int] = None,
                    status: Optional[OrderStatus] = None) -> List[Order]:
        query = select(Order)
        if restaurant_id is not None:
            query = query.where(Order.restaurant_id == restaurant_id)
        if status is not None:
            query = query.where(Order.status == parse_status(status))
        return list(self.session.exec(query.order_by(Order.created_at)).all())

    def list_open_orders(self, restaurant_id: Optional[int] = None) -> List[Order]:
        """Orders that still hold their table"""
        query = select(Order).where(Order.status != OrderStatus.PAID)
        if restaurant_id is not None:
            query = query.where(Order.restaurant_id == restaurant_id)
        return list(self.session.exec(query).all())

    def orders_for_table(self, table_id: uuid.UUID) -> List[Order]:
        return list(self.session.exec(
            select(Order).where(Order.table_id == table_id)
        ).all())

    def get_active_order(self, table_id: uuid.UUID) -> Optional[Order]:
        """The open order for a table; more than one is a data integrity error"""
        open_orders = self.session.exec(
            select(Order).where(Order.table_id == table_id, Order.status != OrderStatus.PAID)
        ).all()
        if len(open_orders) > 1:
            logger.error(f"Table {table_id} has {len(open_orders)} open orders")
            raise InvariantViolationError(
                f"Table {table_id} has {len(open_orders)} open orders",
                table_id=table_id,
                order_ids=[order.id for order in open_orders],
            )
        return open_orders[0] if open_orders else None

    def create_order_from_cart(self, cart: Cart) -> Order:
        """Snapshot menu prices for each cart line and place the order"""
        table = self.get_table(cart.table_id)
        if table.restaurant_id != cart.restaurant_id:
            raise ValidationError("Table belongs to a different restaurant")

        lines = []
        for cart_line in cart.lines:
            menu_item = self.session.get(MenuItem, cart_line.menu_item_id)
            if not menu_item or menu_item.restaurant_id != table.restaurant_id:
                raise ValidationError(f"Menu item {cart_line.menu_item_id} not found")
            if not menu_item.available:
                raise ValidationError(f"{menu_item.name} is not available")
            lines.append(OrderLine(
                menu_item_id=menu_item.id,
                name=menu_item.name,
                description=menu_item.description,
                quantity=cart_line.quantity,
                price=menu_item.price,
            ))

        order = create_order(
            table.id,
            lines,
            existing_orders=self.orders_for_table(table.id),
            restaurant_id=table.restaurant_id,
        )
        self.session.add(order)
        self.session.commit()
        self.session.refresh(order)

        logger.info(f"Order created: {order.id} for table {table.id}")
        self.bus.publish(OrderPlaced(
            order_id=order.id,
            table_id=order.table_id,
            restaurant_id=order.restaurant_id,
            total_amount=order.total_amount,
        ))
        return order

    def advance_order(self, order_id: uuid.UUID, requested_status,
                      expected_version: Optional[int] = None) -> Order:
        """Advance an order one step, issuing or settling its bill on the way.

        ``expected_version`` lets callers detect that somebody else changed
        the order since they read it.
        """
        order = self.get_order(order_id)
        if expected_version is not None and order.version != expected_version:
            raise ConflictError(
                "Order was modified by another user. Please refresh and try again.",
                order_id=order.id,
            )

        previous_status = OrderStatus(order.status)
        advance(order, requested_status)

        if order.status == OrderStatus.COMPLETED:
            self._issue_bill(order)
        elif order.status == OrderStatus.PAID:
            self._settle_bill(order)

        self.session.add(order)
        self.session.commit()
        self.session.refresh(order)

        logger.info(f"Order {order.id} advanced from {previous_status.value} to {order.status.value}")
        self.bus.publish(OrderStatusChanged(
            order_id=order.id,
            table_id=order.table_id,
            restaurant_id=order.restaurant_id,
            previous_status=previous_status.value,
            status=order.status.value,
        ))
        return order

    def bill_for(self, order: Order) -> Bill:
        return calculate_bill_for(
            order,
            tax_rate=self.settings.TAX_RATE,
            service_charge_rate=self.settings.SERVICE_CHARGE_RATE,
        )

    def get_payment_for_order(self, order_id: uuid.UUID) -> Optional[Payment]:
        return self.session.exec(
            select(Payment).where(Payment.order_id == order_id)
        ).first()

    def _issue_bill(self, order: Order) -> Payment:
        bill = self.bill_for(order)
        payment = Payment(
            order_id=order.id,
            restaurant_id=order.restaurant_id,
            subtotal=bill.subtotal,
            tax_amount=bill.tax,
            service_charge=bill.service_charge,
            amount=bill.total,
            payment_url=f"/payments/{order.id}",
        )
        self.session.add(payment)
        return payment

    def _settle_bill(self, order: Order) -> Payment:
        payment = self.get_payment_for_order(order.id) or self._issue_bill(order)
        payment.mark_paid()
        self.session.add(payment)
        return payment

    # ------------------------------------------------------------------
    # Aggregate views
    # ------------------------------------------------------------------

    def list_tables_with_orders(self, restaurant_id: int,
                                floor_number: Optional[int] = None) -> List[TableView]:
        tables = self.list_tables(restaurant_id, floor_number)
        table_ids = [table.id for table in tables]
        placements = self.session.exec(
            select(TablePlacement).where(col(TablePlacement.table_id).in_(table_ids))
        ).all() if table_ids else []
        open_orders = self.session.exec(
            select(Order).where(
                Order.restaurant_id == restaurant_id,
                Order.status != OrderStatus.PAID,
                col(Order.table_id).in_(table_ids),
            )
        ).all() if table_ids else []

        try:
            return list_tables_with_orders(tables, placements, open_orders, restaurant_id, floor_number)
        except InvariantViolationError as e:
            logger.error(f"Table view invariant violated: {e.detail}", table_id=str(e.table_id))
            raise

    def compute_stats(self, restaurant_id: int, now: Optional[datetime] = None) -> DashboardStats:
        start, end = todays_window(now)
        orders = self.session.exec(
            select(Order).where(
                Order.restaurant_id == restaurant_id,
                or_(
                    Order.status != OrderStatus.PAID,
                    (Order.created_at >= start) & (Order.created_at < end),
                ),
            )
        ).all()

        try:
            return compute_stats(restaurant_id, self.list_tables(restaurant_id), orders, now=now)
        except InvariantViolationError as e:
            logger.error(f"Dashboard stats invariant violated: {e.detail}", table_id=str(e.table_id))
            raise
