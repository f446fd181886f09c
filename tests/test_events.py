"""
Unit tests for domain events and the event bus
"""

import uuid

from tableside.core.events import (
    EventBus, OrderPlaced, OrderStatusChanged, TablePlacementChanged, TablePlacementRemoved
)


def test_event_to_dict():
    """Test events serialize their identifiers as strings"""
    order_id, table_id = uuid.uuid4(), uuid.uuid4()
    event = OrderStatusChanged(
        order_id=order_id,
        table_id=table_id,
        restaurant_id=3,
        previous_status="placed",
        status="under_process",
    )

    data = event.to_dict()

    assert data["event_type"] == "OrderStatusChanged"
    assert data["order_id"] == str(order_id)
    assert data["table_id"] == str(table_id)
    assert data["previous_status"] == "placed"
    assert data["status"] == "under_process"
    assert "occurred_at" in data


def test_order_placed_carries_placed_status():
    """Test a new order event reports the initial status"""
    event = OrderPlaced(order_id=uuid.uuid4(), table_id=uuid.uuid4(), restaurant_id=1, total_amount=2500)
    assert event.status == "placed"
    assert event.to_dict()["total_amount"] == 2500


def test_placement_events_to_dict():
    """Test placement events carry the floor plan and geometry"""
    floor_plan_id, table_id = uuid.uuid4(), uuid.uuid4()
    changed = TablePlacementChanged(floor_plan_id, table_id, 2, 3, 4, 5).to_dict()
    removed = TablePlacementRemoved(floor_plan_id, table_id).to_dict()

    assert (changed["x_position"], changed["y_position"], changed["width"], changed["height"]) == (2, 3, 4, 5)
    assert removed["floor_plan_id"] == str(floor_plan_id)
    assert removed["event_type"] == "TablePlacementRemoved"


def test_publish_reaches_subscribers_of_that_type_only():
    """Test handlers only receive the event type they subscribed to"""
    bus = EventBus()
    placed, removed = [], []
    bus.subscribe("OrderPlaced", placed.append)
    bus.subscribe("TablePlacementRemoved", removed.append)

    event = OrderPlaced(order_id=uuid.uuid4(), table_id=uuid.uuid4(), restaurant_id=1, total_amount=0)
    bus.publish(event)

    assert placed == [event]
    assert removed == []


def test_failing_handler_does_not_stop_others():
    """Test a broken subscriber is logged and the rest still run"""
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe("OrderPlaced", broken)
    bus.subscribe("OrderPlaced", received.append)

    bus.publish(OrderPlaced(order_id=uuid.uuid4(), table_id=uuid.uuid4(), restaurant_id=1, total_amount=0))

    assert len(received) == 1


def test_unsubscribe_and_clear():
    """Test handlers can be removed one by one or all at once"""
    bus = EventBus()
    received = []
    bus.subscribe("OrderPlaced", received.append)
    bus.unsubscribe("OrderPlaced", received.append)

    bus.publish(OrderPlaced(order_id=uuid.uuid4(), table_id=uuid.uuid4(), restaurant_id=1, total_amount=0))
    assert received == []

    bus.subscribe("OrderPlaced", received.append)
    bus.clear_subscribers()
    bus.publish(OrderPlaced(order_id=uuid.uuid4(), table_id=uuid.uuid4(), restaurant_id=1, total_amount=0))
    assert received == []
