"""
Domain events system

Domain events represent important business events that can be published
and subscribed to by multiple parts of the system.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import uuid
import structlog

logger = structlog.get_logger(__name__)


class DomainEvent:
    """Base class for domain events"""

    def __init__(self, event_id: uuid.UUID = None):
        self.event_id = event_id or uuid.uuid4()
        self.occurred_at = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary"""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "event_type": self.__class__.__name__
        }


class OrderPlaced(DomainEvent):
    """Event fired when a customer submits an order against a table"""

    def __init__(
        self,
        order_id: uuid.UUID,
        table_id: uuid.UUID,
        restaurant_id: int,
        total_amount: int,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.order_id = order_id
        self.table_id = table_id
        self.restaurant_id = restaurant_id
        self.total_amount = total_amount
        self.status = "placed"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "order_id": str(self.order_id),
            "table_id": str(self.table_id),
            "restaurant_id": self.restaurant_id,
            "total_amount": self.total_amount,
            "status": self.status
        })
        return data


class OrderStatusChanged(DomainEvent):
    """Event fired when an order advances to its next status"""

    def __init__(
        self,
        order_id: uuid.UUID,
        table_id: uuid.UUID,
        restaurant_id: int,
        previous_status: str,
        status: str,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.order_id = order_id
        self.table_id = table_id
        self.restaurant_id = restaurant_id
        self.previous_status = previous_status
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "order_id": str(self.order_id),
            "table_id": str(self.table_id),
            "restaurant_id": self.restaurant_id,
            "previous_status": self.previous_status,
            "status": self.status
        })
        return data


class TablePlacementChanged(DomainEvent):
    """Event fired when a table is added to, moved or resized on a floor plan"""

    def __init__(
        self,
        floor_plan_id: uuid.UUID,
        table_id: uuid.UUID,
        x_position: int,
        y_position: int,
        width: int,
        height: int,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.floor_plan_id = floor_plan_id
        self.table_id = table_id
        self.x_position = x_position
        self.y_position = y_position
        self.width = width
        self.height = height

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "floor_plan_id": str(self.floor_plan_id),
            "table_id": str(self.table_id),
            "x_position": self.x_position,
            "y_position": self.y_position,
            "width": self.width,
            "height": self.height
        })
        return data


class TablePlacementRemoved(DomainEvent):
    """Event fired when a table is taken off a floor plan"""

    def __init__(
        self,
        floor_plan_id: uuid.UUID,
        table_id: uuid.UUID,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.floor_plan_id = floor_plan_id
        self.table_id = table_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "floor_plan_id": str(self.floor_plan_id),
            "table_id": str(self.table_id)
        })
        return data


class EventBus:
    """Simple in-memory event bus for publishing domain events"""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, handler: Callable):
        """Subscribe to a specific event type"""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)
        logger.debug(f"Subscribed handler to event type: {event_type}")

    def unsubscribe(self, event_type: str, handler: Callable):
        """Unsubscribe from an event type"""
        if event_type in self._subscribers:
            self._subscribers[event_type].remove(handler)
            logger.debug(f"Unsubscribed handler from event type: {event_type}")

    def publish(self, event: DomainEvent):
        """Publish an event to all subscribers"""
        event_type = event.__class__.__name__
        handlers = self._subscribers.get(event_type, [])

        if not handlers:
            logger.debug(f"No subscribers for event type: {event_type}")
            return

        logger.info(f"Publishing event {event_type}: {event.event_id}")

        # Handlers run after the publisher committed; a failing handler must
        # not undo or mask that commit.
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event_type}: {e}", exc_info=True)

    def clear_subscribers(self):
        """Clear all subscribers (useful for testing)"""
        self._subscribers.clear()
        logger.debug("Cleared all event subscribers")


# Global event bus instance
event_bus = EventBus()
