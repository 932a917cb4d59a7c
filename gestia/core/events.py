"""
Domain events system

Services publish events after a mutation has been committed. The main
consumer is view invalidation: every successful write announces which
dashboard pages of which company now show stale data.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Tuple
import uuid
import structlog

logger = structlog.get_logger(__name__)

CUSTOMERS_VIEW = "/dashboard/customers"
CALENDAR_VIEW = "/dashboard/calendar"
EMPLOYEES_VIEW = "/dashboard/employees"
INBOX_VIEW = "/dashboard/inbox"


class DomainEvent:
    """Base class for domain events"""

    def __init__(self, event_id: uuid.UUID = None):
        self.event_id = event_id or uuid.uuid4()
        self.occurred_at = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary"""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "event_type": self.__class__.__name__
        }


class ViewsInvalidated(DomainEvent):
    """Event fired when cached pages of a company must be re-rendered"""

    def __init__(
        self,
        company_id: uuid.UUID,
        paths: Tuple[str, ...],
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.company_id = company_id
        self.paths = paths

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "company_id": str(self.company_id),
            "paths": list(self.paths)
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
        logger.debug("Subscribed handler to event type", event_type=event_type)

    def unsubscribe(self, event_type: str, handler: Callable):
        """Unsubscribe from an event type"""
        if event_type in self._subscribers:
            self._subscribers[event_type].remove(handler)
            logger.debug("Unsubscribed handler from event type", event_type=event_type)

    def publish(self, event: DomainEvent):
        """Publish an event to all subscribers; handler errors are logged only"""
        event_type = event.__class__.__name__
        handlers = list(self._subscribers.get(event_type, []))

        if not handlers:
            logger.debug("No subscribers for event type", event_type=event_type)
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Error in event handler", event_type=event_type)

    def clear_subscribers(self):
        """Clear all subscribers (useful for testing)"""
        self._subscribers.clear()
        logger.debug("Cleared all event subscribers")


# Global event bus instance
event_bus = EventBus()


def revalidate_path(company_id: uuid.UUID, *paths: str) -> None:
    """Announce that the given pages of a company are stale"""
    event_bus.publish(ViewsInvalidated(company_id=company_id, paths=tuple(paths)))
