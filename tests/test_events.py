"""
Unit tests for the domain event bus
"""

from unittest.mock import Mock
import uuid

from gestia.core.events import (
    CUSTOMERS_VIEW,
    EventBus,
    ViewsInvalidated,
    revalidate_path,
)


def test_publish_reaches_subscribers():
    bus = EventBus()
    handler = Mock()
    bus.subscribe(ViewsInvalidated.__name__, handler)

    event = ViewsInvalidated(company_id=uuid.uuid4(), paths=(CUSTOMERS_VIEW,))
    bus.publish(event)

    handler.assert_called_once_with(event)


def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    failing = Mock(side_effect=RuntimeError("boom"))
    working = Mock()
    bus.subscribe(ViewsInvalidated.__name__, failing)
    bus.subscribe(ViewsInvalidated.__name__, working)

    bus.publish(ViewsInvalidated(company_id=uuid.uuid4(), paths=(CUSTOMERS_VIEW,)))

    working.assert_called_once()


def test_unsubscribe():
    bus = EventBus()
    handler = Mock()
    bus.subscribe(ViewsInvalidated.__name__, handler)
    bus.unsubscribe(ViewsInvalidated.__name__, handler)

    bus.publish(ViewsInvalidated(company_id=uuid.uuid4(), paths=(CUSTOMERS_VIEW,)))

    handler.assert_not_called()


def test_event_to_dict():
    company_id = uuid.uuid4()
    data = ViewsInvalidated(company_id=company_id, paths=(CUSTOMERS_VIEW,)).to_dict()

    assert data["event_type"] == "ViewsInvalidated"
    assert data["company_id"] == str(company_id)
    assert data["paths"] == [CUSTOMERS_VIEW]


def test_revalidate_path_uses_global_bus(invalidated_views):
    company_id = uuid.uuid4()
    revalidate_path(company_id, CUSTOMERS_VIEW)

    assert invalidated_views[-1].company_id == company_id
    assert invalidated_views[-1].paths == (CUSTOMERS_VIEW,)
