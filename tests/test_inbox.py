"""
Unit tests for the messaging inbox
"""

import pytest
from datetime import timedelta

from sqlmodel import select

from gestia.core.errors import InvalidInput, NotFound
from gestia.core.events import INBOX_VIEW
from gestia.models.conversation import (
    Conversation, ConversationStatus, Message, MessageDirection, MessageStatus,
)
from gestia.services import inbox

from conftest import make_customer, session_for


@pytest.fixture
def conversation_a(db, secretary_a, customer_a):
    return inbox.start_conversation(db, session_for(secretary_a), {"customer_id": str(customer_a.id)})


def test_start_conversation(db, secretary_a, customer_a, conversation_a, invalidated_views):
    assert conversation_a.company_id == secretary_a.company_id
    assert conversation_a.customer_id == customer_a.id
    assert conversation_a.status == ConversationStatus.OPEN
    assert invalidated_views[-1].paths == (INBOX_VIEW,)


def test_send_message(db, secretary_a, customer_a, conversation_a, invalidated_views):
    message = inbox.send_message(db, session_for(secretary_a), {
        "conversation_id": str(conversation_a.id),
        "content": "  Your appointment is confirmed  ",
    })

    assert message.company_id == secretary_a.company_id
    assert message.customer_id == customer_a.id
    assert message.direction == MessageDirection.OUTBOUND
    assert message.status == MessageStatus.SENT
    assert message.content == "Your appointment is confirmed"

    db.expire_all()
    conversation = db.get(Conversation, conversation_a.id)
    assert conversation.status == ConversationStatus.PENDING
    assert conversation.last_message_at == message.created_at
    assert invalidated_views[-1].paths == (INBOX_VIEW,)


def test_send_empty_message_is_rejected(db, secretary_a, conversation_a):
    with pytest.raises(InvalidInput) as exc_info:
        inbox.send_message(db, session_for(secretary_a), {
            "conversation_id": str(conversation_a.id),
            "content": "   ",
        })
    assert "content" in exc_info.value.field_errors
    assert db.exec(select(Message)).all() == []


def test_send_to_other_company_conversation_is_not_found(db, admin_b, conversation_a):
    with pytest.raises(NotFound):
        inbox.send_message(db, session_for(admin_b), {
            "conversation_id": str(conversation_a.id),
            "content": "Hello",
        })

    assert db.exec(select(Message)).all() == []
    db.expire_all()
    assert db.get(Conversation, conversation_a.id).status == ConversationStatus.OPEN


def test_get_conversation_messages_in_order(db, secretary_a, conversation_a):
    session = session_for(secretary_a)
    for content in ("first", "second", "third"):
        inbox.send_message(db, session, {"conversation_id": str(conversation_a.id), "content": content})

    detail = inbox.get_conversation(db, session, conversation_a.id)

    assert [message.content for message in detail.messages] == ["first", "second", "third"]
    assert detail.customer.id == conversation_a.customer_id


def test_list_conversations_by_latest_activity(db, secretary_a, company_a, customer_a, conversation_a):
    session = session_for(secretary_a)
    other_customer = make_customer(db, company_a, first_name="Carlo")
    newer = inbox.start_conversation(db, session, {"customer_id": str(other_customer.id)})
    conversation_a.last_message_at = newer.last_message_at - timedelta(minutes=5)
    db.add(conversation_a)
    db.commit()

    inbox.send_message(db, session, {"conversation_id": str(conversation_a.id), "content": "Ping"})

    listed = inbox.list_conversations(db, session)
    assert [summary.id for summary in listed] == [conversation_a.id, newer.id]
    assert listed[0].last_message.content == "Ping"
    assert listed[0].customer.first_name == customer_a.first_name
    assert listed[1].last_message is None


def test_list_conversations_scoped_to_company(db, admin_b, conversation_a):
    assert inbox.list_conversations(db, session_for(admin_b)) == []
