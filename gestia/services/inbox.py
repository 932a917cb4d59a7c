"""
Messaging inbox: conversations with customers and their messages
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional
import uuid

from sqlmodel import Session
import structlog

from gestia.core.database import transaction
from gestia.core.events import INBOX_VIEW, revalidate_path
from gestia.core.permissions import Operation, authorize
from gestia.core.session import SessionContext
from gestia.core.tenancy import scoped_get, scoped_select, scoped_update
from gestia.models.conversation import (
    Conversation, ConversationStatus, Message, MessageDirection, MessageStatus,
)
from gestia.models.customer import Customer
from gestia.models.user import User
from gestia.schemas.inbox import (
    ConversationDetail, ConversationStart, ConversationSummary, CustomerSummary,
    MessageRead, SendMessage,
)
from gestia.schemas.validation import parse_input

logger = structlog.get_logger(__name__)


def list_conversations(
    db: Session,
    session: Optional[SessionContext],
) -> List[ConversationSummary]:
    """Conversations with customer and last message, most recent activity first"""
    company_id = authorize(session, Operation.INBOX_READ)

    rows = db.exec(
        scoped_select(Conversation, company_id)
        .order_by(Conversation.last_message_at.desc())
    ).all()

    summaries = []
    for conversation in rows:
        customer = scoped_get(db, Customer, company_id, conversation.customer_id, label="Customer")
        last_message = db.exec(
            scoped_select(Message, company_id)
            .where(Message.conversation_id == conversation.id)
            .order_by(Message.created_at.desc())
            .limit(1)
        ).first()
        summaries.append(ConversationSummary(
            id=conversation.id,
            channel=conversation.channel,
            status=conversation.status,
            last_message_at=conversation.last_message_at,
            assignee_id=conversation.assignee_id,
            customer=CustomerSummary.model_validate(customer),
            last_message=MessageRead.model_validate(last_message) if last_message else None,
        ))
    return summaries


def get_conversation(
    db: Session,
    session: Optional[SessionContext],
    conversation_id: uuid.UUID,
) -> ConversationDetail:
    """One conversation with its messages in chronological order"""
    company_id = authorize(session, Operation.INBOX_READ)
    conversation = scoped_get(db, Conversation, company_id, conversation_id, label="Conversation")
    customer = scoped_get(db, Customer, company_id, conversation.customer_id, label="Customer")

    messages = db.exec(
        scoped_select(Message, company_id)
        .where(Message.conversation_id == conversation.id)
        .order_by(Message.created_at.asc())
    ).all()

    return ConversationDetail(
        id=conversation.id,
        channel=conversation.channel,
        status=conversation.status,
        last_message_at=conversation.last_message_at,
        assignee_id=conversation.assignee_id,
        customer=CustomerSummary.model_validate(customer),
        messages=[MessageRead.model_validate(message) for message in messages],
    )


def start_conversation(
    db: Session,
    session: Optional[SessionContext],
    data: Mapping[str, Any],
) -> Conversation:
    """Open a conversation with one of the company's customers"""
    company_id = authorize(session, Operation.INBOX_WRITE)
    payload = parse_input(ConversationStart, data)

    scoped_get(db, Customer, company_id, payload.customer_id, label="Customer")
    if payload.assignee_id is not None:
        scoped_get(db, User, company_id, payload.assignee_id, label="Assignee")

    conversation = Conversation(
        company_id=company_id,
        customer_id=payload.customer_id,
        assignee_id=payload.assignee_id,
        channel=payload.channel,
        status=ConversationStatus.OPEN,
    )
    db.add(conversation)
    db.commit()
    db.refresh(conversation)

    logger.info("conversation_started", conversation_id=str(conversation.id), company_id=str(company_id))
    revalidate_path(company_id, INBOX_VIEW)
    return conversation


def send_message(
    db: Session,
    session: Optional[SessionContext],
    data: Mapping[str, Any],
) -> Message:
    """Append an outbound message and mark the conversation as awaiting the customer"""
    company_id = authorize(session, Operation.INBOX_WRITE)
    payload = parse_input(SendMessage, data)

    conversation = scoped_get(db, Conversation, company_id, payload.conversation_id, label="Conversation")
    now = datetime.utcnow()

    message = Message(
        company_id=company_id,
        conversation_id=conversation.id,
        customer_id=conversation.customer_id,
        direction=MessageDirection.OUTBOUND,
        content=payload.content,
        status=MessageStatus.SENT,
        created_at=now,
    )
    with transaction(db):
        db.add(message)
        scoped_update(db, Conversation, company_id, conversation.id, {
            "last_message_at": now,
            "status": ConversationStatus.PENDING,
        }, label="Conversation")
    db.refresh(message)

    logger.info(
        "message_sent",
        message_id=str(message.id),
        conversation_id=str(conversation.id),
        company_id=str(company_id),
    )
    revalidate_path(company_id, INBOX_VIEW)
    return message
