"""
Inbox conversation and message models
"""

from sqlmodel import Field, Relationship
from datetime import datetime
from typing import Optional, List
from enum import Enum
import uuid

from gestia.models.company import TenantOwned


class Channel(str, Enum):
    WHATSAPP = "WHATSAPP"
    SMS = "SMS"
    EMAIL = "EMAIL"


class ConversationStatus(str, Enum):
    OPEN = "OPEN"           # Waiting for a reply from the company
    PENDING = "PENDING"     # Company replied, waiting for the customer
    CLOSED = "CLOSED"


class MessageDirection(str, Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"


class MessageStatus(str, Enum):
    RECEIVED = "RECEIVED"
    SENDING = "SENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class Conversation(TenantOwned, table=True):
    """Thread of messages with a single customer on one channel"""

    __tablename__ = "conversations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    customer_id: uuid.UUID = Field(foreign_key="customers.id", ondelete="CASCADE", index=True)
    assignee_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", ondelete="SET NULL", index=True)

    channel: Channel = Field(default=Channel.WHATSAPP)
    status: ConversationStatus = Field(default=ConversationStatus.OPEN, index=True)
    last_message_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    messages: List["Message"] = Relationship(back_populates="conversation")


class Message(TenantOwned, table=True):
    """Single inbound or outbound message"""

    __tablename__ = "messages"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    conversation_id: uuid.UUID = Field(foreign_key="conversations.id", ondelete="CASCADE", index=True)
    customer_id: uuid.UUID = Field(foreign_key="customers.id", ondelete="CASCADE", index=True)

    direction: MessageDirection
    content: str
    status: MessageStatus = Field(default=MessageStatus.SENT)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    conversation: Optional[Conversation] = Relationship(back_populates="messages")
