"""
Pydantic schemas for the inbox
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
import uuid

from gestia.models.conversation import (
    Channel, ConversationStatus, MessageDirection, MessageStatus,
)


class SendMessage(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    conversation_id: uuid.UUID
    content: str = Field(..., min_length=1, max_length=4096)


class ConversationStart(BaseModel):
    customer_id: uuid.UUID
    channel: Channel = Channel.WHATSAPP
    assignee_id: Optional[uuid.UUID] = None


class CustomerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    phone_e164: str
    email: Optional[str] = None


class MessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    conversation_id: uuid.UUID
    direction: MessageDirection
    content: str
    status: MessageStatus
    created_at: datetime


class ConversationSummary(BaseModel):
    """Sidebar entry: conversation, customer and last message preview"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    channel: Channel
    status: ConversationStatus
    last_message_at: datetime
    assignee_id: Optional[uuid.UUID] = None
    customer: CustomerSummary
    last_message: Optional[MessageRead] = None


class ConversationDetail(BaseModel):
    """Conversation with all messages, oldest first"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    channel: Channel
    status: ConversationStatus
    last_message_at: datetime
    assignee_id: Optional[uuid.UUID] = None
    customer: CustomerSummary
    messages: List[MessageRead]


class ConversationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: uuid.UUID
    channel: Channel
    status: ConversationStatus
    last_message_at: datetime
    assignee_id: Optional[uuid.UUID] = None
