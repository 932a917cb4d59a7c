"""
Inbox API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
import uuid

from gestia.core.database import get_session
from gestia.core.dependencies import get_session_context
from gestia.core.session import SessionContext
from gestia.schemas.inbox import (
    ConversationDetail, ConversationRead, ConversationSummary, MessageRead,
)
from gestia.services import inbox

router = APIRouter()


@router.get("/conversations", response_model=List[ConversationSummary])
async def list_conversations(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return inbox.list_conversations(db, context)


@router.post("/conversations", response_model=ConversationRead, status_code=status.HTTP_201_CREATED)
async def start_conversation(
    conversation_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return inbox.start_conversation(db, context, conversation_data)


@router.get("/conversations/{conversation_id}", response_model=ConversationDetail)
async def get_conversation(
    conversation_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return inbox.get_conversation(db, context, conversation_id)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: uuid.UUID,
    message_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    """Send an outbound message in a conversation"""
    payload = {**message_data, "conversation_id": conversation_id}
    return inbox.send_message(db, context, payload)
