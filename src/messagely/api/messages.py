"""Message API routes.

- POST /messages           → send as the logged-in user
- GET  /messages/{id}      → detail, if the requester is a party
- POST /messages/{id}/read → mark read, if the requester is the recipient

Every handler fetches the message first, runs the guard, and only then
builds a response, so a refused request never sees message content.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from messagely.auth.dependencies import get_current_user
from messagely.auth.guard import ensure_can_mark_read, ensure_can_view
from messagely.db.engine import get_db
from messagely.schemas.message import (
    MessageCreate,
    MessageDetail,
    MessageDetailResponse,
    MessageSent,
    MessageSentResponse,
    ReadReceipt,
    ReadReceiptResponse,
)
from messagely.services.message_service import MessageService

router = APIRouter(prefix="/messages")

# Ids are 64-bit signed integers in every supported backend.
MessageId = Annotated[int, Path(ge=1, le=2**63 - 1)]


def _svc(db: AsyncSession = Depends(get_db)) -> MessageService:
    return MessageService(db)


@router.post("", response_model=MessageSentResponse, status_code=201)
async def send_message(
    body: MessageCreate,
    current_user: str = Depends(get_current_user),
    svc: MessageService = Depends(_svc),
):
    msg = await svc.send(
        from_username=current_user,
        to_username=body.to_username,
        body=body.body,
    )
    return MessageSentResponse(message=MessageSent.model_validate(msg))


@router.get("/{message_id}", response_model=MessageDetailResponse)
async def get_message(
    message_id: MessageId,
    current_user: str = Depends(get_current_user),
    svc: MessageService = Depends(_svc),
):
    msg = await svc.get(message_id)
    ensure_can_view(current_user, msg)
    return MessageDetailResponse(message=MessageDetail.model_validate(msg))


@router.post("/{message_id}/read", response_model=ReadReceiptResponse)
async def mark_read(
    message_id: MessageId,
    current_user: str = Depends(get_current_user),
    svc: MessageService = Depends(_svc),
):
    msg = await svc.get(message_id)
    ensure_can_mark_read(current_user, msg)
    msg = await svc.mark_read(message_id)
    return ReadReceiptResponse(message=ReadReceipt.model_validate(msg))
