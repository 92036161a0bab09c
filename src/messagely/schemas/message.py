"""Pydantic schemas for messages.

Response shapes nest the other party's public profile:
- GET /messages/{id}        → both from_user and to_user
- GET /users/{u}/to (inbox) → from_user
- GET /users/{u}/from       → to_user
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Party(BaseModel):
    """Public profile of a message's sender or recipient."""
    username: str
    first_name: str
    last_name: str
    phone: str

    model_config = {"from_attributes": True}


class MessageCreate(BaseModel):
    to_username: str = Field(..., min_length=1, max_length=50)
    body: str = Field(..., min_length=1)


class MessageSent(BaseModel):
    id: int
    from_username: str
    to_username: str
    body: str
    sent_at: datetime

    model_config = {"from_attributes": True}


class MessageDetail(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: Optional[datetime] = None
    from_user: Party
    to_user: Party

    model_config = {"from_attributes": True}


class InboxItem(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: Optional[datetime] = None
    from_user: Party

    model_config = {"from_attributes": True}


class OutboxItem(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: Optional[datetime] = None
    to_user: Party

    model_config = {"from_attributes": True}


class ReadReceipt(BaseModel):
    id: int
    read_at: datetime

    model_config = {"from_attributes": True}


# ─── Envelopes ──────────────────────────────────────────

class MessageSentResponse(BaseModel):
    message: MessageSent


class MessageDetailResponse(BaseModel):
    message: MessageDetail


class ReadReceiptResponse(BaseModel):
    message: ReadReceipt


class InboxResponse(BaseModel):
    messages: list[InboxItem]


class OutboxResponse(BaseModel):
    messages: list[OutboxItem]
