"""Message service: storing and reading directed messages.

This layer does not decide who may see what; that's auth.guard, applied
by the routes after get() and before anything is returned. The service
only guarantees the storage invariants:
- both parties exist when a message is sent
- read_at is set once and never moves afterwards
"""

from typing import Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from messagely.db.models import Message, User, utcnow
from messagely.errors import NotFoundError

logger = structlog.get_logger()


class MessageService:
    """Business logic for user-to-user messages."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def send(self, from_username: str, to_username: str, body: str) -> Message:
        """Store a new message. Raises NotFoundError for an unknown party."""
        result = await self.db.execute(
            select(User.username).where(User.username.in_([from_username, to_username]))
        )
        known = set(result.scalars().all())
        for username in (from_username, to_username):
            if username not in known:
                raise NotFoundError(f"No such user: {username}")

        msg = Message(
            from_username=from_username,
            to_username=to_username,
            body=body,
            sent_at=utcnow(),
        )
        self.db.add(msg)
        try:
            await self.db.flush()
            await self.db.commit()
        except IntegrityError:
            # A party vanished between the lookup and the insert.
            await self.db.rollback()
            raise NotFoundError("No such user")

        logger.info("message.sent", message_id=msg.id, from_username=from_username)
        return msg

    async def get(self, message_id: int) -> Message:
        """Fetch one message with both parties' profiles loaded."""
        msg = await self._load(message_id)
        if not msg:
            raise NotFoundError(f"No such message: {message_id}")
        return msg

    async def mark_read(self, message_id: int) -> Message:
        """Set read_at if it isn't set yet; return the message either way.

        One conditional UPDATE, so a second call (or a concurrent one)
        leaves the first timestamp in place.
        """
        await self.db.execute(
            update(Message)
            .where(Message.id == message_id, Message.read_at.is_(None))
            .values(read_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        msg = await self._load(message_id)
        if not msg:
            raise NotFoundError(f"No such message: {message_id}")
        logger.info("message.read", message_id=msg.id)
        return msg

    async def list_from(self, username: str) -> list[Message]:
        """Messages sent by `username`, newest first, with to_user loaded."""
        result = await self.db.execute(
            select(Message)
            .where(Message.from_username == username)
            .options(selectinload(Message.to_user))
            .order_by(Message.sent_at.desc(), Message.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_to(self, username: str) -> list[Message]:
        """Messages addressed to `username`, newest first, with from_user loaded."""
        result = await self.db.execute(
            select(Message)
            .where(Message.to_username == username)
            .options(selectinload(Message.from_user))
            .order_by(Message.sent_at.desc(), Message.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _load(self, message_id: int) -> Optional[Message]:
        result = await self.db.execute(
            select(Message)
            .where(Message.id == message_id)
            .options(
                selectinload(Message.from_user),
                selectinload(Message.to_user),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()
