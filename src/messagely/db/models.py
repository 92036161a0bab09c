"""SQLAlchemy ORM models: single source of truth for the database schema.

Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic migrations are written against these models.

Key concepts:
- username is the primary key of users: the PK constraint is what makes
  concurrent registrations of the same name race-safe.
- messages reference both parties by username with real foreign keys.
- Timestamps are set in Python (utcnow) so ordering has sub-second
  resolution on every backend.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered user.

    `password` holds the bcrypt hash, never plaintext. It is only read by
    UserService.authenticate and never serialized.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), primary_key=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(Text, nullable=False)
    join_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    sent_messages: Mapped[list["Message"]] = relationship(
        foreign_keys="Message.from_username", back_populates="from_user"
    )
    received_messages: Mapped[list["Message"]] = relationship(
        foreign_keys="Message.to_username", back_populates="to_user"
    )


class Message(Base):
    """A directed message between two users.

    read_at moves from NULL to a timestamp exactly once, when the
    recipient reads it. The two parties never change after insert.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_from_sent", "from_username", "sent_at"),
        Index("idx_messages_to_sent", "to_username", "sent_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_username: Mapped[str] = mapped_column(
        String(50), ForeignKey("users.username"), nullable=False
    )
    to_username: Mapped[str] = mapped_column(
        String(50), ForeignKey("users.username"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    read_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    from_user: Mapped["User"] = relationship(
        foreign_keys=[from_username], back_populates="sent_messages"
    )
    to_user: Mapped["User"] = relationship(
        foreign_keys=[to_username], back_populates="received_messages"
    )
