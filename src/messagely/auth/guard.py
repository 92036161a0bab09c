"""Access guard: who may see or touch a message.

The predicates are plain functions over (requester, message) so they can
be tested without HTTP or a database. Routes always fetch the message,
call the matching ensure_* helper, and only then serialize or mutate.

A requester may view a message if they are EITHER party (sender OR
recipient).
"""

from typing import Protocol

from messagely.errors import UnauthorizedError


class HasParties(Protocol):
    from_username: str
    to_username: str


def can_view(requester: str, message: HasParties) -> bool:
    """Sender or recipient may read the message."""
    return requester == message.from_username or requester == message.to_username


def can_mark_read(requester: str, message: HasParties) -> bool:
    """Only the recipient may mark a message read."""
    return requester == message.to_username


def can_access_mailbox(requester: str, username: str) -> bool:
    """A user's profile and message listings are visible only to that user."""
    return requester == username


def ensure_can_view(requester: str, message: HasParties) -> None:
    if not can_view(requester, message):
        raise UnauthorizedError("You do not have permission to view this message")


def ensure_can_mark_read(requester: str, message: HasParties) -> None:
    if not can_mark_read(requester, message):
        raise UnauthorizedError("Only the recipient can mark this message as read")


def ensure_can_access_mailbox(requester: str, username: str) -> None:
    if not can_access_mailbox(requester, username):
        raise UnauthorizedError("You do not have permission to view this user")
