"""User directory and mailbox routes.

- GET /users                 → everyone's name (any logged-in user)
- GET /users/{username}      → full profile   (that user only)
- GET /users/{username}/to   → inbox          (that user only)
- GET /users/{username}/from → sent messages  (that user only)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from messagely.auth.dependencies import get_current_user, get_password_hasher
from messagely.auth.guard import ensure_can_access_mailbox
from messagely.auth.password import PasswordHasher
from messagely.db.engine import get_db
from messagely.schemas.message import InboxItem, InboxResponse, OutboxItem, OutboxResponse
from messagely.schemas.user import UserDetail, UserList
from messagely.services.message_service import MessageService
from messagely.services.user_service import UserService

router = APIRouter(prefix="/users")


def _user_svc(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(db, hasher)


def _msg_svc(db: AsyncSession = Depends(get_db)) -> MessageService:
    return MessageService(db)


@router.get("", response_model=UserList)
async def list_users(svc: UserService = Depends(_user_svc)):
    return UserList(users=await svc.list_profiles())


@router.get("/{username}", response_model=UserDetail)
async def get_user(
    username: str,
    current_user: str = Depends(get_current_user),
    svc: UserService = Depends(_user_svc),
):
    ensure_can_access_mailbox(current_user, username)
    return UserDetail(user=await svc.get_profile(username))


@router.get("/{username}/to", response_model=InboxResponse)
async def messages_to(
    username: str,
    current_user: str = Depends(get_current_user),
    svc: MessageService = Depends(_msg_svc),
):
    """Messages received by this user, newest first."""
    ensure_can_access_mailbox(current_user, username)
    messages = await svc.list_to(username)
    return InboxResponse(messages=[InboxItem.model_validate(m) for m in messages])


@router.get("/{username}/from", response_model=OutboxResponse)
async def messages_from(
    username: str,
    current_user: str = Depends(get_current_user),
    svc: MessageService = Depends(_msg_svc),
):
    """Messages sent by this user, newest first."""
    ensure_can_access_mailbox(current_user, username)
    messages = await svc.list_from(username)
    return OutboxResponse(messages=[OutboxItem.model_validate(m) for m in messages])
