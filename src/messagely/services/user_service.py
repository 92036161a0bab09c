"""User service: credential storage and verification.

Service layer separates business logic from HTTP routing. Routes call
services, services call the database, and every storage failure is
turned into a messagely.errors exception here.

Username uniqueness is enforced by the users primary key at INSERT
time: of two concurrent registrations for one name, exactly one wins.
"""

import structlog
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from messagely.auth.password import PasswordHasher
from messagely.db.models import User, utcnow
from messagely.errors import ConflictError, NotFoundError
from messagely.schemas.user import UserProfile, UserSummary

logger = structlog.get_logger()


class UserService:
    """Registration, authentication, and profile lookup."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    async def register(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
    ) -> UserProfile:
        """Create a user. Raises ConflictError if the username is taken."""
        password_hash = await self.hasher.hash_async(password)
        try:
            await self.db.execute(
                insert(User).values(
                    username=username,
                    password=password_hash,
                    first_name=first_name,
                    last_name=last_name,
                    phone=phone,
                    join_at=utcnow(),
                )
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("user.register_conflict", username=username)
            raise ConflictError("Username already taken")

        logger.info("user.registered", username=username)
        return await self.get_profile(username)

    async def authenticate(self, username: str, password: str) -> bool:
        """Is username/password valid?

        Unknown users and wrong passwords both return False after the
        same amount of bcrypt work.
        """
        result = await self.db.execute(
            select(User.password).where(User.username == username)
        )
        stored_hash = result.scalars().first()
        return await self.hasher.verify_async(password, stored_hash)

    async def record_login(self, username: str) -> None:
        """Stamp last_login_at for an existing user."""
        result = await self.db.execute(
            update(User)
            .where(User.username == username)
            .values(last_login_at=utcnow())
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(f"No such user: {username}")
        await self.db.commit()

    async def get_profile(self, username: str) -> UserProfile:
        result = await self.db.execute(
            select(User)
            .where(User.username == username)
            .execution_options(populate_existing=True)
        )
        user = result.scalars().first()
        if not user:
            raise NotFoundError(f"No such user: {username}")
        return UserProfile.model_validate(user)

    async def list_profiles(self) -> list[UserSummary]:
        result = await self.db.execute(select(User).order_by(User.username))
        return [UserSummary.model_validate(u) for u in result.scalars().all()]
