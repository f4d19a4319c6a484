"""
User service: business rules for the User entity on top of the repository.

Two rules live here rather than in the repository:

- creation always gets a brand-new identifier, whatever the caller supplied;
- an update re-attaches the identifier of the stored row to the incoming
  entity, and is skipped entirely when that row does not exist.

The email helpers are consumed by the router, which performs the uniqueness
check before delegating.  The check and the write that follows are two
separate statements, so concurrent requests can both pass it.
"""
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User
from app.repositories import user_repository


async def create_user(db: AsyncSession, user: User) -> User:
    user.id = uuid.uuid4()
    return await user_repository.create_user(db, user)


async def get_users(db: AsyncSession) -> list[User]:
    return await user_repository.get_users(db)


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Return the user for *user_id*, or None when it does not exist."""
    return await user_repository.get_user_by_id(db, user_id)


async def update_user(db: AsyncSession, user_id: uuid.UUID, user: User) -> User | None:
    """
    Replace the mutable fields of user *user_id* with those of *user*.

    Returns None (without touching the repository's update) when the user
    does not exist.  Any ``id`` carried by *user* is overwritten with the
    stored identifier.
    """
    existing = await user_repository.get_user_by_id(db, user_id)
    if existing is None:
        return None

    user.id = existing.id
    return await user_repository.update_user(db, user)


async def delete_user(db: AsyncSession, user_id: uuid.UUID) -> bool:
    return await user_repository.delete_user(db, user_id)


async def is_email_unique(db: AsyncSession, email: str) -> bool:
    """True when no stored user has exactly this email address."""
    return not await user_repository.get_users_by_email(db, email)


async def list_users_with_same_email(db: AsyncSession, email: str) -> list[User]:
    return await user_repository.get_users_by_email(db, email)
