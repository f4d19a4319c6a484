"""
User repository: persistence operations for the User entity.

Every function takes the request-scoped ``AsyncSession`` first.  Mutations
commit immediately; there is no batching across calls.  A missing row is a
normal outcome reported as ``None`` (lookups, update) or ``False`` (delete).
"""
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User

logger = logging.getLogger(__name__)

# Fields copied from the incoming entity on update; ``id`` is never among them.
_MUTABLE_FIELDS = ("first_name", "last_name", "email", "date_of_birth", "phone_number")


async def create_user(db: AsyncSession, user: User) -> User:
    """Assign a fresh identifier, persist *user* and return it."""
    user.id = uuid.uuid4()
    db.add(user)
    await db.commit()
    logger.info("Created user id=%s", user.id)
    return user


async def get_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User))
    return list(result.scalars().all())


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await db.get(User, user_id)


async def update_user(db: AsyncSession, user: User) -> User | None:
    """
    Overwrite the stored row identified by ``user.id`` with the fields of
    *user* and return the persisted entity.

    Returns None when no row has that identifier.
    """
    existing = await db.get(User, user.id)
    if existing is None:
        return None

    for field in _MUTABLE_FIELDS:
        setattr(existing, field, getattr(user, field))

    await db.commit()
    logger.info("Updated user id=%s", existing.id)
    return existing


async def delete_user(db: AsyncSession, user_id: uuid.UUID) -> bool:
    """
    Delete the user identified by *user_id*.

    Returns True on success, False when the user does not exist.
    """
    user = await db.get(User, user_id)
    if user is None:
        return False

    await db.delete(user)
    await db.commit()
    logger.info("Deleted user id=%s", user_id)
    return True


async def get_users_by_email(db: AsyncSession, email: str) -> list[User]:
    """Return every user whose email equals *email* exactly (case-sensitive)."""
    result = await db.execute(select(User).where(User.email == email))
    return list(result.scalars().all())
