"""SQL User Repository: credential store on the users table.

Invariants:
    - Email lookups are exact (case-sensitive) matches
    - The unique index on users.email is authoritative: an IntegrityError on insert
      is reported as EmailAlreadyExistsError, never as success
"""

import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId
from app.core.errors import EmailAlreadyExistsError
from app.core.records import NewUser, UserRecord
from app.models.user import User

logger = logging.getLogger(__name__)


def _to_record(row: User) -> UserRecord:
    return UserRecord(
        id=UserId(row.id),
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlUserRepository:
    """UserRepository backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def create(self, user: NewUser) -> UserRecord:
        row = User(
            name=user.name, email=user.email, password_hash=user.password_hash,
        )
        self._db.add(row)
        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            logger.warning(f"User insert rejected by constraint: {e.orig}")
            raise EmailAlreadyExistsError() from e
        await self._db.refresh(row)
        return _to_record(row)

    async def find_by_email(self, email: str) -> UserRecord | None:
        result = await self._db.execute(select(User).where(User.email == email))
        row = result.scalar_one_or_none()
        return _to_record(row) if row else None

    async def find_by_id(self, user_id: UserId) -> UserRecord | None:
        row = await self._db.get(User, user_id)
        return _to_record(row) if row else None

    async def exists_by_email(self, email: str) -> bool:
        result = await self._db.execute(
            select(exists().where(User.email == email)),
        )
        return bool(result.scalar())
