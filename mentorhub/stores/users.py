"""User persistence."""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError
from ..models.base import utcnow
from ..models.user import User


class UserStore:
    """Lookup, insert and field-level update of user rows.

    Emails are lowercased on every write and lookup. Writes flush but do
    not commit; the calling service owns the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_external_id(self, google_id: str) -> Optional[User]:
        """Get user by external identity id."""
        stmt = select(User).where(User.google_id == google_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, user_id: int) -> bool:
        stmt = select(User.id).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def insert(self, email: str, **fields: Any) -> User:
        """Create new user.

        Raises ConflictError when the email or external id is already taken;
        the transaction is rolled back in that case.
        """
        user = User(email=email.strip().lower(), **fields)
        self.db.add(user)

        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("User with this email already exists")

        return user

    async def update_fields(self, user: User, **fields: Any) -> User:
        """Write the given columns and flush."""
        for name, value in fields.items():
            setattr(user, name, value)

        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("User update conflicts with an existing account")

        await self.db.refresh(user)
        return user

    async def touch_last_active(self, user_id: int, when: Optional[datetime] = None) -> None:
        """Set last_active without loading the row."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(last_active=when or utcnow())
        )
        await self.db.execute(stmt)
