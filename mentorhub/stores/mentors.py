"""Mentor persistence."""
from typing import Any, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError
from ..models.mentor import Mentor
from ..schemas.mentor import MentorFilters


def is_foreign_key_violation(error: IntegrityError) -> bool:
    """SQLite and PostgreSQL both name the constraint kind in the message."""
    return "foreign key" in str(error.orig).lower()


class MentorStore:
    """Mentor rows, always loaded together with their owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, mentor_id: int) -> Optional[Mentor]:
        stmt = (
            select(Mentor)
            .where(Mentor.id == mentor_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: int) -> Optional[Mentor]:
        stmt = (
            select(Mentor)
            .where(Mentor.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find(self, filters: MentorFilters) -> List[Mentor]:
        """Run the relational part of a directory search, newest first.

        Language filtering is not applied here; it works on the JSON
        language list after loading.
        """
        stmt = select(Mentor)

        if filters.is_approved is not None:
            stmt = stmt.where(Mentor.is_approved == filters.is_approved)

        if filters.is_active is not None:
            stmt = stmt.where(Mentor.is_active == filters.is_active)

        if filters.min_rate is not None:
            stmt = stmt.where(Mentor.hourly_rate >= filters.min_rate)

        if filters.max_rate is not None:
            stmt = stmt.where(Mentor.hourly_rate <= filters.max_rate)

        if filters.search:
            stmt = stmt.where(
                or_(
                    Mentor.title.icontains(filters.search, autoescape=True),
                    Mentor.bio.icontains(filters.search, autoescape=True),
                )
            )

        stmt = stmt.order_by(Mentor.created_at.desc(), Mentor.id.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def insert(self, user_id: int, **fields: Any) -> Mentor:
        """Create mentor row.

        Raises ConflictError when the user already has a listing and
        NotFoundError when the user row is gone. The transaction is rolled
        back in both cases.
        """
        mentor = Mentor(user_id=user_id, **fields)
        self.db.add(mentor)

        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            if is_foreign_key_violation(e):
                raise NotFoundError("User not found")
            raise ConflictError("Mentor profile already exists for this user")

        return await self.get_by_id(mentor.id)

    async def update_fields(self, mentor: Mentor, **fields: Any) -> Mentor:
        for name, value in fields.items():
            setattr(mentor, name, value)

        await self.db.flush()
        return await self.get_by_id(mentor.id)

    async def delete(self, mentor_id: int) -> None:
        await self.db.execute(delete(Mentor).where(Mentor.id == mentor_id))
