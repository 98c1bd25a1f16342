"""Profile service: read and sparse-update of the caller's own user row."""
from typing import Any, Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BadRequestError, NotFoundError
from ..core.logging import BusinessLogger
from ..models.user import User
from ..schemas.auth import ProfileUpdate
from ..stores.users import UserStore

TRIMMED_FIELDS = ("name", "first_name", "last_name", "profession")


def profile_changes(patch: ProfileUpdate) -> Dict[str, Any]:
    """Turn a profile patch into the columns to write.

    - Omitted fields are skipped.
    - Trimmed string fields: written trimmed, ``null`` is skipped.
    - ``image``: ``null`` or blank clears it, anything else is trimmed.
    - ``birthdate``: ``null`` or blank is skipped.
    """
    supplied = patch.model_fields_set
    changes: Dict[str, Any] = {}

    for name in TRIMMED_FIELDS:
        value = getattr(patch, name)
        if name in supplied and value is not None:
            changes[name] = value.strip()

    if "birthdate" in supplied and patch.birthdate is not None:
        changes["birthdate"] = patch.birthdate

    if "image" in supplied:
        image = (patch.image or "").strip()
        changes["image"] = image or None

    return changes


class ProfileService:
    """Profile service."""

    def __init__(self, user_store: Callable[[AsyncSession], UserStore] = UserStore):
        self.user_store = user_store

    async def get_profile(self, db: AsyncSession, user_id: int) -> User:
        user = await self.user_store(db).get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: int,
        patch: ProfileUpdate
    ) -> User:
        """Apply only the supplied fields. Raises BadRequestError if none are."""
        users = self.user_store(db)
        user = await users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        changes = profile_changes(patch)
        if not changes:
            raise BadRequestError("No fields to update")

        user = await users.update_fields(user, **changes)
        await db.commit()

        BusinessLogger.log_profile_updated(user.id, sorted(changes))
        return user

    async def delete_image(self, db: AsyncSession, user_id: int) -> User:
        """Clear the profile image. Idempotent."""
        users = self.user_store(db)
        user = await users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        user = await users.update_fields(user, image=None)
        await db.commit()
        return user


# Global profile service instance
profile_service = ProfileService()
