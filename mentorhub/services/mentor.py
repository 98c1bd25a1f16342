"""Mentor directory service."""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import AuthService, auth_service
from ..core.exceptions import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
)
from ..core.logging import BusinessLogger, SecurityLogger
from ..models.mentor import Mentor
from ..models.user import User
from ..schemas.auth import TokenPair
from ..schemas.mentor import (
    MentorFields,
    MentorFilters,
    MentorSignup,
    MentorUpdate,
)
from ..stores.mentors import MentorStore
from ..stores.users import UserStore

# Optional strings where blank means "no value"
NULLABLE_TEXT_FIELDS = ("bio", "timezone", "currency", "image")


@dataclass
class MentorSignupResult:
    """New account, its listing and the tokens issued for it."""

    user: User
    mentor: Mentor
    tokens: TokenPair


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _dump_languages(languages) -> Optional[List[Dict[str, str]]]:
    if languages is None:
        return None
    return [entry.model_dump() for entry in languages]


def speaks(languages: Optional[Iterable[Dict[str, Any]]], language: str) -> bool:
    """Match a language filter against a mentor's language list.

    Codes match exactly; language names match case-insensitively.
    """
    if not languages:
        return False

    wanted = language.lower()
    for entry in languages:
        if not isinstance(entry, dict):
            continue
        name = entry.get("language")
        if entry.get("code") == language or (isinstance(name, str) and name.lower() == wanted):
            return True
    return False


def new_mentor_fields(payload: MentorFields) -> Dict[str, Any]:
    """Columns for a new listing. Approval always starts false."""
    fields: Dict[str, Any] = {
        "title": payload.title.strip(),
        "years_of_experience": payload.years_of_experience,
        "hourly_rate": payload.hourly_rate,
        "languages": _dump_languages(payload.languages),
        "is_approved": False,
        "is_active": payload.is_active,
    }
    for name in NULLABLE_TEXT_FIELDS:
        fields[name] = _clean_text(getattr(payload, name))
    return fields


def mentor_changes(patch: MentorUpdate) -> Dict[str, Any]:
    """Turn a mentor patch into the columns to write.

    Omitted fields are skipped. ``title`` and ``is_active`` skip ``null``;
    the remaining fields accept ``null`` to clear, and blank strings clear
    too.
    """
    supplied = patch.model_fields_set
    changes: Dict[str, Any] = {}

    if "title" in supplied and patch.title is not None:
        changes["title"] = patch.title.strip()

    for name in NULLABLE_TEXT_FIELDS:
        if name in supplied:
            changes[name] = _clean_text(getattr(patch, name))

    if "years_of_experience" in supplied:
        changes["years_of_experience"] = patch.years_of_experience

    if "hourly_rate" in supplied:
        changes["hourly_rate"] = patch.hourly_rate

    if "languages" in supplied:
        changes["languages"] = _dump_languages(patch.languages)

    if "is_active" in supplied and patch.is_active is not None:
        changes["is_active"] = patch.is_active

    return changes


class MentorService:
    """Mentor directory service.

    Listings are public to read and mutable only by the user who owns them.
    """

    def __init__(
        self,
        auth: Optional[AuthService] = None,
        mentor_store: Callable[[AsyncSession], MentorStore] = MentorStore,
        user_store: Callable[[AsyncSession], UserStore] = UserStore,
    ):
        self.auth = auth or auth_service
        self.mentor_store = mentor_store
        self.user_store = user_store

    async def list_mentors(self, db: AsyncSession, filters: MentorFilters) -> List[Mentor]:
        """Search the directory, newest first."""
        mentors = await self.mentor_store(db).find(filters)

        if filters.language:
            mentors = [m for m in mentors if speaks(m.languages, filters.language)]

        return mentors

    async def get_mentor(self, db: AsyncSession, mentor_id: int) -> Mentor:
        mentor = await self.mentor_store(db).get_by_id(mentor_id)
        if mentor is None:
            raise NotFoundError("Mentor not found")
        return mentor

    async def get_mentor_by_user(self, db: AsyncSession, user_id: int) -> Mentor:
        mentor = await self.mentor_store(db).get_by_user_id(user_id)
        if mentor is None:
            raise NotFoundError("Mentor not found")
        return mentor

    async def create_mentor(
        self,
        db: AsyncSession,
        owner_id: int,
        payload: MentorFields
    ) -> Mentor:
        """Create a listing for an existing user."""
        if not await self.user_store(db).exists(owner_id):
            raise NotFoundError("User not found")

        mentors = self.mentor_store(db)
        if await mentors.get_by_user_id(owner_id):
            raise ConflictError("Mentor profile already exists for this user")

        mentor = await mentors.insert(owner_id, **new_mentor_fields(payload))
        await db.commit()

        BusinessLogger.log_mentor_event("created", mentor.id, owner_id)
        return mentor

    async def create_mentor_with_user(
        self,
        db: AsyncSession,
        payload: MentorSignup
    ) -> MentorSignupResult:
        """Create a user account and its listing as one transaction."""
        users = self.user_store(db)
        if await users.get_by_email(payload.email):
            raise ConflictError("User with this email already exists")

        try:
            user = await users.insert(
                payload.email,
                hashed_password=self.auth.hash_password(payload.password),
                name=payload.name or None,
            )
            mentor = await self.mentor_store(db).insert(user.id, **new_mentor_fields(payload))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        BusinessLogger.log_user_registered(user.id, user.email, source="mentor_signup")
        BusinessLogger.log_mentor_event("created", mentor.id, user.id)

        return MentorSignupResult(
            user=user,
            mentor=mentor,
            tokens=self.auth.issue_tokens(user.id),
        )

    async def _owned(
        self,
        db: AsyncSession,
        mentor_id: int,
        acting_user_id: int,
        action: str
    ) -> Mentor:
        mentor = await self.get_mentor(db, mentor_id)

        if mentor.user_id != acting_user_id:
            SecurityLogger.log_unauthorized_access(
                resource="mentor",
                resource_id=mentor_id,
                user_id=acting_user_id,
                action=action,
            )
            raise AuthorizationError(
                f"You do not have permission to {action} this mentor profile"
            )

        return mentor

    async def update_mentor(
        self,
        db: AsyncSession,
        mentor_id: int,
        acting_user_id: int,
        patch: MentorUpdate
    ) -> Mentor:
        """Apply the supplied fields to a listing the caller owns."""
        mentor = await self._owned(db, mentor_id, acting_user_id, "update")

        changes = mentor_changes(patch)
        if not changes:
            raise BadRequestError("No fields to update")

        mentor = await self.mentor_store(db).update_fields(mentor, **changes)
        await db.commit()

        BusinessLogger.log_mentor_event("updated", mentor.id, acting_user_id, sorted(changes))
        return mentor

    async def delete_mentor(
        self,
        db: AsyncSession,
        mentor_id: int,
        acting_user_id: int
    ) -> None:
        await self._owned(db, mentor_id, acting_user_id, "delete")

        await self.mentor_store(db).delete(mentor_id)
        await db.commit()

        BusinessLogger.log_mentor_event("deleted", mentor_id, acting_user_id)

    async def delete_image(self, db: AsyncSession, owner_user_id: int) -> Mentor:
        """Clear the caller's listing image."""
        mentors = self.mentor_store(db)
        mentor = await mentors.get_by_user_id(owner_user_id)

        if mentor is None:
            raise NotFoundError("Mentor profile not found")

        if not mentor.image:
            raise BadRequestError("No image to delete")

        mentor = await mentors.update_fields(mentor, image=None)
        await db.commit()

        BusinessLogger.log_mentor_event("image_deleted", mentor.id, owner_user_id)
        return mentor


# Global mentor service instance
mentor_service = MentorService()
