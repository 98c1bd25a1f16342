"""Authentication and authorization core functionality."""
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import utcnow
from ..models.user import User
from ..schemas.auth import ExternalProfile, TokenPair
from ..services.external_identity import (
    Accept,
    CreateAndAccept,
    LinkAndAccept,
    decide_external_login,
)
from ..stores.users import UserStore
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    TokenError,
)
from .logging import BusinessLogger, SecurityLogger
from .passwords import PasswordHasher
from .tokens import ACCESS, REFRESH, TokenService


@dataclass
class AuthResult:
    """Authenticated user and the tokens issued for them."""

    user: User
    tokens: TokenPair


class AuthService:
    """Authentication service.

    Holds no per-request state. Every operation takes the request's
    database session explicitly.
    """

    def __init__(
        self,
        hasher: Optional[PasswordHasher] = None,
        tokens: Optional[TokenService] = None,
        user_store: Callable[[AsyncSession], UserStore] = UserStore,
    ):
        self.hasher = hasher or PasswordHasher()
        self.tokens = tokens or TokenService()
        self.user_store = user_store

    @cached_property
    def _dummy_hash(self) -> str:
        # Verified against when the email is unknown so timing does not leak existence
        return self.hasher.hash("dummy-password-for-timing")

    def hash_password(self, password: str) -> str:
        """Hash password using bcrypt."""
        return self.hasher.hash(password)

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify password against hash."""
        return self.hasher.verify(plain_password, hashed_password)

    def issue_tokens(self, user_id: int) -> TokenPair:
        return self.tokens.issue_pair(user_id)

    async def register(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        name: Optional[str] = None
    ) -> AuthResult:
        """Create a password account and sign it in."""
        users = self.user_store(db)

        # Fast path only; the unique index is what actually guarantees this
        if await users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user = await users.insert(
            email,
            hashed_password=self.hash_password(password),
            name=name or None,
        )
        await db.commit()

        BusinessLogger.log_user_registered(user.id, user.email)

        return AuthResult(user=user, tokens=self.issue_tokens(user.id))

    async def login(
        self,
        db: AsyncSession,
        email: str,
        password: str
    ) -> AuthResult:
        """Authenticate user with email and password."""
        users = self.user_store(db)
        user = await users.get_by_email(email)

        if user is None:
            self.verify_password(password, self._dummy_hash)
            SecurityLogger.log_login_attempt(email, success=False, failure_reason="unknown_email")
            raise InvalidCredentialsError()

        if not user.hashed_password:
            self.verify_password(password, self._dummy_hash)
            SecurityLogger.log_login_attempt(email, success=False, failure_reason="no_password_set")
            raise InvalidCredentialsError()

        if not self.verify_password(password, user.hashed_password):
            SecurityLogger.log_login_attempt(email, success=False, failure_reason="wrong_password")
            raise InvalidCredentialsError()

        SecurityLogger.log_login_attempt(email, success=True)

        tokens = self.issue_tokens(user.id)

        # Detached so a rollback of the side effect cannot expire it
        db.expunge(user)
        await self._touch_last_active(db, users, user.id)

        return AuthResult(user=user, tokens=tokens)

    async def _touch_last_active(self, db: AsyncSession, users: UserStore, user_id: int) -> None:
        """Best-effort; a failure here never fails the login."""
        try:
            await users.touch_last_active(user_id)
            await db.commit()
        except SQLAlchemyError:
            BusinessLogger.log_side_effect_failed("touch_last_active", user_id)
            await db.rollback()

    async def refresh(self, db: AsyncSession, refresh_token: Optional[str]) -> TokenPair:
        """Exchange a refresh token for a fresh pair.

        Bad refresh tokens are a 403, not a 401, so clients can tell them
        apart from an expired access token.
        """
        if not refresh_token:
            raise BadRequestError("Refresh token required")

        try:
            claims = self.tokens.verify(refresh_token, expected_kind=REFRESH)
        except TokenError as e:
            SecurityLogger.log_refresh_rejected(reason=e.error_code)
            raise AuthorizationError("Invalid or expired refresh token")

        if not await self.user_store(db).exists(claims.user_id):
            SecurityLogger.log_refresh_rejected(reason="user_not_found", user_id=claims.user_id)
            raise AuthenticationError("User not found")

        return self.issue_tokens(claims.user_id)

    async def authenticate(self, db: AsyncSession, token: str) -> User:
        """Resolve a bearer access token to its user."""
        claims = self.tokens.verify(token, expected_kind=ACCESS)

        user = await self.user_store(db).get_by_id(claims.user_id)
        if user is None:
            raise AuthenticationError("User not found")

        return user

    async def login_with_external_profile(
        self,
        db: AsyncSession,
        profile: ExternalProfile
    ) -> AuthResult:
        """Sign in, link or create an account from a verified provider profile."""
        users = self.user_store(db)

        by_external_id = await users.get_by_external_id(profile.id)
        by_email = None
        if by_external_id is None and profile.email:
            by_email = await users.get_by_email(profile.email)

        action = decide_external_login(by_external_id, by_email, profile)

        if isinstance(action, Accept):
            user = action.user
            await users.touch_last_active(user.id)
            outcome = "accepted"
        elif isinstance(action, LinkAndAccept):
            user = await users.update_fields(action.user, **action.patch)
            await users.touch_last_active(user.id)
            outcome = "linked"
        else:
            user = await users.insert(**action.fields, last_active=utcnow())
            outcome = "created"

        await db.commit()

        BusinessLogger.log_external_identity(user.id, outcome)
        if isinstance(action, CreateAndAccept):
            BusinessLogger.log_user_registered(user.id, user.email, source="google")

        return AuthResult(user=user, tokens=self.issue_tokens(user.id))

    async def change_password(
        self,
        db: AsyncSession,
        user_id: int,
        current_password: str,
        new_password: str
    ) -> None:
        """Change user password."""
        users = self.user_store(db)
        user = await users.get_by_id(user_id)

        if user is None:
            raise NotFoundError("User not found")

        if not self.verify_password(current_password, user.hashed_password):
            raise AuthenticationError("Current password is incorrect")

        if self.verify_password(new_password, user.hashed_password):
            raise BadRequestError("New password must be different from current password")

        await users.update_fields(user, hashed_password=self.hash_password(new_password))
        await db.commit()

        BusinessLogger.log_password_changed(user.id)


# Global auth service instance
auth_service = AuthService()
