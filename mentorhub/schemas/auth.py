"""Authentication and profile schemas."""
import re
from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from .common import BaseSchema

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def check_password_policy(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )
    return value


class EmailNormalizedSchema(BaseSchema):
    """Lowercases the email field after syntax validation."""

    @field_validator("email", mode="after", check_fields=False)
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()


class RegisterRequest(EmailNormalizedSchema):
    """User registration schema."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, max_length=128, description="User password")
    name: Optional[str] = Field(None, min_length=2, max_length=100, description="Display name")

    @field_validator("password")
    @classmethod
    def password_policy(cls, value: str) -> str:
        return check_password_policy(value)

    @field_validator("name", mode="before")
    @classmethod
    def trim_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginRequest(EmailNormalizedSchema):
    """Login request schema."""

    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=1, description="User password")


class RefreshTokenRequest(BaseSchema):
    """Refresh token request schema."""

    refresh_token: Optional[str] = Field(None, description="Refresh token")


class PasswordChangeRequest(BaseSchema):
    """Password change request schema."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=8, max_length=128, description="New password")

    @field_validator("new_password")
    @classmethod
    def password_policy(cls, value: str) -> str:
        return check_password_policy(value)


class ExternalProfile(BaseSchema):
    """Profile asserted by an external identity provider."""

    id: str = Field(..., description="Provider-side user id")
    display_name: Optional[str] = Field(None, description="Display name")
    emails: List[str] = Field(default_factory=list, description="Verified emails")
    photos: List[str] = Field(default_factory=list, description="Photo URLs")

    @property
    def email(self) -> Optional[str]:
        return self.emails[0].strip().lower() if self.emails and self.emails[0] else None

    @property
    def photo(self) -> Optional[str]:
        return self.photos[0] if self.photos else None


class TokenPair(BaseSchema):
    """Access and refresh token pair."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class UserSummary(BaseSchema):
    """Minimal user fields returned on login."""

    id: int
    email: str
    name: Optional[str] = None


class RegisteredUser(UserSummary):
    """User fields returned on registration."""

    created_at: datetime


class ProfileResponse(BaseSchema):
    """Full profile projection. Never includes the password hash."""

    id: int
    email: str
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image: Optional[str] = None
    birthdate: Optional[date] = None
    profession: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseSchema):
    """Sparse profile patch.

    Only fields present in the request body are applied; see
    ``ProfileService.update_profile`` for the per-field rules.
    """

    name: Optional[str] = Field(None, max_length=100)
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    profession: Optional[str] = Field(None, max_length=255)
    birthdate: Optional[date] = None
    image: Optional[str] = Field(None, max_length=500)

    @field_validator("birthdate", mode="before")
    @classmethod
    def blank_birthdate(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value
