"""Mentor directory schemas."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from .auth import EmailNormalizedSchema, check_password_policy
from .common import BaseSchema


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class LanguageEntry(BaseSchema):
    """One spoken language and proficiency."""

    code: str = Field(..., min_length=1, description='Language code, e.g. "en"')
    language: str = Field(..., min_length=1, description='Language name, e.g. "English"')
    level: str = Field(..., min_length=1, description='Proficiency, e.g. "Advanced"')


class MentorFields(BaseSchema):
    """Fields shared by mentor create payloads."""

    title: str = Field(..., min_length=3, max_length=255)
    bio: Optional[str] = Field(None, max_length=2000)
    image: Optional[str] = Field(None, max_length=500)
    years_of_experience: Optional[int] = Field(None, ge=0, le=100)
    timezone: Optional[str] = Field(None, max_length=100)
    hourly_rate: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    languages: Optional[List[LanguageEntry]] = None
    is_active: bool = True

    @field_validator("title", mode="before")
    @classmethod
    def trim_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    blank_currency = field_validator("currency", mode="before")(_blank_to_none)


class MentorCreate(MentorFields):
    """Mentor listing for an already authenticated user."""


class MentorSignup(EmailNormalizedSchema, MentorFields):
    """Public mentor signup: new user account plus listing."""

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


class MentorUpdate(BaseSchema):
    """Sparse mentor patch. Approval is not writable here."""

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    bio: Optional[str] = Field(None, max_length=2000)
    image: Optional[str] = Field(None, max_length=500)
    years_of_experience: Optional[int] = Field(None, ge=0, le=100)
    timezone: Optional[str] = Field(None, max_length=100)
    hourly_rate: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    languages: Optional[List[LanguageEntry]] = None
    is_active: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def trim_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    blank_currency = field_validator("currency", mode="before")(_blank_to_none)


class MentorFilters(BaseSchema):
    """Directory listing filters. All optional."""

    is_approved: Optional[bool] = None
    is_active: Optional[bool] = None
    min_rate: Optional[Decimal] = Field(None, ge=0)
    max_rate: Optional[Decimal] = Field(None, ge=0)
    search: Optional[str] = None
    language: Optional[str] = None


class MentorOwner(BaseSchema):
    """Public fields of the user behind a listing."""

    id: int
    email: str
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image: Optional[str] = None
    profession: Optional[str] = None


class MentorResponse(BaseSchema):
    """Mentor listing with its owner."""

    id: int
    user_id: int
    title: str
    bio: Optional[str] = None
    image: Optional[str] = None
    years_of_experience: Optional[int] = None
    timezone: Optional[str] = None
    hourly_rate: Optional[float] = None
    currency: Optional[str] = None
    languages: Optional[List[LanguageEntry]] = None
    is_approved: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime
    user: MentorOwner
