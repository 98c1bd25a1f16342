"""Pydantic schemas module."""
from .auth import (
    ExternalProfile,
    LoginRequest,
    PasswordChangeRequest,
    ProfileResponse,
    ProfileUpdate,
    RefreshTokenRequest,
    RegisteredUser,
    RegisterRequest,
    TokenPair,
    UserSummary,
)
from .mentor import (
    LanguageEntry,
    MentorCreate,
    MentorFilters,
    MentorOwner,
    MentorResponse,
    MentorSignup,
    MentorUpdate,
)
from .common import (
    ErrorResponse,
    FieldError,
    HealthResponse,
    SuccessResponse,
)

__all__ = [
    # Auth
    "ExternalProfile",
    "LoginRequest",
    "PasswordChangeRequest",
    "ProfileResponse",
    "ProfileUpdate",
    "RefreshTokenRequest",
    "RegisteredUser",
    "RegisterRequest",
    "TokenPair",
    "UserSummary",
    # Mentor
    "LanguageEntry",
    "MentorCreate",
    "MentorFilters",
    "MentorOwner",
    "MentorResponse",
    "MentorSignup",
    "MentorUpdate",
    # Common
    "ErrorResponse",
    "FieldError",
    "HealthResponse",
    "SuccessResponse",
]
