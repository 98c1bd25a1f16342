"""Custom exceptions for the application."""
from typing import Any, Optional


class BaseAPIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = None,
        details: dict = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.errors = errors
        super().__init__(self.message)


class ValidationFailedError(BaseAPIException):
    """Caller input failed validation."""

    def __init__(
        self,
        message: str = "Validation failed. Please check your input.",
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            errors=errors or [],
        )


class BadRequestError(BaseAPIException):
    """Missing parameter or a request that would change nothing."""

    def __init__(self, message: str = "Bad request", details: dict = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="BAD_REQUEST",
            details=details
        )


class MissingEmailError(BadRequestError):
    """External identity profile carries no email address."""

    def __init__(self, message: str = "No email found in external profile"):
        super().__init__(message=message)
        self.error_code = "MISSING_EMAIL"


class AuthenticationError(BaseAPIException):
    """Authentication error."""

    def __init__(self, message: str = "Authentication failed", details: dict = None):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details
        )


class InvalidCredentialsError(AuthenticationError):
    """Login failure. Deliberately says nothing about which part was wrong."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message)
        self.error_code = "INVALID_CREDENTIALS"


class TokenError(AuthenticationError):
    """Base class for bearer token verification failures."""


class InvalidSignatureError(TokenError):
    """Token could not be decoded with the expected secret."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message)
        self.error_code = "INVALID_TOKEN"


class TokenExpiredError(TokenError):
    """Token is past its expiry."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message=message)
        self.error_code = "TOKEN_EXPIRED"


class WrongTokenKindError(TokenError):
    """Token is valid but of the wrong kind for this use."""

    def __init__(self, message: str = "Wrong token type"):
        super().__init__(message=message)
        self.error_code = "WRONG_TOKEN_KIND"


class AuthorizationError(BaseAPIException):
    """Authorization error."""

    def __init__(self, message: str = "Insufficient permissions", details: dict = None):
        super().__init__(
            message=message,
            status_code=403,
            error_code="AUTHORIZATION_ERROR",
            details=details
        )


class NotFoundError(BaseAPIException):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", details: dict = None):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND_ERROR",
            details=details
        )


class ConflictError(BaseAPIException):
    """Resource conflict error."""

    def __init__(self, message: str = "Resource conflict", details: dict = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT_ERROR",
            details=details
        )


class InternalError(BaseAPIException):
    """Unexpected store or hashing failure."""

    def __init__(self, message: str = "Internal server error", details: dict = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="INTERNAL_ERROR",
            details=details
        )
