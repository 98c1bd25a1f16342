"""Logging configuration and utilities."""
import logging
import sys
from typing import Any, Dict, List, Optional

import structlog
from structlog.stdlib import LoggerFactory

from ..config import settings


def configure_logging():
    """Configure structured logging."""

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.monitoring.log_level.upper()),
    )

    # Set third-party log levels
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class RequestLogger:
    """Request logging utility."""

    @staticmethod
    def log_request(
        method: str,
        path: str,
        request_id: str = None,
        extra_data: Dict[str, Any] = None
    ):
        """Log incoming request."""
        logger = structlog.get_logger("api.request")
        logger.info(
            "Request started",
            method=method,
            path=path,
            request_id=request_id,
            **(extra_data or {})
        )

    @staticmethod
    def log_response(
        method: str,
        path: str,
        status_code: int,
        response_time_ms: float,
        request_id: str = None,
    ):
        """Log response."""
        logger = structlog.get_logger("api.response")
        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=status_code,
            response_time_ms=response_time_ms,
            request_id=request_id,
        )

    @staticmethod
    def log_unhandled_error(method: str, path: str, request_id: str = None):
        """Log an exception that escaped every handler. Call from an except block."""
        logger = structlog.get_logger("api.error")
        logger.exception(
            "Unhandled error",
            method=method,
            path=path,
            request_id=request_id,
        )


class BusinessLogger:
    """Business event logging utility."""

    @staticmethod
    def log_user_registered(user_id: int, email: str, source: str = "password"):
        """Log account creation."""
        logger = structlog.get_logger("business.user")
        logger.info(
            "User registered",
            event_type="user_registered",
            user_id=user_id,
            email=email,
            source=source,
        )

    @staticmethod
    def log_external_identity(user_id: int, action: str, provider: str = "google"):
        """Log the outcome of an external-identity login."""
        logger = structlog.get_logger("business.user")
        logger.info(
            "External identity login",
            event_type="external_identity_login",
            user_id=user_id,
            action=action,
            provider=provider,
        )

    @staticmethod
    def log_password_changed(user_id: int):
        """Log password change."""
        logger = structlog.get_logger("business.user")
        logger.info("Password changed", event_type="password_changed", user_id=user_id)

    @staticmethod
    def log_profile_updated(user_id: int, fields: List[str]):
        """Log profile update."""
        logger = structlog.get_logger("business.user")
        logger.info(
            "Profile updated",
            event_type="profile_updated",
            user_id=user_id,
            fields=fields,
        )

    @staticmethod
    def log_mentor_event(
        action: str,
        mentor_id: int,
        user_id: int,
        fields: Optional[List[str]] = None
    ):
        """Log mentor lifecycle event (created, updated, deleted, image_deleted)."""
        logger = structlog.get_logger("business.mentor")
        logger.info(
            f"Mentor {action.replace('_', ' ')}",
            event_type=f"mentor_{action}",
            mentor_id=mentor_id,
            user_id=user_id,
            fields=fields,
        )

    @staticmethod
    def log_side_effect_failed(operation: str, user_id: int):
        """Log a best-effort write that failed. Call from an except block."""
        logger = structlog.get_logger("business.user")
        logger.warning(
            "Best-effort update failed",
            event_type="side_effect_failed",
            operation=operation,
            user_id=user_id,
            exc_info=True,
        )


class SecurityLogger:
    """Security event logging utility."""

    @staticmethod
    def log_login_attempt(
        email: str,
        success: bool,
        failure_reason: str = None
    ):
        """Log login attempt."""
        logger = structlog.get_logger("security.auth")
        logger.info(
            "Login attempt",
            event_type="login_attempt",
            email=email,
            success=success,
            failure_reason=failure_reason
        )

    @staticmethod
    def log_refresh_rejected(reason: str, user_id: Optional[int] = None):
        """Log refresh token rejection."""
        logger = structlog.get_logger("security.auth")
        logger.warning(
            "Refresh token rejected",
            event_type="refresh_rejected",
            reason=reason,
            user_id=user_id,
        )

    @staticmethod
    def log_unauthorized_access(
        resource: str,
        resource_id: int,
        user_id: int,
        action: str,
    ):
        """Log an ownership check failure."""
        logger = structlog.get_logger("security.access")
        logger.warning(
            "Unauthorized access attempt",
            event_type="unauthorized_access",
            resource=resource,
            resource_id=resource_id,
            user_id=user_id,
            action=action,
        )
