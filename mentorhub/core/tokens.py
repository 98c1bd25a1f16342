"""JWT access and refresh token issuance and verification."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from ..config import settings
from ..config.settings import AuthSettings
from ..schemas.auth import TokenPair
from .exceptions import InvalidSignatureError, TokenExpiredError, WrongTokenKindError

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Verified token contents."""

    user_id: int
    kind: str


class TokenService:
    """Mints and validates signed, time-limited bearer tokens.

    Access tokens carry only the subject. Refresh tokens also carry
    ``type: refresh`` and are signed with their own secret when one is
    configured.
    """

    def __init__(self, auth_settings: Optional[AuthSettings] = None):
        config = auth_settings or settings.auth
        self.access_secret = config.secret_key
        self.refresh_secret = config.effective_refresh_secret
        self.algorithm = config.algorithm
        self.access_token_expire_minutes = config.access_token_expire_minutes
        self.refresh_token_expire_days = config.refresh_token_expire_days

    def _encode(self, claims: dict, secret: str, expires_delta: timedelta) -> str:
        now = datetime.now(timezone.utc)
        to_encode = claims.copy()
        to_encode.update({"iat": now, "exp": now + expires_delta})
        return jwt.encode(to_encode, secret, algorithm=self.algorithm)

    def issue_access(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token."""
        return self._encode(
            {"sub": str(user_id)},
            self.access_secret,
            expires_delta or timedelta(minutes=self.access_token_expire_minutes),
        )

    def issue_refresh(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT refresh token."""
        return self._encode(
            {"sub": str(user_id), "type": REFRESH},
            self.refresh_secret,
            expires_delta or timedelta(days=self.refresh_token_expire_days),
        )

    def issue_pair(self, user_id: int) -> TokenPair:
        """Create an access/refresh pair for the user."""
        return TokenPair(
            access_token=self.issue_access(user_id),
            refresh_token=self.issue_refresh(user_id),
            token_type="bearer",
            expires_in=self.access_token_expire_minutes * 60,
        )

    def verify(self, token: str, expected_kind: Optional[str] = None) -> TokenClaims:
        """Verify and decode a token.

        Raises TokenExpiredError, InvalidSignatureError or WrongTokenKindError.
        """
        secret = self.refresh_secret if expected_kind == REFRESH else self.access_secret

        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise InvalidSignatureError()

        kind = payload.get("type") or ACCESS
        if expected_kind is not None and kind != expected_kind:
            raise WrongTokenKindError()

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidSignatureError("Token subject is missing or malformed")

        return TokenClaims(user_id=user_id, kind=kind)
