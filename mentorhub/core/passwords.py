"""Password hashing."""
from typing import Optional

import bcrypt

from ..config import settings

# bcrypt only consumes the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """One-way salted bcrypt hashing at a fixed cost."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or settings.auth.bcrypt_rounds

    def hash(self, password: str) -> str:
        """Hash password using bcrypt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: Optional[str]) -> bool:
        """Verify password against hash.

        A missing or malformed hash never matches.
        """
        if not hashed_password:
            return False

        try:
            return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
        except ValueError:
            return False
