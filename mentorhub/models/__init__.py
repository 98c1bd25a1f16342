"""Database models module."""
from .base import Base
from .user import User
from .mentor import Mentor

__all__ = [
    "Base",
    "User",
    "Mentor",
]
