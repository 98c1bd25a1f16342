"""Persistence stores over the relational database."""
from .users import UserStore
from .mentors import MentorStore

__all__ = [
    "UserStore",
    "MentorStore",
]
