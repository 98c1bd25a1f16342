"""Tests for external identity login."""
import pytest
from sqlalchemy import func, select

from conftest import create_user
from mentorhub.core.auth import auth_service
from mentorhub.core.exceptions import MissingEmailError
from mentorhub.models import User
from mentorhub.schemas.auth import ExternalProfile
from mentorhub.services.external_identity import (
    Accept,
    CreateAndAccept,
    LinkAndAccept,
    decide_external_login,
    split_display_name,
)


def make_profile(**overrides) -> ExternalProfile:
    data = {
        "id": "google-123",
        "display_name": "Ada King Lovelace",
        "emails": ["Ada@Example.com"],
        "photos": ["https://photos.example.com/ada.png"],
    }
    data.update(overrides)
    return ExternalProfile(**data)


def test_split_display_name():
    """Test first-space name splitting."""
    assert split_display_name("Ada King Lovelace") == ("Ada", "King Lovelace")
    assert split_display_name("Plato") == ("Plato", None)
    assert split_display_name("  ") == (None, None)
    assert split_display_name(None) == (None, None)


def test_decide_accepts_known_identity():
    """Test a known external id is accepted as is."""
    user = User(id=1, email="ada@example.com", google_id="google-123")

    action = decide_external_login(user, None, make_profile())

    assert action == Accept(user=user)


def test_decide_links_by_email_without_overwriting_image():
    """Test linking keeps an existing image."""
    user = User(id=1, email="ada@example.com", image="https://old.example.com/me.png")

    action = decide_external_login(None, user, make_profile())

    assert isinstance(action, LinkAndAccept)
    assert action.patch == {"google_id": "google-123"}


def test_decide_links_by_email_fills_missing_image():
    """Test linking fills an empty image."""
    user = User(id=1, email="ada@example.com", image=None)

    action = decide_external_login(None, user, make_profile())

    assert action.patch == {
        "google_id": "google-123",
        "image": "https://photos.example.com/ada.png",
    }


def test_decide_creates_new_account():
    """Test an unknown person gets a password-less account."""
    action = decide_external_login(None, None, make_profile())

    assert isinstance(action, CreateAndAccept)
    assert action.fields == {
        "email": "ada@example.com",
        "google_id": "google-123",
        "name": "Ada King Lovelace",
        "first_name": "Ada",
        "last_name": "King Lovelace",
        "image": "https://photos.example.com/ada.png",
    }


def test_decide_requires_email():
    """Test a profile without email is refused."""
    with pytest.raises(MissingEmailError):
        decide_external_login(None, None, make_profile(emails=[]))


async def test_external_login_creates_then_accepts(async_session):
    """Test first login creates, second login finds the same account."""
    first = await auth_service.login_with_external_profile(async_session, make_profile())
    second = await auth_service.login_with_external_profile(async_session, make_profile())

    assert first.user.id == second.user.id
    assert first.user.hashed_password is None
    assert first.user.last_active is not None
    assert auth_service.tokens.verify(second.tokens.access_token).user_id == first.user.id

    count = await async_session.scalar(select(func.count(User.id)))
    assert count == 1


async def test_external_login_links_existing_account(async_session):
    """Test linking keeps the password so both sign-in methods work."""
    existing = await create_user(async_session, "ada@example.com", name="Ada")
    password_hash = existing.hashed_password

    result = await auth_service.login_with_external_profile(async_session, make_profile())

    assert result.user.id == existing.id
    assert result.user.google_id == "google-123"
    assert result.user.hashed_password == password_hash
    assert result.user.name == "Ada"
    assert result.user.image == "https://photos.example.com/ada.png"
