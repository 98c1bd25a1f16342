"""Tests for password hashing and token issuance."""
from datetime import timedelta

import pytest

from mentorhub.config.settings import AuthSettings
from mentorhub.core.exceptions import (
    InvalidSignatureError,
    TokenExpiredError,
    WrongTokenKindError,
)
from mentorhub.core.passwords import PasswordHasher
from mentorhub.core.tokens import TokenService


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(
        AuthSettings(
            secret_key="access-secret",
            refresh_secret_key="refresh-secret",
            access_token_expire_minutes=15,
            refresh_token_expire_days=30,
        )
    )


def test_hash_and_verify(hasher):
    """Test a hash verifies only its own password."""
    digest = hasher.hash("Secret123")

    assert digest != "Secret123"
    assert hasher.verify("Secret123", digest)
    assert not hasher.verify("secret123", digest)


def test_hash_is_salted(hasher):
    """Test two hashes of one password differ."""
    assert hasher.hash("Secret123") != hasher.hash("Secret123")


def test_verify_malformed_digest(hasher):
    """Test garbage digests never match and never raise."""
    assert not hasher.verify("Secret123", "not-a-bcrypt-hash")
    assert not hasher.verify("Secret123", None)
    assert not hasher.verify("Secret123", "")


def test_verify_long_password(hasher):
    """Test passwords past bcrypt's input limit still round trip."""
    password = "A1" + "x" * 100
    assert hasher.verify(password, hasher.hash(password))


def test_access_token_round_trip(tokens):
    """Test access token carries the subject and no refresh tag."""
    claims = tokens.verify(tokens.issue_access(7))

    assert claims.user_id == 7
    assert claims.kind == "access"


def test_refresh_token_round_trip(tokens):
    """Test refresh token verifies against the refresh secret."""
    claims = tokens.verify(tokens.issue_refresh(7), expected_kind="refresh")

    assert claims.user_id == 7
    assert claims.kind == "refresh"


def test_access_token_rejected_as_refresh(tokens):
    """Test an access token is never accepted where a refresh token is expected."""
    with pytest.raises(InvalidSignatureError):
        tokens.verify(tokens.issue_access(7), expected_kind="refresh")


def test_wrong_kind_with_shared_secret():
    """Test the kind check when both token kinds share one secret."""
    shared = TokenService(AuthSettings(secret_key="shared"))

    with pytest.raises(WrongTokenKindError):
        shared.verify(shared.issue_access(7), expected_kind="refresh")

    with pytest.raises(WrongTokenKindError):
        shared.verify(shared.issue_refresh(7), expected_kind="access")


def test_refresh_secret_defaults_to_access_secret():
    """Test the refresh secret fallback."""
    config = AuthSettings(secret_key="only-secret", refresh_secret_key=None)

    assert config.effective_refresh_secret == "only-secret"


def test_expired_token(tokens):
    """Test expiry is reported distinctly."""
    token = tokens.issue_access(7, expires_delta=timedelta(seconds=-1))

    with pytest.raises(TokenExpiredError):
        tokens.verify(token)


def test_tampered_token(tokens):
    """Test a token signed with another secret is rejected."""
    forged = TokenService(AuthSettings(secret_key="attacker")).issue_access(7)

    with pytest.raises(InvalidSignatureError):
        tokens.verify(forged)


def test_issue_pair(tokens):
    """Test the pair reports the access token lifetime."""
    pair = tokens.issue_pair(3)

    assert pair.token_type == "bearer"
    assert pair.expires_in == 15 * 60
    assert tokens.verify(pair.refresh_token, "refresh").user_id == 3
