"""External identity (Google-style) login policy.

The decision is a pure function of what the store already holds and what
the provider asserted, so it can be tested without a database. The auth
service applies the returned action.

Linking by email trusts the provider's email claim: whoever controls a
provider account with a matching email gains access to the local account.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from ..core.exceptions import MissingEmailError
from ..models.user import User
from ..schemas.auth import ExternalProfile


@dataclass(frozen=True)
class Accept:
    """Known external identity; sign the user in."""

    user: User


@dataclass(frozen=True)
class LinkAndAccept:
    """Existing account with the same email; attach the identity to it."""

    user: User
    patch: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CreateAndAccept:
    """Unknown person; create a password-less account."""

    fields: Dict[str, Any] = field(default_factory=dict)


ExternalLoginAction = Union[Accept, LinkAndAccept, CreateAndAccept]


def split_display_name(display_name: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split "Ada King Lovelace" into ("Ada", "King Lovelace")."""
    if not display_name or not display_name.strip():
        return None, None

    first, _, rest = display_name.strip().partition(" ")
    return first or None, rest.strip() or None


def decide_external_login(
    by_external_id: Optional[User],
    by_email: Optional[User],
    profile: ExternalProfile,
) -> ExternalLoginAction:
    """Choose how to resolve an external login.

    Raises MissingEmailError when the provider gave no email.
    """
    email = profile.email
    if not email:
        raise MissingEmailError()

    if by_external_id is not None:
        return Accept(user=by_external_id)

    if by_email is not None:
        patch: Dict[str, Any] = {"google_id": profile.id}
        if not by_email.image and profile.photo:
            patch["image"] = profile.photo
        return LinkAndAccept(user=by_email, patch=patch)

    first_name, last_name = split_display_name(profile.display_name)
    return CreateAndAccept(
        fields={
            "email": email,
            "google_id": profile.id,
            "name": profile.display_name,
            "first_name": first_name,
            "last_name": last_name,
            "image": profile.photo,
        }
    )
