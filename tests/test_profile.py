"""Tests for profile endpoints."""
from datetime import date

from httpx import AsyncClient

from mentorhub.models import User
from mentorhub.schemas.auth import ProfileUpdate
from mentorhub.services.profile import profile_changes


async def test_get_profile(client: AsyncClient, test_user, auth_headers):
    """Test reading the caller's profile."""
    response = await client.get("/api/auth/profile", headers=auth_headers)

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["id"] == test_user.id
    assert user["email"] == test_user.email
    assert user["first_name"] == "Test"
    assert "hashed_password" not in user


async def test_update_only_birthdate(client: AsyncClient, test_user, auth_headers, session_factory):
    """Test a patch with one field leaves every other field alone."""
    response = await client.put(
        "/api/auth/profile",
        headers=auth_headers,
        json={"birthdate": "1990-01-01"}
    )

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["birthdate"] == "1990-01-01"
    assert user["name"] == "Test User"
    assert user["first_name"] == "Test"
    assert user["last_name"] == "User"
    assert user["profession"] == "Engineer"

    async with session_factory() as session:
        stored = await session.get(User, test_user.id)
        assert stored.birthdate == date(1990, 1, 1)
        assert stored.hashed_password == test_user.hashed_password


async def test_update_trims_strings(client: AsyncClient, auth_headers):
    """Test string fields are stored trimmed."""
    response = await client.put(
        "/api/auth/profile",
        headers=auth_headers,
        json={"first_name": "  Grace  ", "profession": " Admiral "}
    )

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["first_name"] == "Grace"
    assert user["profession"] == "Admiral"


async def test_update_with_no_fields(client: AsyncClient, auth_headers):
    """Test an empty patch is rejected."""
    response = await client.put("/api/auth/profile", headers=auth_headers, json={})

    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


async def test_update_blank_birthdate_only(client: AsyncClient, auth_headers):
    """Test a blank birthdate counts as nothing to update."""
    response = await client.put(
        "/api/auth/profile",
        headers=auth_headers,
        json={"birthdate": ""}
    )

    assert response.status_code == 400


async def test_update_invalid_birthdate(client: AsyncClient, auth_headers):
    """Test an unparseable birthdate fails validation."""
    response = await client.put(
        "/api/auth/profile",
        headers=auth_headers,
        json={"birthdate": "1990-02-31"}
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "birthdate"


async def test_update_and_clear_image(client: AsyncClient, auth_headers):
    """Test setting then clearing the image with null."""
    set_response = await client.put(
        "/api/auth/profile",
        headers=auth_headers,
        json={"image": "https://cdn.example.com/a.png"}
    )
    assert set_response.json()["data"]["user"]["image"] == "https://cdn.example.com/a.png"

    clear_response = await client.put(
        "/api/auth/profile",
        headers=auth_headers,
        json={"image": None}
    )

    assert clear_response.status_code == 200
    assert clear_response.json()["data"]["user"]["image"] is None


async def test_delete_image_is_idempotent(client: AsyncClient, auth_headers):
    """Test deleting the image twice succeeds both times."""
    first = await client.delete("/api/auth/profile/image", headers=auth_headers)
    second = await client.delete("/api/auth/profile/image", headers=auth_headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["data"]["user"]["image"] is None


def test_profile_changes_rules():
    """Test per-field patch semantics."""
    patch = ProfileUpdate.model_validate({
        "name": " Ada ",
        "last_name": None,
        "profession": "",
        "image": "",
    })

    assert profile_changes(patch) == {
        "name": "Ada",
        "profession": "",
        "image": None,
    }


def test_profile_changes_skips_omitted_fields():
    """Test omitted fields never appear in the changes."""
    assert profile_changes(ProfileUpdate.model_validate({})) == {}
    assert profile_changes(ProfileUpdate.model_validate({"birthdate": None})) == {}
