"""Mentor directory routes."""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ...schemas.auth import RegisteredUser
from ...schemas.common import SuccessResponse
from ...schemas.mentor import (
    MentorCreate,
    MentorFilters,
    MentorResponse,
    MentorSignup,
    MentorUpdate,
)
from ...core.security import get_current_user
from ...services.mentor import mentor_service
from ...models.mentor import Mentor
from ...models.user import User

router = APIRouter(prefix="/mentors", tags=["Mentors"])


def mentor_data(mentor: Mentor) -> dict:
    return MentorResponse.model_validate(mentor).model_dump(mode="json")


@router.get("", response_model=SuccessResponse)
async def list_mentors(
    is_approved: Optional[bool] = Query(None),
    is_active: Optional[bool] = Query(None),
    min_rate: Optional[Decimal] = Query(None, ge=0),
    max_rate: Optional[Decimal] = Query(None, ge=0),
    search: Optional[str] = Query(None, max_length=255),
    language: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db)
):
    """List mentors with optional filters."""
    filters = MentorFilters(
        is_approved=is_approved,
        is_active=is_active,
        min_rate=min_rate,
        max_rate=max_rate,
        search=search,
        language=language,
    )
    mentors = await mentor_service.list_mentors(db, filters)

    return SuccessResponse(
        message=f"Found {len(mentors)} mentor(s)",
        data={"mentors": [mentor_data(m) for m in mentors], "count": len(mentors)},
    )


@router.post("", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def create_mentor_with_user(
    signup: MentorSignup,
    db: AsyncSession = Depends(get_db)
):
    """Create a user account together with its mentor profile."""
    result = await mentor_service.create_mentor_with_user(db, signup)

    return SuccessResponse(
        message="Mentor profile and user account created successfully",
        data={
            "user": RegisteredUser.model_validate(result.user).model_dump(mode="json"),
            "mentor": mentor_data(result.mentor),
            **result.tokens.model_dump(),
        },
    )


@router.get("/profile/me", response_model=SuccessResponse)
async def get_my_mentor_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the caller's own mentor profile."""
    mentor = await mentor_service.get_mentor_by_user(db, current_user.id)
    return SuccessResponse(data={"mentor": mentor_data(mentor)})


@router.post("/profile", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def create_my_mentor_profile(
    mentor_create: MentorCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a mentor profile for the authenticated user."""
    mentor = await mentor_service.create_mentor(db, current_user.id, mentor_create)
    return SuccessResponse(
        message="Mentor profile created successfully",
        data={"mentor": mentor_data(mentor)},
    )


@router.delete("/profile/image", response_model=SuccessResponse)
async def delete_my_mentor_image(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove the caller's mentor image reference."""
    await mentor_service.delete_image(db, current_user.id)
    return SuccessResponse(message="Mentor image deleted successfully")


@router.get("/user/{user_id}", response_model=SuccessResponse)
async def get_mentor_by_user(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get a mentor profile by its owner's user id."""
    mentor = await mentor_service.get_mentor_by_user(db, user_id)
    return SuccessResponse(data={"mentor": mentor_data(mentor)})


@router.get("/{mentor_id}", response_model=SuccessResponse)
async def get_mentor(
    mentor_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get a mentor profile by id."""
    mentor = await mentor_service.get_mentor(db, mentor_id)
    return SuccessResponse(data={"mentor": mentor_data(mentor)})


@router.put("/{mentor_id}", response_model=SuccessResponse)
async def update_mentor(
    mentor_id: int,
    mentor_update: MentorUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update a mentor profile the caller owns."""
    mentor = await mentor_service.update_mentor(db, mentor_id, current_user.id, mentor_update)
    return SuccessResponse(
        message="Mentor profile updated successfully",
        data={"mentor": mentor_data(mentor)},
    )


@router.delete("/{mentor_id}", response_model=SuccessResponse)
async def delete_mentor(
    mentor_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a mentor profile the caller owns."""
    await mentor_service.delete_mentor(db, mentor_id, current_user.id)
    return SuccessResponse(message="Mentor profile deleted successfully")
