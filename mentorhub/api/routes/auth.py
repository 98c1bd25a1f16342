"""Authentication and profile routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ...schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    ProfileResponse,
    ProfileUpdate,
    RefreshTokenRequest,
    RegisteredUser,
    RegisterRequest,
    UserSummary,
)
from ...schemas.common import SuccessResponse
from ...core.auth import auth_service
from ...core.security import get_current_user
from ...services.profile import profile_service
from ...models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])


def profile_data(user: User) -> dict:
    return {"user": ProfileResponse.model_validate(user).model_dump(mode="json")}


@router.post("/register", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    register_request: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Register a new user."""
    result = await auth_service.register(
        db,
        email=register_request.email,
        password=register_request.password,
        name=register_request.name,
    )

    return SuccessResponse(
        message="User registered successfully",
        data={
            "user": RegisteredUser.model_validate(result.user).model_dump(mode="json"),
            **result.tokens.model_dump(),
        },
    )


@router.post("/login", response_model=SuccessResponse)
async def login_user(
    login_request: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Login user and return tokens."""
    result = await auth_service.login(db, login_request.email, login_request.password)

    return SuccessResponse(
        message="Login successful",
        data={
            "user": UserSummary.model_validate(result.user).model_dump(mode="json"),
            **result.tokens.model_dump(),
        },
    )


@router.post("/refresh-token", response_model=SuccessResponse)
async def refresh_token(
    refresh_request: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange a refresh token for a new token pair."""
    tokens = await auth_service.refresh(db, refresh_request.refresh_token)

    return SuccessResponse(message="Token refreshed", data=tokens.model_dump())


@router.get("/profile", response_model=SuccessResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get current user profile."""
    user = await profile_service.get_profile(db, current_user.id)
    return SuccessResponse(data=profile_data(user))


@router.put("/profile", response_model=SuccessResponse)
async def update_profile(
    profile_update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update the supplied profile fields."""
    user = await profile_service.update_profile(db, current_user.id, profile_update)
    return SuccessResponse(message="Profile updated successfully", data=profile_data(user))


@router.delete("/profile/image", response_model=SuccessResponse)
async def delete_profile_image(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove the profile image reference."""
    user = await profile_service.delete_image(db, current_user.id)
    return SuccessResponse(message="Profile image deleted successfully", data=profile_data(user))


@router.post("/change-password", response_model=SuccessResponse)
async def change_password(
    password_change: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Change user password."""
    await auth_service.change_password(
        db,
        current_user.id,
        password_change.current_password,
        password_change.new_password,
    )

    return SuccessResponse(message="Password changed successfully")


@router.post("/logout", response_model=SuccessResponse)
async def logout_user(
    current_user: User = Depends(get_current_user)
):
    """Logout user (client-side token invalidation)."""
    # Tokens stay valid until they expire; the client discards them
    return SuccessResponse(message="Logged out successfully")
