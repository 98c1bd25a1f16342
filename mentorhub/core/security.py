"""Bearer token dependencies."""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.user import User
from .auth import auth_service
from .exceptions import AuthenticationError

# Security scheme; missing credentials are reported through our own envelope
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    return await auth_service.authenticate(db, credentials.credentials)
