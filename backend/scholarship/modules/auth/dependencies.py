from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from scholarship.core.config import settings
from scholarship.core.database import get_db
from scholarship.core.exceptions import AuthorizationError, InvalidTokenError, MissingTokenError
from scholarship.core.logging_config import set_user_id
from scholarship.core.security import decode_token
from scholarship.core.types import is_valid_uuid
from scholarship.models.user import User

# Token travels in a custom header rather than "Authorization: Bearer"
token_header = APIKeyHeader(name=settings.AUTH_HEADER_NAME, auto_error=False)


async def _user_from_token(token: str, request: Request, db: AsyncSession) -> User:
    payload = decode_token(token)

    user_id = payload["sub"]
    if not is_valid_uuid(user_id):
        raise InvalidTokenError()

    user = await db.get(User, user_id)
    if not user:
        # Account deleted after the token was issued
        raise InvalidTokenError()

    request.state.user_id = user.id
    set_user_id(user.id)
    return user


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(token_header),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    if not token:
        raise MissingTokenError()
    return await _user_from_token(token, request, db)


async def get_optional_user(
    request: Request,
    token: Optional[str] = Depends(token_header),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Authenticated user if a valid token was sent, else None"""
    if not token:
        return None
    try:
        return await _user_from_token(token, request, db)
    except InvalidTokenError:
        return None


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if not current_user.is_admin:
        raise AuthorizationError()
    return current_user
