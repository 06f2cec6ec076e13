from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from datetime import datetime

from scholarship.core.database import get_db
from scholarship.core.exceptions import DuplicateUserError, InvalidCredentialsError
from scholarship.core.security import verify_password, get_password_hash, create_user_token
from scholarship.core.logging_config import logger, set_user_id
from scholarship.core.rate_limiter import login_rate_limit, register_rate_limit
from scholarship.models.user import User, UserRole
from scholarship.schemas.auth import UserRegister, UserLogin, LoginResponse, PublicUser, UserResponse
from scholarship.schemas.common import MessageResponse
from scholarship.modules.auth.dependencies import get_current_user

router = APIRouter()


@router.post("/register", response_model=MessageResponse)
@register_rate_limit()
async def register(
    request: Request,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register a new account"""
    client_ip = request.client.host if request.client else "unknown"

    def username_taken():
        logger.log_auth_event(
            event="register",
            success=False,
            username=user_data.username,
            reason="Username taken",
            client_ip=client_ip
        )
        return DuplicateUserError(user_data.username)

    result = await db.execute(select(User).where(User.username == user_data.username))
    if result.scalar_one_or_none():
        raise username_taken()

    user = User(
        username=user_data.username,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role or UserRole.USER,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        await db.rollback()
        raise username_taken()

    logger.log_auth_event(
        event="register",
        success=True,
        username=user.username,
        client_ip=client_ip,
        user_role=user.role.value
    )

    return {"msg": "User registered successfully"}


@router.post("/login", response_model=LoginResponse)
@login_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Exchange username and password for a session token"""
    client_ip = request.client.host if request.client else "unknown"

    result = await db.execute(select(User).where(User.username == credentials.username))
    user = result.scalar_one_or_none()

    # Same error for unknown user and wrong password
    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.log_auth_event(
            event="login",
            success=False,
            username=credentials.username,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise InvalidCredentialsError()

    user.last_login = datetime.utcnow()
    await db.commit()

    set_user_id(user.id)

    logger.log_auth_event(
        event="login",
        success=True,
        username=user.username,
        client_ip=client_ip,
        user_role=user.role.value
    )

    return LoginResponse(
        token=create_user_token(user.id, user.role.value),
        user=PublicUser(username=user.username, role=user.role),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the account behind the current token"""
    return current_user
