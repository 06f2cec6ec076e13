from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from scholarship.models.user import UserRole
from scholarship.schemas.common import CamelModel


class UserRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)
    role: Optional[UserRole] = None


class UserLogin(BaseModel):
    username: str
    password: str


class PublicUser(BaseModel):
    """What the login response reveals about the account"""
    username: str
    role: UserRole


class LoginResponse(BaseModel):
    token: str
    user: PublicUser


class UserResponse(CamelModel):
    id: str
    username: str
    role: UserRole
    created_at: datetime
    last_login: Optional[datetime] = None
