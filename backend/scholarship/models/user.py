from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from datetime import datetime
import enum

from scholarship.core.database import Base
from scholarship.core.types import GUID, generate_uuid


class UserRole(str, enum.Enum):
    """User roles"""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """Login account for a beneficiary or an administrator"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), default=UserRole.USER, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.username}>"
