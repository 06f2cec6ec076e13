from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt

from scholarship.core.config import settings
from scholarship.core.exceptions import InvalidTokenError


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    if not hashed_password:
        return False
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def create_user_token(user_id: str, role: str) -> str:
    """Create the session token handed out on login"""
    return create_access_token({"sub": str(user_id), "role": role})


def decode_token(token: str) -> Dict[str, Any]:
    """Decode JWT token"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise InvalidTokenError()

    if payload.get("type") != "access" or not payload.get("sub"):
        raise InvalidTokenError()

    return payload
