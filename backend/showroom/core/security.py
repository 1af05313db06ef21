# backend/showroom/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Header, HTTPException
from jose import JWTError, jwt
from passlib.hash import bcrypt as bcrypt_hash

from .config import settings

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash"""
    if not hashed_password:
        return False
    try:
        return bcrypt_hash.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token"""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def require_admin(authorization: Optional[str] = Header(None)) -> dict:
    """
    Bearer-token gate for admin routes.
    Returns the decoded token payload.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="No token")

    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        raise HTTPException(status_code=401, detail="Invalid token format")

    try:
        payload = jwt.decode(parts[1], settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise HTTPException(status_code=401, detail="Token invalid")

    return payload
