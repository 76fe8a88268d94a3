"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies resolving the caller context {id, role, ...}
  and gating routes by role (jobseeker / employer)
"""

from datetime import datetime, timedelta
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import get_settings
from app.core.errors import AuthenticationError, Forbidden
from app.db.mongodb import get_collection, COLLECTIONS

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (missing header handled in get_current_user)
bearer_scheme = HTTPBearer(auto_error=False)

INVALID_TOKEN = "Not authorized, token invalid"
NOT_ALLOWED = "You are not authorized to perform this action"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")

    payload = decode_token(credentials.credentials)
    if not payload:
        raise AuthenticationError(INVALID_TOKEN)

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError(INVALID_TOKEN)

    try:
        user_oid = ObjectId(user_id)
    except (InvalidId, TypeError):
        raise AuthenticationError(INVALID_TOKEN)

    # Verify user still exists
    user = get_collection(COLLECTIONS["users"]).find_one({"_id": user_oid}, {"password": 0})
    if not user:
        raise AuthenticationError(INVALID_TOKEN)

    return {
        "id": str(user["_id"]),
        "role": user["role"],
        "name": user.get("name"),
        "email": user.get("email"),
        "resume": user.get("resume")
    }


async def get_current_jobseeker(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require jobseeker role."""
    if user["role"] != "jobseeker":
        raise Forbidden(NOT_ALLOWED)
    return user


async def get_current_employer(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require employer role."""
    if user["role"] != "employer":
        raise Forbidden(NOT_ALLOWED)
    return user
