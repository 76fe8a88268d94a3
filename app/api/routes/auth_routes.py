"""
Authentication Routes

POST /auth/register - Register new user (jobseeker or employer)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, Depends

from app.core.auth import create_access_token, get_current_user
from app.services.user_service import get_user_service
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    Employers must provide company_name; jobseekers must not.
    """
    user = get_user_service().register(request.model_dump(mode="json", exclude_none=True))
    return MessageResponse(message=f"Registered successfully as {user['role']}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = get_user_service().authenticate(request.email, request.password)
    token = create_access_token(data={"sub": user["id"], "role": user["role"]})
    return TokenResponse(access_token=token, user_id=user["id"], role=user["role"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return get_user_service().get_profile(user["id"])
