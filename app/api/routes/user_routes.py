"""
User Routes

GET /users/me - Get own profile
PUT /users/me - Update own profile
PUT /users/me/avatar - Set avatar reference
PUT /users/me/resume - Set resume reference (jobseeker only)
DELETE /users/me/resume - Remove resume reference (jobseeker only)
GET /users/{user_id} - Public profile
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user, get_current_jobseeker
from app.services.user_service import get_user_service
from app.schemas.schemas import (
    ProfileUpdate, ReferenceUpdate, UserResponse, PublicProfileResponse, MessageResponse
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_my_profile(user: dict = Depends(get_current_user)):
    return get_user_service().get_profile(user["id"])


@router.put("/me", response_model=UserResponse)
async def update_my_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Update profile. Company fields only apply to employer accounts."""
    return get_user_service().update_profile(user["id"], data.model_dump(exclude_unset=True))


@router.put("/me/avatar", response_model=MessageResponse)
async def set_avatar(data: ReferenceUpdate, user: dict = Depends(get_current_user)):
    get_user_service().set_avatar(user["id"], data.reference)
    return MessageResponse(message="Avatar updated successfully")


@router.put("/me/resume", response_model=MessageResponse)
async def set_resume(data: ReferenceUpdate, jobseeker: dict = Depends(get_current_jobseeker)):
    get_user_service().set_resume(jobseeker["id"], data.reference)
    return MessageResponse(message="Resume updated successfully")


@router.delete("/me/resume", response_model=MessageResponse)
async def delete_resume(jobseeker: dict = Depends(get_current_jobseeker)):
    get_user_service().delete_resume(jobseeker["id"])
    return MessageResponse(message="Resume deleted successfully")


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_public_profile(user_id: str):
    return get_user_service().get_public_profile(user_id)
