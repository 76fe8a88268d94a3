"""
Saved Job Routes (jobseeker only)

POST /saved-jobs/{job_id} - Save a job
GET /saved-jobs - List saved jobs
DELETE /saved-jobs/{job_id} - Remove a saved job
"""

from fastapi import APIRouter, Depends
from typing import List

from app.core.auth import get_current_jobseeker
from app.services.saved_job_service import get_saved_job_service
from app.schemas.schemas import SavedJobResponse, MessageResponse

router = APIRouter(prefix="/saved-jobs", tags=["Saved Jobs"])


@router.post("/{job_id}", response_model=MessageResponse, status_code=201)
async def save_job(job_id: str, jobseeker: dict = Depends(get_current_jobseeker)):
    get_saved_job_service().save(jobseeker["id"], job_id)
    return MessageResponse(message="Job saved successfully")


@router.get("", response_model=List[SavedJobResponse])
async def get_saved_jobs(jobseeker: dict = Depends(get_current_jobseeker)):
    return get_saved_job_service().list(jobseeker["id"])


@router.delete("/{job_id}", response_model=MessageResponse)
async def remove_saved_job(job_id: str, jobseeker: dict = Depends(get_current_jobseeker)):
    get_saved_job_service().remove(jobseeker["id"], job_id)
    return MessageResponse(message="Saved job removed successfully")
