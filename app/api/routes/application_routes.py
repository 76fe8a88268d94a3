"""
Application Routes

POST /applications/{job_id} - Apply to job (jobseeker only)
GET /applications/me - My applications (jobseeker only)
GET /applications/job/{job_id} - Applications for a job (owning employer only)
PATCH /applications/{application_id}/status - Change status (owning employer only)
"""

from fastapi import APIRouter, Depends
from typing import List

from app.core.auth import get_current_jobseeker, get_current_employer
from app.services.application_service import get_application_service
from app.schemas.schemas import (
    ApplicationResponse, ApplicationStatusUpdate, StatusResponse, MessageResponse
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("/{job_id}", response_model=MessageResponse, status_code=201)
async def apply_to_job(job_id: str, jobseeker: dict = Depends(get_current_jobseeker)):
    """Apply to a job. Jobseekers only. Cannot apply twice to same job."""
    get_application_service().apply(jobseeker["id"], job_id)
    return MessageResponse(message="Job applied successfully")


@router.get("/me", response_model=List[ApplicationResponse])
async def get_my_applications(jobseeker: dict = Depends(get_current_jobseeker)):
    return get_application_service().list_my_applications(jobseeker["id"])


@router.get("/job/{job_id}", response_model=List[ApplicationResponse])
async def get_applications_for_job(job_id: str, employer: dict = Depends(get_current_employer)):
    """All applications received for one of the employer's jobs."""
    return get_application_service().list_applications_for_job(employer["id"], job_id)


@router.patch("/{application_id}/status", response_model=StatusResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    employer: dict = Depends(get_current_employer)
):
    """Update status of a job application."""
    new_status = get_application_service().update_status(employer["id"], application_id, update.status)
    return StatusResponse(status=new_status)
