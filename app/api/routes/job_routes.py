"""
Job Routes

POST /jobs - Create job posting (employer only)
GET /jobs - Search open jobs with filters
GET /jobs/employer/me - Employer's own jobs (open / closed / all)
GET /jobs/{job_id} - Get open job details
PUT /jobs/{job_id} - Update job (owner only)
DELETE /jobs/{job_id} - Delete job (owner only)
PATCH /jobs/{job_id}/toggle - Open/close job (owner only)
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.core.auth import get_current_employer
from app.services.filter_builder import SearchCriteria
from app.services.job_service import get_job_service
from app.schemas.schemas import (
    JobCreate, JobUpdate, JobResponse, JobListResponse, JobCreatedResponse,
    JobStatusFilter, ToggleResponse, MessageResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def search_criteria(
    keyword: Optional[str] = Query(None, description="Search title, description and requirements"),
    location: Optional[str] = Query(None),
    job_type: Optional[str] = Query(None, description="One type or a comma-separated list"),
    salary_min: Optional[float] = Query(None),
    salary_max: Optional[float] = Query(None)
) -> SearchCriteria:
    return SearchCriteria(
        keyword=keyword, location=location, job_type=job_type,
        salary_min=salary_min, salary_max=salary_max
    )


@router.post("", response_model=JobCreatedResponse, status_code=201)
async def create_job(job: JobCreate, employer: dict = Depends(get_current_employer)):
    """Create a new job posting. Only employers can create jobs."""
    job_id = get_job_service().create_job(employer["id"], job.model_dump(mode="json"))
    return JobCreatedResponse(job_id=job_id)


@router.get("", response_model=JobListResponse)
async def search_jobs(
    criteria: SearchCriteria = Depends(search_criteria),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1)
):
    """List open job postings with filters and pagination, newest first."""
    return get_job_service().search_jobs(criteria, page=page, page_size=page_size)


@router.get("/employer/me", response_model=JobListResponse)
async def list_own_jobs(
    criteria: SearchCriteria = Depends(search_criteria),
    status: JobStatusFilter = Query(JobStatusFilter.all),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    employer: dict = Depends(get_current_employer)
):
    """All jobs posted by this employer, closed ones included unless filtered."""
    return get_job_service().list_own_jobs(
        employer["id"], criteria, status=status, page=page, page_size=page_size
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str):
    """Get details of an open job."""
    return get_job_service().get_job(job_id)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(job_id: str, update: JobUpdate, employer: dict = Depends(get_current_employer)):
    """Update a job posting. Only the owning employer can update."""
    return get_job_service().update_job(
        employer["id"], job_id, update.model_dump(exclude_unset=True, mode="json")
    )


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: str, employer: dict = Depends(get_current_employer)):
    """Delete a job posting that has no applications."""
    get_job_service().delete_job(employer["id"], job_id)
    return MessageResponse(message="Job deleted successfully")


@router.patch("/{job_id}/toggle", response_model=ToggleResponse)
async def toggle_job_status(job_id: str, employer: dict = Depends(get_current_employer)):
    """Close an open job or reopen a closed one."""
    is_closed = get_job_service().toggle_job_status(employer["id"], job_id)
    return ToggleResponse(is_closed=is_closed)
