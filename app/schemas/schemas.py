"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
The services also validate plain dict input through these models.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    jobseeker = "jobseeker"
    employer = "employer"


class JobType(str, Enum):
    remote = "remote"
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    contract = "contract"


class ApplicationStatus(str, Enum):
    applied = "applied"
    in_review = "in-review"
    accepted = "accepted"
    rejected = "rejected"


class JobStatusFilter(str, Enum):
    """Status selector for an employer's own listing view."""
    open = "open"
    closed = "closed"
    all = "all"


# ============================================================
# AUTH / USER SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole
    company_name: Optional[str] = None
    company_description: Optional[str] = None

    @field_validator("name", "company_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower()

    @model_validator(mode="after")
    def check_company_fields(self):
        if self.role == UserRole.employer:
            if not self.company_name or len(self.company_name) < 2:
                raise ValueError("Company name is required for employers")
        elif self.company_name is not None or self.company_description is not None:
            raise ValueError("Company fields are only allowed for employers")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    avatar: Optional[str] = None
    resume: Optional[str] = None
    company_name: Optional[str] = None
    company_description: Optional[str] = None
    company_logo: Optional[str] = None


class PublicProfileResponse(BaseModel):
    id: str
    name: str
    role: str
    avatar: Optional[str] = None
    company_name: Optional[str] = None
    company_description: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=30)
    avatar: Optional[str] = None
    company_name: Optional[str] = Field(None, min_length=2)
    company_description: Optional[str] = None
    company_logo: Optional[str] = None


class ReferenceUpdate(BaseModel):
    """Reference (URL/path) to a file held by the external file store."""
    reference: str = Field(..., min_length=1)


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    location: Optional[str] = None
    job_type: JobType
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)

    @field_validator("title", "description", "requirements", mode="before")
    @classmethod
    def strip_required(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("location", mode="before")
    @classmethod
    def strip_location(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None:
            if self.salary_max < self.salary_min:
                raise ValueError("salary_max must be greater than or equal to salary_min")
        return self


class JobUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None


class CompanySummary(BaseModel):
    id: str
    name: Optional[str] = None
    company_name: Optional[str] = None
    company_description: Optional[str] = None
    company_logo: Optional[str] = None
    avatar: Optional[str] = None


class JobResponse(BaseModel):
    id: str
    title: str
    description: str
    requirements: str
    location: Optional[str] = None
    job_type: str
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    is_closed: bool
    company: Optional[CompanySummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class JobListResponse(BaseModel):
    items: List[JobResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class JobCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Job created successfully"
    job_id: str


class ToggleResponse(BaseModel):
    success: bool = True
    is_closed: bool


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(BaseModel):
    # Plain str so an unknown value reaches the service and yields a 400
    status: str


class JobSummary(BaseModel):
    id: str
    title: str
    location: Optional[str] = None
    job_type: str
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    is_closed: bool
    company_name: Optional[str] = None


class ApplicantSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    resume: Optional[str] = None
    avatar: Optional[str] = None


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    resume: Optional[str] = None
    status: str
    job: Optional[JobSummary] = None
    applicant: Optional[ApplicantSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class StatusResponse(BaseModel):
    success: bool = True
    status: str


# ============================================================
# SAVED JOB SCHEMAS
# ============================================================

class SavedJobResponse(BaseModel):
    id: str
    job_id: str
    job: Optional[JobSummary] = None
    created_at: datetime


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class TrendsResponse(BaseModel):
    active_jobs: int
    total_applicants: int
    total_hired: int


class CountsResponse(BaseModel):
    total_active_jobs: int
    total_applications: int
    total_hired: int
    trends: TrendsResponse


class RecentJob(BaseModel):
    id: str
    title: str
    location: Optional[str] = None
    job_type: str
    is_closed: bool
    created_at: datetime


class RecentApplication(BaseModel):
    id: str
    status: str
    job_title: Optional[str] = None
    applicant: Optional[ApplicantSummary] = None
    created_at: datetime


class DashboardData(BaseModel):
    recent_jobs: List[RecentJob]
    recent_applications: List[RecentApplication]


class AnalyticsResponse(BaseModel):
    counts: CountsResponse
    data: DashboardData


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
    success: bool = False
