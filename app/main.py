"""
Job Board - Main Application

FastAPI backend with:
- MongoDB for users, jobs, applications and saved jobs
- JWT authentication (jobseeker / employer roles)
- Domain errors mapped to HTTP status codes

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.errors import DomainError
from app.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
log = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Job Board",
    description="""
    Two-sided job board backend.

    ## Features
    - **Authentication**: JWT-based auth for jobseekers and employers
    - **Jobs**: Keyword / location / type / salary search, employer management
    - **Applications**: Apply once per job, employer-driven status workflow
    - **Saved Jobs**: Jobseeker bookmarks
    - **Analytics**: Employer dashboard with 7-day trends
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """ValidationError -> 400, Forbidden -> 403, NotFound -> 404, Conflict -> 409 ..."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "detail": exc.message},
        headers=exc.headers
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
        log.info("MongoDB indexes initialized")
    except Exception as e:
        # Unique indexes arbitrate duplicate applications, saves and emails
        log.error(f"MongoDB index initialization failed: {e}")
        raise


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
