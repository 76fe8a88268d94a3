"""
Analytics Routes

GET /analytics/me - Employer dashboard: counts, 7-day trends, recent activity
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_employer
from app.services.analytics_service import get_analytics_service
from app.schemas.schemas import AnalyticsResponse

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/me", response_model=AnalyticsResponse)
async def get_my_analytics(employer: dict = Depends(get_current_employer)):
    """
    Counts and trends across this employer's jobs.

    Trends compare the last 7 days with the 7 days before; after a quiet
    week any activity reports +100%.
    """
    return get_analytics_service().get_for_employer(employer["id"])
