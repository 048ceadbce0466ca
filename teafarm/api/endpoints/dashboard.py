"""
Dashboard API endpoint for the reference backend.
"""

from fastapi import APIRouter, Depends

from teafarm.core.deps import depends_repository
from teafarm.core.security import require_token
from teafarm.models.dashboard import DashboardStats
from teafarm.services.repository import FarmRepository

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_token)])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    repository: FarmRepository = Depends(depends_repository),
) -> DashboardStats:
    """
    Aggregate figures for the dashboard.

    Monthly values (harvest, temperature, rainfall, humidity) cover the
    current calendar month; the other figures are all-time.

    Example:
        GET /api/dashboard/stats

        Response:
        {
            "totalFields": 3,
            "totalArea": 7.5,
            "completedTasks": 4,
            "inProgressTasks": 1,
            "pendingTasks": 2,
            "totalHarvest": 1250.0,
            "monthlyHarvest": 320.0,
            "averageTemperature": 21.4,
            "totalRainfall": 86.0,
            "averageHumidity": 74.2,
            "harvestByGrade": {"PREMIUM": 300.0, "HIGH": 950.0}
        }
    """
    return repository.dashboard_stats()
