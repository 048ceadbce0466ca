"""
Dashboard slice holding the aggregate statistics.
"""

from typing import Optional

from pydantic import BaseModel

from teafarm.models.dashboard import DashboardStats
from teafarm.services.api_client import ApiClient, ApiError
from teafarm.store.slice import OperationResult, error_message


class DashboardState(BaseModel):
    stats: Optional[DashboardStats] = None
    loading: bool = False
    error: Optional[str] = None


class DashboardSlice:
    def __init__(self, api: ApiClient):
        self._api = api
        self.state = DashboardState()

    async def fetch(self) -> OperationResult[DashboardStats]:
        self.state.loading = True
        self.state.error = None
        try:
            stats = await self._api.get_dashboard_stats()
        except ApiError as e:
            self.state.loading = False
            self.state.error = error_message(e, "Failed to fetch dashboard statistics")
            return OperationResult(error=self.state.error)

        self.state.stats = stats
        self.state.loading = False
        return OperationResult(value=stats)
