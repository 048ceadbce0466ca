"""
Application store.

One container holding every slice plus the shared API client, credential
storage and navigator. Code that needs a slice receives the store (or the
slice) explicitly; ``get_store`` is the accessor for callers without one.

Usage:
    async with create_store() as store:
        await store.bootstrap()
        await store.auth.login({"username": "admin", "password": "admin123"})
        await store.fields.fetch()
"""

import logging
from typing import Optional

import httpx

from teafarm.core.config import Settings, get_settings
from teafarm.services.api_client import ApiClient
from teafarm.services.navigation import Navigator
from teafarm.services.storage import CredentialStorage
from teafarm.store.auth import AuthSlice, AuthStatus
from teafarm.store.dashboard import DashboardSlice
from teafarm.store.entities import (
    FieldSlice,
    HarvestRecordSlice,
    TaskSlice,
    WeatherObservationSlice,
)

logger = logging.getLogger(__name__)


class Store:
    """Typed container of all state slices."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.auth = AuthSlice(api)
        self.fields = FieldSlice(api)
        self.tasks = TaskSlice(api)
        self.harvest_records = HarvestRecordSlice(api)
        self.weather_observations = WeatherObservationSlice(api)
        self.dashboard = DashboardSlice(api)

    @property
    def storage(self) -> CredentialStorage:
        return self.api.storage

    @property
    def navigator(self) -> Navigator:
        return self.api.navigator

    async def bootstrap(self) -> AuthStatus:
        """Decide the initial authentication state from persisted credentials."""
        await self.auth.restore_session()
        return self.auth.state.status

    async def close(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "Store":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def create_store(
    settings: Optional[Settings] = None,
    storage: Optional[CredentialStorage] = None,
    navigator: Optional[Navigator] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Store:
    """
    Build a store wired to the configured backend.

    Args:
        settings: Settings to use (defaults to ``get_settings()``)
        storage: Credential storage (defaults to the configured file)
        navigator: Navigator (defaults to one starting at ``/``)
        transport: Optional httpx transport, e.g. ``httpx.ASGITransport``
    """
    settings = settings or get_settings()
    api = ApiClient(
        storage=storage or CredentialStorage(settings.credentials_path),
        navigator=navigator or Navigator(login_path=settings.login_path),
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        transport=transport,
    )
    return Store(api)


# Module-level singleton instance
_store: Optional[Store] = None


def get_store() -> Store:
    """
    Get the process-wide Store instance.

    Returns:
        Store instance
    """
    global _store
    if _store is None:
        _store = create_store()
    return _store
