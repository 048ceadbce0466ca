"""
HTTP client adapter for the Tea Farm Operations REST backend.

Every outbound request goes through one ``httpx.AsyncClient`` whose event
hooks act as interceptors:

- the request hook attaches ``Authorization: Bearer <token>`` read from
  the credential storage at send time;
- the response hook reacts to 401 by clearing the stored credentials,
  notifying the unauthorized listeners and redirecting to login.

The 401 returned for a rejected credential submission (``POST /auth/login``)
is a failed login, not an expired session, and is left to the caller.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from teafarm.core.config import Settings, get_settings
from teafarm.models.auth import LoginRequest, LoginResponse, User
from teafarm.models.base import CamelModel
from teafarm.models.dashboard import DashboardStats
from teafarm.models.field import Field
from teafarm.models.harvest_record import HarvestRecord
from teafarm.models.task import Task
from teafarm.models.weather_observation import WeatherObservation
from teafarm.services.navigation import Navigator
from teafarm.services.storage import CredentialStorage, CredentialStorageError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"

ModelT = TypeVar("ModelT", bound=BaseModel)
UnauthorizedListener = Callable[[], Union[None, Awaitable[None]]]


class ApiError(Exception):
    """
    Base class for every failure reported by ApiClient.

    Attributes:
        message: Human-readable description
        status_code: HTTP status, None for transport failures
        server_message: Message taken from the response body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_message = server_message


class TransportError(ApiError):
    """Raised when the request never produced a response (DNS, connect, timeout)."""

    pass


class ServerError(ApiError):
    """Raised for 4xx/5xx responses."""

    pass


class UnauthorizedError(ServerError):
    """Raised for 401 responses."""

    pass


class MalformedResponseError(ApiError):
    """Raised when a 2xx body does not match the expected model."""

    pass


def _safe_json(response: httpx.Response) -> Any:
    """Return the decoded JSON body, or None when the body is not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _extract_message(data: Any) -> Optional[str]:
    """
    Pull a human-readable message out of an error body.

    Accepts ``{"message": ...}``, ``{"detail": ...}`` (including FastAPI's
    list of validation errors) and ``{"error": ...}``.
    """
    if not isinstance(data, dict):
        return None
    for key in ("message", "detail", "error"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, list) and value:
            parts = [item.get("msg", str(item)) if isinstance(item, dict) else str(item) for item in value]
            return "; ".join(parts)
    return None


class ResourceClient(Generic[ModelT]):
    """
    CRUD calls for one REST collection.

    Example:
        >>> fields = await api.fields.list(FieldSearchParams(location="Block A"))
        >>> created = await api.fields.create(FieldDraft(name="N", location="A", area_size=1.5))
    """

    def __init__(self, api: "ApiClient", path: str, model: Type[ModelT]):
        self._api = api
        self.path = path
        self.model = model

    async def list(self, params: Optional[CamelModel] = None) -> List[ModelT]:
        query = params.to_payload() if params is not None else None
        data = await self._api.request("GET", self.path, params=query)
        if not isinstance(data, list):
            raise MalformedResponseError(f"Expected a list from GET {self.path}")
        return [self._api.parse(self.model, item, self.path) for item in data]

    async def get(self, id: int) -> ModelT:
        data = await self._api.request("GET", f"{self.path}/{id}")
        return self._api.parse(self.model, data, self.path)

    async def create(self, draft: CamelModel) -> ModelT:
        data = await self._api.request("POST", self.path, json=draft.to_payload())
        return self._api.parse(self.model, data, self.path)

    async def update(self, id: int, patch: CamelModel) -> ModelT:
        data = await self._api.request("PUT", f"{self.path}/{id}", json=patch.to_payload())
        return self._api.parse(self.model, data, self.path)

    async def delete(self, id: int) -> None:
        await self._api.request("DELETE", f"{self.path}/{id}")


class ApiClient:
    """
    Thin async REST client shared by every state slice.

    Args:
        storage: Credential storage read for the bearer token
        navigator: Navigator redirected to login on 401
        base_url: Backend base URL, e.g. ``http://localhost:8080/api``
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (MockTransport, ASGITransport)
    """

    def __init__(
        self,
        storage: CredentialStorage,
        navigator: Optional[Navigator] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings: Settings = get_settings()
        self.storage = storage
        self.navigator = navigator or Navigator(login_path=settings.login_path)
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._unauthorized_listeners: List[UnauthorizedListener] = []

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.request_timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
            event_hooks={
                "request": [self._attach_token],
                "response": [self._intercept_unauthorized],
            },
        )
        logger.info(f"API client created for {self.base_url}")

        self.fields: ResourceClient[Field] = ResourceClient(self, "/fields", Field)
        self.tasks: ResourceClient[Task] = ResourceClient(self, "/tasks", Task)
        self.harvest_records: ResourceClient[HarvestRecord] = ResourceClient(
            self, "/harvest-records", HarvestRecord
        )
        self.weather_observations: ResourceClient[WeatherObservation] = ResourceClient(
            self, "/weather-observations", WeatherObservation
        )

    # Interceptors

    async def _attach_token(self, request: httpx.Request) -> None:
        token = self.storage.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def _intercept_unauthorized(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        if response.request.url.path.endswith(LOGIN_PATH):
            return
        logger.warning(
            f"401 from {response.request.method} {response.request.url.path}, "
            "clearing credentials"
        )
        try:
            self.storage.clear()
        except CredentialStorageError as e:
            logger.warning(f"Could not clear stored credentials: {e}")
        for listener in self._unauthorized_listeners:
            result = listener()
            if inspect.isawaitable(result):
                await result
        self.navigator.redirect_to_login()

    def add_unauthorized_listener(self, listener: UnauthorizedListener) -> None:
        """Register a callback run whenever an authenticated request gets 401."""
        self._unauthorized_listeners.append(listener)

    # Transport

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            TransportError: If no response was received
            UnauthorizedError: On 401
            ServerError: On any other 4xx/5xx
        """
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.RequestError as e:
            raise TransportError(f"Network error on {method} {path}: {e}") from e

        data = _safe_json(response)
        if response.is_error:
            server_message = _extract_message(data)
            message = server_message or f"HTTP {response.status_code} on {method} {path}"
            error_cls = UnauthorizedError if response.status_code == 401 else ServerError
            raise error_cls(message, status_code=response.status_code, server_message=server_message)
        return data

    def parse(self, model: Type[ModelT], data: Any, path: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Unexpected response from {path}: {e.error_count()} validation error(s)"
            ) from e

    async def aclose(self) -> None:
        await self._client.aclose()

    # Authentication

    async def login(self, credentials: LoginRequest) -> LoginResponse:
        data = await self.request("POST", LOGIN_PATH, json=credentials.to_payload())
        return self.parse(LoginResponse, data, LOGIN_PATH)

    async def logout(self) -> None:
        """Notify the server, then drop the stored credentials whatever the outcome."""
        try:
            await self.request("POST", "/auth/logout")
        finally:
            try:
                self.storage.clear()
            except CredentialStorageError as e:
                logger.warning(f"Could not clear stored credentials: {e}")

    async def get_current_user(self) -> User:
        data = await self.request("GET", "/auth/me")
        return self.parse(User, data, "/auth/me")

    # Dashboard

    async def get_dashboard_stats(self) -> DashboardStats:
        data = await self.request("GET", "/dashboard/stats")
        return self.parse(DashboardStats, data, "/dashboard/stats")
