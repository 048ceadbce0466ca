"""
Authentication gate.

States and transitions:

    ANONYMOUS       --login-->            AUTHENTICATING
    AUTHENTICATING  --success-->          AUTHENTICATED  (token persisted)
    AUTHENTICATING  --failure-->          FAILED         (nothing persisted)
    AUTHENTICATED   --logout / 401-->     ANONYMOUS      (token and user cleared)

On cold start ``restore_session`` checks a persisted token with
``GET /auth/me``; a rejected token is discarded.
"""

import logging
from enum import Enum
from typing import Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from teafarm.models.auth import LoginRequest, User
from teafarm.services.api_client import ApiClient, ApiError
from teafarm.services.storage import CredentialStorageError
from teafarm.store.slice import OperationResult, error_message

logger = logging.getLogger(__name__)


class AuthStatus(str, Enum):
    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATING = "AUTHENTICATING"
    AUTHENTICATED = "AUTHENTICATED"
    FAILED = "FAILED"


class AuthState(BaseModel):
    """In-memory authentication state."""

    status: AuthStatus = AuthStatus.ANONYMOUS
    user: Optional[User] = None
    token: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.status == AuthStatus.AUTHENTICATED


class AuthSlice:
    """
    Authentication slice driving the gate state machine.

    The slice registers itself with the API client so that a 401 on any
    authenticated request drops it back to ANONYMOUS.
    """

    def __init__(self, api: ApiClient):
        self._api = api
        self.state = AuthState()
        api.add_unauthorized_listener(self.expire)

    def _reset(self, error: Optional[str] = None) -> None:
        self.state = AuthState(error=error)

    async def login(
        self, credentials: Union[LoginRequest, Mapping[str, str]]
    ) -> OperationResult[User]:
        """
        Submit credentials.

        Returns:
            The authenticated user, or the failure message
        """
        self.state.status = AuthStatus.AUTHENTICATING
        self.state.loading = True
        self.state.error = None
        try:
            request = (
                credentials
                if isinstance(credentials, LoginRequest)
                else LoginRequest.model_validate(credentials)
            )
            response = await self._api.login(request)
            self._api.storage.save(response.token, response.user)
        except (ApiError, ValidationError, CredentialStorageError) as e:
            message = error_message(e, "Login failed")
            logger.warning(f"Login failed: {message}")
            self.state = AuthState(status=AuthStatus.FAILED, error=message)
            return OperationResult(error=message)

        logger.info(f"User '{response.user.username}' logged in as {response.user.role.value}")
        self.state = AuthState(
            status=AuthStatus.AUTHENTICATED,
            user=response.user,
            token=response.token,
        )
        return OperationResult(value=response.user)

    async def logout(self) -> OperationResult[None]:
        """
        Log out locally and on the server.

        Stored credentials are cleared even when the server call fails.
        """
        try:
            await self._api.logout()
        except ApiError as e:
            logger.warning(f"Server logout failed, clearing local session anyway: {e}")
        self._reset()
        logger.info("Logged out")
        return OperationResult()

    async def restore_session(self) -> OperationResult[User]:
        """
        Cold-start check of a persisted token.

        Without a token the gate stays ANONYMOUS. With one, ``GET /auth/me``
        decides between AUTHENTICATED and ANONYMOUS (token discarded).
        """
        storage = self._api.storage
        token = storage.token
        if not token:
            self._reset()
            return OperationResult()

        self.state = AuthState(
            status=AuthStatus.AUTHENTICATING, token=token, user=storage.user, loading=True
        )
        try:
            user = await self._api.get_current_user()
        except ApiError as e:
            message = error_message(e, "Failed to restore session")
            logger.warning(f"Discarding stale token: {message}")
            try:
                storage.clear()
            except CredentialStorageError as err:
                logger.warning(f"Could not clear stored credentials: {err}")
            self._reset(error=message)
            return OperationResult(error=message)

        try:
            storage.save(token, user)
        except CredentialStorageError as e:
            logger.warning(f"Could not refresh stored user: {e}")
        self.state = AuthState(status=AuthStatus.AUTHENTICATED, user=user, token=token)
        logger.info(f"Session restored for '{user.username}'")
        return OperationResult(value=user)

    def expire(self) -> None:
        """Drop to ANONYMOUS after the server rejected the token."""
        if self.state.status != AuthStatus.ANONYMOUS:
            logger.info("Session expired")
        self._reset()

    def clear_error(self) -> None:
        self.state.error = None
