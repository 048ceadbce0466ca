"""
Navigator for the client's current location.

The HTTP client uses it to send the user back to the login entry point
when the server rejects the stored token.
"""

import logging
from collections import deque
from typing import Deque

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


class Navigator:
    """Tracks the current location and the most recently visited paths."""

    def __init__(self, login_path: str = "/login", start: str = "/", limit: int = HISTORY_LIMIT):
        self.login_path = login_path
        self.history: Deque[str] = deque([start], maxlen=limit)

    @property
    def location(self) -> str:
        return self.history[-1]

    def navigate(self, path: str) -> None:
        if path != self.location:
            self.history.append(path)

    def redirect_to_login(self) -> None:
        logger.info(f"Redirecting to {self.login_path}")
        self.navigate(self.login_path)

    @property
    def at_login(self) -> bool:
        return self.location == self.login_path
