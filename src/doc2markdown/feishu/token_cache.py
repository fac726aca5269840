"""
Tenant access token cache.

One cache belongs to one ``FeishuClient``; every document converted through
that client reuses the cached token until it expires.
"""

import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Optional

from loguru import logger


@dataclass(frozen=True)
class AccessToken:
    """Access token with its absolute expiry (``time.time()`` seconds)"""

    token: str
    expires_at: float

    def is_valid(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return bool(self.token) and now < self.expires_at


TokenFetcher = Callable[[], AccessToken]


class AccessTokenCache:
    """Holds one access token and refreshes it on demand."""

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize an empty cache.

        Args:
            clock: Source of the current time in seconds
        """
        self._clock = clock
        self._current: Optional[AccessToken] = None
        self._lock = Lock()

    def get_or_refresh(self, fetch: TokenFetcher) -> str:
        """
        Return the cached token, fetching a new one if missing or expired.

        Args:
            fetch: Obtains a fresh token from the platform

        Returns:
            Access token string
        """
        with self._lock:
            if self._current is not None and self._current.is_valid(self._clock()):
                return self._current.token
            logger.debug("Access token missing or expired, refreshing")
            self._current = fetch()
            return self._current.token

    def invalidate(self):
        """Drop the cached token so the next call refreshes it."""
        with self._lock:
            self._current = None
