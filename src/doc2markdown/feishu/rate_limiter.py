"""Token bucket rate limiter for Feishu open platform calls."""

import math
import time
from threading import Lock
from typing import Optional

from loguru import logger


class TokenBucketRateLimiter:
    """Thread-safe token bucket rate limiter.

    The open platform enforces per-app request quotas; every API call made by
    the client acquires one token before going out.
    """

    def __init__(
        self,
        rate: float,
        capacity: Optional[int] = None,
        name: str = "FeishuRateLimiter"
    ):
        """Initialize rate limiter.

        Args:
            rate: Tokens per second (e.g., 5.0 = 300 requests/min)
            capacity: Bucket capacity (burst size). Defaults to rate rounded up, minimum 1
            name: Identifier for logging
        """
        if rate <= 0:
            raise ValueError("rate must be positive")
        self.rate = rate
        self.capacity = capacity or max(1, math.ceil(rate))
        self.name = name

        self.tokens = float(self.capacity)
        self.last_update = time.monotonic()
        self.lock = Lock()

        logger.debug(
            f"Initialized {name}: {rate:.2f} tokens/sec, capacity={self.capacity}"
        )

    def acquire(self, tokens: int = 1, block: bool = True) -> bool:
        """Acquire tokens from the bucket.

        Args:
            tokens: Number of tokens to acquire (default: 1)
            block: If True, wait until tokens available. If False, return immediately.

        Returns:
            True if tokens were acquired, False if not available (only when block=False)
        """
        with self.lock:
            now = time.monotonic()
            elapsed = now - self.last_update

            # Refill bucket based on elapsed time
            self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
            self.last_update = now

            if self.tokens >= tokens:
                self.tokens -= tokens
                return True

            if not block:
                logger.debug(f"{self.name}: Not enough tokens, returning False")
                return False

            wait_time = (tokens - self.tokens) / self.rate

        # Wait outside lock to avoid blocking other threads
        logger.debug(f"{self.name}: Waiting {wait_time:.2f}s for tokens")
        time.sleep(wait_time)
        return self.acquire(tokens, block=True)

    def __enter__(self):
        self.acquire(tokens=1, block=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass


class NoOpRateLimiter:
    """Rate limiter that never waits (tests, mocked transports)."""

    def __init__(self, name: str = "NoOpRateLimiter"):
        self.name = name

    def acquire(self, tokens: int = 1, block: bool = True) -> bool:
        return True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass
