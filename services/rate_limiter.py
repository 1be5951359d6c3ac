"""
Rate limiter for the public API paths
Token bucket per client identifier, refilled continuously over the window
"""

import time
from typing import Dict, Optional
from datetime import datetime, timedelta
from collections import defaultdict
import logging

from utils.get_env import (
    env_flag,
    env_int,
    get_rate_limit_calls_env,
    get_rate_limit_enabled_env,
    get_rate_limit_window_env,
)

logger = logging.getLogger(__name__)

DEFAULT_CALLS_PER_WINDOW = 30
DEFAULT_WINDOW_SECONDS = 60


class RateLimiter:
    """
    Token bucket rate limiter keyed by client identifier

    Configuration via environment variables:
    - RATE_LIMIT_CALLS: Requests allowed per window (default: 30)
    - RATE_LIMIT_WINDOW: Window in seconds (default: 60)
    - RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: true)
    """

    def __init__(
        self,
        calls_per_window: Optional[int] = None,
        window_seconds: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        self.calls_per_window = max(1, calls_per_window or env_int(
            get_rate_limit_calls_env(), DEFAULT_CALLS_PER_WINDOW
        ))
        self.window_seconds = max(1, window_seconds or env_int(
            get_rate_limit_window_env(), DEFAULT_WINDOW_SECONDS
        ))
        self.enabled = (
            enabled
            if enabled is not None
            else env_flag(get_rate_limit_enabled_env(), True)
        )

        self.buckets: Dict[str, Dict] = defaultdict(
            lambda: {"tokens": self.calls_per_window, "last_refill": time.time()}
        )
        self._last_prune = time.time()

        logger.info(
            f"Rate limiter initialized: {self.calls_per_window} calls per {self.window_seconds}s window"
            + ("" if self.enabled else " (disabled)")
        )

    def _refill_bucket(self, identifier: str) -> None:
        bucket = self.buckets[identifier]
        now = time.time()
        elapsed = now - bucket["last_refill"]

        refill_rate = self.calls_per_window / self.window_seconds
        bucket["tokens"] = min(
            self.calls_per_window,
            bucket["tokens"] + elapsed * refill_rate,
        )
        bucket["last_refill"] = now

    def is_allowed(self, identifier: str, tokens_cost: int = 1) -> bool:
        if not self.enabled:
            return True

        self._refill_bucket(identifier)
        bucket = self.buckets[identifier]

        if bucket["tokens"] >= tokens_cost:
            bucket["tokens"] -= tokens_cost
            return True

        logger.warning(
            f"Rate limit exceeded for {identifier}: {bucket['tokens']:.1f} tokens available, need {tokens_cost}"
        )
        return False

    def get_remaining_calls(self, identifier: str) -> float:
        if not self.enabled:
            return float("inf")

        self._refill_bucket(identifier)
        return self.buckets[identifier]["tokens"]

    def get_reset_time(self, identifier: str) -> Optional[datetime]:
        """When the bucket for identifier is full again"""
        if not self.enabled:
            return None

        missing = self.calls_per_window - self.buckets[identifier]["tokens"]
        if missing <= 0:
            return None
        seconds_until_full = missing * self.window_seconds / self.calls_per_window
        return datetime.now() + timedelta(seconds=seconds_until_full)

    def prune(self) -> int:
        """Drop buckets that have refilled completely; they would be recreated full anyway"""
        now = time.time()
        refill_rate = self.calls_per_window / self.window_seconds
        idle = [
            identifier
            for identifier, bucket in self.buckets.items()
            if bucket["tokens"] + (now - bucket["last_refill"]) * refill_rate >= self.calls_per_window
        ]
        for identifier in idle:
            del self.buckets[identifier]
        self._last_prune = now
        return len(idle)

    def reset(self, identifier: Optional[str] = None) -> None:
        if identifier:
            self.buckets.pop(identifier, None)
        else:
            self.buckets.clear()

    def check(self, identifier: str, tokens_cost: int = 1) -> tuple[bool, Dict[str, str]]:
        """
        Check rate limit and return status with headers

        Returns:
            (is_allowed, headers_dict)
        """
        if time.time() - self._last_prune >= self.window_seconds:
            self.prune()

        is_allowed = self.is_allowed(identifier, tokens_cost)
        remaining = self.get_remaining_calls(identifier)
        reset_time = self.get_reset_time(identifier)

        headers = {
            "X-RateLimit-Limit": str(self.calls_per_window),
            "X-RateLimit-Remaining": str(int(max(0, min(remaining, self.calls_per_window)))),
            "X-RateLimit-Window-Seconds": str(self.window_seconds),
        }
        if reset_time:
            headers["X-RateLimit-Reset"] = str(int(reset_time.timestamp()))

        return is_allowed, headers
