"""
Tracking of GitHub rate-limit headers.

treefetch never waits out a rate limit; the numbers are only used to
warn early and to tell the user when the limit resets.
"""

from datetime import datetime
from typing import Mapping, Optional

from .logger import logger


LOW_QUOTA_THRESHOLD = 10


class RateLimitInfo:
    """Last known rate-limit state as reported by the API."""

    def __init__(self):
        self.limit: Optional[int] = None
        self.remaining: Optional[int] = None
        self.used: Optional[int] = None
        self.reset_time: Optional[datetime] = None

    @property
    def is_exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= LOW_QUOTA_THRESHOLD

    @property
    def reset_in_seconds(self) -> float:
        if not self.reset_time:
            return 0.0
        return max(0.0, (self.reset_time - datetime.now()).total_seconds())

    def describe_reset(self) -> str:
        if not self.reset_time:
            return ""
        return f"The limit resets at {self.reset_time:%H:%M:%S}."


class RateLimitTracker:
    """Records ``x-ratelimit-*`` headers from every response."""

    def __init__(self):
        self.rate_limit_info = RateLimitInfo()
        self._warned = False

    def update(self, headers: Mapping[str, str]) -> None:
        info = self.rate_limit_info

        if "x-ratelimit-limit" in headers:
            info.limit = int(headers["x-ratelimit-limit"])
        if "x-ratelimit-remaining" in headers:
            info.remaining = int(headers["x-ratelimit-remaining"])
        if "x-ratelimit-used" in headers:
            info.used = int(headers["x-ratelimit-used"])
        if "x-ratelimit-reset" in headers:
            info.reset_time = datetime.fromtimestamp(int(headers["x-ratelimit-reset"]))

        if info.is_exhausted and not self._warned:
            self._warned = True
            logger.warning(
                f"Only {info.remaining} API requests left. {info.describe_reset()}".strip()
            )


__all__ = [
    "RateLimitInfo",
    "RateLimitTracker",
]
