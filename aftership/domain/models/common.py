"""Defines common Value Objects used across the AfterShip domain.

These objects represent simple values like request methods, API paths
and the rate-limit window reported by the API.
"""

import time
from dataclasses import dataclass
from typing import NewType, Dict, Any, Optional, TypedDict

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
ApiPath = NewType("ApiPath", str)                # Path relative to the API endpoint, e.g. '/trackings'
HttpMethod = NewType("HttpMethod", str)          # 'GET', 'POST', 'PUT', 'DELETE'

# === Envelope Context ===
ResponseData = NewType("ResponseData", Dict[str, Any])  # The 'data' part of an envelope


class Meta(TypedDict, total=False):
    """The 'meta' part of every AfterShip response envelope."""
    code: int
    message: str
    type: str


# --- Rate Limit ---

@dataclass
class RateLimit:
    """X-RateLimit values taken from API response headers."""
    reset: int = 0      # The unix timestamp when the rate limit will be reset.
    limit: int = 0      # The rate limit ceiling for the account per second.
    remaining: int = 0  # The number of requests left in the current window.

    def is_reached(self, now: Optional[float] = None) -> bool:
        """True when no requests are left and the window has not reset yet."""
        current = int(now if now is not None else time.time())
        return self.remaining == 0 and self.reset >= current

    def seconds_until_reset(self, now: Optional[float] = None) -> float:
        """Seconds until the window is open again, never negative.

        The window stays closed for the whole `reset` second, so it opens
        at `reset + 1`.
        """
        current = now if now is not None else time.time()
        return max(0.0, float(self.reset + 1) - current)


class BackoffPolicy(TypedDict):
    """Value Object representing retry backoff configuration."""
    max_retries: int
    initial_delay: float
    factor: float
