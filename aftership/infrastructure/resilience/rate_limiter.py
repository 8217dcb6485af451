"""Tracks the rate limit reported by the AfterShip API.

Every response carries X-RateLimit-* headers. The tracker keeps the most
recent values so the client can refuse to send while the window is used up.
"""

import logging
import threading
from typing import Mapping, Optional

from aftership.domain.models.common import RateLimit

logger = logging.getLogger(__name__)

HEADER_RESET = "x-ratelimit-reset"
HEADER_LIMIT = "x-ratelimit-limit"
HEADER_REMAINING = "x-ratelimit-remaining"


def _header_int(headers: Mapping[str, str], name: str) -> Optional[int]:
    # requests' CaseInsensitiveDict handles case; plain dicts are checked both ways
    value = headers.get(name)
    if value is None:
        value = headers.get(name.title())
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed {name} header: {value!r}")
        return None


def parse_rate_limit(headers: Mapping[str, str]) -> Optional[RateLimit]:
    """Builds a RateLimit from response headers.

    Returns:
        The parsed RateLimit, or None unless all three headers are valid integers.
    """
    reset = _header_int(headers, HEADER_RESET)
    limit = _header_int(headers, HEADER_LIMIT)
    remaining = _header_int(headers, HEADER_REMAINING)
    if reset is None or limit is None or remaining is None:
        return None
    return RateLimit(reset=reset, limit=limit, remaining=remaining)


class RateLimitTracker:
    """Keeps the latest server-reported rate limit."""

    def __init__(self, initial: Optional[RateLimit] = None):
        self._rate_limit = initial or RateLimit()
        self._lock = threading.Lock()

    @property
    def rate_limit(self) -> RateLimit:
        with self._lock:
            return RateLimit(
                reset=self._rate_limit.reset,
                limit=self._rate_limit.limit,
                remaining=self._rate_limit.remaining,
            )

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """Stores the rate limit from a response. Incomplete headers are ignored."""
        parsed = parse_rate_limit(headers)
        if parsed is None:
            return
        with self._lock:
            self._rate_limit = parsed
        logger.debug(
            f"Rate limit updated: remaining={parsed.remaining}/{parsed.limit}, reset={parsed.reset}"
        )

    def is_reached(self) -> bool:
        """True when the current window has no requests left."""
        with self._lock:
            return self._rate_limit.is_reached()

    def wait_time(self) -> float:
        """Seconds until a request may be sent again (0.0 if it may be sent now)."""
        with self._lock:
            if not self._rate_limit.is_reached():
                return 0.0
            return self._rate_limit.seconds_until_reset()
