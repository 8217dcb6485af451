from requests.structures import CaseInsensitiveDict

from aftership.domain.models.common import RateLimit
from aftership.infrastructure.resilience.rate_limiter import RateLimitTracker, parse_rate_limit


def test_parse_rate_limit_case_insensitive():
    headers = CaseInsensitiveDict({"X-RateLimit-Reset": "1700000000", "X-RateLimit-Limit": "10",
                                   "X-RateLimit-Remaining": "3"})
    assert parse_rate_limit(headers) == RateLimit(reset=1700000000, limit=10, remaining=3)


def test_parse_rate_limit_plain_dict_lowercase():
    headers = {"x-ratelimit-reset": "5", "x-ratelimit-limit": "10", "x-ratelimit-remaining": "0"}
    assert parse_rate_limit(headers) == RateLimit(reset=5, limit=10, remaining=0)


def test_parse_rate_limit_incomplete_or_malformed():
    assert parse_rate_limit({}) is None
    assert parse_rate_limit({"x-ratelimit-reset": "5", "x-ratelimit-limit": "10"}) is None
    assert parse_rate_limit({"x-ratelimit-reset": "soon", "x-ratelimit-limit": "10",
                             "x-ratelimit-remaining": "1"}) is None


def test_tracker_starts_empty_and_not_reached():
    tracker = RateLimitTracker()
    assert tracker.rate_limit == RateLimit()
    assert tracker.wait_time() == 0.0


def test_tracker_ignores_incomplete_headers():
    tracker = RateLimitTracker(RateLimit(reset=1, limit=10, remaining=9))
    tracker.update_from_headers({"x-ratelimit-limit": "20"})
    assert tracker.rate_limit == RateLimit(reset=1, limit=10, remaining=9)


def test_tracker_returns_a_copy():
    tracker = RateLimitTracker(RateLimit(reset=1, limit=10, remaining=9))
    snapshot = tracker.rate_limit
    snapshot.remaining = 0
    assert tracker.rate_limit.remaining == 9


def test_tracker_reached_and_wait_time(mocker):
    mocker.patch("aftership.domain.models.common.time.time", return_value=1000.0)
    tracker = RateLimitTracker()
    tracker.update_from_headers({"x-ratelimit-reset": "1010", "x-ratelimit-limit": "10",
                                 "x-ratelimit-remaining": "0"})

    assert tracker.is_reached()
    assert tracker.wait_time() == 11.0

    tracker.update_from_headers({"x-ratelimit-reset": "1010", "x-ratelimit-limit": "10",
                                 "x-ratelimit-remaining": "4"})
    assert not tracker.is_reached()
    assert tracker.wait_time() == 0.0
