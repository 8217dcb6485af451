"""Concrete implementation of the ApiRequester interface using requests.

Serializes parameters, attaches authentication, sends the request and
translates the AfterShip response envelope into data or typed errors.
"""

import json
import logging
import time
import uuid
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

from aftership.version import __version__
from aftership.domain.events.api_events import (
    ApiCallFailed, ApiCallInitiated, ApiCallSucceeded, dispatch_event
)
from aftership.domain.interfaces.api_requester import ApiRequester
from aftership.domain.models.common import ApiPath, HttpMethod, Meta, RateLimit, ResponseData
from aftership.domain.models.errors import (
    APIError,
    ERR_EXCEED_RATE_LIMIT,
    TooManyRequestsError,
    TransportError,
    error_class_for_status,
)
from aftership.domain.models.serialization import to_dict, to_query
from aftership.infrastructure.api.auth import Authenticator
from aftership.infrastructure.resilience.rate_limiter import RateLimitTracker

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"aftership-sdk-python/{__version__}"
JSON_CONTENT_TYPE = "application/json"


class AfterShipClient(ApiRequester):
    """Sends requests to the AfterShip API and unwraps the envelopes."""

    def __init__(
        self,
        authenticator: Authenticator,
        endpoint: str,
        user_agent: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        rate_limit_tracker: Optional[RateLimitTracker] = None,
    ):
        """Initializes the client.

        Args:
            authenticator: Builds the auth headers of each request.
            endpoint: API base URL, e.g. 'https://api.aftership.com/tracking/2023-10'.
            user_agent: Value of the User-Agent header.
            timeout: Request timeout in seconds.
            session: Optional requests.Session to reuse connections.
            rate_limit_tracker: Holds the rate limit between requests.
        """
        self.authenticator = authenticator
        self.endpoint = endpoint.rstrip("/")
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout
        self.session = session or requests.Session()
        self.rate_limit_tracker = rate_limit_tracker or RateLimitTracker()
        logger.debug(f"AfterShipClient initialized for endpoint: {self.endpoint}")

    @property
    def rate_limit(self) -> RateLimit:
        return self.rate_limit_tracker.rate_limit

    def close(self) -> None:
        self.session.close()

    def _build_headers(self, method: str, url: str, query: Dict[str, str], body: Optional[bytes]) -> Dict[str, str]:
        headers = {
            "aftership-client": DEFAULT_USER_AGENT,
            "User-Agent": self.user_agent,
            "request-id": str(uuid.uuid4()),
        }
        if body is not None:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        headers.update(self.authenticator.auth_headers(method, urlsplit(url).path, query, body, headers))
        return headers

    def make_request(
        self,
        method: HttpMethod,
        path: ApiPath,
        query: Optional[Any] = None,
        body: Optional[Any] = None,
    ) -> ResponseData:
        method = HttpMethod(method.upper())
        if self.rate_limit_tracker.is_reached():
            current = self.rate_limit_tracker.rate_limit
            logger.warning(f"Rate limit reached until {current.reset}; not sending {method} {path}")
            raise TooManyRequestsError(
                code=429,
                message=ERR_EXCEED_RATE_LIMIT,
                type="TooManyRequests",
                path=path,
                rate_limit=current,
            )

        url = f"{self.endpoint}{path}"
        params = to_query(query)
        data = json.dumps(to_dict(body)).encode("utf-8") if body is not None else None
        headers = self._build_headers(method, url, params, data)
        request_id = headers["request-id"]

        dispatch_event(ApiCallInitiated(method=method, path=path, request_id=request_id))
        start_time = time.perf_counter()
        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Failed to send {method} {path}: {e}")
            dispatch_event(ApiCallFailed(method=method, path=path, error_type=type(e).__name__,
                                         error_message=str(e), request_id=request_id))
            raise TransportError(f"failed to send request {method} {path}: {e}") from e
        latency_ms = (time.perf_counter() - start_time) * 1000

        self.rate_limit_tracker.update_from_headers(response.headers)
        return self._handle_response(response, method, path, request_id, latency_ms)

    def _handle_response(
        self,
        response: requests.Response,
        method: HttpMethod,
        path: ApiPath,
        request_id: str,
        latency_ms: float,
    ) -> ResponseData:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if 200 <= response.status_code < 300:
            if not isinstance(payload, dict):
                raise APIError(
                    code=response.status_code,
                    message=f"invalid JSON response: {response.text[:200]}",
                    type="InvalidResponse",
                    path=path,
                    rate_limit=self.rate_limit,
                )
            logger.debug(f"{method} {path} -> {response.status_code} in {latency_ms:.2f}ms")
            dispatch_event(ApiCallSucceeded(method=method, path=path, status_code=response.status_code,
                                            latency_ms=latency_ms, request_id=request_id))
            return payload.get("data") or {}

        error = self._error_from_response(response, payload, path)
        logger.warning(f"{method} {path} failed with HTTP {response.status_code}: {error.message}")
        dispatch_event(ApiCallFailed(method=method, path=path, error_type=type(error).__name__,
                                     error_message=error.message, request_id=request_id))
        raise error

    def _error_from_response(self, response: requests.Response, payload: Any, path: ApiPath) -> APIError:
        error_class = error_class_for_status(response.status_code)
        meta: Optional[Meta] = payload.get("meta") if isinstance(payload, dict) else None
        if isinstance(meta, dict):
            return error_class(
                code=meta.get("code", response.status_code),
                message=meta.get("message", ""),
                type=meta.get("type", ""),
                path=path,
                rate_limit=self.rate_limit,
            )
        # Body is not an envelope (e.g. a proxy error page)
        return error_class(
            code=response.status_code,
            message=response.text,
            type=response.reason or "",
            path=path,
            rate_limit=self.rate_limit,
        )
