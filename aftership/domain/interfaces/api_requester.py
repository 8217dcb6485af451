"""Interface for sending requests to the AfterShip API.

Defines the contract the core services rely on, so they do not depend
on the HTTP library behind it.
"""

import abc
from typing import Any, Optional

from aftership.domain.models.common import ApiPath, HttpMethod, RateLimit, ResponseData


class ApiRequester(abc.ABC):
    """Abstract Base Class for the request pipeline."""

    @abc.abstractmethod
    def make_request(
        self,
        method: HttpMethod,
        path: ApiPath,
        query: Optional[Any] = None,
        body: Optional[Any] = None,
    ) -> ResponseData:
        """Sends a request and returns the 'data' part of the envelope.

        Args:
            method: HTTP method ('GET', 'POST', 'PUT', 'DELETE').
            path: Path relative to the API endpoint, e.g. '/trackings'.
            query: Dataclass or dict serialized to URL parameters.
            body: Dataclass or dict serialized to the JSON body.

        Returns:
            The decoded 'data' object of the response envelope.

        Raises:
            TooManyRequestsError: If the rate limit is reached before sending.
            APIError: If the API answers with a non-2xx status.
            TransportError: If the request could not be sent.
        """
        pass

    @property
    @abc.abstractmethod
    def rate_limit(self) -> RateLimit:
        """The most recent rate limit reported by the API."""
        pass
