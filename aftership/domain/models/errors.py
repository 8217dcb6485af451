"""Exception hierarchy for the AfterShip client.

Client-side validation problems raise before any request is sent.
Server responses with a non-2xx status are mapped onto APIError
subclasses by HTTP status code.
"""

from typing import Dict, Optional, Type

from aftership.domain.models.common import RateLimit

# Messages for missing required values
ERR_MISSING_TRACKING_NUMBER = "tracking number is empty"
ERR_MISSING_TRACKING_ID = "tracking id is empty"
ERR_MISSING_SLUG_OR_TRACKING_NUMBER = "slug or tracking number is empty"
ERR_MISSING_ESTIMATED_DELIVERY_DATES = "estimated delivery dates are empty"
ERR_EXCEED_RATE_LIMIT = (
    "You have exceeded the API call rate limit. "
    "Please retry again at X-RateLimit-Reset header timestamp."
)


class AfterShipError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(AfterShipError):
    """Raised when the client is missing credentials or has invalid settings."""


class MissingParameterError(AfterShipError, ValueError):
    """Raised when a required parameter is empty. No request is sent."""


class TransportError(AfterShipError):
    """Raised when the HTTP request could not be completed (DNS, timeout, ...)."""


class APIError(AfterShipError):
    """Error returned by the AfterShip API.

    Attributes:
        code: The meta.code of the envelope, or the HTTP status when the body is not JSON.
        message: Human readable message from the API.
        type: The meta.type of the envelope (e.g. 'BadRequest').
        path: The request path that produced the error.
        rate_limit: The rate limit reported with the response, if any.
    """

    def __init__(
        self,
        code: int,
        message: str,
        type: str = "",
        path: str = "",
        rate_limit: Optional[RateLimit] = None,
    ):
        self.code = code
        self.message = message
        self.type = type
        self.path = path
        self.rate_limit = rate_limit
        super().__init__(str(self))

    def __str__(self) -> str:
        prefix = f"{self.path}: " if self.path else ""
        return f"{prefix}{self.code} {self.type}: {self.message}"


class BadRequestError(APIError):
    """400: the request was invalid or cannot be otherwise served."""


class UnauthorizedError(APIError):
    """401: invalid API key or signature."""


class ForbiddenError(APIError):
    """403: the request is understood, but access is not allowed."""


class NotFoundError(APIError):
    """404: the URI requested is invalid or the resource does not exist."""


class TooManyRequestsError(APIError):
    """429: the account has reached the API rate limit."""

    @property
    def retry_after(self) -> float:
        """Seconds to wait before the rate limit window resets."""
        if self.rate_limit is None:
            return 0.0
        return self.rate_limit.seconds_until_reset()


class InternalError(APIError):
    """5xx: something went wrong on AfterShip's end."""


STATUS_ERRORS: Dict[int, Type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    429: TooManyRequestsError,
}


def error_class_for_status(status_code: int) -> Type[APIError]:
    """Picks the APIError subclass matching an HTTP status code."""
    if status_code >= 500:
        return InternalError
    return STATUS_ERRORS.get(status_code, APIError)
