"""Identifiers that address a single tracking in URL paths.

A tracking can be addressed either by the id AfterShip generated for it,
or by the courier slug together with the tracking number.
"""

import abc
from dataclasses import dataclass
from urllib.parse import quote

from aftership.domain.models.errors import (
    MissingParameterError,
    ERR_MISSING_TRACKING_ID,
    ERR_MISSING_SLUG_OR_TRACKING_NUMBER,
)


def escape_path_segment(value: str) -> str:
    """Escapes a value so it can be used as a single URL path segment."""
    return quote(value, safe="")


class TrackingIdentifier(abc.ABC):
    """Abstract Base Class for anything that identifies a single tracking."""

    @abc.abstractmethod
    def uri_path(self) -> str:
        """Returns the URL path fragment (leading slash included).

        Raises:
            MissingParameterError: If a required part of the identifier is empty.
        """
        pass


@dataclass(frozen=True)
class TrackingID(TrackingIdentifier):
    """A unique identifier generated by AfterShip for the tracking."""
    id: str

    def uri_path(self) -> str:
        if not self.id:
            raise MissingParameterError(ERR_MISSING_TRACKING_ID)
        return "/" + escape_path_segment(self.id)


@dataclass(frozen=True)
class SlugTrackingNumber(TrackingIdentifier):
    """Identifies a tracking by courier slug and tracking number."""
    slug: str
    tracking_number: str

    def uri_path(self) -> str:
        if not self.slug or not self.tracking_number:
            raise MissingParameterError(ERR_MISSING_SLUG_OR_TRACKING_NUMBER)
        return f"/{escape_path_segment(self.slug)}/{escape_path_segment(self.tracking_number)}"
