"""Application service for the /trackings resource.

Builds URL paths from tracking identifiers, sends the requests through the
retry service and decodes the responses into Tracking models.
"""

import dataclasses
import logging
from typing import Iterator, Optional

from aftership.domain.interfaces.api_requester import ApiRequester
from aftership.domain.models.errors import MissingParameterError, ERR_MISSING_TRACKING_NUMBER
from aftership.domain.models.identifiers import TrackingIdentifier
from aftership.domain.models.serialization import from_dict
from aftership.domain.models.tracking import (
    CreateTrackingParams,
    GetTrackingParams,
    GetTrackingsParams,
    PagedTrackings,
    Tracking,
    TrackingCompletedStatus,
    UpdateTrackingParams,
)
from aftership.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)

TRACKINGS_PATH = "/trackings"


def resolve_path(identifier: TrackingIdentifier, context: str, suffix: str = "", prefix: str = TRACKINGS_PATH) -> str:
    """Builds '<prefix><identifier path><suffix>', adding context to identifier errors."""
    try:
        return f"{prefix}{identifier.uri_path()}{suffix}"
    except MissingParameterError as e:
        raise MissingParameterError(f"{context}: {e}") from e


class TrackingService:
    """Create, read, update and delete trackings."""

    def __init__(self, requester: ApiRequester, api_retry_service: ApiRetryService):
        self.requester = requester
        self.api_retry_service = api_retry_service

    def _request(self, endpoint_name: str, method: str, path: str, query=None, body=None) -> dict:
        return self.api_retry_service.execute_with_retry(
            self.requester.make_request, method, path,
            query=query, body=body, endpoint_name=endpoint_name,
        )

    def _single(self, data: dict) -> Tracking:
        return from_dict(Tracking, data.get("tracking"))

    def create_tracking(self, params: CreateTrackingParams) -> Tracking:
        """Creates a new tracking.

        Raises:
            MissingParameterError: If `params.tracking_number` is empty.
        """
        if not params.tracking_number:
            raise MissingParameterError(ERR_MISSING_TRACKING_NUMBER)
        logger.info(f"Creating tracking {params.slug or '<auto>'}/{params.tracking_number}")
        data = self._request("create_tracking", "POST", TRACKINGS_PATH, body={"tracking": params})
        return self._single(data)

    def get_trackings(self, params: Optional[GetTrackingsParams] = None) -> PagedTrackings:
        """Gets tracking results of multiple trackings."""
        data = self._request("get_trackings", "GET", TRACKINGS_PATH, query=params)
        return from_dict(PagedTrackings, data)

    def iter_trackings(self, params: Optional[GetTrackingsParams] = None) -> Iterator[Tracking]:
        """Yields every tracking matching `params`, requesting page after page.

        Stops at an empty or short page, or once `count` trackings were yielded.
        """
        query = dataclasses.replace(params) if params else GetTrackingsParams()
        page = query.page or 1
        yielded = 0
        while True:
            query.page = page
            paged = self.get_trackings(query)
            for tracking in paged.trackings:
                yield tracking
            yielded += len(paged.trackings)

            page_size = paged.limit or query.limit
            if not paged.trackings or (page_size and len(paged.trackings) < page_size):
                break
            if paged.count is not None and yielded >= paged.count:
                break
            page += 1
            logger.debug(f"Fetching trackings page {page} ({yielded} so far)")

    def get_tracking(self, identifier: TrackingIdentifier, params: Optional[GetTrackingParams] = None) -> Tracking:
        """Gets tracking results of a single tracking."""
        path = resolve_path(identifier, "error getting tracking")
        return self._single(self._request("get_tracking", "GET", path, query=params))

    def update_tracking(self, identifier: TrackingIdentifier, params: UpdateTrackingParams) -> Tracking:
        """Updates a tracking."""
        path = resolve_path(identifier, "error updating tracking")
        return self._single(self._request("update_tracking", "PUT", path, body={"tracking": params}))

    def delete_tracking(self, identifier: TrackingIdentifier) -> Tracking:
        """Deletes a tracking."""
        path = resolve_path(identifier, "error deleting tracking")
        logger.info(f"Deleting tracking {path}")
        return self._single(self._request("delete_tracking", "DELETE", path))

    def retrack_tracking(self, identifier: TrackingIdentifier) -> Tracking:
        """Retracks an expired tracking. Max 3 times per tracking."""
        path = resolve_path(identifier, "error retracking", suffix="/retrack")
        return self._single(self._request("retrack_tracking", "POST", path))

    def mark_tracking_as_completed(
        self,
        identifier: TrackingIdentifier,
        status: TrackingCompletedStatus,
    ) -> Tracking:
        """Marks a tracking as completed. It won't auto update until retracked."""
        path = resolve_path(identifier, "error marking tracking as completed", suffix="/mark-as-completed")
        reason = TrackingCompletedStatus(status).value
        return self._single(
            self._request("mark_tracking_as_completed", "POST", path, body={"reason": reason})
        )
