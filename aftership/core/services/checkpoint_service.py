"""Application service for the /last_checkpoint resource."""

from typing import Optional

from aftership.core.services.tracking_service import resolve_path
from aftership.domain.interfaces.api_requester import ApiRequester
from aftership.domain.models.courier import GetCheckpointParams, LastCheckpoint
from aftership.domain.models.identifiers import TrackingIdentifier
from aftership.domain.models.serialization import from_dict
from aftership.infrastructure.resilience.api_retry import ApiRetryService

LAST_CHECKPOINT_PATH = "/last_checkpoint"


class CheckpointService:
    """Reads the last checkpoint of a tracking."""

    def __init__(self, requester: ApiRequester, api_retry_service: ApiRetryService):
        self.requester = requester
        self.api_retry_service = api_retry_service

    def get_last_checkpoint(
        self,
        identifier: TrackingIdentifier,
        params: Optional[GetCheckpointParams] = None,
    ) -> LastCheckpoint:
        """Returns the tracking information of the last checkpoint of a tracking."""
        path = resolve_path(identifier, "error getting last checkpoint", prefix=LAST_CHECKPOINT_PATH)
        data = self.api_retry_service.execute_with_retry(
            self.requester.make_request, "GET", path, query=params, endpoint_name="get_last_checkpoint"
        )
        return from_dict(LastCheckpoint, data)
