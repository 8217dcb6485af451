"""Application service for the /couriers resource."""

import logging

from aftership.domain.interfaces.api_requester import ApiRequester
from aftership.domain.models.courier import CourierList, DetectCourierParams, TrackingCouriers
from aftership.domain.models.errors import MissingParameterError, ERR_MISSING_TRACKING_NUMBER
from aftership.domain.models.serialization import from_dict
from aftership.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)


class CourierService:
    """Lists couriers and detects the courier of a tracking number."""

    def __init__(self, requester: ApiRequester, api_retry_service: ApiRetryService):
        self.requester = requester
        self.api_retry_service = api_retry_service

    def get_couriers(self) -> CourierList:
        """Returns the couriers activated in the account."""
        data = self.api_retry_service.execute_with_retry(
            self.requester.make_request, "GET", "/couriers", endpoint_name="get_couriers"
        )
        return from_dict(CourierList, data)

    def get_all_couriers(self) -> CourierList:
        """Returns every courier supported by AfterShip."""
        data = self.api_retry_service.execute_with_retry(
            self.requester.make_request, "GET", "/couriers/all", endpoint_name="get_all_couriers"
        )
        return from_dict(CourierList, data)

    def detect_courier(self, params: DetectCourierParams) -> TrackingCouriers:
        """Returns the couriers matching a tracking number.

        Raises:
            MissingParameterError: If `params.tracking_number` is empty.
        """
        if not params.tracking_number:
            raise MissingParameterError(ERR_MISSING_TRACKING_NUMBER)
        logger.debug(f"Detecting courier for {params.tracking_number}")
        data = self.api_retry_service.execute_with_retry(
            self.requester.make_request, "POST", "/couriers/detect",
            body={"tracking": params}, endpoint_name="detect_courier",
        )
        return from_dict(TrackingCouriers, data)
