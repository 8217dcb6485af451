"""Application service for estimated delivery date (EDD) predictions."""

import logging
from typing import List

from aftership.domain.interfaces.api_requester import ApiRequester
from aftership.domain.models.errors import MissingParameterError, ERR_MISSING_ESTIMATED_DELIVERY_DATES
from aftership.domain.models.serialization import from_dict
from aftership.domain.models.tracking import EstimatedDeliveryDate
from aftership.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)

PREDICT_BATCH_PATH = "/estimated-delivery-date/predict-batch"


class EstimatedDeliveryService:
    """Predicts delivery dates for shipments that are not tracked yet."""

    def __init__(self, requester: ApiRequester, api_retry_service: ApiRetryService):
        self.requester = requester
        self.api_retry_service = api_retry_service

    def batch_predict_estimated_delivery_date(
        self,
        estimated_delivery_dates: List[EstimatedDeliveryDate],
    ) -> List[EstimatedDeliveryDate]:
        """Predicts the delivery date of each shipment in the batch.

        Args:
            estimated_delivery_dates: Shipments to predict; each needs addresses
                and either `pickup_time` or `estimated_pickup`.

        Returns:
            The predictions, in request order.

        Raises:
            MissingParameterError: If the batch is empty.
        """
        if not estimated_delivery_dates:
            raise MissingParameterError(ERR_MISSING_ESTIMATED_DELIVERY_DATES)
        logger.debug(f"Predicting {len(estimated_delivery_dates)} delivery date(s)")
        data = self.api_retry_service.execute_with_retry(
            self.requester.make_request, "POST", PREDICT_BATCH_PATH,
            body={"estimated_delivery_dates": list(estimated_delivery_dates)},
            endpoint_name="batch_predict_estimated_delivery_date",
        )
        return [from_dict(EstimatedDeliveryDate, item) for item in data.get("estimated_delivery_dates") or []]
