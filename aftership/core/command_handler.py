"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work
to the AfterShip services and renders the results through the UserInterface.
Each handler returns True on success so the CLI can set its exit code.
"""

import logging
from typing import List, Optional

from aftership.core.aftership import AfterShip
from aftership.domain.interfaces.user_interface import UserInterface
from aftership.domain.models.courier import DetectCourierParams, Notification
from aftership.domain.models.errors import AfterShipError, MissingParameterError
from aftership.domain.models.identifiers import SlugTrackingNumber, TrackingID, TrackingIdentifier
from aftership.domain.models.tracking import (
    CreateTrackingParams,
    EstimatedDeliveryDate,
    GetTrackingParams,
    GetTrackingsParams,
    TrackingCompletedStatus,
    UpdateTrackingParams,
)
from aftership.infrastructure.resilience.api_retry import MaxRetryError

logger = logging.getLogger(__name__)


def build_identifier(
    tracking_id: Optional[str] = None,
    slug: Optional[str] = None,
    tracking_number: Optional[str] = None,
) -> TrackingIdentifier:
    """Chooses the identifier kind from the given CLI options."""
    if tracking_id:
        return TrackingID(tracking_id)
    if slug or tracking_number:
        return SlugTrackingNumber(slug or "", tracking_number or "")
    raise MissingParameterError("pass either --id or --slug together with --number")


class CommandHandler:
    """Handles incoming commands and delegates to the AfterShip services."""

    def __init__(self, aftership: AfterShip, ui: UserInterface):
        self.aftership = aftership
        self.ui = ui

    def _report(self, error: AfterShipError) -> bool:
        if isinstance(error, MaxRetryError):
            error = error.original_exception
        logger.debug(f"Command failed: {type(error).__name__}: {error}")
        self.ui.display_error(str(error))
        return False

    # --- Trackings ---

    def handle_create_tracking(self, params: CreateTrackingParams) -> bool:
        try:
            tracking = self.aftership.trackings.create_tracking(params)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_tracking(tracking, title="Tracking created")
        return True

    def handle_list_trackings(self, params: GetTrackingsParams, fetch_all: bool = False) -> bool:
        try:
            if fetch_all:
                trackings = list(self.aftership.trackings.iter_trackings(params))
                total = len(trackings)
            else:
                paged = self.aftership.trackings.get_trackings(params)
                trackings, total = paged.trackings, paged.count
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_trackings(trackings, total=total)
        return True

    def handle_get_tracking(self, identifier: TrackingIdentifier, fields: Optional[str] = None,
                            lang: Optional[str] = None) -> bool:
        try:
            tracking = self.aftership.trackings.get_tracking(identifier, GetTrackingParams(fields=fields, lang=lang))
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_tracking(tracking)
        return True

    def handle_update_tracking(self, identifier: TrackingIdentifier, params: UpdateTrackingParams) -> bool:
        try:
            tracking = self.aftership.trackings.update_tracking(identifier, params)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_tracking(tracking, title="Tracking updated")
        return True

    def handle_delete_tracking(self, identifier: TrackingIdentifier) -> bool:
        try:
            tracking = self.aftership.trackings.delete_tracking(identifier)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_info(f"Deleted tracking {tracking.slug}/{tracking.tracking_number} ({tracking.id})")
        return True

    def handle_retrack(self, identifier: TrackingIdentifier) -> bool:
        try:
            tracking = self.aftership.trackings.retrack_tracking(identifier)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_info(f"Retracking {tracking.slug}/{tracking.tracking_number}")
        return True

    def handle_mark_completed(self, identifier: TrackingIdentifier, status: TrackingCompletedStatus) -> bool:
        try:
            tracking = self.aftership.trackings.mark_tracking_as_completed(identifier, status)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_tracking(tracking, title=f"Marked as completed ({status.value})")
        return True

    # --- Couriers ---

    def handle_list_couriers(self, include_all: bool = False) -> bool:
        try:
            if include_all:
                couriers = self.aftership.couriers.get_all_couriers()
            else:
                couriers = self.aftership.couriers.get_couriers()
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_couriers(couriers.couriers)
        return True

    def handle_detect_courier(self, params: DetectCourierParams) -> bool:
        try:
            detected = self.aftership.couriers.detect_courier(params)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_couriers(detected.couriers)
        return True

    # --- Last checkpoint ---

    def handle_last_checkpoint(self, identifier: TrackingIdentifier) -> bool:
        try:
            last_checkpoint = self.aftership.checkpoints.get_last_checkpoint(identifier)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_last_checkpoint(last_checkpoint)
        return True

    # --- Notifications ---

    def handle_get_notification(self, identifier: TrackingIdentifier) -> bool:
        try:
            notification = self.aftership.notifications.get_notification(identifier)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_notification(notification)
        return True

    def handle_change_notification(self, identifier: TrackingIdentifier, emails: List[str],
                                   smses: List[str], remove: bool = False) -> bool:
        notification = Notification(emails=list(emails), smses=list(smses))
        try:
            if remove:
                result = self.aftership.notifications.remove_notification(identifier, notification)
            else:
                result = self.aftership.notifications.add_notification(identifier, notification)
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_notification(result)
        return True

    # --- Estimated delivery dates ---

    def handle_predict_edd(self, estimated_delivery_dates: List[EstimatedDeliveryDate]) -> bool:
        try:
            predictions = self.aftership.estimated_delivery_dates.batch_predict_estimated_delivery_date(
                estimated_delivery_dates
            )
        except AfterShipError as e:
            return self._report(e)
        self.ui.display_estimated_delivery_dates(predictions)
        return True
