"""Application service for the /notifications resource.

Notification receivers are emails and phone numbers that AfterShip
notifies about status changes of a tracking.
"""

import logging

from aftership.core.services.tracking_service import resolve_path
from aftership.domain.interfaces.api_requester import ApiRequester
from aftership.domain.models.courier import Notification
from aftership.domain.models.identifiers import TrackingIdentifier
from aftership.domain.models.serialization import from_dict
from aftership.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)

NOTIFICATIONS_PATH = "/notifications"


class NotificationService:
    """Gets, adds and removes notification receivers of a tracking."""

    def __init__(self, requester: ApiRequester, api_retry_service: ApiRetryService):
        self.requester = requester
        self.api_retry_service = api_retry_service

    def _send(self, endpoint_name: str, method: str, path: str, body=None) -> Notification:
        data = self.api_retry_service.execute_with_retry(
            self.requester.make_request, method, path, body=body, endpoint_name=endpoint_name
        )
        return from_dict(Notification, data.get("notification"))

    def get_notification(self, identifier: TrackingIdentifier) -> Notification:
        """Returns the contact information for a tracking's notifications."""
        path = resolve_path(identifier, "error getting notification", prefix=NOTIFICATIONS_PATH)
        return self._send("get_notification", "GET", path)

    def add_notification(self, identifier: TrackingIdentifier, notification: Notification) -> Notification:
        """Adds notification receivers to a tracking."""
        path = resolve_path(identifier, "error adding notification", prefix=NOTIFICATIONS_PATH, suffix="/add")
        logger.info(f"Adding {len(notification.emails or [])} email(s), {len(notification.smses or [])} sms to {path}")
        return self._send("add_notification", "POST", path, body={"notification": notification})

    def remove_notification(self, identifier: TrackingIdentifier, notification: Notification) -> Notification:
        """Removes notification receivers from a tracking."""
        path = resolve_path(identifier, "error removing notification", prefix=NOTIFICATIONS_PATH, suffix="/remove")
        return self._send("remove_notification", "POST", path, body={"notification": notification})
