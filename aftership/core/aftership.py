"""Entry point for library users.

Wires the request pipeline, retry service and resource services together
(the Composition Root). Values not passed explicitly are read from
configuration (environment, .env, ~/.aftership/config.yaml).
"""

import logging
from typing import Optional

import requests

from aftership.core.services.checkpoint_service import CheckpointService
from aftership.core.services.courier_service import CourierService
from aftership.core.services.estimated_delivery_service import EstimatedDeliveryService
from aftership.core.services.notification_service import NotificationService
from aftership.core.services.tracking_service import TrackingService
from aftership.domain.models.common import RateLimit
from aftership.infrastructure.api.auth import create_authenticator
from aftership.infrastructure.api.client import AfterShipClient
from aftership.infrastructure.config import settings
from aftership.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)


class AfterShip:
    """AfterShip tracking API client.

    Example:
        >>> aftership = AfterShip(api_key="asat_...")
        >>> tracking = aftership.trackings.get_tracking(SlugTrackingNumber("dhl", "1234567890"))
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        auth_type: Optional[str] = None,
        endpoint: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initializes all services.

        Args:
            api_key: AfterShip API key. Read from configuration if None.
            api_secret: Secret for 'aes' request signing.
            auth_type: 'api_key' (default) or 'aes'.
            endpoint: API base URL.
            user_agent: User-Agent header value.
            timeout: Request timeout in seconds.
            max_retries: Retries for rate limit, 5xx and network errors (default 0).
            session: Optional requests.Session, e.g. with custom adapters.

        Raises:
            ConfigurationError: If no API key is available or auth settings are invalid.
        """
        settings.load_configuration()

        effective_auth_type = (auth_type or settings.get_auth_type()).lower()
        authenticator = create_authenticator(
            effective_auth_type,
            api_key or settings.get_api_key(),
            api_secret or settings.get_api_secret(),
        )

        self.client = AfterShipClient(
            authenticator=authenticator,
            endpoint=endpoint or settings.get_endpoint(),
            user_agent=user_agent or settings.get_user_agent(),
            timeout=timeout if timeout is not None else settings.get_timeout(),
            session=session,
        )

        policy = settings.get_backoff_policy()
        self.api_retry_service = ApiRetryService(
            max_retries=max_retries if max_retries is not None else policy["max_retries"],
            initial_backoff_s=policy["initial_delay"],
            backoff_factor=policy["factor"],
        )

        self.trackings = TrackingService(self.client, self.api_retry_service)
        self.couriers = CourierService(self.client, self.api_retry_service)
        self.checkpoints = CheckpointService(self.client, self.api_retry_service)
        self.notifications = NotificationService(self.client, self.api_retry_service)
        self.estimated_delivery_dates = EstimatedDeliveryService(self.client, self.api_retry_service)
        logger.debug(f"AfterShip initialized (auth={effective_auth_type}, endpoint={self.client.endpoint})")

    @property
    def rate_limit(self) -> RateLimit:
        """The rate limit reported by the most recent response."""
        return self.client.rate_limit

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "AfterShip":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
