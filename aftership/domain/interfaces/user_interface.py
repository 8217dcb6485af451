"""Interface for presenting results to the user.

Defines the contract for displaying trackings, couriers, errors and
informational messages, allowing different UI implementations.
"""

import abc
from typing import Any, List

from aftership.domain.models.tracking import Tracking, EstimatedDeliveryDate
from aftership.domain.models.courier import Courier, LastCheckpoint, Notification


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_tracking(self, tracking: Tracking, **kwargs: Any) -> None:
        """Displays a single tracking with its checkpoints."""
        pass

    @abc.abstractmethod
    def display_trackings(self, trackings: List[Tracking], **kwargs: Any) -> None:
        """Displays a list of trackings as a table."""
        pass

    @abc.abstractmethod
    def display_couriers(self, couriers: List[Courier], **kwargs: Any) -> None:
        """Displays a list of couriers as a table."""
        pass

    @abc.abstractmethod
    def display_last_checkpoint(self, last_checkpoint: LastCheckpoint, **kwargs: Any) -> None:
        """Displays the last checkpoint of a tracking."""
        pass

    @abc.abstractmethod
    def display_notification(self, notification: Notification, **kwargs: Any) -> None:
        """Displays the notification receivers of a tracking."""
        pass

    @abc.abstractmethod
    def display_estimated_delivery_dates(self, dates: List[EstimatedDeliveryDate], **kwargs: Any) -> None:
        """Displays predicted delivery dates."""
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass
