"""Domain models for couriers, last checkpoints and notifications."""

from dataclasses import dataclass, field
from typing import List, Optional

from aftership.domain.models.tracking import Checkpoint


@dataclass
class Courier:
    """A courier supported by AfterShip."""
    slug: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    other_name: Optional[str] = None
    web_url: Optional[str] = None
    required_fields: Optional[List[str]] = None
    optional_fields: Optional[List[str]] = None
    default_language: Optional[str] = None
    support_languages: Optional[List[str]] = None
    service_from_country_iso3: Optional[List[str]] = None


@dataclass
class CourierList:
    """The data part of the list couriers response."""
    total: Optional[int] = None
    couriers: List[Courier] = field(default_factory=list)


@dataclass
class TrackingCouriers:
    """Couriers detected for a tracking number."""
    total: Optional[int] = None
    couriers: List[Courier] = field(default_factory=list)


@dataclass
class DetectCourierParams:
    """Parameters for courier detection. Only `tracking_number` is required."""
    tracking_number: Optional[str] = None
    tracking_postal_code: Optional[str] = None
    tracking_ship_date: Optional[str] = None      # YYYYMMDD
    tracking_account_number: Optional[str] = None
    tracking_key: Optional[str] = None
    tracking_origin_country: Optional[str] = None
    tracking_destination_country: Optional[str] = None
    tracking_state: Optional[str] = None
    slug: Optional[List[str]] = None              # restrict detection to these couriers


@dataclass
class GetCheckpointParams:
    """Query parameters for the last checkpoint endpoint."""
    fields: Optional[str] = None
    lang: Optional[str] = None
    tracking_account_number: Optional[str] = None
    tracking_origin_country: Optional[str] = None
    tracking_destination_country: Optional[str] = None
    tracking_key: Optional[str] = None
    tracking_postal_code: Optional[str] = None
    tracking_ship_date: Optional[str] = None
    tracking_state: Optional[str] = None


@dataclass
class LastCheckpoint:
    """The most recent checkpoint of a tracking."""
    id: Optional[str] = None
    slug: Optional[str] = None
    tracking_number: Optional[str] = None
    tag: Optional[str] = None
    subtag: Optional[str] = None
    subtag_message: Optional[str] = None
    checkpoint: Optional[Checkpoint] = None


@dataclass
class Notification:
    """Email and SMS receivers of tracking notifications."""
    emails: List[str] = field(default_factory=list)
    smses: List[str] = field(default_factory=list)
