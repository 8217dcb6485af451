"""Domain models for trackings and their nested objects.

Field names match the JSON keys used by the AfterShip tracking API.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


class TrackingCompletedStatus(str, enum.Enum):
    """Reason passed when marking a tracking as completed."""
    DELIVERED = "DELIVERED"
    LOST = "LOST"
    RETURNED_TO_SENDER = "RETURNED_TO_SENDER"


@dataclass
class AdditionalFields:
    """Extra fields some couriers require to identify a shipment."""
    tracking_account_number: Optional[str] = None
    tracking_origin_country: Optional[str] = None
    tracking_destination_country: Optional[str] = None
    tracking_key: Optional[str] = None
    tracking_postal_code: Optional[str] = None
    tracking_ship_date: Optional[str] = None
    tracking_state: Optional[str] = None
    origin_country_iso3: Optional[str] = None
    destination_country_iso3: Optional[str] = None
    destination_postal_code: Optional[str] = None
    destination_state: Optional[str] = None


# --- Nested objects ---

@dataclass
class Checkpoint:
    """A single tracking event reported by the courier."""
    slug: Optional[str] = None
    created_at: Optional[datetime] = None
    checkpoint_time: Optional[str] = None
    city: Optional[str] = None
    coordinates: Optional[List[float]] = None
    country_iso3: Optional[str] = None
    country_name: Optional[str] = None
    message: Optional[str] = None
    state: Optional[str] = None
    location: Optional[str] = None
    tag: Optional[str] = None
    subtag: Optional[str] = None
    subtag_message: Optional[str] = None
    zip: Optional[str] = None
    raw_tag: Optional[str] = None


@dataclass
class EstimatedDelivery:
    """An estimated delivery date, either a single date or a range."""
    type: Optional[str] = None          # 'specific' or 'range'
    source: Optional[str] = None        # carrier, AfterShip AI or custom EDD settings
    datetime: Optional[str] = None
    datetime_min: Optional[str] = None
    datetime_max: Optional[str] = None


@dataclass
class NextCourier:
    """A courier the shipment is handed over to."""
    slug: Optional[str] = None
    tracking_number: Optional[str] = None
    source: Optional[str] = None


@dataclass
class ProofOfDelivery:
    """A link to a proof of delivery (signature, photo, ...)."""
    type: Optional[str] = None
    url: Optional[str] = None


@dataclass
class Address:
    """An address used for delivery date prediction."""
    country: Optional[str] = None       # ISO 3166-1 alpha-3
    state: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    raw_location: Optional[str] = None


@dataclass
class Weight:
    """Shipment weight."""
    unit: Optional[str] = None          # 'kg', 'lb', ...
    value: Optional[float] = None


@dataclass
class OrderProcessingTime:
    """Time the merchant needs to process an order."""
    unit: Optional[str] = None          # 'day'
    value: Optional[int] = None


@dataclass
class EstimatedPickup:
    """Used to estimate the pickup time when it is not known yet."""
    order_time: Optional[str] = None
    order_cutoff_time: Optional[str] = None
    business_days: Optional[List[int]] = None
    order_processing_time: Optional[OrderProcessingTime] = None
    pickup_time: Optional[str] = None


@dataclass
class EstimatedDeliveryDate:
    """An estimated delivery date computed by AfterShip.

    Used both as the prediction request and as the prediction result.
    Either `pickup_time` or `estimated_pickup` is required in requests.
    """
    slug: Optional[str] = None
    service_type_name: Optional[str] = None
    origin_address: Optional[Address] = None
    destination_address: Optional[Address] = None
    weight: Optional[Weight] = None
    package_count: Optional[int] = None
    pickup_time: Optional[str] = None
    estimated_pickup: Optional[EstimatedPickup] = None
    estimated_delivery_date: Optional[str] = None
    confidence_score: Optional[float] = None
    estimated_delivery_date_min: Optional[str] = None
    estimated_delivery_date_max: Optional[str] = None


# --- Tracking aggregate ---

@dataclass
class Tracking(AdditionalFields):
    """A Tracking returned by the AfterShip API."""
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_updated_at: Optional[datetime] = None
    tracking_number: Optional[str] = None
    slug: Optional[str] = None
    active: Optional[bool] = None
    custom_fields: Optional[Dict[str, str]] = None
    customer_name: Optional[str] = None
    transit_time: Optional[int] = None
    destination_city: Optional[str] = None
    destination_raw_location: Optional[str] = None
    courier_destination_country_iso3: Optional[str] = None
    emails: Optional[List[str]] = None
    expected_delivery: Optional[str] = None
    note: Optional[str] = None
    order_id: Optional[str] = None
    order_id_path: Optional[str] = None
    order_date: Optional[str] = None
    order_number: Optional[str] = None
    order_tags: Optional[List[str]] = None
    order_promised_delivery_date: Optional[str] = None
    shipment_package_count: Optional[int] = None
    shipment_pickup_date: Optional[str] = None
    shipment_delivery_date: Optional[str] = None
    shipment_type: Optional[str] = None
    shipment_weight: Optional[float] = None
    shipment_weight_unit: Optional[str] = None
    shipment_tags: Optional[List[str]] = None
    signed_by: Optional[str] = None
    smses: Optional[List[str]] = None
    source: Optional[str] = None
    tag: Optional[str] = None
    subtag: Optional[str] = None
    subtag_message: Optional[str] = None
    title: Optional[str] = None
    tracked_count: Optional[int] = None
    last_mile_tracking_supported: Optional[bool] = None
    language: Optional[str] = None
    unique_token: Optional[str] = None
    checkpoints: List[Checkpoint] = field(default_factory=list)
    subscribed_smses: Optional[List[str]] = None
    subscribed_emails: Optional[List[str]] = None
    return_to_sender: Optional[bool] = None
    delivery_type: Optional[str] = None
    pickup_location: Optional[str] = None
    pickup_note: Optional[str] = None
    courier_tracking_link: Optional[str] = None
    courier_redirect_link: Optional[str] = None
    first_attempted_at: Optional[str] = None
    on_time_status: Optional[str] = None
    on_time_difference: Optional[int] = None
    aftership_estimated_delivery_date: Optional[EstimatedDeliveryDate] = None
    custom_estimated_delivery_date: Optional[EstimatedDelivery] = None
    first_estimated_delivery: Optional[EstimatedDelivery] = None
    latest_estimated_delivery: Optional[EstimatedDelivery] = None
    courier_connection_id: Optional[str] = None
    next_couriers: List[NextCourier] = field(default_factory=list)
    proof_of_delivery: List[ProofOfDelivery] = field(default_factory=list)

    @property
    def latest_checkpoint(self) -> Optional[Checkpoint]:
        """The most recent checkpoint, if the courier reported any."""
        return self.checkpoints[-1] if self.checkpoints else None


@dataclass
class PagedTrackings:
    """The data part of the list trackings response."""
    limit: Optional[int] = None         # Number of trackings each page contains (default 100)
    count: Optional[int] = None         # Total number of matched trackings, max 10,000
    page: Optional[int] = None          # Page shown (default 1)
    keyword: Optional[str] = None
    slug: Optional[str] = None
    origin: Optional[List[str]] = None
    destination: Optional[List[str]] = None
    tag: Optional[str] = None
    created_at_min: Optional[datetime] = None
    created_at_max: Optional[datetime] = None
    last_updated_at: Optional[datetime] = None
    return_to_sender: Optional[List[bool]] = None
    courier_destination_country_iso3: Optional[List[str]] = None
    trackings: List[Tracking] = field(default_factory=list)


# --- Request parameters ---

@dataclass
class CreateTrackingParams(AdditionalFields):
    """Parameters for a new tracking. Only `tracking_number` is required."""
    tracking_number: Optional[str] = None
    slug: Optional[str] = None          # auto-detected by AfterShip when omitted
    title: Optional[str] = None
    order_id: Optional[str] = None
    order_id_path: Optional[str] = None
    custom_fields: Optional[Dict[str, str]] = None
    language: Optional[str] = None      # ISO 639-1
    order_promised_delivery_date: Optional[str] = None  # YYYY-MM-DD
    origin_state: Optional[str] = None
    origin_city: Optional[str] = None
    origin_postal_code: Optional[str] = None
    origin_raw_location: Optional[str] = None
    delivery_type: Optional[str] = None
    pickup_location: Optional[str] = None
    pickup_note: Optional[str] = None
    ios: Optional[List[str]] = None
    android: Optional[List[str]] = None
    emails: Optional[List[str]] = None
    smses: Optional[List[str]] = None
    customer_name: Optional[str] = None
    destination_raw_location: Optional[str] = None
    note: Optional[str] = None
    slug_group: Optional[str] = None
    order_date: Optional[str] = None
    order_number: Optional[str] = None
    shipment_type: Optional[str] = None
    shipment_tags: Optional[List[str]] = None
    courier_connection_id: Optional[str] = None
    next_couriers: Optional[List[NextCourier]] = None


@dataclass
class UpdateTrackingParams(AdditionalFields):
    """Fields that can be changed on an existing tracking."""
    smses: Optional[List[str]] = None
    emails: Optional[List[str]] = None
    title: Optional[str] = None
    customer_name: Optional[str] = None
    order_id: Optional[str] = None
    order_id_path: Optional[str] = None
    custom_fields: Optional[Dict[str, str]] = None
    note: Optional[str] = None
    language: Optional[str] = None
    order_promised_delivery_date: Optional[str] = None
    delivery_type: Optional[str] = None
    pickup_location: Optional[str] = None
    pickup_note: Optional[str] = None
    slug: Optional[str] = None
    order_number: Optional[str] = None
    order_date: Optional[str] = None
    shipment_type: Optional[str] = None
    origin_state: Optional[str] = None
    origin_city: Optional[str] = None
    origin_postal_code: Optional[str] = None
    origin_raw_location: Optional[str] = None
    destination_raw_location: Optional[str] = None


@dataclass
class GetTrackingParams(AdditionalFields):
    """Query parameters for a single tracking."""
    fields: Optional[str] = None        # comma separated list of fields to include
    lang: Optional[str] = None          # language of the checkpoint messages


@dataclass
class GetTrackingsParams:
    """Query parameters for listing trackings."""
    courier_destination_country_iso3: Optional[str] = None
    created_at_max: Optional[str] = None
    created_at_min: Optional[str] = None
    destination: Optional[str] = None
    fields: Optional[str] = None
    keyword: Optional[str] = None
    limit: Optional[int] = None
    origin: Optional[str] = None
    page: Optional[int] = None
    return_to_sender: Optional[str] = None
    shipment_tags: Optional[str] = None
    slug: Optional[str] = None
    tag: Optional[str] = None
    tracking_numbers: Optional[str] = None
    transit_time: Optional[int] = None
    updated_at_max: Optional[str] = None
    updated_at_min: Optional[str] = None
