import pytest
from unittest.mock import MagicMock

from aftership.core.services.checkpoint_service import CheckpointService
from aftership.core.services.courier_service import CourierService
from aftership.core.services.estimated_delivery_service import EstimatedDeliveryService
from aftership.core.services.notification_service import NotificationService
from aftership.domain.models.courier import DetectCourierParams, GetCheckpointParams, Notification
from aftership.domain.models.errors import MissingParameterError
from aftership.domain.models.identifiers import SlugTrackingNumber, TrackingID
from aftership.domain.models.tracking import Address, EstimatedDeliveryDate


# --- Couriers ---

def test_get_couriers(mock_requester: MagicMock, retry_service):
    mock_requester.make_request.return_value = {
        "total": 1, "couriers": [{"slug": "dhl", "name": "DHL", "required_fields": []}],
    }

    couriers = CourierService(mock_requester, retry_service).get_couriers()

    mock_requester.make_request.assert_called_once_with("GET", "/couriers")
    assert couriers.total == 1
    assert couriers.couriers[0].name == "DHL"


def test_get_all_couriers(mock_requester: MagicMock, retry_service):
    mock_requester.make_request.return_value = {"total": 0, "couriers": []}

    couriers = CourierService(mock_requester, retry_service).get_all_couriers()

    mock_requester.make_request.assert_called_once_with("GET", "/couriers/all")
    assert couriers.couriers == []


def test_detect_courier(mock_requester: MagicMock, retry_service):
    mock_requester.make_request.return_value = {"total": 2, "couriers": [{"slug": "dhl"}, {"slug": "fedex"}]}
    params = DetectCourierParams(tracking_number="1234567890", slug=["dhl", "fedex"])

    detected = CourierService(mock_requester, retry_service).detect_courier(params)

    mock_requester.make_request.assert_called_once_with("POST", "/couriers/detect", body={"tracking": params})
    assert [c.slug for c in detected.couriers] == ["dhl", "fedex"]


def test_detect_courier_requires_number(mock_requester: MagicMock, retry_service):
    with pytest.raises(MissingParameterError, match="tracking number is empty"):
        CourierService(mock_requester, retry_service).detect_courier(DetectCourierParams())
    mock_requester.make_request.assert_not_called()


# --- Last checkpoint ---

def test_get_last_checkpoint(mock_requester: MagicMock, retry_service):
    mock_requester.make_request.return_value = {
        "id": "x", "slug": "dhl", "tracking_number": "1", "tag": "InTransit",
        "checkpoint": {"message": "Departed", "checkpoint_time": "2024-05-02T07:00:00+02:00"},
    }
    params = GetCheckpointParams(lang="en")

    last = CheckpointService(mock_requester, retry_service).get_last_checkpoint(
        SlugTrackingNumber("dhl", "1"), params
    )

    mock_requester.make_request.assert_called_once_with("GET", "/last_checkpoint/dhl/1", query=params)
    assert last.checkpoint.message == "Departed"
    assert last.checkpoint.checkpoint_time == "2024-05-02T07:00:00+02:00"


def test_get_last_checkpoint_empty_id(mock_requester: MagicMock, retry_service):
    with pytest.raises(MissingParameterError, match="error getting last checkpoint"):
        CheckpointService(mock_requester, retry_service).get_last_checkpoint(TrackingID(""))


# --- Notifications ---

def test_get_notification(mock_requester: MagicMock, retry_service):
    mock_requester.make_request.return_value = {"notification": {"emails": ["a@example.com"], "smses": []}}

    notification = NotificationService(mock_requester, retry_service).get_notification(TrackingID("x"))

    mock_requester.make_request.assert_called_once_with("GET", "/notifications/x", body=None)
    assert notification.emails == ["a@example.com"]


@pytest.mark.parametrize("method_name, suffix", [("add_notification", "/add"), ("remove_notification", "/remove")])
def test_change_notification(mock_requester: MagicMock, retry_service, method_name, suffix):
    mock_requester.make_request.return_value = {"notification": {"emails": [], "smses": ["+85291239123"]}}
    notification = Notification(smses=["+85291239123"])
    service = NotificationService(mock_requester, retry_service)

    result = getattr(service, method_name)(SlugTrackingNumber("dhl", "1"), notification)

    mock_requester.make_request.assert_called_once_with(
        "POST", f"/notifications/dhl/1{suffix}", body={"notification": notification}
    )
    assert result.smses == ["+85291239123"]


def test_notification_missing_identifier(mock_requester: MagicMock, retry_service):
    with pytest.raises(MissingParameterError, match="error adding notification"):
        NotificationService(mock_requester, retry_service).add_notification(
            SlugTrackingNumber("dhl", ""), Notification()
        )


# --- Estimated delivery dates ---

def test_batch_predict(mock_requester: MagicMock, retry_service):
    mock_requester.make_request.return_value = {
        "estimated_delivery_dates": [
            {"slug": "fedex", "estimated_delivery_date": "2024-05-06", "confidence_score": 1},
        ]
    }
    request = EstimatedDeliveryDate(
        slug="fedex",
        origin_address=Address(country="USA"),
        destination_address=Address(country="USA"),
        pickup_time="2024-05-01 15:00:00",
    )

    predictions = EstimatedDeliveryService(mock_requester, retry_service).batch_predict_estimated_delivery_date(
        [request]
    )

    mock_requester.make_request.assert_called_once_with(
        "POST", "/estimated-delivery-date/predict-batch", body={"estimated_delivery_dates": [request]}
    )
    assert predictions[0].estimated_delivery_date == "2024-05-06"
    assert predictions[0].confidence_score == 1.0


def test_batch_predict_empty(mock_requester: MagicMock, retry_service):
    with pytest.raises(MissingParameterError, match="estimated delivery dates are empty"):
        EstimatedDeliveryService(mock_requester, retry_service).batch_predict_estimated_delivery_date([])


def test_add_notification_with_null_receivers(mock_requester: MagicMock, retry_service):
    """A Notification decoded from JSON nulls can still be sent."""
    mock_requester.make_request.return_value = {"notification": {"emails": ["a@example.com"], "smses": None}}
    notification = Notification(emails=["a@example.com"], smses=None)

    result = NotificationService(mock_requester, retry_service).add_notification(TrackingID("x"), notification)

    assert result.emails == ["a@example.com"]
    assert result.smses is None
