import pytest
from unittest.mock import MagicMock

from aftership.core.services.tracking_service import TrackingService
from aftership.domain.models.errors import MissingParameterError, NotFoundError
from aftership.domain.models.identifiers import SlugTrackingNumber, TrackingID
from aftership.domain.models.tracking import (
    CreateTrackingParams,
    GetTrackingParams,
    GetTrackingsParams,
    TrackingCompletedStatus,
    UpdateTrackingParams,
)
from conftest import SAMPLE_TRACKING, TEST_ENDPOINT, envelope, make_response


@pytest.fixture
def tracking_service(mock_requester, retry_service) -> TrackingService:
    return TrackingService(mock_requester, retry_service)


def test_create_tracking(tracking_service: TrackingService, mock_requester: MagicMock):
    """create_tracking posts the params wrapped in 'tracking' and decodes the result."""
    mock_requester.make_request.return_value = {"tracking": SAMPLE_TRACKING}
    params = CreateTrackingParams(tracking_number="1234567890", slug="dhl")

    tracking = tracking_service.create_tracking(params)

    mock_requester.make_request.assert_called_once_with(
        "POST", "/trackings", query=None, body={"tracking": params}
    )
    assert tracking.id == "5b74f4958776db0e00b6f5ed"
    assert len(tracking.checkpoints) == 2


def test_create_tracking_requires_number(tracking_service: TrackingService, mock_requester: MagicMock):
    with pytest.raises(MissingParameterError, match="tracking number is empty"):
        tracking_service.create_tracking(CreateTrackingParams(slug="dhl"))
    mock_requester.make_request.assert_not_called()


def test_get_trackings(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.return_value = {
        "page": 1, "limit": 100, "count": 1, "trackings": [SAMPLE_TRACKING],
    }
    params = GetTrackingsParams(tag="InTransit")

    paged = tracking_service.get_trackings(params)

    mock_requester.make_request.assert_called_once_with("GET", "/trackings", query=params, body=None)
    assert paged.count == 1
    assert paged.trackings[0].tracking_number == "1234567890"


def test_iter_trackings_fetches_until_short_page(tracking_service: TrackingService, mock_requester: MagicMock):
    pages = {
        1: {"page": 1, "limit": 2, "count": 3, "trackings": [{"id": "a"}, {"id": "b"}]},
        2: {"page": 2, "limit": 2, "count": 3, "trackings": [{"id": "c"}]},
    }
    requested_pages = []

    def fake_request(method, path, query=None, body=None):
        requested_pages.append(query.page)
        return pages[query.page]

    mock_requester.make_request.side_effect = fake_request
    params = GetTrackingsParams(limit=2)

    ids = [t.id for t in tracking_service.iter_trackings(params)]

    assert ids == ["a", "b", "c"]
    assert requested_pages == [1, 2]
    assert params.page is None


def test_iter_trackings_stops_at_count(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.return_value = {"limit": 2, "count": 2, "trackings": [{"id": "a"}, {"id": "b"}]}

    assert len(list(tracking_service.iter_trackings())) == 2
    mock_requester.make_request.assert_called_once()


def test_iter_trackings_empty(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.return_value = {"trackings": []}
    assert list(tracking_service.iter_trackings()) == []


@pytest.mark.parametrize(
    "identifier, path",
    [
        (TrackingID("5b74f4958776db0e00b6f5ed"), "/trackings/5b74f4958776db0e00b6f5ed"),
        (SlugTrackingNumber("dhl", "1234567890"), "/trackings/dhl/1234567890"),
    ],
)
def test_get_tracking_paths(tracking_service: TrackingService, mock_requester: MagicMock, identifier, path):
    mock_requester.make_request.return_value = {"tracking": SAMPLE_TRACKING}
    params = GetTrackingParams(fields="title,tag")

    tracking = tracking_service.get_tracking(identifier, params)

    mock_requester.make_request.assert_called_once_with("GET", path, query=params, body=None)
    assert tracking.slug == "dhl"


def test_get_tracking_empty_identifier(tracking_service: TrackingService, mock_requester: MagicMock):
    with pytest.raises(MissingParameterError, match="error getting tracking: tracking id is empty"):
        tracking_service.get_tracking(TrackingID(""))
    mock_requester.make_request.assert_not_called()


def test_update_tracking(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.return_value = {"tracking": {"id": "x", "title": "New"}}
    params = UpdateTrackingParams(title="New")

    tracking = tracking_service.update_tracking(TrackingID("x"), params)

    mock_requester.make_request.assert_called_once_with(
        "PUT", "/trackings/x", query=None, body={"tracking": params}
    )
    assert tracking.title == "New"


def test_update_tracking_empty_slug(tracking_service: TrackingService):
    with pytest.raises(MissingParameterError, match="error updating tracking: slug or tracking number is empty"):
        tracking_service.update_tracking(SlugTrackingNumber("", "123"), UpdateTrackingParams(title="t"))


def test_delete_tracking(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.return_value = {"tracking": {"id": "x", "slug": "dhl", "tracking_number": "1"}}

    tracking = tracking_service.delete_tracking(SlugTrackingNumber("dhl", "1"))

    mock_requester.make_request.assert_called_once_with("DELETE", "/trackings/dhl/1", query=None, body=None)
    assert tracking.id == "x"


def test_retrack_tracking(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.return_value = {"tracking": {"id": "x", "active": True}}

    tracking = tracking_service.retrack_tracking(TrackingID("x"))

    mock_requester.make_request.assert_called_once_with("POST", "/trackings/x/retrack", query=None, body=None)
    assert tracking.active is True


def test_mark_tracking_as_completed(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.return_value = {"tracking": {"id": "x", "tag": "Delivered"}}

    tracking = tracking_service.mark_tracking_as_completed(TrackingID("x"), TrackingCompletedStatus.LOST)

    mock_requester.make_request.assert_called_once_with(
        "POST", "/trackings/x/mark-as-completed", query=None, body={"reason": "LOST"}
    )
    assert tracking.tag == "Delivered"


def test_api_errors_propagate(tracking_service: TrackingService, mock_requester: MagicMock):
    mock_requester.make_request.side_effect = NotFoundError(code=4004, message="Tracking does not exist.")
    with pytest.raises(NotFoundError):
        tracking_service.get_tracking(TrackingID("missing"))


def test_end_to_end_with_real_client(aftership, mock_session):
    """The facade sends a correctly addressed request through the real client."""
    mock_session.request.return_value = make_response(200, envelope({"tracking": SAMPLE_TRACKING}))

    tracking = aftership.trackings.get_tracking(SlugTrackingNumber("dhl", "1234567890"))

    assert mock_session.request.call_args.args == ("GET", f"{TEST_ENDPOINT}/trackings/dhl/1234567890")
    assert tracking.latest_checkpoint.location == "Venlo"
