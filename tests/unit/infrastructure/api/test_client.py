import json
import time

import pytest
import requests

from aftership.domain.models.common import RateLimit
from aftership.domain.models.errors import (
    APIError,
    BadRequestError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    TooManyRequestsError,
    TransportError,
    UnauthorizedError,
)
from aftership.domain.models.tracking import CreateTrackingParams, GetTrackingsParams
from aftership.infrastructure.api.client import DEFAULT_USER_AGENT
from conftest import TEST_ENDPOINT, envelope, make_response


def test_make_request_returns_data(client, mock_session):
    mock_session.request.return_value = make_response(200, envelope({"tracking": {"id": "abc"}}))

    data = client.make_request("GET", "/trackings/abc")

    assert data == {"tracking": {"id": "abc"}}
    args, kwargs = mock_session.request.call_args
    assert args == ("GET", f"{TEST_ENDPOINT}/trackings/abc")
    assert kwargs["data"] is None
    assert kwargs["params"] is None
    assert kwargs["timeout"] == 30.0


def test_make_request_sets_headers(client, mock_session):
    client.make_request("GET", "/couriers")

    headers = mock_session.request.call_args.kwargs["headers"]
    assert headers["as-api-key"] == "test-api-key"
    assert headers["aftership-client"] == DEFAULT_USER_AGENT
    assert headers["User-Agent"] == DEFAULT_USER_AGENT
    assert headers["request-id"]
    assert "Content-Type" not in headers


def test_make_request_serializes_body_and_query(client, mock_session):
    client.make_request(
        "POST", "/trackings",
        query=GetTrackingsParams(slug="dhl", page=2),
        body={"tracking": CreateTrackingParams(tracking_number="123", title=None)},
    )

    kwargs = mock_session.request.call_args.kwargs
    assert kwargs["params"] == {"slug": "dhl", "page": "2"}
    assert json.loads(kwargs["data"]) == {"tracking": {"tracking_number": "123"}}
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_missing_data_returns_empty_dict(client, mock_session):
    mock_session.request.return_value = make_response(200, {"meta": {"code": 200}})
    assert client.make_request("GET", "/couriers") == {}


def test_rate_limit_headers_are_recorded(client, mock_session):
    mock_session.request.return_value = make_response(
        200, envelope({}),
        headers={"X-RateLimit-Reset": "1700000000", "X-RateLimit-Limit": "10", "X-RateLimit-Remaining": "7"},
    )

    client.make_request("GET", "/couriers")

    assert client.rate_limit == RateLimit(reset=1700000000, limit=10, remaining=7)


def test_reached_rate_limit_blocks_request(client, mock_session):
    reset = int(time.time()) + 60
    mock_session.request.return_value = make_response(
        200, envelope({}),
        headers={"x-ratelimit-reset": str(reset), "x-ratelimit-limit": "10", "x-ratelimit-remaining": "0"},
    )
    client.make_request("GET", "/couriers")
    mock_session.request.reset_mock()

    with pytest.raises(TooManyRequestsError) as exc_info:
        client.make_request("GET", "/couriers")

    mock_session.request.assert_not_called()
    error = exc_info.value
    assert error.code == 429
    assert error.type == "TooManyRequests"
    assert "X-RateLimit-Reset" in error.message
    assert error.rate_limit.reset == reset
    assert 0 < error.retry_after <= 61


def test_expired_rate_limit_does_not_block(client, mock_session):
    mock_session.request.return_value = make_response(
        200, envelope({}),
        headers={"x-ratelimit-reset": "1", "x-ratelimit-limit": "10", "x-ratelimit-remaining": "0"},
    )
    client.make_request("GET", "/couriers")
    client.make_request("GET", "/couriers")
    assert mock_session.request.call_count == 2


@pytest.mark.parametrize(
    "status, error_class",
    [
        (400, BadRequestError),
        (401, UnauthorizedError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (429, TooManyRequestsError),
        (500, InternalError),
        (503, InternalError),
        (418, APIError),
    ],
)
def test_error_statuses_map_to_error_classes(client, mock_session, status, error_class):
    mock_session.request.return_value = make_response(
        status, envelope({}, code=4000 + status, message="Something failed", type="SomeType"),
    )

    with pytest.raises(error_class) as exc_info:
        client.make_request("GET", "/trackings/x")

    error = exc_info.value
    assert type(error) is error_class
    assert error.code == 4000 + status
    assert error.message == "Something failed"
    assert error.type == "SomeType"
    assert error.path == "/trackings/x"
    assert "Something failed" in str(error)


def test_non_json_error_body(client, mock_session):
    mock_session.request.return_value = make_response(502, text="<html>Bad Gateway</html>", reason="Bad Gateway")

    with pytest.raises(InternalError) as exc_info:
        client.make_request("GET", "/couriers")

    assert exc_info.value.code == 502
    assert exc_info.value.type == "Bad Gateway"
    assert exc_info.value.message == "<html>Bad Gateway</html>"


def test_non_json_success_body_raises(client, mock_session):
    mock_session.request.return_value = make_response(200, text="not json")
    with pytest.raises(APIError, match="invalid JSON response"):
        client.make_request("GET", "/couriers")


def test_transport_error_is_wrapped(client, mock_session):
    mock_session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(TransportError, match="connection refused") as exc_info:
        client.make_request("GET", "/couriers")
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
