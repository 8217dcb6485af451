import json
from typing import Any, Dict, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from typer.testing import CliRunner

from aftership.core.aftership import AfterShip
from aftership.domain.interfaces.api_requester import ApiRequester
from aftership.infrastructure.api.auth import ApiKeyAuthenticator
from aftership.infrastructure.api.client import AfterShipClient
from aftership.infrastructure.config import settings
from aftership.infrastructure.resilience.api_retry import ApiRetryService

TEST_ENDPOINT = "https://api.example.test/tracking/2023-10"


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keeps tests away from the developer's ~/.aftership/config.yaml and .env.

    Marks configuration as loaded so no file is read, and removes
    AFTERSHIP_* variables from the environment.
    """
    monkeypatch.setattr(settings, "_loaded", True)
    monkeypatch.setattr(settings, "_config", {})
    for key in ("AFTERSHIP_API_KEY", "AFTERSHIP_API_SECRET", "AFTERSHIP_AUTH_TYPE",
                "AFTERSHIP_ENDPOINT", "AFTERSHIP_TIMEOUT", "RETRY_MAX_RETRIES"):
        monkeypatch.delenv(key, raising=False)
    yield
    settings.clear_test_config()


def make_response(
    status_code: int = 200,
    payload: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
    text: Optional[str] = None,
    reason: str = "OK",
) -> requests.Response:
    """Builds a real requests.Response with the given body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers or {})
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(payload if payload is not None else {}).encode("utf-8")
    response.encoding = "utf-8"
    return response


def envelope(data: Any, code: int = 200, message: str = "", type: str = "") -> Dict[str, Any]:
    meta = {"code": code}
    if message:
        meta["message"] = message
    if type:
        meta["type"] = type
    return {"meta": meta, "data": data}


@pytest.fixture
def mock_session(mocker):
    """A requests.Session whose request() returns an empty 200 envelope by default."""
    session = mocker.MagicMock(spec=requests.Session)
    session.request.return_value = make_response(200, envelope({}))
    return session


@pytest.fixture
def client(mock_session) -> AfterShipClient:
    return AfterShipClient(
        authenticator=ApiKeyAuthenticator("test-api-key"),
        endpoint=TEST_ENDPOINT,
        session=mock_session,
    )


@pytest.fixture
def mock_requester(mocker):
    """An ApiRequester double for service tests."""
    requester = mocker.MagicMock(spec=ApiRequester)
    requester.make_request.return_value = {}
    return requester


@pytest.fixture
def retry_service() -> ApiRetryService:
    return ApiRetryService(max_retries=0)


@pytest.fixture
def aftership(mock_session) -> AfterShip:
    return AfterShip(api_key="test-api-key", endpoint=TEST_ENDPOINT, session=mock_session)


SAMPLE_TRACKING = {
    "id": "5b74f4958776db0e00b6f5ed",
    "created_at": "2024-05-01T10:00:00+00:00",
    "updated_at": "2024-05-02T08:30:00Z",
    "tracking_number": "1234567890",
    "slug": "dhl",
    "active": True,
    "tag": "InTransit",
    "subtag": "InTransit_001",
    "title": "Order #1001",
    "origin_country_iso3": "DEU",
    "destination_country_iso3": "NLD",
    "shipment_weight": 2,
    "emails": ["buyer@example.com"],
    "checkpoints": [
        {
            "slug": "dhl",
            "checkpoint_time": "2024-05-01T12:00:00+02:00",
            "city": "Leipzig",
            "coordinates": [51.3, 12.4],
            "message": "Shipment picked up",
            "tag": "InfoReceived",
        },
        {
            "slug": "dhl",
            "checkpoint_time": "2024-05-02T07:00:00+02:00",
            "location": "Venlo",
            "message": "Arrived at sort facility",
            "tag": "InTransit",
        },
    ],
    "latest_estimated_delivery": {"type": "specific", "source": "Carrier", "datetime": "2024-05-04"},
    "next_couriers": [{"slug": "postnl", "tracking_number": "3SABC", "source": "Carrier"}],
    "proof_of_delivery": [{"type": "signature", "url": "https://example.test/pod.png"}],
    "some_future_field": {"ignored": True},
}
