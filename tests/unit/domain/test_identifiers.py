import pytest

from aftership.domain.models.errors import MissingParameterError
from aftership.domain.models.identifiers import SlugTrackingNumber, TrackingID


def test_tracking_id_path():
    assert TrackingID("5b74f4958776db0e00b6f5ed").uri_path() == "/5b74f4958776db0e00b6f5ed"


def test_tracking_id_is_path_escaped():
    assert TrackingID("a/b c").uri_path() == "/a%2Fb%20c"


def test_empty_tracking_id_raises():
    with pytest.raises(MissingParameterError, match="tracking id is empty"):
        TrackingID("").uri_path()


def test_slug_tracking_number_path():
    assert SlugTrackingNumber("dhl", "1234567890").uri_path() == "/dhl/1234567890"


def test_slug_tracking_number_escapes_each_segment():
    assert SlugTrackingNumber("usps", "AB/12?3").uri_path() == "/usps/AB%2F12%3F3"


@pytest.mark.parametrize("slug, number", [("", "123"), ("dhl", ""), ("", "")])
def test_slug_tracking_number_requires_both_parts(slug, number):
    with pytest.raises(MissingParameterError, match="slug or tracking number is empty"):
        SlugTrackingNumber(slug, number).uri_path()


def test_missing_parameter_error_is_a_value_error():
    with pytest.raises(ValueError):
        TrackingID("").uri_path()
