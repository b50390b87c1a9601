"""Google geo adapters against a stubbed HTTP session."""

from unittest.mock import MagicMock

import pytest
import requests
from ordering.delivery.geo import get_geocoder, reset_geo
from ordering.delivery.geo.fake_adapter import FakeGeocoder
from ordering.delivery.geo.google_adapter import GoogleDistanceMatrix, GoogleMapsGeocoder
from ordering.delivery.geo.port import Coordinates

ORIGIN = Coordinates(40.1792, 44.4991)
DESTINATION = Coordinates(40.18, 44.51)


def _session(body=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value.json.return_value = body
    return session


class TestGoogleMapsGeocoder:
    def test_first_result_with_a_zone_name(self):
        body = {
            "results": [
                {"address_components": [{"long_name": "Armenia", "types": ["country", "political"]}]},
                {
                    "address_components": [
                        {"long_name": "Yerevan", "types": ["locality", "political"]},
                        {"long_name": "Yerevan", "types": ["administrative_area_level_1", "political"]},
                    ]
                },
            ]
        }
        session = _session(body)
        assert GoogleMapsGeocoder("key", session).locality_name(40.18, 44.51) == "Yerevan"
        assert session.get.call_args.kwargs["params"]["latlng"] == "40.18,44.51"

    def test_transport_error_means_no_answer(self):
        session = _session(error=requests.ConnectionError("down"))
        assert GoogleMapsGeocoder("key", session).locality_name(40.18, 44.51) is None

    def test_no_results(self):
        assert GoogleMapsGeocoder("key", _session({"results": []})).locality_name(40.18, 44.51) is None


class TestGoogleDistanceMatrix:
    def test_distance_rounded_to_km(self):
        body = {"status": "OK", "rows": [{"elements": [{"distance": {"value": 12600}}]}]}
        assert GoogleDistanceMatrix("key", _session(body)).distance_km(ORIGIN, DESTINATION) == 13

    def test_missing_element(self):
        body = {"status": "OK", "rows": [{"elements": [{"status": "ZERO_RESULTS"}]}]}
        assert GoogleDistanceMatrix("key", _session(body)).distance_km(ORIGIN, DESTINATION) is None

    def test_request_denied(self):
        body = {"status": "REQUEST_DENIED", "rows": []}
        assert GoogleDistanceMatrix("key", _session(body)).distance_km(ORIGIN, DESTINATION) is None

    def test_timeout_means_no_answer(self):
        session = _session(error=requests.Timeout("slow"))
        assert GoogleDistanceMatrix("key", session).distance_km(ORIGIN, DESTINATION) is None


class TestAdapterSelection:
    @pytest.fixture(autouse=True)
    def _fresh(self):
        reset_geo()
        yield
        reset_geo()

    def test_fake_without_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        assert isinstance(get_geocoder(), FakeGeocoder)

    def test_google_with_api_key(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "secret")
        assert isinstance(get_geocoder(), GoogleMapsGeocoder)
