"""Geo adapter factory.

Provides get_geocoder() / get_distance_matrix() with swappable
implementations:
- Fake adapters for development and testing (default)
- Google Maps adapters when GOOGLE_MAPS_API_KEY is set
"""

import os

from ordering.delivery.geo.fake_adapter import FakeDistanceMatrix, FakeGeocoder
from ordering.delivery.geo.port import DistanceMatrix, Geocoder

_current_geocoder: Geocoder | None = None
_current_distance_matrix: DistanceMatrix | None = None


def get_geocoder() -> Geocoder:
    global _current_geocoder
    if _current_geocoder is None:
        api_key = os.getenv("GOOGLE_MAPS_API_KEY")
        if api_key:
            from ordering.delivery.geo.google_adapter import GoogleMapsGeocoder

            _current_geocoder = GoogleMapsGeocoder(api_key)
        else:
            _current_geocoder = FakeGeocoder()
    return _current_geocoder


def set_geocoder(geocoder: Geocoder) -> None:
    """Override the active geocoder (useful for tests)."""
    global _current_geocoder
    _current_geocoder = geocoder


def get_distance_matrix() -> DistanceMatrix:
    global _current_distance_matrix
    if _current_distance_matrix is None:
        api_key = os.getenv("GOOGLE_MAPS_API_KEY")
        if api_key:
            from ordering.delivery.geo.google_adapter import GoogleDistanceMatrix

            _current_distance_matrix = GoogleDistanceMatrix(api_key)
        else:
            _current_distance_matrix = FakeDistanceMatrix()
    return _current_distance_matrix


def set_distance_matrix(distance_matrix: DistanceMatrix) -> None:
    """Override the active distance matrix (useful for tests)."""
    global _current_distance_matrix
    _current_distance_matrix = distance_matrix


def reset_geo() -> None:
    """Reset to the default adapters."""
    global _current_geocoder, _current_distance_matrix
    _current_geocoder = None
    _current_distance_matrix = None
