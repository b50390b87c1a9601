"""Configurable fake geo adapters for development and testing.

Neither adapter calls out to the network. Tests configure the answers they
need and inspect ``calls`` afterwards.
"""

from ordering.delivery.geo.port import Coordinates, DistanceMatrix, Geocoder


class GeoProviderError(Exception):
    """Raised by the fakes when configured to fail."""


class FakeGeocoder(Geocoder):
    def __init__(self) -> None:
        self.locality: str | None = None
        self.should_fail = False
        self.calls: list[dict] = []

    def configure(self, locality: str | None = None, should_fail: bool = False) -> None:
        self.locality = locality
        self.should_fail = should_fail

    def locality_name(self, lat: float, lng: float) -> str | None:
        self.calls.append({"method": "locality_name", "lat": lat, "lng": lng})
        if self.should_fail:
            raise GeoProviderError("Geocoder unavailable")
        return self.locality


class FakeDistanceMatrix(DistanceMatrix):
    """Returns distances keyed by destination coordinates; unknown destinations yield None."""

    def __init__(self) -> None:
        self.distances: dict[tuple[float, float], int | None] = {}
        self.should_fail = False
        self.calls: list[dict] = []

    def configure(self, distances: dict | None = None, should_fail: bool = False) -> None:
        self.distances = dict(distances or {})
        self.should_fail = should_fail

    def distance_km(self, origin: Coordinates, destination: Coordinates) -> int | None:
        self.calls.append({"method": "distance_km", "origin": origin, "destination": destination})
        if self.should_fail:
            raise GeoProviderError("Distance matrix unavailable")
        return self.distances.get((destination.lat, destination.lng))
