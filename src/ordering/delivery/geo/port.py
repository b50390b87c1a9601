"""Geo ports (abstract interfaces) used to place a destination in a delivery zone.

``Geocoder`` turns coordinates into a locality name; ``DistanceMatrix``
measures road distance between two points. Both return None when the
provider has no answer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def as_param(self) -> str:
        return f"{self.lat},{self.lng}"


class Geocoder(ABC):
    @abstractmethod
    def locality_name(self, lat: float, lng: float) -> str | None:
        """Return the locality (city) name at the coordinates, or None."""
        ...


class DistanceMatrix(ABC):
    @abstractmethod
    def distance_km(self, origin: Coordinates, destination: Coordinates) -> int | None:
        """Return the road distance in whole kilometres, or None."""
        ...
