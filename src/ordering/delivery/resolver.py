"""Delivery zone resolution — place a destination in exactly one zone.

Fallback chain:
1. reverse-geocode the coordinates and use the zone with that locality name;
2. otherwise rank the three closest zones (great-circle) by road distance;
3. if any road distance is missing, use the closest zone as the crow flies.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.delivery.geo import get_distance_matrix, get_geocoder
from ordering.delivery.geo.port import Coordinates, DistanceMatrix, Geocoder
from ordering.delivery.zone import DeliveryZone

logger = structlog.get_logger(__name__)

NEAREST_CANDIDATES = 3


class ZoneNotFoundError(Exception):
    """No delivery zone is configured at all."""


class ZoneResolver:
    def __init__(self, geocoder: Geocoder | None = None, distance_matrix: DistanceMatrix | None = None) -> None:
        self.geocoder = geocoder or get_geocoder()
        self.distance_matrix = distance_matrix or get_distance_matrix()

    def resolve(self, lat: float, lng: float) -> DeliveryZone:
        zones = current_domain.repository_for(DeliveryZone)._dao.query.limit(None).all().items
        if not zones:
            raise ZoneNotFoundError("No delivery zones are configured")

        name = self._locality_name(lat, lng)
        if name:
            zone = next((z for z in zones if z.name == name), None)
            if zone is not None:
                return zone
            logger.info("locality_without_zone", locality=name)

        return self._nearest_by_road(zones, Coordinates(lat, lng))

    def _locality_name(self, lat: float, lng: float) -> str | None:
        try:
            return self.geocoder.locality_name(lat, lng)
        except Exception as exc:
            logger.warning("geocoder_failed", lat=lat, lng=lng, error=str(exc))
            return None

    def _nearest_by_road(self, zones: list[DeliveryZone], origin: Coordinates) -> DeliveryZone:
        candidates = sorted(zones, key=lambda z: z.distance_km(origin.lat, origin.lng))[:NEAREST_CANDIDATES]
        try:
            distances = [
                self.distance_matrix.distance_km(origin, Coordinates(zone.lat, zone.lng)) for zone in candidates
            ]
        except Exception as exc:
            logger.warning("distance_matrix_failed", origin=origin.as_param(), error=str(exc))
            return candidates[0]

        if any(distance is None for distance in distances):
            return candidates[0]
        return candidates[distances.index(min(distances))]
