"""Delivery fee resolution."""

from ordering.delivery.geo.port import Coordinates
from ordering.delivery.resolver import ZoneResolver
from ordering.delivery.zone import DeliveryZone


def calculate_delivery_fee(zone: DeliveryZone, total: float) -> float:
    """Flat zone fee, waived once ``total`` reaches the zone's free-delivery threshold."""
    return zone.price if total < zone.is_free_from_price else 0.0


def resolve_delivery_fee(destination: Coordinates, total: float, resolver: ZoneResolver | None = None) -> float:
    """Resolve the zone for ``destination`` (one geo lookup) and price delivery for ``total``."""
    zone = (resolver or ZoneResolver()).resolve(destination.lat, destination.lng)
    return calculate_delivery_fee(zone, total)
