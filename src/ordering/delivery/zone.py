"""DeliveryZone aggregate — a city/area with a flat delivery fee.

Orders delivered to the zone pay ``price`` unless their total reaches
``is_free_from_price``.
"""

import math

from protean.fields import Float, String

from ordering.domain import ordering

EARTH_RADIUS_KM = 6371.0


@ordering.aggregate
class DeliveryZone:
    name = String(required=True, max_length=255)
    lat = Float(required=True, min_value=-90.0, max_value=90.0)
    lng = Float(required=True, min_value=-180.0, max_value=180.0)
    price = Float(required=True, min_value=0.0)
    is_free_from_price = Float(required=True, min_value=0.0)

    def distance_km(self, lat: float, lng: float) -> float:
        """Great-circle distance from the zone centre to ``(lat, lng)``."""
        phi1, phi2 = math.radians(self.lat), math.radians(lat)
        d_phi = math.radians(lat - self.lat)
        d_lambda = math.radians(lng - self.lng)
        a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
        return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))
