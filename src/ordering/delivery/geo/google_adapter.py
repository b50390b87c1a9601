"""Google Maps geo adapters (Geocoding and Distance Matrix APIs).

Selected by ``get_geocoder`` / ``get_distance_matrix`` when
``GOOGLE_MAPS_API_KEY`` is set. Transport errors are logged and reported as
"no answer" so the zone resolver can fall back to proximity.
"""

import requests
import structlog

from ordering.delivery.geo.port import Coordinates, DistanceMatrix, Geocoder

logger = structlog.get_logger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
REQUEST_TIMEOUT = 5

_LOCALITY = {"locality", "political"}
_SUBLOCALITY = {"political", "sublocality", "sublocality_level_1"}
_POSTAL_CODE = {"postal_code"}
_ADMINISTRATIVE_AREA = {"administrative_area_level_1", "political"}

# Google spellings that differ from the names delivery zones are stored under.
_LOCALITY_ALIASES = {
    "Chermug": "Jermuk",
    "Kəlbəcər": "Karvachar",
    "Şuşa": "Shushi",
    "Xankəndi": "Stepanakert",
    "Əsgəran": "Askeran",
    "Ağdərə": "Martakert",
}

# Sublocalities priced as their own zone inside a larger locality.
_SUBLOCALITY_ZONES = {
    ("Yerevan", "Nubarashen"),
    ("Vagharshapat", "Zvartnots"),
    ("Ashtarak", "Mughni"),
}


def locality_from_components(components: list[dict]) -> str | None:
    """Pick the delivery-zone name out of one geocoding result's address components."""
    found: dict[str, str] = {}
    for component in components:
        name = component.get("long_name")
        if not name:
            continue
        types = set(component.get("types", []))
        if types == _LOCALITY:
            found["city"] = name
        elif types == _SUBLOCALITY:
            found["sublocality"] = name
        elif types == _POSTAL_CODE:
            found["postal_code"] = name
        elif types == _ADMINISTRATIVE_AREA:
            found["administrative_area"] = name

    city = found.get("city")
    sublocality = found.get("sublocality")
    if city == "Yerevan" and found.get("administrative_area") != "Yerevan":
        return None
    if (city, sublocality) in _SUBLOCALITY_ZONES:
        return sublocality
    if city == "Katnaghbyur":
        return f"Katnaghbyur {found.get('postal_code')}"
    if city == "Martuni":
        return f"Martuni {found.get('postal_code') or 'Arcakh'}"
    return _LOCALITY_ALIASES.get(city, city)


class GoogleMapsGeocoder(Geocoder):
    def __init__(self, api_key: str, session: requests.Session | None = None) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()

    def locality_name(self, lat: float, lng: float) -> str | None:
        try:
            response = self.session.get(
                GEOCODE_URL,
                params={"latlng": f"{lat},{lng}", "language": "en", "key": self.api_key},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("geocoding_failed", lat=lat, lng=lng, error=str(exc))
            return None

        for result in body.get("results", []):
            name = locality_from_components(result.get("address_components") or [])
            if name:
                return name

        logger.info("geocoding_no_locality", lat=lat, lng=lng)
        return None


class GoogleDistanceMatrix(DistanceMatrix):
    def __init__(self, api_key: str, session: requests.Session | None = None) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()

    def distance_km(self, origin: Coordinates, destination: Coordinates) -> int | None:
        try:
            response = self.session.get(
                DISTANCE_MATRIX_URL,
                params={
                    "origins": origin.as_param(),
                    "destinations": destination.as_param(),
                    "key": self.api_key,
                },
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("distance_lookup_failed", origin=origin.as_param(), error=str(exc))
            return None

        try:
            distance = body["rows"][0]["elements"][0]["distance"]["value"] if body.get("status") == "OK" else None
        except (KeyError, IndexError):
            distance = None

        if distance is None:
            logger.info("distance_unavailable", origin=origin.as_param(), destination=destination.as_param())
            return None
        return round(distance / 1000)
