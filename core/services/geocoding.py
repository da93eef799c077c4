import logging
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings

from core.exceptions import ServiceError

logger = logging.getLogger(__name__)


@dataclass
class GeocodeResult:
    lat: float
    lng: float
    formatted_address: str

    def as_dict(self) -> dict:
        return {'lat': self.lat, 'lng': self.lng, 'formatted_address': self.formatted_address}


def geocode_address(address: str, api_key: Optional[str] = None) -> Optional[GeocodeResult]:
    """Look ``address`` up with the Google geocoder.

    Returns ``None`` when the geocoder has no match.  A missing key, a
    transport failure or a non-2xx answer raises :class:`ServiceError`.
    """
    api_key = api_key or settings.GOOGLE_MAPS_API_KEY
    if not api_key:
        raise ServiceError('Google Maps API key not configured')
    try:
        r = requests.get(
            settings.GEOCODING_URL,
            params={'address': address, 'key': api_key},
            timeout=settings.GEOCODING_TIMEOUT,
        )
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        logger.exception('geocoding request failed for %r', address)
        raise ServiceError('Geocoding service error') from exc

    results = data.get('results') or []
    if data.get('status') != 'OK' or not results:
        logger.warning('geocoding failed for address %r: status %s', address, data.get('status'))
        return None
    first = results[0]
    location = first['geometry']['location']
    return GeocodeResult(lat=location['lat'], lng=location['lng'], formatted_address=first['formatted_address'])
