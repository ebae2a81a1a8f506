import ipaddress
import logging
from typing import Optional

import httpx

from core.config import settings

logger = logging.getLogger(__name__)

EMPTY_LOCATION = {"latitude": None, "longitude": None, "country": None, "city": None}


def _as_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def is_public_ip(ip: Optional[str]) -> bool:
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.is_global


class Geolocator:
    """Best-effort IP to location lookup against an ip-api style JSON service.

    Any failure (disabled lookup, private address, network error, non-2xx
    answer, ``status: fail`` payload) yields an empty location instead of an
    exception.
    """

    def __init__(self, url_template: str, timeout: float = 5.0, enabled: bool = True, transport=None):
        self.url_template = url_template
        self.timeout = timeout
        self.enabled = enabled
        self.transport = transport

    async def locate(self, ip: Optional[str]) -> dict:
        if not self.enabled or not is_public_ip(ip):
            return dict(EMPTY_LOCATION)

        url = self.url_template.format(ip=ip)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Geolocation lookup for %s failed: %s", ip, e)
            return dict(EMPTY_LOCATION)

        if not isinstance(payload, dict) or payload.get("status") == "fail":
            logger.warning("Geolocation lookup for %s returned no location: %s", ip, payload)
            return dict(EMPTY_LOCATION)

        return {
            "latitude": _as_float(payload.get("lat", payload.get("latitude"))),
            "longitude": _as_float(payload.get("lon", payload.get("longitude"))),
            "country": payload.get("country") or payload.get("country_name"),
            "city": payload.get("city"),
        }


geolocator = Geolocator(
    settings.GEOLOCATION_URL,
    timeout=settings.GEOLOCATION_TIMEOUT,
    enabled=settings.GEOLOCATION_ENABLED,
)

def get_geolocator() -> Geolocator:
    return geolocator


def get_client_ip(request) -> Optional[str]:
    """Get client IP address from request"""
    x_forwarded_for = request.headers.get("x-forwarded-for")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None
