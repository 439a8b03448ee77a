"""
Geocoding hook.

geomappable does not talk to any geocoding service itself. Register a callable
with geomappable.config.set_geocoder(); it receives an address (or IP address)
string and must return a GeoLoc.
"""

__all__ = ['GeoLoc', 'geocode', 'geocode_ip_address', 'is_ip_address', 'lookup']

import re
from typing import Optional, Union

from geomappable import config
from geomappable.exceptions import GeocodeError
from geomappable.latlng import LatLng
from geomappable.utils.logging import LOGGER

_IP_ADDRESS = re.compile(r'^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$')


class GeoLoc(LatLng):
    """
    The result of a geocoding request.

    Args:
        lat:
            The latitude (0 if geocoding was unsuccessful)

        lng:
            The longitude (0 if geocoding was unsuccessful)

        success:
            (Default True) Whether the request resolved to a location

        full_address:
            (Optional) The address as reported by the geocoder

        provider:
            (Optional) The name of the service which answered
    """

    def __init__(
        self,
        lat: Union[float, int, str] = 0,
        lng: Union[float, int, str] = 0,
        success: bool = True,
        full_address: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        super().__init__(lat, lng)
        self.success = success
        self.full_address = full_address
        self.provider = provider

    def __repr__(self):
        status = 'success' if self.success else 'failure'
        return f'<GeoLoc({self.lat}, {self.lng}) {status}>'

    @classmethod
    def failure(cls, provider: Optional[str] = None) -> 'GeoLoc':
        return cls(success=False, provider=provider)


def is_ip_address(value) -> bool:
    return isinstance(value, str) and _IP_ADDRESS.match(value.strip()) is not None


def lookup(location: str) -> GeoLoc:
    if config.geocoder is None:
        raise GeocodeError(
            f'Cannot geocode {location!r}: no geocoder is configured. '
            'Register one with geomappable.config.set_geocoder().'
        )

    LOGGER.debug('Geocoding %r', location)
    return config.geocoder(location)


def geocode(location: str) -> GeoLoc:
    """
    Resolves an address through the configured geocoder.

    Raises:
        GeocodeError: if no geocoder is configured or the location could not be found
    """
    res = lookup(location)
    if res is None or not res.success:
        raise GeocodeError(f'Could not geocode {location!r}')

    return res


def geocode_ip_address(ip_address: str) -> GeoLoc:
    """Resolves an IP address through the configured geocoder"""
    res = lookup(ip_address.strip())
    if res is None or not res.success:
        raise GeocodeError(f'Could not geocode IP address {ip_address!r}')

    return res
