"""
Representation of a latitude/longitude pair
"""

__all__ = ['LatLng']

import re
from typing import Any, Optional, Tuple, Union

from geomappable import calc
from geomappable._types import Formula, Units
from geomappable.utils.functions import finite_float

_LATLNG_STRING = re.compile(r'(-?\d+\.?\d*)[, ] ?(-?\d+\.?\d*)$')


class LatLng:
    """Representation of a point on the globe (i.e., a lat/lng pair)"""

    def __init__(self, lat: Union[float, int, str], lng: Union[float, int, str]):
        self.lat = float(lat)
        self.lng = float(lng)

    def __eq__(self, other):
        if not isinstance(other, LatLng):
            return False

        return self.lat == other.lat and self.lng == other.lng

    def __hash__(self):
        return hash((self.lat, self.lng))

    def __repr__(self):
        return f'<LatLng({self.lat}, {self.lng})>'

    def __str__(self):
        return self.ll

    @property
    def ll(self) -> str:
        """The point as a 'lat,lng' string"""
        return f'{self.lat},{self.lng}'

    @property
    def is_valid(self) -> bool:
        return -90 <= self.lat <= 90 and -180 <= self.lng <= 180

    @staticmethod
    def wrap_longitude(lng: float) -> float:
        """Wraps a longitude into [-180, 180]"""
        lng = finite_float(lng, 'longitude')
        wrapped = (lng + 180) % 360 - 180
        # 180 itself stays east
        return 180.0 if wrapped == -180 and lng > 0 else wrapped

    @classmethod
    def normalize(cls, thing: Any, other: Any = None) -> 'LatLng':
        """
        Converts a variety of point-like inputs into a LatLng.

        Accepts:
            - a LatLng (returned as-is)
            - a (lat, lng) tuple or list, or lat and lng as two arguments
            - a 'lat,lng' or 'lat lng' string
            - any object with a to_lat_lng() method, e.g. a Mappable model instance
            - any object with lat/lng or latitude/longitude attributes

        Any other string is treated as an address and resolved through the
        configured geocoder.

        Args:
            thing:
                The point-like value

            other:
                (Optional) The longitude, if thing is a latitude

        Returns:
            LatLng
        """
        if other is not None:
            thing = (thing, other)

        if isinstance(thing, LatLng):
            return thing

        if isinstance(thing, str):
            thing = thing.strip()
            match = _LATLNG_STRING.match(thing)
            if match:
                return cls(match.group(1), match.group(2))

            from geomappable.geocoding import geocode  # pylint: disable=import-outside-toplevel
            return geocode(thing)

        if isinstance(thing, (tuple, list)) and len(thing) == 2:
            return cls(thing[0], thing[1])

        if hasattr(thing, 'to_lat_lng'):
            res = thing.to_lat_lng()
            if res is None:
                raise ValueError(f'{thing!r} has no coordinates')
            return res

        for lat_attr, lng_attr in (('lat', 'lng'), ('latitude', 'longitude')):
            if hasattr(thing, lat_attr) and hasattr(thing, lng_attr):
                return cls(getattr(thing, lat_attr), getattr(thing, lng_attr))

        raise TypeError(
            f'{thing!r} ({type(thing).__name__}) cannot be normalized to a LatLng. '
            'Expected a LatLng, a (lat, lng) pair, a string or an object with '
            'lat/lng attributes.'
        )

    def distance_to(
        self,
        other: Any,
        units: Optional[Union[Units, str]] = None,
        formula: Optional[Union[Formula, str]] = None,
    ) -> float:
        """Returns the distance from this point to another"""
        return calc.distance_between(self, other, units=units, formula=formula)

    def heading_to(self, other: Any) -> float:
        """Returns the heading in degrees from this point to another"""
        return calc.heading_between(self, other)

    def heading_from(self, other: Any) -> float:
        """Returns the heading in degrees from another point to this one"""
        return calc.heading_between(other, self)

    def endpoint(
        self,
        heading: float,
        distance: float,
        units: Optional[Union[Units, str]] = None,
    ) -> 'LatLng':
        """Returns the point reached by travelling a distance along a heading"""
        return calc.endpoint(self, heading, distance, units=units)

    def midpoint_to(self, other: Any, units: Optional[Union[Units, str]] = None) -> 'LatLng':
        """Returns the point halfway between this point and another"""
        return calc.midpoint_between(self, other, units=units)

    def to_float(self, reverse: bool = False) -> Tuple[float, float]:
        """
        Converts the point to a tuple of floats (lat, lng)

        Args:
            reverse: (bool)
                (Default False) If True, reverses the order to (lng, lat)
        """
        if reverse:
            return self.lng, self.lat
        return self.lat, self.lng
