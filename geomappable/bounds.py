"""
Representation of a rectangular lat/lng region
"""

__all__ = ['Bounds']

from typing import Any, Optional, Union

from geomappable._types import Units
from geomappable.latlng import LatLng


class Bounds:

    """
    A rectangle on the globe, as expressed by its Southwest and Northeast corners.

    When the Southwest corner's longitude is greater than the Northeast corner's,
    the rectangle crosses the antimeridian.

    Args:
        sw: (LatLng)
            The Southwest corner

        ne: (LatLng)
            The Northeast corner

    """

    def __init__(self, sw: LatLng, ne: LatLng):
        self.sw = LatLng.normalize(sw)
        self.ne = LatLng.normalize(ne)

    def __eq__(self, other):
        if not isinstance(other, Bounds):
            return False

        return self.sw == other.sw and self.ne == other.ne

    def __hash__(self):
        return hash((self.sw, self.ne))

    def __repr__(self):
        return f'<Bounds {self.sw.to_float()} - {self.ne.to_float()}>'

    @property
    def crosses_meridian(self) -> bool:
        return self.sw.lng > self.ne.lng

    @property
    def center(self) -> LatLng:
        return self.sw.midpoint_to(self.ne)

    def contains(self, point: Any) -> bool:
        """
        Test whether a point lies strictly inside the bounds.

        Args:
            point:
                Any point-like value accepted by LatLng.normalize()

        Returns:
            bool
        """
        point = LatLng.normalize(point)
        if not self.sw.lat < point.lat < self.ne.lat:
            return False

        if self.crosses_meridian:
            return point.lng < self.ne.lng or point.lng > self.sw.lng

        return self.sw.lng < point.lng < self.ne.lng

    def __contains__(self, point: Any) -> bool:
        return self.contains(point)

    def to_span(self) -> LatLng:
        """
        Returns the latitudinal and longitudinal extent of the bounds, as a LatLng
        """
        lat_span = self.ne.lat - self.sw.lat
        lng_span = self.ne.lng - self.sw.lng
        if self.crosses_meridian:
            lng_span += 360

        return LatLng(abs(lat_span), abs(lng_span))

    @classmethod
    def from_point_and_radius(
        cls,
        point: Any,
        radius: float,
        units: Optional[Union[Units, str]] = None,
    ) -> 'Bounds':
        """
        Creates the smallest Bounds containing a circle.

        Args:
            point:
                The center of the circle

            radius:
                The radius of the circle

            units:
                (Default config.default_units) The unit system of the radius

        Returns:
            Bounds
        """
        point = LatLng.normalize(point)
        p0 = point.endpoint(0, radius, units=units)
        p90 = point.endpoint(90, radius, units=units)
        p180 = point.endpoint(180, radius, units=units)
        p270 = point.endpoint(270, radius, units=units)
        return cls(LatLng(p180.lat, p270.lng), LatLng(p0.lat, p90.lng))

    @classmethod
    def normalize(cls, thing: Any, other: Any = None) -> 'Bounds':
        """
        Converts a Bounds, a pair of point-likes, or two point-likes into a Bounds.
        The first point is the Southwest corner.
        """
        if isinstance(thing, Bounds):
            return thing

        if other is None and isinstance(thing, (tuple, list)) and len(thing) == 2:
            thing, other = thing

        if other is None:
            raise TypeError(
                f'{thing!r} ({type(thing).__name__}) cannot be normalized to Bounds'
            )

        return cls(LatLng.normalize(thing), LatLng.normalize(other))
