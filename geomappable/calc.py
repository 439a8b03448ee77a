""" Distance, heading and destination calculations between LatLngs """

__all__ = [
    'deg2rad', 'distance_between', 'endpoint', 'heading_between', 'midpoint_between',
    'rad2deg', 'to_heading', 'units_per_latitude_degree', 'units_per_longitude_degree',
    'units_sphere_multiplier',
]

import math
from typing import TYPE_CHECKING, Optional, Union

from geomappable import config
from geomappable._const import (
    EARTH_RADIUS_IN_KMS, EARTH_RADIUS_IN_MILES, EARTH_RADIUS_IN_NMS,
    KMS_PER_LATITUDE_DEGREE, KMS_PER_MILE, MILES_PER_LATITUDE_DEGREE,
    NMS_PER_LATITUDE_DEGREE, NMS_PER_MILE, PI_DIV_RAD,
)
from geomappable._types import Formula, Units
from geomappable.utils.functions import finite_float

if TYPE_CHECKING:
    from geomappable.latlng import LatLng


def deg2rad(degrees: float) -> float:
    return float(degrees) / 180.0 * math.pi


def rad2deg(rad: float) -> float:
    return float(rad) * 180.0 / math.pi


def to_heading(rad: float) -> float:
    """Converts an angle in radians to a compass heading in [0, 360)"""
    return (rad2deg(rad) + 360) % 360


def units_sphere_multiplier(units: Union[Units, str]) -> float:
    """Returns the radius of the earth in the given unit system"""
    units = Units.coerce(units)
    if units is Units.KMS:
        return EARTH_RADIUS_IN_KMS
    if units is Units.NMS:
        return EARTH_RADIUS_IN_NMS
    return EARTH_RADIUS_IN_MILES


def units_per_latitude_degree(units: Union[Units, str]) -> float:
    """Returns the length of one degree of latitude in the given unit system"""
    units = Units.coerce(units)
    if units is Units.KMS:
        return KMS_PER_LATITUDE_DEGREE
    if units is Units.NMS:
        return NMS_PER_LATITUDE_DEGREE
    return MILES_PER_LATITUDE_DEGREE


def units_per_longitude_degree(lat: float, units: Union[Units, str]) -> float:
    """
    Returns the length of one degree of longitude at a given latitude, in the
    given unit system

    Args:
        lat:
            The latitude, in degrees

        units:
            The unit system

    Returns:
        float
    """
    units = Units.coerce(units)
    miles_per_longitude_degree = abs(MILES_PER_LATITUDE_DEGREE * math.cos(lat * PI_DIV_RAD))
    if units is Units.KMS:
        return miles_per_longitude_degree * KMS_PER_MILE
    if units is Units.NMS:
        return miles_per_longitude_degree * NMS_PER_MILE
    return miles_per_longitude_degree


def distance_between(
    start: 'LatLng',
    finish: 'LatLng',
    units: Optional[Union[Units, str]] = None,
    formula: Optional[Union[Formula, str]] = None,
) -> float:
    """
    Calculate the distance between two points.

    Args:
        start:
            The first point

        finish:
            The second point

        units:
            (Default config.default_units) The unit system of the result

        formula:
            (Default config.default_formula) 'sphere' for the great-circle distance,
            'flat' for the flat-earth approximation

    Returns:
        (float) the distance
    """
    from geomappable.latlng import LatLng  # pylint: disable=import-outside-toplevel

    start, finish = LatLng.normalize(start), LatLng.normalize(finish)
    if start == finish:
        return 0.0

    units = Units.coerce(units or config.default_units)
    formula = Formula.coerce(formula or config.default_formula)

    if formula is Formula.FLAT:
        return math.sqrt(
            (units_per_latitude_degree(units) * (start.lat - finish.lat)) ** 2 +
            (units_per_longitude_degree(start.lat, units) * (start.lng - finish.lng)) ** 2
        )

    lat1, lat2 = deg2rad(start.lat), deg2rad(finish.lat)
    var1 = (
        math.sin(lat1) * math.sin(lat2) +
        math.cos(lat1) * math.cos(lat2) * math.cos(deg2rad(finish.lng) - deg2rad(start.lng))
    )
    # Floating point error can push near-identical points outside acos' domain
    return units_sphere_multiplier(units) * math.acos(max(-1.0, min(1.0, var1)))


def heading_between(start: 'LatLng', finish: 'LatLng') -> float:
    """
    Calculate the initial heading in degrees (clockwise from North) from one point
    to another
    """
    from geomappable.latlng import LatLng  # pylint: disable=import-outside-toplevel

    start, finish = LatLng.normalize(start), LatLng.normalize(finish)
    d_lng = deg2rad(finish.lng - start.lng)
    lat1, lat2 = deg2rad(start.lat), deg2rad(finish.lat)

    y_val = math.sin(d_lng) * math.cos(lat2)
    x_val = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    return to_heading(math.atan2(y_val, x_val))


def endpoint(
    start: 'LatLng',
    heading: float,
    distance: float,
    units: Optional[Union[Units, str]] = None,
) -> 'LatLng':
    """
    Give a start location, a heading (in degrees clockwise from North), and a
    distance of travel, returns the finish location.

    Args:
        start:
            The starting location

        heading:
            The heading, in degrees

        distance:
            The amount of movement

        units:
            (Default config.default_units) The unit system of the distance

    Returns:
        (LatLng)
    """
    from geomappable.latlng import LatLng  # pylint: disable=import-outside-toplevel

    start = LatLng.normalize(start)
    radius = units_sphere_multiplier(units or config.default_units)
    lat, lng = deg2rad(start.lat), deg2rad(start.lng)
    heading = deg2rad(finite_float(heading, 'heading'))
    ang_dist = finite_float(distance, 'distance') / radius

    end_lat = math.asin(
        math.sin(lat) * math.cos(ang_dist) +
        math.cos(lat) * math.sin(ang_dist) * math.cos(heading)
    )
    end_lng = lng + math.atan2(
        math.sin(heading) * math.sin(ang_dist) * math.cos(lat),
        math.cos(ang_dist) - math.sin(lat) * math.sin(end_lat)
    )
    return LatLng(rad2deg(end_lat), LatLng.wrap_longitude(rad2deg(end_lng)))


def midpoint_between(
    start: 'LatLng',
    finish: 'LatLng',
    units: Optional[Union[Units, str]] = None,
) -> 'LatLng':
    """Returns the point halfway along the great circle between two points"""
    heading = heading_between(start, finish)
    distance = distance_between(start, finish, units=units, formula=Formula.SPHERE)
    return endpoint(start, heading, distance / 2, units=units)
