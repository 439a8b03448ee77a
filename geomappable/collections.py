"""
In-memory distance calculations over many points at once
"""

__all__ = ['distances_from', 'sort_by_distance_from']

from typing import Any, Iterable, List, Optional, Union

import numpy as np

from geomappable import calc, config
from geomappable._types import Formula, Units
from geomappable.latlng import LatLng


def _units_of(item: Any) -> Optional[Units]:
    options = getattr(type(item), 'mappable_options', None)
    return options().units if options else None


def distances_from(
    points: Iterable[Any],
    origin: Any,
    units: Optional[Union[Units, str]] = None,
    formula: Optional[Union[Formula, str]] = None,
) -> np.ndarray:
    """
    Calculates the distance from an origin to each of many points.

    Args:
        points:
            Point-like values (anything accepted by LatLng.normalize())

        origin:
            The point distances are measured from

        units:
            (Default config.default_units) The unit system of the result

        formula:
            (Default config.default_formula) 'sphere' or 'flat'

    Returns:
        A numpy array of distances, in the order of the points
    """
    origin = LatLng.normalize(origin)
    units = Units.coerce(units or config.default_units)
    formula = Formula.coerce(formula or config.default_formula)

    coords = np.array([LatLng.normalize(x).to_float() for x in points], dtype=float)
    if coords.size == 0:
        return np.empty(0)

    lats, lngs = coords[:, 0], coords[:, 1]
    if formula is Formula.FLAT:
        # Scaled at the origin's latitude, as in the flat distance SQL
        return np.sqrt(
            (calc.units_per_latitude_degree(units) * (origin.lat - lats)) ** 2 +
            (calc.units_per_longitude_degree(origin.lat, units) * (origin.lng - lngs)) ** 2
        )

    lat1, lng1 = np.radians(origin.lat), np.radians(origin.lng)
    lat2, lng2 = np.radians(lats), np.radians(lngs)
    var1 = np.sin(lat1) * np.sin(lat2) + np.cos(lat1) * np.cos(lat2) * np.cos(lng2 - lng1)
    return calc.units_sphere_multiplier(units) * np.arccos(np.clip(var1, -1.0, 1.0))


def sort_by_distance_from(
    items: Iterable[Any],
    origin: Any,
    units: Optional[Union[Units, str]] = None,
    formula: Optional[Union[Formula, str]] = None,
    distance_attribute_name: str = 'distance',
) -> List[Any]:
    """
    Sorts point-like objects (e.g. Mappable records) by their distance from an
    origin, setting that distance on each of them.

    Args:
        items:
            The objects to sort

        origin:
            The point distances are measured from

        units:
            (Default: the first item's model units, else config.default_units)

        formula:
            (Default config.default_formula) 'sphere' or 'flat'

        distance_attribute_name:
            (Default 'distance') The attribute to store each distance in

    Returns:
        A new list, nearest first
    """
    items = list(items)
    if not items:
        return []

    units = units or _units_of(items[0])
    distances = distances_from(items, origin, units=units, formula=formula)
    for item, distance in zip(items, distances):
        setattr(item, distance_attribute_name, float(distance))

    return [items[i] for i in np.argsort(distances, kind='stable')]
