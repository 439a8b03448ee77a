
from geomappable._version import __version__  # noqa: F401
from geomappable.utils.logging import LOGGER
from geomappable._types import DistanceRange, Formula, Units
from geomappable.exceptions import (
    GeocodeError, GeocodeValidationError, ThroughAssociationError, UnsupportedAdapter
)
from geomappable.latlng import LatLng
from geomappable.bounds import Bounds
from geomappable.geocoding import GeoLoc
from geomappable.expressions import DistanceFunction
from geomappable.scope import GeoScope
from geomappable.mappable import Mappable, MappableConfig, acts_as_mappable
from geomappable.collections import distances_from, sort_by_distance_from


__all__ = [
    'Bounds',
    'DistanceFunction',
    'DistanceRange',
    'Formula',
    'GeoLoc',
    'GeoScope',
    'GeocodeError',
    'GeocodeValidationError',
    'LatLng',
    'Mappable',
    'MappableConfig',
    'ThroughAssociationError',
    'Units',
    'UnsupportedAdapter',
    'acts_as_mappable',
    'distances_from',
    'sort_by_distance_from',
    'LOGGER',
]
