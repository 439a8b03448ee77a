"""
Library-wide defaults for geomappable.

Models configured with acts_as_mappable() fall back on these values for any
option they don't set themselves.
"""

__all__ = [
    'default_formula', 'default_units', 'geocoder',
    'reset_defaults', 'set_default_formula', 'set_default_units', 'set_geocoder',
]

from typing import Callable, Optional, Union

from geomappable._types import Formula, Units

# These declare the defaults in use (miles, sphere)
default_units: Units = Units.MILES
default_formula: Formula = Formula.SPHERE

# A callable accepting an address (or IP address) string and returning a GeoLoc
geocoder: Optional[Callable] = None


def set_default_units(units: Union[Units, str]):
    """
    Set the global default unit system.

    Args:
        units: 'miles', 'kms' or 'nms'
    """
    global default_units
    default_units = Units.coerce(units)


def set_default_formula(formula: Union[Formula, str]):
    """
    Set the global default distance formula.

    Args:
        formula: 'sphere' or 'flat'
    """
    global default_formula
    default_formula = Formula.coerce(formula)


def set_geocoder(func: Optional[Callable]):
    """
    Set the geocoder used to resolve addresses and IP addresses.

    The geocoder is any callable which accepts a string and returns a
    geomappable.geocoding.GeoLoc. Pass None to remove it.
    """
    global geocoder
    if func is not None and not callable(func):
        raise TypeError(f'Geocoder must be callable, not {type(func).__name__}')

    geocoder = func


def reset_defaults():
    """Restores the out-of-the-box defaults"""
    global default_units, default_formula, geocoder
    default_units = Units.MILES
    default_formula = Formula.SPHERE
    geocoder = None
