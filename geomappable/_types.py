"""Enumerations and small value types shared across geomappable"""

__all__ = ['DistanceRange', 'Formula', 'Units']

from enum import Enum
from typing import NamedTuple, Union


class Units(str, Enum):
    """Unit systems in which distances are expressed"""
    MILES = 'miles'
    KMS = 'kms'
    NMS = 'nms'

    @classmethod
    def coerce(cls, value: Union['Units', str]) -> 'Units':
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown units {value!r}. Options: {[x.value for x in cls]}"
            ) from None


class Formula(str, Enum):
    """Distance formulas: great-circle (sphere) or flat-earth approximation (flat)"""
    SPHERE = 'sphere'
    FLAT = 'flat'

    @classmethod
    def coerce(cls, value: Union['Formula', str]) -> 'Formula':
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown formula {value!r}. Options: {[x.value for x in cls]}"
            ) from None


class DistanceRange(NamedTuple):
    """
    A distance interval, as used by in_range() queries.

    Args:
        low: (float)
            The lower bound, always inclusive

        high: (float)
            The upper bound

        exclude_end: (bool)
            (Default False) If True, the upper bound is exclusive
    """
    low: float
    high: float
    exclude_end: bool = False

    @classmethod
    def normalize(cls, value) -> 'DistanceRange':
        """
        Converts a python range (exclusive end), a 2-tuple (inclusive end) or a
        DistanceRange into a DistanceRange.
        """
        if isinstance(value, DistanceRange):
            return value

        if isinstance(value, range):
            if value.step != 1:
                raise ValueError('Distance ranges must have a step of 1')
            return cls(value.start, value.stop, True)

        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(value[0], value[1])

        raise TypeError(
            f'{value!r} ({type(value).__name__}) cannot be interpreted as a distance range'
        )
