"""Module for miscellaneous multi-use functions"""

__all__ = ['finite_float', 'sql_number']

import math
from typing import Union


def finite_float(value: Union[float, int, str], name: str = 'value') -> float:
    """
    Converts a value to a float, rejecting anything which isn't a finite number.

    Args:
        value:
            The number (or numeric string) to convert

        name:
            (Default 'value') What the value is, for the error message

    Raises:
        ValueError: if the value is not a number, or is infinite or NaN

    Returns:
        float
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f'{name} {value!r} is not a valid number') from None

    if not math.isfinite(number):
        raise ValueError(f'{name} must be finite, not {value!r}')

    return number


def sql_number(value: Union[float, int, str]) -> str:
    """
    Renders a number as a SQL numeric literal.

    Values are always passed through float(), so nothing other than a number
    can end up in generated SQL.

    Args:
        value:
            The number (or numeric string) to render

    Returns:
        str
    """
    number = finite_float(value)
    if number.is_integer() and abs(number) < 1e15:
        return str(int(number))

    return repr(number)
