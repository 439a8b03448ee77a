"""Exceptions raised by geomappable"""

__all__ = [
    'GeocodeError', 'GeocodeValidationError', 'ThroughAssociationError',
    'UnsupportedAdapter',
]


class UnsupportedAdapter(Exception):
    """Raised when no distance SQL adapter exists for a database dialect"""


class ThroughAssociationError(ValueError):
    """Raised when an association named in a `through` path cannot be found"""


class GeocodeError(Exception):
    """Raised when an address or IP address cannot be geocoded"""


class GeocodeValidationError(GeocodeError):
    """Raised when auto-geocoding fails while inserting a record"""

    def __init__(self, field: str, message: str):
        super().__init__(f'{field} {message}')
        self.field = field
        self.message = message
