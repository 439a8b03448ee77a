"""Base class for database-specific distance SQL"""

__all__ = ['AbstractAdapter']

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
import weakref

from geomappable.utils.functions import sql_number
from geomappable.utils.mixins import LoggingMixin

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from geomappable.latlng import LatLng


class AbstractAdapter(LoggingMixin, ABC):
    """
    Renders distance calculations as SQL for a specific database.

    Args:
        qualified_lat_column_name:
            The table-qualified SQL of the latitude column

        qualified_lng_column_name:
            The table-qualified SQL of the longitude column
    """

    _loaded_engines: 'weakref.WeakSet' = weakref.WeakSet()

    def __init__(self, qualified_lat_column_name: str, qualified_lng_column_name: str):
        super().__init__()
        self.qualified_lat_column_name = qualified_lat_column_name
        self.qualified_lng_column_name = qualified_lng_column_name

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._loaded_engines = weakref.WeakSet()

    @classmethod
    def loaded(cls, engine: 'Engine') -> bool:
        """Whether load() has already run against this engine"""
        return engine in cls._loaded_engines

    @classmethod
    def load(cls, engine: 'Engine') -> None:
        """
        Prepares an engine for distance queries. Most databases need nothing;
        adapters override this where they do.
        """
        cls._loaded_engines.add(engine)

    @classmethod
    def prepare(cls, connection: 'Connection') -> None:
        """
        Prepares a connection which was already checked out of the pool when
        load() ran. Most databases need nothing.
        """

    @abstractmethod
    def sphere_distance_sql(self, lat: float, lng: float, multiplier: float) -> str:
        """
        Returns the great-circle distance SQL.

        Args:
            lat:
                The origin latitude, in radians

            lng:
                The origin longitude, in radians

            multiplier:
                The radius of the earth in the desired unit system
        """

    @abstractmethod
    def flat_distance_sql(
        self, origin: 'LatLng', lat_degree_units: float, lng_degree_units: float
    ) -> str:
        """
        Returns the flat-earth distance SQL.

        Args:
            origin:
                The origin, in degrees

            lat_degree_units:
                The length of a degree of latitude in the desired unit system

            lng_degree_units:
                The length of a degree of longitude at the origin's latitude
        """

    def _sphere_terms(self, lat: float, lng: float) -> str:
        """The argument to ACOS shared by every spherical implementation"""
        lat, lng = sql_number(lat), sql_number(lng)
        lat_col, lng_col = self.qualified_lat_column_name, self.qualified_lng_column_name
        return (
            f'COS({lat})*COS({lng})*COS(RADIANS({lat_col}))*COS(RADIANS({lng_col}))+'
            f'COS({lat})*SIN({lng})*COS(RADIANS({lat_col}))*SIN(RADIANS({lng_col}))+'
            f'SIN({lat})*SIN(RADIANS({lat_col}))'
        )

    def _flat_terms(
        self,
        origin: 'LatLng',
        lat_degree_units: float,
        lng_degree_units: float,
        power: str = 'POW',
    ) -> str:
        lat_col, lng_col = self.qualified_lat_column_name, self.qualified_lng_column_name
        return (
            f'SQRT({power}({sql_number(lat_degree_units)}*({sql_number(origin.lat)}-{lat_col}),2)+'
            f'{power}({sql_number(lng_degree_units)}*({sql_number(origin.lng)}-{lng_col}),2))'
        )
