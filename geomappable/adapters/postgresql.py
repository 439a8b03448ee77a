"""Distance SQL for PostgreSQL"""

__all__ = ['PostgreSQL']

from geomappable.adapters._base import AbstractAdapter
from geomappable.utils.functions import sql_number


class PostgreSQL(AbstractAdapter):

    def sphere_distance_sql(self, lat, lng, multiplier):
        return f'(ACOS(least(1,{self._sphere_terms(lat, lng)}))*{sql_number(multiplier)})'

    def flat_distance_sql(self, origin, lat_degree_units, lng_degree_units):
        return self._flat_terms(origin, lat_degree_units, lng_degree_units)
