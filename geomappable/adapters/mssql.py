"""Distance SQL for Microsoft SQL Server"""

__all__ = ['MSSQL']

from geomappable.adapters._base import AbstractAdapter
from geomappable.utils.functions import sql_number


class MSSQL(AbstractAdapter):

    def sphere_distance_sql(self, lat, lng, multiplier):
        # SQL Server has no LEAST(); rounding keeps the ACOS argument within [-1, 1]
        return f'(ACOS(ROUND({self._sphere_terms(lat, lng)},4))*{sql_number(multiplier)})'

    def flat_distance_sql(self, origin, lat_degree_units, lng_degree_units):
        return self._flat_terms(origin, lat_degree_units, lng_degree_units, power='POWER')
