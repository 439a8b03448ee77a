"""
Distance SQL for SQLite.

SQLite lacks most of the math functions the distance formulas need, so load()
registers Python implementations on every connection the engine opens.
"""

__all__ = ['SQLite']

import math
from typing import Dict, Optional

from sqlalchemy import event

from geomappable.adapters._base import AbstractAdapter
from geomappable.utils.functions import sql_number


def _null_safe(func):
    def wrapped(*args):
        if any(x is None for x in args):
            return None
        return func(*args)
    return wrapped


_FUNCTIONS = {
    'acos': (1, _null_safe(math.acos)),
    'cos': (1, _null_safe(math.cos)),
    'sin': (1, _null_safe(math.sin)),
    'sqrt': (1, _null_safe(math.sqrt)),
    'radians': (1, _null_safe(math.radians)),
    'pow': (2, _null_safe(math.pow)),
    'least': (-1, _null_safe(min)),
}


_REGISTERED = 'geomappable_functions'


def register_functions(dbapi_connection, info: Optional[Dict] = None) -> None:
    """
    Registers the math functions on a raw sqlite3 connection. When given the
    pool's info dict for the connection, it is marked as done.
    """
    for name, (num_args, func) in _FUNCTIONS.items():
        dbapi_connection.create_function(name, num_args, func, deterministic=True)
    if info is not None:
        info[_REGISTERED] = True


def _on_connect(dbapi_connection, connection_record):
    register_functions(dbapi_connection, connection_record.info)


def _on_checkout(dbapi_connection, connection_record, connection_proxy):  # pylint: disable=unused-argument
    # Connections pooled before load() ran never saw the connect event
    if not connection_record.info.get(_REGISTERED):
        register_functions(dbapi_connection, connection_record.info)


class SQLite(AbstractAdapter):

    @classmethod
    def load(cls, engine):
        if cls.loaded(engine):
            return

        cls.get_logger().debug('Registering distance functions on %r', engine)
        for identifier, listener in (('connect', _on_connect), ('checkout', _on_checkout)):
            if not event.contains(engine, identifier, listener):
                event.listen(engine, identifier, listener)

        super().load(engine)

    @classmethod
    def prepare(cls, connection):
        # Checked out before load() ran, e.g. by a session already in a transaction
        pooled = connection.connection
        if not pooled.info.get(_REGISTERED):
            register_functions(pooled.dbapi_connection, pooled.info)

    def _null_guard(self, sql: str) -> str:
        return (
            f'(CASE WHEN {self.qualified_lat_column_name} IS NULL OR '
            f'{self.qualified_lng_column_name} IS NULL THEN NULL ELSE {sql} END)'
        )

    def sphere_distance_sql(self, lat, lng, multiplier):
        return self._null_guard(
            f'(ACOS(least(1,{self._sphere_terms(lat, lng)}))*{sql_number(multiplier)})'
        )

    def flat_distance_sql(self, origin, lat_degree_units, lng_degree_units):
        return self._null_guard(self._flat_terms(origin, lat_degree_units, lng_degree_units))
