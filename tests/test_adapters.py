import pytest
from sqlalchemy import create_engine, text

from geomappable import LatLng, UnsupportedAdapter
from geomappable.adapters import AbstractAdapter, load_adapter
from geomappable.adapters.mssql import MSSQL
from geomappable.adapters.mysql import MySQL
from geomappable.adapters.postgresql import PostgreSQL
from geomappable.adapters.sqlite import SQLite


SPHERE_TERMS = (
    'COS(0.5)*COS(1.5)*COS(RADIANS(locations.lat))*COS(RADIANS(locations.lng))+'
    'COS(0.5)*SIN(1.5)*COS(RADIANS(locations.lat))*SIN(RADIANS(locations.lng))+'
    'SIN(0.5)*SIN(RADIANS(locations.lat))'
)


def test_load_adapter():
    assert load_adapter('mysql') is MySQL
    assert load_adapter('mariadb') is MySQL
    assert load_adapter('postgresql') is PostgreSQL
    assert load_adapter('sqlite') is SQLite
    assert load_adapter('mssql') is MSSQL
    assert load_adapter('PostgreSQL') is PostgreSQL


def test_load_adapter_unsupported():
    with pytest.raises(UnsupportedAdapter, match='`oracle` is not a supported adapter'):
        load_adapter('oracle')


def test_mysql_sql():
    adapter = MySQL('locations.lat', 'locations.lng')
    assert adapter.sphere_distance_sql(0.5, 1.5, 3963.19) == (
        f'(ACOS(least(1,{SPHERE_TERMS}))*3963.19)'
    )
    assert adapter.flat_distance_sql(LatLng(10, 20), 69.1, 50) == (
        'SQRT(POW(69.1*(10-locations.lat),2)+POW(50*(20-locations.lng),2))'
    )


def test_postgresql_sql():
    adapter = PostgreSQL('locations.lat', 'locations.lng')
    assert adapter.sphere_distance_sql(0.5, 1.5, 6371) == (
        f'(ACOS(least(1,{SPHERE_TERMS}))*6371)'
    )
    assert adapter.flat_distance_sql(LatLng(10.5, -20), 69.1, 50) == (
        'SQRT(POW(69.1*(10.5-locations.lat),2)+POW(50*(-20-locations.lng),2))'
    )


def test_mssql_sql():
    adapter = MSSQL('locations.lat', 'locations.lng')
    assert adapter.sphere_distance_sql(0.5, 1.5, 3963.19) == (
        f'(ACOS(ROUND({SPHERE_TERMS},4))*3963.19)'
    )
    assert adapter.flat_distance_sql(LatLng(10, 20), 69.1, 50) == (
        'SQRT(POWER(69.1*(10-locations.lat),2)+POWER(50*(20-locations.lng),2))'
    )


def test_sqlite_sql():
    adapter = SQLite('locations.lat', 'locations.lng')
    null_guard = (
        'CASE WHEN locations.lat IS NULL OR locations.lng IS NULL THEN NULL ELSE '
    )
    assert adapter.sphere_distance_sql(0.5, 1.5, 3963.19) == (
        f'({null_guard}(ACOS(least(1,{SPHERE_TERMS}))*3963.19) END)'
    )
    assert adapter.flat_distance_sql(LatLng(10, 20), 69.1, 50) == (
        f'({null_guard}SQRT(POW(69.1*(10-locations.lat),2)+POW(50*(20-locations.lng),2)) END)'
    )


def test_adapter_rejects_non_numbers():
    adapter = MySQL('locations.lat', 'locations.lng')
    with pytest.raises(ValueError):
        adapter.sphere_distance_sql('1; DROP TABLE locations', 0, 1)

    with pytest.raises(ValueError):
        adapter.sphere_distance_sql(float('nan'), 0, 1)


def test_sqlite_load():
    engine = create_engine('sqlite://')
    assert not SQLite.loaded(engine)

    SQLite.load(engine)
    assert SQLite.loaded(engine)

    with engine.connect() as conn:
        assert conn.execute(text('SELECT least(3, 1, 2)')).scalar() == 1
        assert conn.execute(text('SELECT pow(2, 3)')).scalar() == 8
        assert conn.execute(text('SELECT radians(180)')).scalar() == pytest.approx(3.14159265)
        assert conn.execute(text('SELECT acos(NULL)')).scalar() is None

    # Loading again is a no-op
    SQLite.load(engine)
    assert SQLite.loaded(engine)


def test_sqlite_load_registers_on_new_connections():
    engine = create_engine('sqlite:///:memory:')
    SQLite.load(engine)
    engine.dispose()

    with engine.connect() as conn:
        assert conn.execute(text('SELECT sqrt(16)')).scalar() == 4


def test_sqlite_prepare_checked_out_connection(tmp_path):
    engine = create_engine(f'sqlite:///{tmp_path / "geo.sqlite"}')
    with engine.connect() as conn:
        SQLite.load(engine)
        SQLite.prepare(conn)
        assert conn.execute(text('SELECT cos(0)')).scalar() == 1

        # Already registered
        SQLite.prepare(conn)

    engine.dispose()


def test_sqlite_load_covers_pooled_connections(tmp_path):
    engine = create_engine(f'sqlite:///{tmp_path / "geo.sqlite"}')
    connections = [engine.connect() for _ in range(2)]
    for conn in connections:
        conn.close()

    SQLite.load(engine)
    connections = [engine.connect() for _ in range(2)]
    for conn in connections:
        assert conn.execute(text('SELECT least(2, 1)')).scalar() == 1
        conn.close()

    engine.dispose()


def test_adapters_must_implement_distance_sql():
    class Incomplete(AbstractAdapter):
        def sphere_distance_sql(self, lat, lng, multiplier):
            return ''

    with pytest.raises(TypeError):
        Incomplete('locations.lat', 'locations.lng')


def test_loaded_is_per_adapter():
    engine = create_engine('sqlite://')
    MySQL.load(engine)
    assert MySQL.loaded(engine)
    assert not PostgreSQL.loaded(engine)
