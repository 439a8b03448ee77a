import pytest
from sqlalchemy import select
from sqlalchemy.dialects import mssql, mysql, postgresql, sqlite

from geomappable import DistanceFunction, LatLng
from geomappable.adapters.mysql import MySQL
from geomappable.expressions import DistanceText, render_distance_sql

from tests.functions import ORIGIN
from tests.models import CustomLocation, Location


def compile_sql(clause, dialect) -> str:
    return str(clause.compile(dialect=dialect))


def test_distance_function_init():
    func = Location.distance_expression(ORIGIN)
    assert isinstance(func, DistanceFunction)
    assert func.origin == ORIGIN
    assert func.units.value == 'miles'
    assert func.formula.value == 'sphere'
    assert repr(func) == '<DistanceFunction sphere from (37.792, -122.393) in miles>'

    func = Location.distance_expression('1,2', units='kms', formula='flat')
    assert func.origin == LatLng(1, 2)
    assert func.units.value == 'kms'
    assert func.formula.value == 'flat'

    with pytest.raises(ValueError):
        Location.distance_expression(ORIGIN, units='furlongs')


def test_distance_function_compiles_per_dialect():
    stmt = select(Location.distance_expression(ORIGIN).label('distance'))

    sql = compile_sql(stmt, postgresql.dialect())
    assert 'ACOS(least(1,' in sql
    assert 'RADIANS(locations.lat)' in sql
    assert sql.endswith('FROM locations')

    sql = compile_sql(stmt, mysql.dialect())
    assert 'ACOS(least(1,' in sql

    sql = compile_sql(stmt, mssql.dialect())
    assert 'ACOS(ROUND(' in sql

    sql = compile_sql(stmt, sqlite.dialect())
    assert 'CASE WHEN locations.lat IS NULL OR locations.lng IS NULL' in sql

    # The generic string compiler renders as MySQL
    assert 'ACOS(least(1,' in str(stmt)


def test_distance_function_custom_columns():
    stmt = select(CustomLocation.distance_expression(ORIGIN).label('dist'))
    sql = compile_sql(stmt, postgresql.dialect())
    assert 'SQRT(POW(' in sql
    assert 'custom_locations.latitude' in sql
    assert 'custom_locations.longitude' in sql
    assert 'custom_locations.lat)' not in sql


def test_render_distance_sql():
    adapter = MySQL('locations.lat', 'locations.lng')
    assert render_distance_sql(adapter, LatLng(0, 0), 'miles', 'flat') == (
        'SQRT(POW(69.1*(0-locations.lat),2)+POW(69.1*(0-locations.lng),2))'
    )
    assert render_distance_sql(adapter, LatLng(0, 0), 'kms', 'sphere') == (
        adapter.sphere_distance_sql(0, 0, 3963.19 * 1.609)
    )


def test_distance_text():
    distance = Location.distance_expression(ORIGIN)
    clause = DistanceText('distance > 1 AND distance_limit < 5', distance)
    assert repr(clause) == "<DistanceText 'distance > 1 AND distance_limit < 5'>"

    sql = compile_sql(clause, sqlite.dialect())
    assert sql.startswith('(CASE WHEN')
    assert sql.endswith('END) > 1 AND distance_limit < 5')


def test_distance_text_custom_name():
    distance = CustomLocation.distance_expression(ORIGIN)
    sql = compile_sql(DistanceText('dist desc', distance, 'dist'), postgresql.dialect())
    assert sql.startswith('SQRT(POW(')
    assert sql.endswith(') desc')


def test_bound_conditions():
    sql = compile_sql(Location.bound_conditions(((0, 0), (1, 1))), sqlite.dialect())
    assert sql == (
        'locations.lat > ? AND locations.lat < ? AND locations.lng > ? AND locations.lng < ?'
    )


def test_bound_conditions_across_meridian():
    compiled = Location.bound_conditions(((-1, 179), (1, -179))).compile(
        dialect=sqlite.dialect()
    )
    assert str(compiled) == (
        'locations.lat > ? AND locations.lat < ? AND (locations.lng < ? OR locations.lng > ?)'
    )
    assert sorted(compiled.params.values()) == [-179, -1, 1, 179]


def test_distance_conditions():
    distance = Location.distance_expression(ORIGIN)

    sql = compile_sql(Location.distance_conditions(distance, within=5), sqlite.dialect())
    assert sql.endswith('END) <= ?')

    sql = compile_sql(Location.distance_conditions(distance, beyond=5), sqlite.dialect())
    assert sql.endswith('END) > ?')

    # Exclusive end
    sql = compile_sql(
        Location.distance_conditions(distance, distance_range=range(1, 5)), sqlite.dialect()
    )
    assert '>= ?' in sql
    assert sql.endswith('END) < ?')

    # Inclusive end
    sql = compile_sql(
        Location.distance_conditions(distance, distance_range=(1, 5)), sqlite.dialect()
    )
    assert '>= ?' in sql
    assert sql.endswith('END) <= ?')

    assert Location.distance_conditions(distance) is None
