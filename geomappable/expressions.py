"""
SQLAlchemy constructs which carry distance calculations into a statement.

The SQL of a DistanceFunction depends on the database, so it is rendered at
compile time by the adapter matching the compiling dialect.
"""

__all__ = ['DistanceFunction', 'DistanceText', 'render_distance_sql']

import re
from typing import Dict

from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import ColumnElement
from sqlalchemy.types import Float

from geomappable import calc
from geomappable._types import Formula, Units
from geomappable.adapters import AbstractAdapter, load_adapter
from geomappable.latlng import LatLng


def render_distance_sql(
    adapter: AbstractAdapter, origin: LatLng, units: Units, formula: Formula
) -> str:
    """
    Renders the distance from an origin using an adapter.

    Args:
        adapter:
            The adapter of the target database

        origin:
            The point distances are measured from

        units:
            The unit system of the distance

        formula:
            Formula.SPHERE or Formula.FLAT

    Returns:
        str
    """
    if formula is Formula.FLAT:
        return adapter.flat_distance_sql(
            origin,
            calc.units_per_latitude_degree(units),
            calc.units_per_longitude_degree(origin.lat, units),
        )

    return adapter.sphere_distance_sql(
        calc.deg2rad(origin.lat),
        calc.deg2rad(origin.lng),
        calc.units_sphere_multiplier(units),
    )


class DistanceFunction(ColumnElement):  # pylint: disable=too-many-ancestors
    """
    The distance between an origin and the coordinates stored in two columns.

    Behaves like any other numeric column expression: it can be compared,
    labeled and ordered by.

    Args:
        lat_column:
            The latitude column

        lng_column:
            The longitude column

        origin:
            The point distances are measured from

        units:
            The unit system of the distance

        formula:
            Formula.SPHERE or Formula.FLAT
    """

    inherit_cache = False
    type = Float()

    def __init__(self, lat_column, lng_column, origin: LatLng, units: Units, formula: Formula):
        self.lat_column = lat_column
        self.lng_column = lng_column
        self.origin = origin
        self.units = Units.coerce(units)
        self.formula = Formula.coerce(formula)

    def __repr__(self):
        return (
            f'<DistanceFunction {self.formula.value} from {self.origin.to_float()} '
            f'in {self.units.value}>'
        )


class DistanceText(ColumnElement):  # pylint: disable=too-many-ancestors
    """
    A raw SQL fragment in which every whole-word occurrence of the distance column
    name is replaced by a distance expression.

    Args:
        sql:
            The SQL fragment, e.g. 'distance < 5'

        distance:
            The expression to substitute

        column_name:
            (Default 'distance') The name to substitute
    """

    inherit_cache = False

    def __init__(self, sql: str, distance: ColumnElement, column_name: str = 'distance'):
        self.sql = sql
        self.distance = distance
        self.pattern = re.compile(rf'\b{re.escape(column_name)}\b')

    def __repr__(self):
        return f'<DistanceText {self.sql!r}>'


def _without_result_map(kw: Dict) -> Dict:
    return {k: v for k, v in kw.items() if k != 'add_to_result_map'}


@compiles(DistanceFunction)
def _compile_distance_function(element, compiler, **kw):
    kw = _without_result_map(kw)
    adapter = load_adapter(compiler.dialect.name)(
        compiler.process(element.lat_column, **kw),
        compiler.process(element.lng_column, **kw),
    )
    return render_distance_sql(adapter, element.origin, element.units, element.formula)


@compiles(DistanceText)
def _compile_distance_text(element, compiler, **kw):
    distance_sql = compiler.process(element.distance, **_without_result_map(kw))
    parts = element.pattern.split(element.sql)
    return distance_sql.join(compiler.post_process_text(part) for part in parts)
