"""
A SQLAlchemy select statement which knows how far each row is from an origin
"""

__all__ = ['GeoScope']

from typing import TYPE_CHECKING, Any, List, Optional

from sqlalchemy import select, text
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select
from sqlalchemy.sql.expression import ColumnElement

from geomappable.expressions import DistanceText
from geomappable.utils.mixins import LoggingMixin

if TYPE_CHECKING:
    from geomappable.mappable import Mappable


class GeoScope(LoggingMixin):
    """
    Wraps a select statement against a Mappable model.

    Once an origin has been given (see Mappable.geo_scope()), the scope carries a
    distance expression: it is selected alongside the model under the model's
    distance column name, and any raw SQL string passed to where() or order_by()
    may refer to that name, e.g.

        Location.within(5, origin=home).where('distance > 1').order_by('distance')

    Scopes are immutable; every method returns a new scope.

    Args:
        model:
            The Mappable model class

        statement:
            (Optional) The select statement to build on. Default select(model)

        distance:
            (Optional) The distance expression
    """

    def __init__(
        self,
        model: type,
        statement: Optional[Select] = None,
        distance: Optional[ColumnElement] = None,
        through_joined: bool = False,
    ):
        super().__init__()
        self.model = model
        self.statement = statement if statement is not None else select(model)
        self.distance = distance
        self.through_joined = through_joined

    def __repr__(self):
        return f'<GeoScope {self.model.__name__}{" with distance" if self.has_distance else ""}>'

    @property
    def has_distance(self) -> bool:
        return self.distance is not None

    @property
    def distance_column_name(self) -> str:
        return self.model.mappable_options().distance_column_name

    def _clone(self, statement: Select, distance: Optional[ColumnElement] = None) -> 'GeoScope':
        return GeoScope(
            self.model,
            statement,
            distance if distance is not None else self.distance,
            self.through_joined,
        )

    def _substitute_distance(self, clause: Any) -> Any:
        """Turns raw SQL strings into clauses, replacing the distance column name"""
        if not isinstance(clause, str):
            return clause

        if self.distance is None:
            return text(clause)

        return DistanceText(clause, self.distance, self.distance_column_name)

    def with_distance(self, distance: ColumnElement) -> 'GeoScope':
        """
        Returns a scope selecting the given distance expression alongside the model.

        Args:
            distance:
                The distance expression, e.g. from Mappable.distance_expression()
        """
        label = distance.label(self.distance_column_name)
        if self.distance is None:
            statement = self.statement.add_columns(label)
        else:
            # Replaces the previously selected distance
            statement = self.statement.with_only_columns(
                self.model, label, maintain_column_froms=True
            )
        return self._clone(statement, distance)

    def where(self, *clauses) -> 'GeoScope':
        """Adds WHERE criteria. Raw SQL strings may refer to the distance column name."""
        if not clauses:
            return self
        return self._clone(self.statement.where(*map(self._substitute_distance, clauses)))

    filter = where

    def order_by(self, *clauses) -> 'GeoScope':
        """Adds ORDER BY criteria. Raw SQL strings may refer to the distance column name."""
        if not clauses:
            return self
        return self._clone(self.statement.order_by(*map(self._substitute_distance, clauses)))

    def limit(self, limit: Optional[int]) -> 'GeoScope':
        return self._clone(self.statement.limit(limit))

    def offset(self, offset: Optional[int]) -> 'GeoScope':
        return self._clone(self.statement.offset(offset))

    def join(self, target, *args, **kwargs) -> 'GeoScope':
        return self._clone(self.statement.join(target, *args, **kwargs))

    def options(self, *options) -> 'GeoScope':
        return self._clone(self.statement.options(*options))

    # Geo operations, scoped to this statement
    def geo_scope(self, **kwargs) -> 'GeoScope':
        return self.model.geo_scope(self, **kwargs)

    def within(self, distance: float, **kwargs) -> 'GeoScope':
        return self.model.within(distance, scope=self, **kwargs)

    inside = within

    def beyond(self, distance: float, **kwargs) -> 'GeoScope':
        return self.model.beyond(distance, scope=self, **kwargs)

    outside = beyond

    def in_range(self, distance_range, **kwargs) -> 'GeoScope':
        return self.model.in_range(distance_range, scope=self, **kwargs)

    def in_bounds(self, bounds, **kwargs) -> 'GeoScope':
        return self.model.in_bounds(bounds, scope=self, **kwargs)

    def closest(self, **kwargs) -> 'GeoScope':
        return self.model.closest(scope=self, **kwargs)

    nearest = closest

    def farthest(self, **kwargs) -> 'GeoScope':
        return self.model.farthest(scope=self, **kwargs)

    # Execution
    def all(self, session: Session) -> List['Mappable']:
        """
        Executes the statement and returns the model instances. When the scope
        has a distance, it is set on each instance under the distance column name.

        Args:
            session:
                The session to execute against

        Returns:
            List of model instances
        """
        self.model.adapter(session)
        result = session.execute(self.statement)
        if self.model.mappable_through_path():
            result = result.unique()

        if self.distance is None:
            return list(result.scalars())

        name = self.distance_column_name
        instances = []
        for row in result:
            instance, distance = row[0], row[-1]
            setattr(instance, name, distance)
            instances.append(instance)

        self.logger.debug('Loaded %d %s records', len(instances), self.model.__name__)
        return instances

    def first(self, session: Session) -> Optional['Mappable']:
        """Executes the statement with LIMIT 1 and returns the instance, or None"""
        res = self.limit(1).all(session)
        return res[0] if res else None
