"""
Geospatial querying for SQLAlchemy models.

To use, mix Mappable into a declarative model which stores its coordinates in
two float columns, and optionally configure it with acts_as_mappable():

    @acts_as_mappable(default_units='kms', lat_column_name='latitude',
                      lng_column_name='longitude')
    class Store(Mappable, Base):
        __tablename__ = 'stores'
        ...

    stmt = Store.within(5, origin=(51.5, -0.12)).order_by('distance')
"""

__all__ = ['Mappable', 'MappableConfig', 'acts_as_mappable', 'end_of_reflection_chain']

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import and_, event, inspect, or_
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import RelationshipProperty, Session, contains_eager
from sqlalchemy.sql.expression import ColumnElement

from geomappable import config
from geomappable._types import DistanceRange, Formula, Units
from geomappable.adapters import AbstractAdapter, load_adapter
from geomappable.bounds import Bounds
from geomappable.exceptions import GeocodeValidationError, ThroughAssociationError
from geomappable.expressions import DistanceFunction, render_distance_sql
from geomappable.geocoding import geocode_ip_address, is_ip_address, lookup
from geomappable.latlng import LatLng
from geomappable.scope import GeoScope
from geomappable.utils.functions import finite_float
from geomappable.utils.logging import warn_once


@dataclass
class MappableConfig:
    """
    The options of a Mappable model.

    Args:
        distance_column_name:
            (Default 'distance') The name under which distances are selected,
            and which raw SQL passed to GeoScope.where()/order_by() may refer to

        default_units:
            (Default config.default_units) The unit system of distances

        default_formula:
            (Default config.default_formula) The distance formula

        lat_column_name:
            (Default 'lat') The latitude column

        lng_column_name:
            (Default 'lng') The longitude column

        through:
            (Optional) An association path to the model which holds the coordinates,
            as a relationship name, a nested dict ({'company': 'location'}) or a
            sequence of names

        auto_geocode_field:
            (Optional) The address attribute to geocode when a record is inserted

        auto_geocode_error_message:
            (Default 'could not locate address') The message recorded when
            auto-geocoding fails
    """
    distance_column_name: str = 'distance'
    default_units: Optional[Units] = None
    default_formula: Optional[Formula] = None
    lat_column_name: str = 'lat'
    lng_column_name: str = 'lng'
    through: Any = None
    auto_geocode_field: Optional[str] = None
    auto_geocode_error_message: str = 'could not locate address'

    def __post_init__(self):
        if self.default_units is not None:
            self.default_units = Units.coerce(self.default_units)
        if self.default_formula is not None:
            self.default_formula = Formula.coerce(self.default_formula)

    @property
    def units(self) -> Units:
        return self.default_units or config.default_units

    @property
    def formula(self) -> Formula:
        return self.default_formula or config.default_formula


def _through_path(through: Any) -> List[str]:
    """Flattens 'a', {'a': 'b'}, {'a': {'b': 'c'}} or ('a', 'b') into a list of names"""
    path = []
    while through:
        if isinstance(through, dict):
            association, through = next(iter(through.items()))
        elif isinstance(through, (list, tuple)):
            association, through = through[0], (through[1:] or None)
        else:
            association, through = through, None
        path.append(association)

    return path


def _reflection_chain(through: Any, klass: type) -> List[RelationshipProperty]:
    chain = []
    for association in _through_path(through):
        reflection = inspect(klass).relationships.get(association)
        if reflection is None:
            raise ThroughAssociationError(
                f'You gave {association} in through, but it could not be found '
                f'on {klass.__name__}.'
            )
        chain.append(reflection)
        klass = reflection.mapper.class_

    return chain


def end_of_reflection_chain(through: Any, klass: type) -> Optional[RelationshipProperty]:
    """
    Follows an association path from a model class.

    Args:
        through:
            The association path, e.g. 'location' or {'company': 'location'}

        klass:
            The model class the path starts from

    Returns:
        The relationship at the end of the path, or None if the path is empty

    Raises:
        ThroughAssociationError: if an association in the path doesn't exist
    """
    chain = _reflection_chain(through, klass)
    return chain[-1] if chain else None


def _engine_for(bind: Union[Engine, Connection]) -> Engine:
    if isinstance(bind, Connection):
        return bind.engine
    if isinstance(bind, Engine):
        return bind

    raise TypeError(f'Expected an Engine, Connection or Session, not {type(bind).__name__}')


class Mappable:
    """
    Mixin for declarative models which store a latitude and longitude.

    Adds classmethods which build GeoScopes (within, beyond, in_range, in_bounds,
    closest, farthest) and instance methods for distances between records.
    """

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @classmethod
    def mappable_config(cls) -> MappableConfig:
        """The options this class was configured with"""
        return getattr(cls, '__mappable__', None) or MappableConfig()

    @classmethod
    def mappable_through_path(cls) -> List[RelationshipProperty]:
        """The relationships leading to the class which holds the coordinates"""
        return _reflection_chain(cls.mappable_config().through, cls)

    @classmethod
    def mappable_target(cls) -> type:
        """The class holding the coordinates: this class, or the end of its through path"""
        reflection = end_of_reflection_chain(cls.mappable_config().through, cls)
        return reflection.mapper.class_ if reflection is not None else cls

    @classmethod
    def mappable_options(cls) -> MappableConfig:
        """
        The options in effect. Classes with a through path use the options of the
        class at the end of it.
        """
        target = cls.mappable_target()
        if target is cls:
            return cls.mappable_config()

        if isinstance(target, type) and issubclass(target, Mappable):
            return target.mappable_options()

        return MappableConfig()

    @classmethod
    def _coordinate_column(cls, column_name: str):
        table = inspect(cls.mappable_target()).local_table
        try:
            return table.c[column_name]
        except KeyError:
            raise ValueError(
                f'Table {table.name!r} has no column {column_name!r}'
            ) from None

    @classmethod
    def lat_column(cls):
        return cls._coordinate_column(cls.mappable_options().lat_column_name)

    @classmethod
    def lng_column(cls):
        return cls._coordinate_column(cls.mappable_options().lng_column_name)

    @classmethod
    def qualified_lat_column_name(cls) -> str:
        column = cls.lat_column()
        return f'{column.table.name}.{column.name}'

    @classmethod
    def qualified_lng_column_name(cls) -> str:
        column = cls.lng_column()
        return f'{column.table.name}.{column.name}'

    @classmethod
    def adapter(cls, bind: Union[Engine, Connection, Session]) -> AbstractAdapter:
        """
        The distance SQL adapter for the database behind an engine, connection or
        session. The adapter is loaded against the engine the first time, and the
        connection (a session's being the one its statements will run on) is
        prepared for distance queries.

        Raises:
            UnsupportedAdapter: if the database isn't supported
        """
        if isinstance(bind, Session):
            bind = bind.connection(bind_arguments={'mapper': cls})

        engine = _engine_for(bind)
        klass = load_adapter(engine.dialect.name)
        if not klass.loaded(engine):
            klass.load(engine)
        if isinstance(bind, Connection):
            klass.prepare(bind)

        return klass(cls.qualified_lat_column_name(), cls.qualified_lng_column_name())

    # -------------------------------------------------------------------------
    # Distance SQL
    # -------------------------------------------------------------------------

    @classmethod
    def distance_expression(
        cls,
        origin: Any,
        units: Optional[Union[Units, str]] = None,
        formula: Optional[Union[Formula, str]] = None,
    ) -> DistanceFunction:
        """
        Returns the distance from an origin as a SQL expression, rendered for
        whichever database the statement is compiled against.

        Args:
            origin:
                Any point-like value accepted by LatLng.normalize()

            units:
                (Default: the model's units) The unit system

            formula:
                (Default: the model's formula) 'sphere' or 'flat'
        """
        options = cls.mappable_options()
        return DistanceFunction(
            cls.lat_column(),
            cls.lng_column(),
            cls._normalize_point_to_lat_lng(origin),
            units or options.units,
            formula or options.formula,
        )

    @classmethod
    def distance_sql(
        cls,
        origin: Any,
        units: Optional[Union[Units, str]] = None,
        formula: Optional[Union[Formula, str]] = None,
        dialect: Union[str, Engine, Connection, Session, None] = None,
    ) -> str:
        """
        Returns the raw distance SQL for a database.

        Args:
            origin:
                Any point-like value accepted by LatLng.normalize()

            units:
                (Default: the model's units) The unit system

            formula:
                (Default: the model's formula) 'sphere' or 'flat'

            dialect:
                A dialect name (e.g. 'postgresql'), or an engine, connection or
                session to take it from

        Returns:
            str
        """
        if dialect is None:
            raise ValueError('A dialect name, engine, connection or session is required')

        options = cls.mappable_options()
        if isinstance(dialect, str):
            adapter = load_adapter(dialect)(
                cls.qualified_lat_column_name(), cls.qualified_lng_column_name()
            )
        else:
            adapter = cls.adapter(dialect)

        return render_distance_sql(
            adapter,
            cls._normalize_point_to_lat_lng(origin),
            Units.coerce(units or options.units),
            Formula.coerce(formula or options.formula),
        )

    @classmethod
    def bound_conditions(cls, bounds: Any) -> ColumnElement:
        """
        Returns the condition restricting coordinates to a bounding box. When the box
        crosses the antimeridian, longitudes match either side of it.
        """
        bounds = Bounds.normalize(bounds)
        sw, ne = bounds.sw, bounds.ne
        lat, lng = cls.lat_column(), cls.lng_column()
        if bounds.crosses_meridian:
            lng_condition = or_(lng < ne.lng, lng > sw.lng)
        else:
            lng_condition = and_(lng > sw.lng, lng < ne.lng)

        return and_(lat > sw.lat, lat < ne.lat, lng_condition)

    @staticmethod
    def distance_conditions(
        distance: ColumnElement,
        within: Optional[float] = None,
        beyond: Optional[float] = None,
        distance_range: Any = None,
    ) -> Optional[ColumnElement]:
        """Returns the condition on the distance expression, if any was requested"""
        if within is not None:
            return distance <= finite_float(within, 'within')

        if beyond is not None:
            return distance > finite_float(beyond, 'beyond')

        if distance_range is not None:
            distance_range = DistanceRange.normalize(distance_range)
            upper = (
                distance < finite_float(distance_range.high, 'range end')
                if distance_range.exclude_end
                else distance <= finite_float(distance_range.high, 'range end')
            )
            return and_(distance >= finite_float(distance_range.low, 'range start'), upper)

        return None

    # -------------------------------------------------------------------------
    # Scopes
    # -------------------------------------------------------------------------

    @classmethod
    def geo_scope(
        cls,
        scope: Optional[GeoScope] = None,
        *,
        origin: Any = None,
        units: Optional[Union[Units, str]] = None,
        formula: Optional[Union[Formula, str]] = None,
        bounds: Any = None,
        within: Optional[float] = None,
        beyond: Optional[float] = None,
        range: Any = None,  # pylint: disable=redefined-builtin
    ) -> GeoScope:
        """
        Builds a GeoScope restricted by distance and/or a bounding box.

        Args:
            scope:
                (Optional) The scope to build on. Default: a new scope over this class

            origin:
                (Optional) The point distances are measured from. Any value accepted
                by LatLng.normalize(), or an IP address to geocode

            units:
                (Default: the model's units) The unit system of the distances

            formula:
                (Default: the model's formula) 'sphere' or 'flat'

            bounds:
                (Optional) A Bounds (or pair of corners) rows must lie within

            within:
                (Optional) Keep rows at most this far from the origin

            beyond:
                (Optional) Keep rows further than this from the origin

            range:
                (Optional) Keep rows whose distance is within this range; a python
                range (exclusive end), a (low, high) tuple (inclusive end) or a
                DistanceRange

        Returns:
            GeoScope
        """
        scope = scope if scope is not None else GeoScope(cls)
        options = cls.mappable_options()

        origin = cls._normalize_point_to_lat_lng(origin) if origin is not None else None
        units = Units.coerce(units or options.units)
        formula = Formula.coerce(formula or options.formula)
        bounds = Bounds.normalize(bounds) if bounds is not None else None
        distance_range = DistanceRange.normalize(range) if range is not None else None

        requested = [x for x, v in (
            ('within', within), ('beyond', beyond), ('range', distance_range)
        ) if v is not None]
        if len(requested) > 1:
            warn_once(
                'Only one of within/beyond/range is applied per query; using %r and ignoring %s',
                requested[0], requested[1:]
            )

        if requested and origin is None:
            raise ValueError(f'An origin is required to filter by {requested[0]}')

        if origin is None and bounds is None:
            return scope

        if bounds is None:
            bounds = cls._formulate_bounds_from_distance(origin, units, within, distance_range)

        distance = None
        if origin is not None:
            distance = DistanceFunction(cls.lat_column(), cls.lng_column(), origin, units, formula)
            scope = scope.with_distance(distance)

        if bounds is not None:
            scope = scope.where(cls.bound_conditions(bounds))

        if requested:
            scope = scope.where(
                cls.distance_conditions(distance, within, beyond, distance_range)
            )

        return cls._include_through(scope)

    @classmethod
    def within(cls, distance: float, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        """Rows at most `distance` from the origin"""
        return cls.geo_scope(scope, within=distance, **kwargs)

    @classmethod
    def inside(cls, distance: float, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        return cls.within(distance, scope, **kwargs)

    @classmethod
    def beyond(cls, distance: float, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        """Rows further than `distance` from the origin"""
        return cls.geo_scope(scope, beyond=distance, **kwargs)

    @classmethod
    def outside(cls, distance: float, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        return cls.beyond(distance, scope, **kwargs)

    @classmethod
    def in_range(cls, distance_range: Any, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        """Rows whose distance from the origin lies in a range"""
        return cls.geo_scope(scope, range=distance_range, **kwargs)

    @classmethod
    def in_bounds(cls, bounds: Any, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        """Rows inside a bounding box"""
        return cls.geo_scope(scope, bounds=bounds, **kwargs)

    @classmethod
    def closest(cls, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        """The row nearest to the origin, ignoring rows without coordinates"""
        scope = cls._require_distance(cls.geo_scope(scope, **kwargs), 'closest')
        return scope.order_by(scope.distance.asc()).limit(1)

    @classmethod
    def nearest(cls, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        return cls.closest(scope, **kwargs)

    @classmethod
    def farthest(cls, scope: Optional[GeoScope] = None, **kwargs) -> GeoScope:
        """The row furthest from the origin, ignoring rows without coordinates"""
        scope = cls._require_distance(cls.geo_scope(scope, **kwargs), 'farthest')
        return scope.order_by(scope.distance.desc()).limit(1)

    @staticmethod
    def _require_distance(scope: GeoScope, operation: str) -> GeoScope:
        if not scope.has_distance:
            raise ValueError(f'An origin is required to find the {operation} row')

        # NULL distances sort first ascending on some databases
        return scope.where(scope.distance.is_not(None))

    @classmethod
    def _formulate_bounds_from_distance(
        cls,
        origin: Optional[LatLng],
        units: Units,
        within: Optional[float],
        distance_range: Optional[DistanceRange],
    ) -> Optional[Bounds]:
        """A bounding box around a within/range query, to narrow the rows examined"""
        if origin is None:
            return None

        distance = within if within is not None else (
            distance_range.high if distance_range is not None else None
        )
        if distance is None:
            return None

        return Bounds.from_point_and_radius(origin, finite_float(distance, 'distance'), units=units)

    @classmethod
    def _include_through(cls, scope: GeoScope) -> GeoScope:
        """Joins and eager-loads the through path, so its columns can be queried"""
        chain = cls.mappable_through_path()
        if not chain or scope.through_joined:
            return scope

        loader = None
        for reflection in chain:
            attr = reflection.class_attribute
            scope = scope.join(attr)
            loader = contains_eager(attr) if loader is None else loader.contains_eager(attr)

        scope = scope.options(loader)
        scope.through_joined = True
        return scope

    @classmethod
    def _normalize_point_to_lat_lng(cls, point: Any) -> LatLng:
        """LatLng.normalize(), plus geocoding of IP addresses"""
        if is_ip_address(point):
            return geocode_ip_address(point)

        return LatLng.normalize(point)

    # -------------------------------------------------------------------------
    # Instance methods
    # -------------------------------------------------------------------------

    def _mappable_record(self) -> Any:
        record = self
        for reflection in type(self).mappable_through_path():
            record = getattr(record, reflection.key)
            if record is None:
                return None
        return record

    def to_lat_lng(self) -> Optional[LatLng]:
        """
        The coordinates of this record (or of the record at the end of its through
        path), or None if they aren't set
        """
        record = self._mappable_record()
        if record is None:
            return None

        cls = type(self)
        mapper = inspect(type(record))
        lat = getattr(record, mapper.get_property_by_column(cls.lat_column()).key)
        lng = getattr(record, mapper.get_property_by_column(cls.lng_column()).key)
        if lat is None or lng is None:
            return None

        return LatLng(lat, lng)

    def _require_lat_lng(self) -> LatLng:
        point = self.to_lat_lng()
        if point is None:
            raise ValueError(f'{self!r} has no coordinates')
        return point

    def distance_to(
        self,
        other: Any,
        units: Optional[Union[Units, str]] = None,
        formula: Optional[Union[Formula, str]] = None,
    ) -> float:
        """The distance from this record to any point-like value"""
        options = type(self).mappable_options()
        return self._require_lat_lng().distance_to(
            other, units=units or options.units, formula=formula or options.formula
        )

    def heading_to(self, other: Any) -> float:
        return self._require_lat_lng().heading_to(other)

    def heading_from(self, other: Any) -> float:
        return self._require_lat_lng().heading_from(other)

    def endpoint(
        self, heading: float, distance: float, units: Optional[Union[Units, str]] = None
    ) -> LatLng:
        units = units or type(self).mappable_options().units
        return self._require_lat_lng().endpoint(heading, distance, units=units)

    def midpoint_to(self, other: Any, units: Optional[Union[Units, str]] = None) -> LatLng:
        units = units or type(self).mappable_options().units
        return self._require_lat_lng().midpoint_to(other, units=units)

    def auto_geocode_address(self) -> bool:
        """
        Geocodes the configured address field and stores the result in the
        latitude/longitude columns.

        On failure the configured error message is recorded in
        self.geocode_errors under the address field.

        Returns:
            bool, whether geocoding succeeded
        """
        options = type(self).mappable_config()
        field = options.auto_geocode_field or 'address'
        self.geocode_errors: Dict[str, str] = {}

        address = getattr(self, field, None)
        geo = lookup('' if address is None else str(address))
        if geo is None or not geo.success:
            self.geocode_errors[field] = options.auto_geocode_error_message
            return False

        mapper = inspect(type(self))
        setattr(self, mapper.get_property_by_column(type(self).lat_column()).key, geo.lat)
        setattr(self, mapper.get_property_by_column(type(self).lng_column()).key, geo.lng)
        return True


def _auto_geocode_before_insert(mapper, connection, target):  # pylint: disable=unused-argument
    if not target.auto_geocode_address():
        options = type(target).mappable_config()
        field = options.auto_geocode_field or 'address'
        raise GeocodeValidationError(field, options.auto_geocode_error_message)


def acts_as_mappable(cls: Optional[type] = None, **options):
    """
    Class decorator configuring a Mappable model.

    Keyword Args:
        distance_column_name: (str) (Default 'distance')
        default_units: (str) (Default config.default_units) 'miles', 'kms' or 'nms'
        default_formula: (str) (Default config.default_formula) 'sphere' or 'flat'
        lat_column_name: (str) (Default 'lat')
        lng_column_name: (str) (Default 'lng')
        through: The association path to the model holding the coordinates. All
            other options are then taken from that model.
        auto_geocode: True, or a dict with 'field' (default 'address') and
            'error_message' (default 'could not locate address'). Geocodes the
            address field whenever a record is inserted.

    Can be used with or without arguments:

        @acts_as_mappable
        class Location(Mappable, Base): ...

        @acts_as_mappable(default_units='kms')
        class Location(Mappable, Base): ...
    """
    auto_geocode = options.pop('auto_geocode', None)

    def decorate(klass: type) -> type:
        if not (isinstance(klass, type) and issubclass(klass, Mappable)):
            raise TypeError(f'acts_as_mappable can only decorate Mappable subclasses, not {klass!r}')

        mappable_config = MappableConfig(**options)
        if auto_geocode:
            if mappable_config.through:
                raise ValueError('auto_geocode cannot be combined with through')

            geocode_options = {} if auto_geocode is True else dict(auto_geocode)
            mappable_config.auto_geocode_field = geocode_options.pop('field', 'address')
            if 'error_message' in geocode_options:
                mappable_config.auto_geocode_error_message = geocode_options.pop('error_message')
            if geocode_options:
                raise TypeError(f'Unknown auto_geocode options: {sorted(geocode_options)}')

            event.listen(klass, 'before_insert', _auto_geocode_before_insert, propagate=True)

        klass.__mappable__ = mappable_config
        if not hasattr(klass, mappable_config.distance_column_name):
            setattr(klass, mappable_config.distance_column_name, None)

        return klass

    if cls is not None:
        return decorate(cls)

    return decorate
