"""
Database-specific distance SQL.

Each supported SQLAlchemy dialect has a module in this package named after the
dialect, defining an adapter class named after the dialect in CamelCase
(e.g. ``postgresql`` -> ``PostgreSQL``).
"""

__all__ = ['AbstractAdapter', 'load_adapter']

from importlib import import_module
from typing import Dict, Type

from geomappable.adapters._base import AbstractAdapter
from geomappable.exceptions import UnsupportedAdapter
from geomappable.utils.logging import LOGGER

_DIALECT_ALIASES = {
    # SQLAlchemy's generic string compiler, used by str(statement)
    'default': 'mysql',
    'mariadb': 'mysql',
}

_ADAPTER_CLASSES = {
    'mssql': 'MSSQL',
    'mysql': 'MySQL',
    'postgresql': 'PostgreSQL',
    'sqlite': 'SQLite',
}

_LOADED: Dict[str, Type[AbstractAdapter]] = {}


def load_adapter(dialect_name: str) -> Type[AbstractAdapter]:
    """
    Returns the adapter class for a SQLAlchemy dialect name.

    Args:
        dialect_name:
            The dialect name, e.g. engine.dialect.name

    Raises:
        UnsupportedAdapter: if no adapter exists for the dialect
    """
    name = dialect_name.lower()
    name = _DIALECT_ALIASES.get(name, name)
    if name in _LOADED:
        return _LOADED[name]

    try:
        module = import_module(f'{__name__}.{name}')
        klass = getattr(module, _ADAPTER_CLASSES.get(name, name.capitalize()))
    except (ImportError, AttributeError):
        raise UnsupportedAdapter(
            f'`{dialect_name.lower()}` is not a supported adapter.'
        ) from None

    LOGGER.debug('Loaded distance adapter %s for dialect %r', klass.__name__, dialect_name)
    _LOADED[name] = klass
    return klass
