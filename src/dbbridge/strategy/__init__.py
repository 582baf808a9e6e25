"""
Backend bindings, one strategy class per engine.

Importing this package registers every binding. Driver modules are imported
only when an engine is created, so an installed dbbridge works with whichever
drivers are present.
"""
from functools import lru_cache

from dbbridge.backend import BackendKind
from dbbridge.exceptions import UnsupportedBackendError
from dbbridge.strategy.base import _STRATEGY_REGISTRY
from dbbridge.strategy.base import DatabaseStrategy as DatabaseStrategy
from dbbridge.strategy.base import register_strategy as register_strategy
from dbbridge.strategy.firebird import FirebirdStrategy as FirebirdStrategy
from dbbridge.strategy.mysql import MySQLStrategy as MySQLStrategy
from dbbridge.strategy.oracle import OracleStrategy as OracleStrategy
from dbbridge.strategy.postgres import PostgresStrategy as PostgresStrategy
from dbbridge.strategy.sqlite import SQLiteStrategy as SQLiteStrategy
from dbbridge.strategy.sqlserver import SqlServerStrategy as SqlServerStrategy


def _validate_backend(kind) -> BackendKind:
    """Parse ``kind`` and raise UnsupportedBackendError if it has no binding."""
    kind = BackendKind.parse(kind)
    if kind not in _STRATEGY_REGISTRY:
        available = [k.value for k in _STRATEGY_REGISTRY]
        raise UnsupportedBackendError(f'No binding registered for {kind.value}. Available: {available}')
    return kind


@lru_cache(maxsize=8)
def _get_strategy(kind: BackendKind) -> DatabaseStrategy:
    """Get cached strategy instance for a backend."""
    return _STRATEGY_REGISTRY[kind]()


def get_strategy(kind) -> DatabaseStrategy:
    """Get the strategy instance for a backend kind, value or alias.
    """
    return _get_strategy(_validate_backend(kind))


def get_strategy_class(kind) -> type[DatabaseStrategy]:
    """Get the strategy class for a backend without instantiating."""
    return _STRATEGY_REGISTRY[_validate_backend(kind)]


def get_available_backends() -> list[BackendKind]:
    """Return list of backends with a registered binding."""
    return list(_STRATEGY_REGISTRY.keys())


def is_supported_backend(kind) -> bool:
    """Check if a backend is supported."""
    try:
        _validate_backend(kind)
    except UnsupportedBackendError:
        return False
    return True
