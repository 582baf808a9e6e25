"""
Vendor-agnostic async database access for SQL Server, PostgreSQL, MySQL,
MariaDB, SQLite, Oracle and Firebird.

All operations can be called either as:
- Module functions: await dbbridge.query(db, sql, params, shape=User)
- Database methods: await db.query(sql, params, shape=User)

The module functions are facades over the Database methods.
"""
__version__ = '0.1.0'

from collections.abc import Mapping
from typing import Any

from dbbridge.backend import BackendKind
from dbbridge.connection import Database, connect
from dbbridge.exceptions import DatabaseError, DbConnectionError, DisposedError
from dbbridge.exceptions import IntegrityError, ProgrammingError, StatementError
from dbbridge.exceptions import TypeConversionError, UnsupportedBackendError
from dbbridge.exceptions import ValidationError
from dbbridge.factory import create_connection, create_provider
from dbbridge.mapping import ColumnMapped, Field
from dbbridge.options import DatabaseOptions
from dbbridge.provider import Provider


async def execute(db: Database, statement: str, parameters: Mapping[str, Any] | None = None) -> int:
    """Execute a statement and return the affected row count.
    """
    return await db.execute(statement, parameters)


async def query(db: Database, statement: str, parameters: Mapping[str, Any] | None = None,
                shape: Any = dict) -> list[Any]:
    """Execute a query and return every row mapped to ``shape``.
    """
    return await db.query(statement, parameters, shape=shape)


async def query_single(db: Database, statement: str, parameters: Mapping[str, Any] | None = None,
                       shape: Any = dict) -> Any:
    """Execute a query and return the first mapped row or None.
    """
    return await db.query_single(statement, parameters, shape=shape)


__all__ = [
    # Core
    'connect',
    'Database',
    'DatabaseOptions',
    'BackendKind',
    'Provider',
    'create_provider',
    'create_connection',
    # Operations
    'execute',
    'query',
    'query_single',
    # Mapping
    'ColumnMapped',
    'Field',
    # Exceptions
    'DatabaseError',
    'ValidationError',
    'UnsupportedBackendError',
    'DisposedError',
    'TypeConversionError',
    'DbConnectionError',
    'ProgrammingError',
    'StatementError',
    'IntegrityError',
]
