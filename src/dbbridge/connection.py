"""
Database facade.

``connect()`` returns a Database: a closable handle around one Provider that
tracks how many statements ran and how long they took.

Usage:
    async with dbbridge.connect('sqlite', 'app.db') as db:
        await db.execute('insert into users (name) values (:name)', {'name': 'Alice'})
        users = await db.query('select * from users', shape=User)
"""
import logging
from collections.abc import Mapping
from typing import Any

from dbbridge.exceptions import DisposedError
from dbbridge.factory import create_provider
from dbbridge.options import DatabaseOptions, load_database_options
from dbbridge.provider import Provider

logger = logging.getLogger(__name__)

__all__ = ['Database', 'connect']


class Database:
    """Handle over one Provider.

    Closing the handle closes the provider; closing twice is harmless. Every
    other call after close raises DisposedError.
    """

    def __init__(self, provider: Provider) -> None:
        self.provider = provider
        self._closed = False

    def __repr__(self) -> str:
        return f'Database({self.provider!r})'

    @property
    def options(self) -> DatabaseOptions:
        return self.provider.options

    @property
    def backend(self):
        return self.provider.backend

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def calls(self) -> int:
        """Number of statements run through this handle."""
        return self.provider.calls

    @property
    def time(self) -> float:
        """Cumulative statement time in seconds."""
        return self.provider.time

    def _ensure_not_disposed(self) -> None:
        if self._closed:
            raise DisposedError('Database handle is closed')

    async def execute(self, statement: str, parameters: Mapping[str, Any] | None = None) -> int:
        """Run a statement that returns no rows and return the affected row count.
        """
        self._ensure_not_disposed()
        return await self.provider.execute(statement, parameters)

    async def query(self, statement: str, parameters: Mapping[str, Any] | None = None,
                    shape: Any = dict) -> list[Any]:
        """Run a query and return every row mapped to ``shape``.

        ``shape`` is a scalar type (first column only), ``dict`` (the default)
        or a record class constructible without arguments.
        """
        self._ensure_not_disposed()
        return await self.provider.query(statement, parameters, shape=shape)

    async def query_single(self, statement: str, parameters: Mapping[str, Any] | None = None,
                           shape: Any = dict) -> Any:
        """First row mapped to ``shape``, or None when the query returns nothing.
        """
        self._ensure_not_disposed()
        return await self.provider.query_single(statement, parameters, shape=shape)

    async def close(self) -> None:
        """Close the handle and its provider."""
        if self._closed:
            return
        self._closed = True
        try:
            await self.provider.close()
        finally:
            logger.debug(f'Database closed: {self.calls} statements in {self.time:.2f}s '
                         f'(avg: {self.time/max(1, self.calls):.3f}s per statement)')

    async def __aenter__(self) -> 'Database':
        self._ensure_not_disposed()
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()


def connect(backend: Any, connection_string: str | None = None,
            config: Any | None = None, **kw: Any) -> Database:
    """Create a Database handle. Does not connect until the first statement.

    Args:
        backend: Can be:
                - BackendKind, its value, name or alias, with ``connection_string``
                - DatabaseOptions object
                - Dictionary of options
                - Name of a section in ``config`` holding the options
        connection_string: Backend specific connection string
        config: Configuration object (for loading named option sections)
        **kw: Additional keyword arguments to override options

    Raises
        ValidationError: the connection string is missing or blank
        UnsupportedBackendError: the backend has no binding
    """
    if connection_string is None and (config is not None or isinstance(backend, dict | DatabaseOptions)):
        options = load_database_options(backend, config, **kw)
    else:
        options = DatabaseOptions(backend=backend, connection_string=connection_string, **kw)
    return Database(create_provider(options))
