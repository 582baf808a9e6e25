"""
Base strategy interface for backend bindings.

Each supported engine is one strategy class. A strategy is stateless: it knows
how to turn a connection string into a SQLAlchemy URL for its driver, how to
build an engine that never pools, and how to open a connection, prepare a
statement, name parameters and run statements. The provider depends on this
interface only, never on a concrete driver.

The default implementation targets SQLAlchemy's asyncio extension. Engines
without an asyncio driver override the connection and execution methods.
"""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from dbbridge.row import ResultSet

if TYPE_CHECKING:
    from dbbridge.backend import BackendKind
    from dbbridge.options import DatabaseOptions

logger = logging.getLogger(__name__)

# Registry of backend kind -> strategy class
# Defined here to avoid circular imports (concrete strategies import from base)
_STRATEGY_REGISTRY: dict['BackendKind', type['DatabaseStrategy']] = {}

# Connection string keys understood by every binding, lower-cased
_KEY_ALIASES = {
    'host': 'host',
    'hostname': 'host',
    'server': 'host',
    'address': 'host',
    'data source': 'host',
    'datasource': 'host',
    'port': 'port',
    'database': 'database',
    'dbname': 'database',
    'initial catalog': 'database',
    'user': 'username',
    'username': 'username',
    'user id': 'username',
    'userid': 'username',
    'uid': 'username',
    'password': 'password',
    'pwd': 'password',
}

SIGILS = '@:$'


def register_strategy(*kinds: 'BackendKind'):
    """Decorator to register a strategy class for one or more backends.

    Usage:
        @register_strategy(BackendKind.MYSQL, BackendKind.MARIADB)
        class MySQLStrategy(DatabaseStrategy):
            ...
    """
    def decorator(cls: type['DatabaseStrategy']) -> type['DatabaseStrategy']:
        for kind in kinds:
            _STRATEGY_REGISTRY[kind] = cls
        return cls
    return decorator


def parse_keyvalue(connection_string: str) -> dict[str, str]:
    """Split an ADO/ODBC style ``Key=Value;Key=Value`` string.

    Keys are lower-cased and stripped; values keep their case.

    >>> parse_keyvalue('Server=db1; Database=sales;User Id=sa;')
    {'server': 'db1', 'database': 'sales', 'user id': 'sa'}
    """
    pairs = {}
    for part in connection_string.split(';'):
        if not part.strip():
            continue
        key, sep, value = part.partition('=')
        if not sep:
            raise sa.exc.ArgumentError(f'Malformed connection string segment: {part.strip()!r}')
        pairs[key.strip().lower()] = value.strip()
    return pairs


def bind_name(name: str) -> str:
    """Bind key for SQLAlchemy ``:name`` placeholders, without any sigil.

    >>> bind_name('@Name'), bind_name(':Name'), bind_name('Name')
    ('Name', 'Name', 'Name')
    """
    if name[:1] in SIGILS:
        return name[1:]
    return name


class DatabaseStrategy:
    """Base class for backend-specific bindings.
    """

    #: SQLAlchemy dialect names accepted in URL-form connection strings
    dialects: tuple[str, ...] = ()
    #: Driver used when a URL names the dialect only
    driver: str = ''

    @property
    def drivername(self) -> str:
        return f'{self.dialects[0]}+{self.driver}'

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.drivername})'

    # Connection strings

    def build_url(self, connection_string: str) -> sa.URL:
        """Translate a connection string into a URL for this binding's driver.

        URL-form strings keep everything but gain the default driver when
        they name the dialect alone. Anything else is handed to
        ``url_from_native``.
        """
        if '://' not in connection_string:
            return self.url_from_native(connection_string.strip())

        url = sa.engine.make_url(connection_string.strip())
        dialect, _, driver = url.drivername.partition('+')
        if dialect not in self.dialects:
            raise sa.exc.ArgumentError(
                f'{type(self).__name__} cannot use a {dialect!r} URL; expected one of {self.dialects}')
        if not driver:
            url = url.set(drivername=f'{dialect}+{self.driver}')
        return url

    def url_from_native(self, connection_string: str) -> sa.URL:
        """Build a URL from a ``Key=Value;`` connection string.
        """
        pairs = parse_keyvalue(connection_string)
        parts: dict[str, Any] = {}
        query: dict[str, str] = {}
        for key, value in pairs.items():
            alias = _KEY_ALIASES.get(key)
            if alias is None:
                query[key] = value
            else:
                parts[alias] = value
        if 'port' in parts:
            parts['port'] = int(parts['port'])
        return sa.URL.create(self.drivername, query=query, **parts)

    # Engine lifecycle

    def get_engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        """Keyword arguments for engine creation.

        NullPool: every call opens and closes its own connection.
        """
        kwargs: dict[str, Any] = {'poolclass': NullPool, 'echo': options.echo}
        if options.connect_args:
            kwargs['connect_args'] = dict(options.connect_args)
        kwargs.update(options.engine_kwargs or {})
        return kwargs

    def create_engine(self, options: 'DatabaseOptions') -> AsyncEngine:
        """Create the engine for a provider. Does not connect.
        """
        url = self.build_url(options.connection_string)
        logger.debug(f'Creating engine for {url.render_as_string(hide_password=True)}')
        return create_async_engine(url, **self.get_engine_kwargs(options))

    async def dispose_engine(self, engine: AsyncEngine) -> None:
        await engine.dispose()

    # Statement execution

    @asynccontextmanager
    async def open_connection(self, engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
        """Open a connection that is closed on every exit path.
        """
        async with engine.connect() as conn:
            yield conn

    def prepare_statement(self, sql: str) -> sa.TextClause:
        """Wrap statement text; ``:name`` placeholders become bind parameters.
        """
        return sa.text(sql)

    def parameter_name(self, name: str) -> str:
        """Normalize a caller supplied parameter name. Pass-through by default.
        """
        return name

    def bind_parameter(self, bound: dict[str, Any], name: str, value: Any) -> None:
        """Attach one parameter to the pending bind values under its normalized name.
        """
        bound[self.parameter_name(name)] = value

    def bind_key(self, name: str) -> str:
        """SQLAlchemy bind key for a normalized parameter name.

        ``text()`` placeholders are written ``:name``, so the key carries no
        sigil.
        """
        return bind_name(name)

    def bind_values(self, params: dict[str, Any]) -> dict[str, Any]:
        """Bound parameters keyed for ``conn.execute``."""
        return {self.bind_key(name): value for name, value in params.items()}

    async def execute_non_query(self, conn: AsyncConnection, statement: sa.TextClause,
                                params: dict[str, Any]) -> int:
        """Run a statement that returns no rows, commit, return rowcount.
        """
        result = await conn.execute(statement, self.bind_values(params))
        rowcount = result.rowcount
        await conn.commit()
        return rowcount

    async def execute_query(self, conn: AsyncConnection, statement: sa.TextClause,
                            params: dict[str, Any]) -> ResultSet:
        """Run a statement, fetch every row, commit.

        Queries that write (``INSERT ... RETURNING``, procedures) keep their
        changes.
        """
        result = await conn.execute(statement, self.bind_values(params))
        resultset = ResultSet.from_result(result)
        await conn.commit()
        return resultset


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
