"""
SQLite-specific strategy implementation.

Uses aiosqlite through SQLAlchemy's ``sqlite+aiosqlite`` dialect. Accepted
connection strings:
- a SQLAlchemy URL (``sqlite:///path/to/file.db``)
- ``Data Source=path/to/file.db;`` in the ADO style
- a bare file path

Every call opens a new connection, so ``:memory:`` databases do not outlive
a single statement; use a file.
"""
import logging

import sqlalchemy as sa

from dbbridge.backend import BackendKind
from dbbridge.strategy.base import DatabaseStrategy, parse_keyvalue
from dbbridge.strategy.base import register_strategy

logger = logging.getLogger(__name__)


@register_strategy(BackendKind.SQLITE)
class SQLiteStrategy(DatabaseStrategy):
    """SQLite binding.
    """

    dialects = ('sqlite',)
    driver = 'aiosqlite'

    def url_from_native(self, connection_string: str) -> sa.URL:
        """Build the URL from ``Data Source=`` or a bare path.
        """
        if '=' not in connection_string:
            return sa.URL.create(self.drivername, database=connection_string.rstrip(';'))

        pairs = parse_keyvalue(connection_string)
        path = pairs.pop('data source', None) or pairs.pop('datasource', None)
        if path is None:
            raise sa.exc.ArgumentError('SQLite connection string needs a Data Source')
        if pairs:
            logger.debug(f'Ignoring SQLite connection string keys: {sorted(pairs)}')
        return sa.URL.create(self.drivername, database=path)
