"""
SQL Server-specific strategy implementation.

Uses aioodbc, the asyncio wrapper around pyodbc (``mssql+aioodbc``). ODBC
connection strings are already ``Key=Value;`` lists and go to the driver
verbatim through SQLAlchemy's ``odbc_connect`` query argument. When the
string names no ODBC driver, ``DEFAULT_ODBC_DRIVER`` is prepended.
"""
import sqlalchemy as sa

from dbbridge.backend import BackendKind
from dbbridge.strategy.base import DatabaseStrategy, parse_keyvalue
from dbbridge.strategy.base import register_strategy

DEFAULT_ODBC_DRIVER = 'ODBC Driver 18 for SQL Server'


@register_strategy(BackendKind.SQLSERVER)
class SqlServerStrategy(DatabaseStrategy):
    """SQL Server binding.
    """

    dialects = ('mssql',)
    driver = 'aioodbc'

    def url_from_native(self, connection_string: str) -> sa.URL:
        odbc = connection_string.strip().rstrip(';')
        if 'driver' not in parse_keyvalue(odbc):
            odbc = f'Driver={{{DEFAULT_ODBC_DRIVER}}};{odbc}'
        return sa.URL.create(self.drivername, query={'odbc_connect': odbc})
