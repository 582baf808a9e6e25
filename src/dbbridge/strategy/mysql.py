"""
MySQL and MariaDB strategy implementation.

Both engines speak the same protocol and share this binding through aiomysql
(``mysql+aiomysql``). A ``mariadb://`` URL keeps SQLAlchemy's MariaDB dialect
but still runs on aiomysql.
"""
from dbbridge.backend import BackendKind
from dbbridge.strategy.base import DatabaseStrategy, register_strategy


@register_strategy(BackendKind.MYSQL, BackendKind.MARIADB)
class MySQLStrategy(DatabaseStrategy):
    """MySQL / MariaDB binding.
    """

    dialects = ('mysql', 'mariadb')
    driver = 'aiomysql'
