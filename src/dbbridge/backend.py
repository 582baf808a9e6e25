"""Backend tags used to select a binding."""
import enum
from typing import Any

from dbbridge.exceptions import UnsupportedBackendError

__all__ = ['BackendKind']


class BackendKind(str, enum.Enum):
    """Supported database engines.

    MARIADB is an alias of MYSQL: both resolve to the same binding.
    """

    SQLSERVER = 'sqlserver'
    POSTGRES = 'postgres'
    MYSQL = 'mysql'
    MARIADB = 'mariadb'
    SQLITE = 'sqlite'
    ORACLE = 'oracle'
    FIREBIRD = 'firebird'

    @property
    def description(self) -> str:
        """Human readable engine name."""
        return _DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value: Any) -> 'BackendKind':
        """Resolve a member, its value, its name or a common alias.

        >>> BackendKind.parse('PostgreSQL')
        <BackendKind.POSTGRES: 'postgres'>
        >>> BackendKind.parse(BackendKind.MARIADB).description
        'MariaDB'
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _ALIASES:
                return _ALIASES[key]
            for member in cls:
                if key in {member.value, member.name.lower()}:
                    return member
        raise UnsupportedBackendError(f'Database type {value!r} is not supported. '
                                      f'Available: {[m.value for m in cls]}')


_DESCRIPTIONS = {
    BackendKind.SQLSERVER: 'Microsoft SQL Server',
    BackendKind.POSTGRES: 'PostgreSQL',
    BackendKind.MYSQL: 'MySQL',
    BackendKind.MARIADB: 'MariaDB',
    BackendKind.SQLITE: 'SQLite',
    BackendKind.ORACLE: 'Oracle Database',
    BackendKind.FIREBIRD: 'Firebird',
}

_ALIASES = {
    'postgresql': BackendKind.POSTGRES,
    'pg': BackendKind.POSTGRES,
    'mssql': BackendKind.SQLSERVER,
    'sql server': BackendKind.SQLSERVER,
    'sqlite3': BackendKind.SQLITE,
}


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
