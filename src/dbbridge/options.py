from dataclasses import dataclass, field
from typing import Any

from dbbridge.backend import BackendKind
from dbbridge.exceptions import ValidationError

from libb import ConfigOptions, load_options

__all__ = [
    'DatabaseOptions',
    'load_database_options',
]


@dataclass
class DatabaseOptions(ConfigOptions):
    """Options

    supported backends: `sqlserver`, `postgres`, `mysql`, `mariadb`,
    `sqlite`, `oracle`, `firebird` (and the aliases BackendKind.parse knows)

    Engine options:
    - echo: Log every statement through SQLAlchemy (default: False)
    - connect_args: Keyword arguments handed to the driver's connect()
    - engine_kwargs: Extra keyword arguments for engine creation
    """
    backend: BackendKind | str = None
    connection_string: str = None
    echo: bool = False
    connect_args: dict[str, Any] = field(default_factory=dict)
    engine_kwargs: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.connection_string, str) or not self.connection_string.strip():
            raise ValidationError('Connection string cannot be empty')
        self.backend = BackendKind.parse(self.backend)
        self.connect_args = dict(self.connect_args or {})
        self.engine_kwargs = dict(self.engine_kwargs or {})


def load_database_options(options: DatabaseOptions | dict[str, Any] | str,
                          config: Any | None = None, **kw: Any) -> DatabaseOptions:
    """Build DatabaseOptions from an instance, a dict, or a config section name.

    Keyword arguments override loaded values. A ready DatabaseOptions is
    returned as is.
    """
    if isinstance(options, DatabaseOptions):
        return options
    options_func = load_options(cls=DatabaseOptions)(lambda o, c: o)
    return options_func(options, config, **kw)
