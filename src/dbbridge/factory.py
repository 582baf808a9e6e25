"""
Provider factory.

Validates a backend tag and a connection string and builds the Provider for
the matching binding. Nothing connects and no driver is imported here; the
first statement does that.
"""
import logging
from typing import Any

from dbbridge.options import DatabaseOptions
from dbbridge.provider import Provider
from dbbridge.strategy import get_strategy

logger = logging.getLogger(__name__)

__all__ = ['create_provider', 'create_connection']


def _options(kind: Any, connection_string: str | None, **kw: Any) -> DatabaseOptions:
    if isinstance(kind, DatabaseOptions):
        return kind
    return DatabaseOptions(backend=kind, connection_string=connection_string, **kw)


def create_provider(kind: Any, connection_string: str | None = None, **kw: Any) -> Provider:
    """Create the Provider for a backend.

    Args:
        kind: BackendKind, its value or alias, or a ready DatabaseOptions
        connection_string: Backend specific connection string
        **kw: Remaining DatabaseOptions fields (echo, connect_args, engine_kwargs)

    Raises
        ValidationError: the connection string is missing or blank
        UnsupportedBackendError: no binding exists for ``kind``
    """
    options = _options(kind, connection_string, **kw)
    strategy = get_strategy(options.backend)
    logger.debug(f'Creating provider for {options.backend.description} using {strategy!r}')
    return Provider(strategy, options)


def create_connection(kind: Any, connection_string: str | None = None, **kw: Any):
    """Raw asynchronous connection context manager for a backend.

    The engine behind it is disposed when the context exits.

    Usage:
        async with create_connection('sqlite', 'app.db') as conn:
            await conn.execute(sa.text('select 1'))
    """
    return _RawConnection(create_provider(kind, connection_string, **kw))


class _RawConnection:
    """Async context manager pairing one connection with its provider."""

    def __init__(self, provider: Provider) -> None:
        self.provider = provider
        self._context = None

    async def __aenter__(self):
        self._context = self.provider.connect()
        try:
            return await self._context.__aenter__()
        except BaseException:
            await self.provider.close()
            raise

    async def __aexit__(self, exc_type, exc_value, traceback):
        try:
            return await self._context.__aexit__(exc_type, exc_value, traceback)
        finally:
            await self.provider.close()
