"""
Provider: runs statements against one backend.

A Provider owns a connection string (through its DatabaseOptions) and the
strategy of its backend. Every call opens its own connection, runs one
statement and closes the connection again, whatever the outcome. The engine
behind those connections is built on first use and never pools.
"""
import logging
import time
from collections.abc import Mapping
from functools import wraps
from typing import Any

from dbbridge.exceptions import DisposedError, ValidationError
from dbbridge.mapping import get_shape
from dbbridge.options import DatabaseOptions
from dbbridge.params import bind_parameters
from dbbridge.row import ResultSet
from dbbridge.strategy import DatabaseStrategy

logger = logging.getLogger(__name__)

__all__ = ['Provider']


def dumpsql(func):
    """Decorator for logging SQL statements, parameters and timings."""
    @wraps(func)
    async def wrapper(self, statement: str, parameters: Mapping[str, Any] | None = None,
                      *args: Any, **kwargs: Any):
        self._ensure_not_disposed()
        start = time.time()
        logger.debug(f'SQL:\n{statement}\nargs: {len(parameters or {})} parameters')
        try:
            return await func(self, statement, parameters, *args, **kwargs)
        except Exception:
            logger.error(f'Error with statement:\nSQL:\n{statement}\nparameters: {list(parameters or {})}')
            raise
        finally:
            elapsed = time.time() - start
            self.addcall(elapsed)
            logger.debug(f'Statement time: {elapsed:.4f}s')
    return wrapper


def _check_statement(statement: Any) -> str:
    if not isinstance(statement, str) or not statement.strip():
        raise ValidationError('Statement cannot be empty')
    return statement


class Provider:
    """Executes statements and queries for one backend and connection string.

    Use through ``async with`` or call ``close()`` when done; any call after
    close raises DisposedError.
    """

    def __init__(self, strategy: DatabaseStrategy, options: DatabaseOptions) -> None:
        self.strategy = strategy
        self.options = options
        self._engine = None
        self._closed = False
        self.calls = 0
        self.time = 0.0

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f'Provider({self.options.backend.value}, {self.strategy!r}, {state})'

    @property
    def backend(self):
        return self.options.backend

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_not_disposed(self) -> None:
        if self._closed:
            raise DisposedError(f'{type(self).__name__} for {self.backend.value} is closed')

    @property
    def engine(self):
        """Engine for this provider, created on first use."""
        self._ensure_not_disposed()
        if self._engine is None:
            self._engine = self.strategy.create_engine(self.options)
        return self._engine

    def addcall(self, elapsed: float) -> None:
        """Track execution statistics."""
        self.time += elapsed
        self.calls += 1

    def connect(self):
        """Raw connection context manager from the binding.

        Usage:
            async with provider.connect() as conn:
                ...
        """
        return self.strategy.open_connection(self.engine)

    async def _run_query(self, statement: str, parameters: Mapping[str, Any] | None) -> ResultSet:
        prepared = self.strategy.prepare_statement(_check_statement(statement))
        bound = bind_parameters(self.strategy, parameters)
        async with self.connect() as conn:
            resultset = await self.strategy.execute_query(conn, prepared, bound)
        logger.debug(f'Fetched {len(resultset)} rows')
        return resultset

    @dumpsql
    async def execute(self, statement: str, parameters: Mapping[str, Any] | None = None) -> int:
        """Run a statement that returns no rows. Returns the affected row count.
        """
        prepared = self.strategy.prepare_statement(_check_statement(statement))
        bound = bind_parameters(self.strategy, parameters)
        async with self.connect() as conn:
            rowcount = await self.strategy.execute_non_query(conn, prepared, bound)
        logger.debug(f'Statement affected {rowcount} rows')
        return rowcount

    @dumpsql
    async def query(self, statement: str, parameters: Mapping[str, Any] | None = None,
                    shape: Any = dict) -> list[Any]:
        """Run a query and map every row to ``shape``.
        """
        target = get_shape(shape)
        resultset = await self._run_query(statement, parameters)
        return [target.map(row) for row in resultset]

    @dumpsql
    async def query_single(self, statement: str, parameters: Mapping[str, Any] | None = None,
                           shape: Any = dict) -> Any:
        """Run a query and map its first row, or return None when there is none.
        """
        target = get_shape(shape)
        resultset = await self._run_query(statement, parameters)
        for row in resultset:
            return target.map(row)
        return None

    async def close(self) -> None:
        """Release the engine. Calling close more than once is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        engine, self._engine = self._engine, None
        if engine is not None:
            await self.strategy.dispose_engine(engine)
        logger.debug(f'Provider for {self.backend.value} closed')

    async def __aenter__(self) -> 'Provider':
        self._ensure_not_disposed()
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()
