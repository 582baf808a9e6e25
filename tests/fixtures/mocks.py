"""
Fake binding for provider and facade tests.

FakeStrategy never touches a driver. It records every connection it opens
and closes, the statements it runs and their bind values, and can be told to
fail a statement.

Usage:
    async def test_release(fake_provider, fake_strategy):
        await fake_provider.execute('update t set x = 1')
        assert fake_strategy.events == ['engine', 'open', 'execute', 'close']
"""
from contextlib import asynccontextmanager

import pytest
import sqlalchemy as sa
from dbbridge.options import DatabaseOptions
from dbbridge.provider import Provider
from dbbridge.row import ResultSet
from dbbridge.strategy import DatabaseStrategy


class FakeEngine:

    def __init__(self):
        self.disposed = False


class FakeStrategy(DatabaseStrategy):
    """Strategy double recording resource use."""

    dialects = ('fake',)
    driver = 'fake'

    def __init__(self, resultset=None, rowcount=1, error=None):
        self.resultset = resultset or ResultSet()
        self.rowcount = rowcount
        self.error = error
        self.events = []
        self.statements = []
        self.engines = []

    @property
    def opened(self):
        return self.events.count('open')

    @property
    def released(self):
        return self.events.count('close')

    def create_engine(self, options):
        self.events.append('engine')
        engine = FakeEngine()
        self.engines.append(engine)
        return engine

    async def dispose_engine(self, engine):
        self.events.append('dispose')
        engine.disposed = True

    @asynccontextmanager
    async def open_connection(self, engine):
        self.events.append('open')
        try:
            yield object()
        finally:
            self.events.append('close')

    def _run(self, statement, params):
        self.statements.append((statement.text, params))
        if self.error is not None:
            raise self.error

    async def execute_non_query(self, conn, statement, params):
        self.events.append('execute')
        self._run(statement, params)
        return self.rowcount

    async def execute_query(self, conn, statement, params):
        self.events.append('query')
        self._run(statement, params)
        return self.resultset


def operational_error():
    """Driver-style failure as SQLAlchemy reports it."""
    return sa.exc.OperationalError('SELECT 1', {}, Exception('connection refused'))


@pytest.fixture
def fake_strategy():
    return FakeStrategy(resultset=ResultSet(
        columns=['Id', 'Name', 'Age'],
        rows=[(1, 'A', 30), (2, 'B', None)],
        ))


@pytest.fixture
def fake_provider(fake_strategy):
    options = DatabaseOptions(backend='sqlite', connection_string='fake.db')
    return Provider(fake_strategy, options)
