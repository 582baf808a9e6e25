import asyncio

import pytest
from dbbridge import DbConnectionError, DisposedError, ValidationError
from dbbridge.row import ResultSet

from tests.fixtures.mocks import operational_error
from tests.fixtures.values import User


async def test_engine_created_lazily(fake_provider, fake_strategy):
    assert fake_strategy.events == []
    await fake_provider.execute('UPDATE Users SET Age = 1')
    await fake_provider.execute('UPDATE Users SET Age = 2')
    assert fake_strategy.events.count('engine') == 1


async def test_execute_releases_connection(fake_provider, fake_strategy):
    assert await fake_provider.execute('UPDATE Users SET Age = :Age', {'@Age': 3}) == 1
    assert fake_strategy.events == ['engine', 'open', 'execute', 'close']
    assert fake_strategy.statements == [('UPDATE Users SET Age = :Age', {'@Age': 3})]


async def test_failure_propagates_and_releases(fake_provider, fake_strategy):
    fake_strategy.error = operational_error()
    with pytest.raises(DbConnectionError) as exc:
        await fake_provider.query('SELECT 1')
    assert exc.value is fake_strategy.error
    assert fake_strategy.opened == fake_strategy.released == 1


async def test_cancellation_releases(fake_provider, fake_strategy):
    async def hang(conn, statement, params):
        await asyncio.sleep(10)

    fake_strategy.execute_query = hang
    task = asyncio.create_task(fake_provider.query('SELECT 1'))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert fake_strategy.opened == fake_strategy.released == 1


async def test_query_maps_records(fake_provider):
    users = await fake_provider.query('SELECT * FROM Users', shape=User)
    assert users == [User(id=1, name='A', age=30), User(id=2, name='B', age=None)]


async def test_query_defaults_to_dict(fake_provider):
    rows = await fake_provider.query('SELECT * FROM Users')
    assert rows[0] == {'Id': 1, 'Name': 'A', 'Age': 30}


async def test_query_single(fake_provider, fake_strategy):
    assert await fake_provider.query_single('SELECT Name FROM Users', shape=str) == 'A'
    fake_strategy.resultset = ResultSet(columns=['Name'], rows=[])
    assert await fake_provider.query_single('SELECT Name FROM Users', shape=str) is None


async def test_invalid_shape_fails_before_io(fake_provider, fake_strategy):
    with pytest.raises(ValidationError):
        await fake_provider.query('SELECT 1', shape='User')
    assert fake_strategy.opened == 0


async def test_empty_statement(fake_provider, fake_strategy):
    with pytest.raises(ValidationError):
        await fake_provider.execute('  ')
    assert fake_strategy.opened == 0


async def test_close_is_idempotent(fake_provider, fake_strategy):
    await fake_provider.execute('DELETE FROM Users')
    await fake_provider.close()
    await fake_provider.close()
    assert fake_strategy.events.count('dispose') == 1
    assert fake_strategy.engines[0].disposed


async def test_close_without_engine(fake_provider, fake_strategy):
    await fake_provider.close()
    assert fake_provider.closed
    assert 'dispose' not in fake_strategy.events


@pytest.mark.parametrize('call', [
    lambda p: p.execute('DELETE FROM Users'),
    lambda p: p.query('SELECT 1'),
    lambda p: p.query_single('SELECT 1'),
])
async def test_calls_after_close(fake_provider, fake_strategy, call):
    await fake_provider.close()
    with pytest.raises(DisposedError):
        await call(fake_provider)
    assert fake_strategy.opened == 0


async def test_statistics(fake_provider):
    await fake_provider.execute('DELETE FROM Users')
    await fake_provider.query('SELECT 1')
    assert fake_provider.calls == 2
    assert fake_provider.time >= 0


async def test_async_context_manager(fake_provider):
    async with fake_provider as provider:
        await provider.execute('DELETE FROM Users')
    assert fake_provider.closed
