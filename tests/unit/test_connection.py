import dbbridge
import pytest
from dbbridge import BackendKind, Database, DatabaseOptions, DisposedError
from dbbridge import UnsupportedBackendError, ValidationError
from dbbridge.provider import Provider

from tests.fixtures.values import User


@pytest.fixture
def fake_db(fake_provider):
    return Database(fake_provider)


def test_connect_does_not_connect(tmp_path):
    db = dbbridge.connect('sqlite', str(tmp_path / 'never.db'))
    assert db.backend is BackendKind.SQLITE
    assert db.provider._engine is None
    assert not (tmp_path / 'never.db').exists()


@pytest.mark.parametrize('backend', list(BackendKind))
@pytest.mark.parametrize('connection_string', [None, '', '   '])
def test_connect_requires_connection_string(backend, connection_string):
    with pytest.raises(ValidationError):
        dbbridge.connect(backend, connection_string)


def test_connect_unknown_backend():
    with pytest.raises(UnsupportedBackendError):
        dbbridge.connect('informix', 'Server=x;')


def test_connect_with_options():
    options = DatabaseOptions(backend='sqlite', connection_string='app.db', echo=True)
    db = dbbridge.connect(options)
    assert db.options is options


async def test_module_functions(fake_db, fake_strategy):
    assert await dbbridge.execute(fake_db, 'DELETE FROM Users') == 1
    users = await dbbridge.query(fake_db, 'SELECT * FROM Users', shape=User)
    assert [u.name for u in users] == ['A', 'B']
    assert await dbbridge.query_single(fake_db, 'SELECT Name FROM Users', shape=str) == 'A'
    assert fake_db.calls == 3


async def test_close_twice(fake_db, fake_provider):
    await fake_db.execute('DELETE FROM Users')
    await fake_db.close()
    await fake_db.close()
    assert fake_db.closed
    assert fake_provider.closed


@pytest.mark.parametrize('method', ['execute', 'query', 'query_single'])
async def test_calls_after_close(fake_db, fake_strategy, method):
    await fake_db.close()
    with pytest.raises(DisposedError):
        await getattr(fake_db, method)('SELECT 1')
    assert fake_strategy.opened == 0


async def test_context_manager(fake_db):
    async with fake_db as db:
        assert await db.query('SELECT Name FROM Users', shape=str) == ['A', 'B']
    assert fake_db.closed
    with pytest.raises(DisposedError):
        async with fake_db:
            pass


def test_provider_type():
    db = dbbridge.connect('postgres', 'host=localhost dbname=test')
    assert isinstance(db.provider, Provider)
