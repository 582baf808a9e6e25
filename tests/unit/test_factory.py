import pytest
from dbbridge import BackendKind, Provider, UnsupportedBackendError
from dbbridge import ValidationError, create_connection, create_provider
from dbbridge.strategy import MySQLStrategy, SQLiteStrategy


@pytest.mark.parametrize('kind', list(BackendKind))
def test_create_provider_for_every_backend(kind):
    provider = create_provider(kind, 'Server=localhost;Database=test;')
    assert isinstance(provider, Provider)
    assert provider.backend is kind
    assert provider._engine is None


def test_mariadb_and_mysql_share_binding():
    mariadb = create_provider(BackendKind.MARIADB, 'mariadb://u:p@h/db')
    mysql = create_provider(BackendKind.MYSQL, 'mysql://u:p@h/db')
    assert type(mariadb.strategy) is type(mysql.strategy) is MySQLStrategy


@pytest.mark.parametrize('kind', list(BackendKind))
@pytest.mark.parametrize('connection_string', [None, '', ' \t '])
def test_blank_connection_string(kind, connection_string):
    with pytest.raises(ValidationError):
        create_provider(kind, connection_string)


def test_unknown_backend():
    with pytest.raises(UnsupportedBackendError):
        create_provider('db2', 'DATABASE=sample;')


def test_forwarded_options():
    provider = create_provider('sqlite', 'app.db', echo=True, connect_args={'timeout': 5})
    assert isinstance(provider.strategy, SQLiteStrategy)
    assert provider.options.echo is True
    assert provider.options.connect_args == {'timeout': 5}


def test_create_connection_validates_eagerly():
    with pytest.raises(ValidationError):
        create_connection('sqlite', '')
    with pytest.raises(UnsupportedBackendError):
        create_connection('db2', 'x')
