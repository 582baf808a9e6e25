import pytest
from dbbridge import BackendKind, DatabaseOptions
from dbbridge import UnsupportedBackendError, ValidationError
from dbbridge.options import load_database_options


def test_init_defaults():
    """Test default initialization"""
    options = DatabaseOptions(backend='sqlite', connection_string='app.db')

    assert options.backend is BackendKind.SQLITE
    assert options.echo is False
    assert options.connect_args == {}
    assert options.engine_kwargs == {}


@pytest.mark.parametrize('connection_string', [None, '', '   ', '\t\n'])
def test_connection_string_required(connection_string):
    with pytest.raises(ValidationError):
        DatabaseOptions(backend='postgres', connection_string=connection_string)


def test_connection_string_checked_before_backend():
    """A bad connection string wins over a bad backend"""
    with pytest.raises(ValidationError):
        DatabaseOptions(backend='informix', connection_string='')


def test_unknown_backend():
    with pytest.raises(UnsupportedBackendError):
        DatabaseOptions(backend='informix', connection_string='x')


def test_load_from_dict():
    options = load_database_options({'backend': 'pg', 'connection_string': 'host=db'}, echo=True)
    assert options.backend is BackendKind.POSTGRES
    assert options.echo is True


def test_load_returns_ready_options():
    options = DatabaseOptions(backend='sqlite', connection_string='app.db')
    assert load_database_options(options) is options
