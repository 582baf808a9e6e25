"""
Exception classes raised by the access layer.

Errors reported by a backend (a refused connection, a rejected statement) are
never wrapped here. They reach the caller as the SQLAlchemy exception that
carries the driver error in ``.orig``; the groups at the bottom of this module
exist so callers can catch them without importing SQLAlchemy.
"""
import sqlalchemy.exc


class DatabaseError(Exception):
    """Base class for all dbbridge errors.
    """


class ValidationError(DatabaseError):
    """Error in input validation.
    """


class UnsupportedBackendError(DatabaseError):
    """Backend tag does not name a known binding.
    """


class DisposedError(DatabaseError):
    """Operation attempted on a closed provider or database handle.
    """


class TypeConversionError(DatabaseError):
    """Error converting a fetched value to the requested type.
    """


DbConnectionError = (
    sqlalchemy.exc.OperationalError,
    sqlalchemy.exc.InterfaceError,
    sqlalchemy.exc.ArgumentError,
    )

ProgrammingError = (
    sqlalchemy.exc.ProgrammingError,
    sqlalchemy.exc.DataError,
    sqlalchemy.exc.NotSupportedError,
    )

IntegrityError = (
    sqlalchemy.exc.IntegrityError,
    )

StatementError = ProgrammingError + IntegrityError
