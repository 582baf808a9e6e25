"""
Consolidated type handling for database operations.

This module provides:
- TypeConverter: Convert Python values to database-compatible bind values
- Scalar shapes: which target types read a single column, and their defaults
- coerce: Convert a fetched value to a requested Python type
"""
import datetime
import decimal
import enum
import logging
import math
import types
import typing
import uuid
from typing import Any

import dateutil.parser
import numpy as np
import pandas as pd
import pyarrow as pa

from dbbridge.exceptions import TypeConversionError

logger = logging.getLogger(__name__)

NUMPY_FLOAT_TYPES = (np.floating,)
NUMPY_INT_TYPES = (np.integer, np.unsignedinteger)


# Type Converter - Handles Python -> Database value conversion

def _convert_numpy_value(val: Any) -> Any:
    """Convert NumPy value to Python type."""
    if isinstance(val, np.floating) and np.isnan(val):
        return None

    if isinstance(val, np.datetime64):
        if np.isnat(val):
            return None
        return pd.Timestamp(val).to_pydatetime()

    if isinstance(val, np.bool_ | np.floating | np.integer | np.unsignedinteger):
        return val.item()

    return val


def _convert_pyarrow_value(value: Any) -> Any:
    """Convert PyArrow scalar to Python type."""
    if not value.is_valid:
        return None
    return value.as_py()


class TypeConverter:
    """Universal type conversion for bind values.

    Handles NumPy, Pandas, and PyArrow scalars. Values that mean "missing"
    become None so the driver binds SQL NULL.
    """

    @staticmethod
    def convert_value(value: Any) -> Any:
        """Convert a single value to a database-compatible format."""
        if value is None:
            return None

        if isinstance(value, float) and math.isnan(value):
            return None

        if isinstance(value, pa.Scalar):
            return _convert_pyarrow_value(value)

        if isinstance(value, (*NUMPY_FLOAT_TYPES, *NUMPY_INT_TYPES, np.bool_, np.datetime64)):
            return _convert_numpy_value(value)

        if value is pd.NA or value is pd.NaT:
            return None

        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()

        return value

    @staticmethod
    def convert_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
        """Convert a mapping of parameters for database operations."""
        if params is None:
            return None
        return {k: TypeConverter.convert_value(v) for k, v in params.items()}


# Scalar shapes - target types that read the first column only

SCALAR_TYPES: tuple[type, ...] = (
    int, float, decimal.Decimal, bool, str, bytes,
    datetime.datetime, datetime.date, datetime.time, uuid.UUID,
    )

_DEFAULTS: dict[type, Any] = {
    int: 0,
    float: 0.0,
    decimal.Decimal: decimal.Decimal(0),
    bool: False,
    }


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Return the underlying type of ``Optional[X]`` and whether it was optional.

    >>> unwrap_optional(int | None)
    (<class 'int'>, True)
    >>> unwrap_optional(str)
    (<class 'str'>, False)
    """
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return tp, False


def is_scalar_shape(tp: Any) -> bool:
    """Whether ``tp`` names a single-value shape rather than a record."""
    if tp is Any or tp is object:
        return True
    base, _ = unwrap_optional(tp)
    if not isinstance(base, type):
        return False
    return base in SCALAR_TYPES or issubclass(base, enum.Enum)


def default_for(tp: Any) -> Any:
    """Default value of a scalar shape: zero for numbers, False for bool,
    None for everything else and for any Optional shape.
    """
    base, optional = unwrap_optional(tp)
    if optional:
        return None
    return _DEFAULTS.get(base)


# Coercion - Database value -> requested Python type

def _to_int(value: Any) -> int:
    if isinstance(value, float | decimal.Decimal):
        return int(round(value))
    if isinstance(value, str):
        return int(value.strip())
    if isinstance(value, int):
        return int(value)
    raise TypeError(f'cannot convert {type(value).__name__} to int')


def _to_float(value: Any) -> float:
    if isinstance(value, int | float | decimal.Decimal | str):
        return float(value)
    raise TypeError(f'cannot convert {type(value).__name__} to float')


def _to_decimal(value: Any) -> decimal.Decimal:
    if isinstance(value, float):
        return decimal.Decimal(str(value))
    if isinstance(value, str):
        return decimal.Decimal(value.strip())
    if isinstance(value, int):
        return decimal.Decimal(value)
    raise TypeError(f'cannot convert {type(value).__name__} to Decimal')


def _to_bool(value: Any) -> bool:
    if isinstance(value, int | float | decimal.Decimal):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {'true', 'false'}:
            return text == 'true'
    raise ValueError(f'cannot convert {value!r} to bool')


def _to_str(value: Any) -> str:
    if isinstance(value, bytes | bytearray | memoryview):
        raise TypeError('cannot convert binary data to str')
    return str(value)


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytearray | memoryview):
        return bytes(value)
    raise TypeError(f'cannot convert {type(value).__name__} to bytes')


def _to_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, str):
        return dateutil.parser.isoparse(value.strip())
    raise TypeError(f'cannot convert {type(value).__name__} to datetime')


def _to_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, str):
        return dateutil.parser.isoparse(value.strip()).date()
    raise TypeError(f'cannot convert {type(value).__name__} to date')


def _to_time(value: Any) -> datetime.time:
    if isinstance(value, datetime.datetime):
        return value.time()
    if isinstance(value, datetime.timedelta):
        # MySQL drivers return TIME columns as timedelta
        return (datetime.datetime.min + value).time()
    if isinstance(value, str):
        return datetime.time.fromisoformat(value.strip())
    raise TypeError(f'cannot convert {type(value).__name__} to time')


def _to_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, str):
        return uuid.UUID(value.strip())
    if isinstance(value, bytes | bytearray) and len(value) == 16:
        return uuid.UUID(bytes=bytes(value))
    raise TypeError(f'cannot convert {type(value).__name__} to UUID')


_CONVERTERS = {
    int: _to_int,
    float: _to_float,
    decimal.Decimal: _to_decimal,
    bool: _to_bool,
    str: _to_str,
    bytes: _to_bytes,
    datetime.datetime: _to_datetime,
    datetime.date: _to_date,
    datetime.time: _to_time,
    uuid.UUID: _to_uuid,
    }


def coerce(value: Any, target: Any) -> Any:
    """Convert a non-NULL fetched value to ``target``.

    Optional targets are unwrapped first. A value that already has the exact
    target type is returned unchanged.

    >>> coerce('42', int)
    42
    >>> coerce(2.5, int)
    2
    >>> coerce(1, bool)
    True
    >>> coerce('2024-01-31', datetime.date)
    datetime.date(2024, 1, 31)
    """
    target, _ = unwrap_optional(target)
    if target is Any or target is object:
        return value
    if type(value) is target:
        return value

    if isinstance(target, type) and issubclass(target, enum.Enum):
        try:
            return target(value)
        except ValueError as err:
            raise TypeConversionError(f'Cannot convert {value!r} to {target.__name__}') from err

    converter = _CONVERTERS.get(target)
    if converter is None:
        if isinstance(target, type) and isinstance(value, target):
            return value
        name = getattr(target, '__name__', repr(target))
        raise TypeConversionError(f'Cannot convert {type(value).__name__} to {name}')

    try:
        return converter(value)
    except (TypeError, ValueError, ArithmeticError, OverflowError) as err:
        raise TypeConversionError(
            f'Cannot convert {type(value).__name__} value {value!r} to {target.__name__}') from err


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
