"""
Row mapping: fetched rows to caller-supplied target shapes.

A query names the shape of its results. Three kinds are understood:

- scalar shapes (``int``, ``str``, ``Decimal``, ``datetime``, ``UUID``,
  ``Optional[...]`` of those, ...) read the first column of every row
- ``dict`` returns each row as a column -> value mapping
- any other class is a record: a fresh instance is built per row and its
  writable fields are filled from the columns whose names match,
  case-insensitively

Record fields come from ``column_fields()`` when the class defines it, so a
shape can rename or restrict what gets populated. Without it they are
derived from dataclass fields, class annotations and settable properties.

Usage:
    @dataclass
    class User:
        id: int = 0
        name: str = ''
        age: int | None = None

    users = map_rows(resultset, User)
"""
import dataclasses
import inspect
import logging
import typing
from collections.abc import Mapping
from typing import Any, ClassVar, Protocol, runtime_checkable

from dbbridge.cache import cached_by_shape
from dbbridge.exceptions import ValidationError
from dbbridge.row import ResultRow, ResultSet
from dbbridge.types import coerce, default_for, is_scalar_shape

logger = logging.getLogger(__name__)

__all__ = [
    'Field',
    'ColumnMapped',
    'Shape',
    'ScalarShape',
    'MappingShape',
    'RecordShape',
    'get_shape',
    'record_fields',
    'map_row',
    'map_rows',
]


@dataclasses.dataclass(frozen=True)
class Field:
    """A settable attribute of a record shape and its declared type."""

    name: str
    type: Any = Any

    def assign(self, instance: Any, value: Any) -> None:
        setattr(instance, self.name, coerce(value, self.type))


@runtime_checkable
class ColumnMapped(Protocol):
    """Record shapes that declare their own column -> field map."""

    @classmethod
    def column_fields(cls) -> Mapping[str, Field]: ...


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError) as err:
        logger.debug(f'Could not resolve annotations of {obj!r}: {err}')
        return dict(getattr(obj, '__annotations__', {}))


def _is_classvar(tp: Any) -> bool:
    return tp is ClassVar or typing.get_origin(tp) is ClassVar


def _derived_fields(shape: type) -> dict[str, Field]:
    hints = _type_hints(shape)
    fields: dict[str, Field] = {}

    if dataclasses.is_dataclass(shape):
        if shape.__dataclass_params__.frozen:
            logger.debug(f'{shape.__name__} is frozen, no writable fields')
            return fields
        for f in dataclasses.fields(shape):
            fields[f.name] = Field(f.name, hints.get(f.name, Any))
    else:
        for name, tp in hints.items():
            if not _is_classvar(tp):
                fields[name] = Field(name, tp)

    for name, member in inspect.getmembers(shape, lambda m: isinstance(m, property)):
        if member.fset is None:
            continue
        fields[name] = Field(name, _type_hints(member.fget).get('return', Any))

    return {name: f for name, f in fields.items() if not name.startswith('_')}


@cached_by_shape('record_fields')
def record_fields(shape: type) -> dict[str, Field]:
    """Writable fields of a record shape keyed by lower-cased column name.
    """
    if isinstance(shape, ColumnMapped):
        declared = shape.column_fields()
    else:
        declared = _derived_fields(shape)
    return {column.lower(): f for column, f in declared.items()}


class Shape:
    """How the rows of one query become values."""

    def __init__(self, target: Any) -> None:
        self.target = target

    def map(self, row: ResultRow) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.target!r})'


class ScalarShape(Shape):
    """First column of each row, coerced to the target type.

    Only the first column is read even when the statement selects more.
    """

    def __init__(self, target: Any) -> None:
        super().__init__(target)
        self.default = default_for(target)

    def map(self, row: ResultRow) -> Any:
        if not row.field_count:
            return self.default
        value = row.get_value(0)
        if value is None:
            return self.default
        return coerce(value, self.target)


class MappingShape(Shape):
    """Each row as a plain dict."""

    def map(self, row: ResultRow) -> dict[str, Any]:
        return row.to_dict()


class RecordShape(Shape):
    """A new instance per row with matching fields populated."""

    def __init__(self, target: type) -> None:
        super().__init__(target)
        self.fields = record_fields(target)
        self._constructible = False

    def _check_constructible(self) -> None:
        try:
            inspect.signature(self.target).bind()
        except TypeError as err:
            raise ValidationError(
                f'{self.target.__name__} must be constructible without arguments') from err
        except ValueError:
            logger.debug(f'No signature for {self.target.__name__}, calling it as is')
        self._constructible = True

    def create(self) -> Any:
        """New instance; errors raised by the constructor itself propagate."""
        if not self._constructible:
            self._check_constructible()
        return self.target()

    def map(self, row: ResultRow) -> Any:
        item = self.create()
        for column, value in row:
            if value is None:
                continue
            field = self.fields.get(column.lower())
            if field is not None:
                field.assign(item, value)
        return item


@cached_by_shape('shapes')
def get_shape(target: Any) -> Shape:
    """Resolve the shape for a requested target type.
    """
    if target is dict:
        return MappingShape(target)
    if is_scalar_shape(target):
        return ScalarShape(target)
    if isinstance(target, type):
        return RecordShape(target)
    raise ValidationError(f'Unsupported result shape: {target!r}')


def map_row(row: ResultRow, target: Any) -> Any:
    """Map a single row to ``target``.
    """
    return get_shape(target).map(row)


def map_rows(resultset: ResultSet, target: Any) -> list[Any]:
    """Map every row of a result set, preserving order.
    """
    shape = get_shape(target)
    return [shape.map(row) for row in resultset]
