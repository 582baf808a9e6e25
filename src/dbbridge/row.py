"""Fetched rows, independent of the driver that produced them."""
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any


class ResultRow:
    """One fetched row as ordered (column name, value) pairs.

    SQL NULL is None; the field count is fixed for the life of the row.
    """

    __slots__ = ('columns', 'values')

    def __init__(self, columns: Sequence[str], values: Sequence[Any]) -> None:
        self.columns = tuple(columns)
        self.values = tuple(values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(zip(self.columns, self.values))

    def __repr__(self) -> str:
        return f'ResultRow({dict(self)!r})'

    @property
    def field_count(self) -> int:
        return len(self.values)

    def get_value(self, index: int = 0) -> Any:
        """Value of the column at ``index``, the first column by default."""
        return self.values[index]

    def to_dict(self) -> dict[str, Any]:
        """Convert row to dictionary."""
        return dict(zip(self.columns, self.values))


@dataclass
class ResultSet:
    """Column names and every row of one query, in fetch order."""

    columns: list[str] = field(default_factory=list)
    rows: list[Sequence[Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[ResultRow]:
        for values in self.rows:
            yield ResultRow(self.columns, values)

    @classmethod
    def from_result(cls, result: Any) -> 'ResultSet':
        """Drain a SQLAlchemy result.

        Statements that return no rows (DDL, DML without RETURNING) give an
        empty set.
        """
        if not result.returns_rows:
            return cls()
        columns = list(result.keys())
        return cls(columns=columns, rows=[tuple(row) for row in result.fetchall()])
