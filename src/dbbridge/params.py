"""
Parameter binding.

Callers pass named parameters the way their engine spells them (``@Name``
for SQL Server, ``:Name`` for Oracle, plain ``Name`` elsewhere). Names are
kept as given unless the binding's ``parameter_name`` hook normalizes them;
only Oracle does, adding the ``:`` sigil. The binding turns the names into
SQLAlchemy bind keys when it executes the statement. Values are normalized by
TypeConverter: numpy and pyarrow scalars become Python scalars and missing
values (None, NaN, NaT, ``pd.NA``) become NULL.
"""
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from dbbridge.exceptions import ValidationError
from dbbridge.types import TypeConverter

if TYPE_CHECKING:
    from dbbridge.strategy import DatabaseStrategy

logger = logging.getLogger(__name__)

__all__ = ['bind_parameters']


def bind_parameters(strategy: 'DatabaseStrategy',
                    parameters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Translate a ParameterSet into bind values for one statement.

    Returns an empty dict when there are no parameters.
    """
    if not parameters:
        return {}
    if not isinstance(parameters, Mapping):
        raise ValidationError(f'Parameters must be a mapping of name to value, '
                              f'got {type(parameters).__name__}')

    bound: dict[str, Any] = {}
    for name, value in parameters.items():
        if not isinstance(name, str) or not name.strip('@:$'):
            raise ValidationError(f'Invalid parameter name: {name!r}')
        strategy.bind_parameter(bound, name, TypeConverter.convert_value(value))
    logger.debug(f'Bound {len(bound)} parameters: {list(bound)}')
    return bound
