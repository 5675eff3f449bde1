"""
The closed set of filter operators and the registry that dispatches each one to
its predicate strategy.

Each `FilterOperator` is registered exactly once with:
- its value arity (`ValueArity`): how many values a filter item must carry, and
- a factory building the `FilterSpecification` that produces the predicate.

The registry is filled at import time and verified to cover every operator, so a
missing or duplicated registration fails when the module is imported rather than
when a request happens to use the operator. After import it is only read.
"""
import enum
import operator as py_operator
from collections.abc import Callable
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, NamedTuple

from queryspec.core.exceptions import UnsupportedOperatorError

from .predicates import Between, Comparison, FilterSpecification, In, IsNull, Like

if TYPE_CHECKING:
    from .context import QueryContext
    from .converter import ValueConverter

SpecificationFactory = Callable[[str, Any, "QueryContext", "ValueConverter"], FilterSpecification]


class ValueArity(enum.Enum):
    """
    Number of values an operator works with.
    """

    SINGLE = "exactly one"
    PAIR = "exactly two"
    MULTIPLE = "one or more"

    def accepts(self, count: int) -> bool:
        if self is ValueArity.SINGLE:
            return count == 1
        if self is ValueArity.PAIR:
            return count == 2
        return count >= 1


class FilterOperator(str, enum.Enum):
    """
    Enumeration of the filter operators, keyed by the token used in request expressions.
    """

    EQUAL = "eq"
    NOT_EQUAL = "neq"
    GREATER_THAN = "gt"
    GREATER_OR_EQUAL = "gte"
    LESS_THAN = "lt"
    LESS_OR_EQUAL = "lte"
    LIKE = "like"
    NOT_LIKE = "notlike"
    IN = "in"
    NOT_IN = "notin"
    BETWEEN = "between"
    IS_NULL = "isnull"
    IS_NOT_NULL = "isnotnull"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "FilterOperator":
        """
        Returns the operator for a request token (case-insensitive).

        Raises:
            UnsupportedOperatorError: If no operator uses the token.
        """
        try:
            return cls(token.strip().lower())
        except ValueError as e:
            raise UnsupportedOperatorError(token) from e

    @property
    def arity(self) -> ValueArity:
        return operator_definition(self).arity


class OperatorDefinition(NamedTuple):
    arity: ValueArity
    factory: SpecificationFactory


_registry: dict[FilterOperator, OperatorDefinition] = {}


def _register(operator: FilterOperator, arity: ValueArity, factory: SpecificationFactory) -> None:
    if operator in _registry:
        raise RuntimeError(f"Filter operator '{operator}' is registered twice")
    _registry[operator] = OperatorDefinition(arity, factory)


_register(FilterOperator.EQUAL, ValueArity.SINGLE, partial(Comparison, compare=py_operator.eq))
_register(FilterOperator.NOT_EQUAL, ValueArity.SINGLE, partial(Comparison, compare=py_operator.ne))
_register(FilterOperator.GREATER_THAN, ValueArity.SINGLE, partial(Comparison, compare=py_operator.gt))
_register(FilterOperator.GREATER_OR_EQUAL, ValueArity.SINGLE, partial(Comparison, compare=py_operator.ge))
_register(FilterOperator.LESS_THAN, ValueArity.SINGLE, partial(Comparison, compare=py_operator.lt))
_register(FilterOperator.LESS_OR_EQUAL, ValueArity.SINGLE, partial(Comparison, compare=py_operator.le))
_register(FilterOperator.LIKE, ValueArity.SINGLE, Like)
_register(FilterOperator.NOT_LIKE, ValueArity.SINGLE, partial(Like, negate=True))
_register(FilterOperator.IN, ValueArity.MULTIPLE, In)
_register(FilterOperator.NOT_IN, ValueArity.MULTIPLE, partial(In, negate=True))
_register(FilterOperator.BETWEEN, ValueArity.PAIR, Between)
_register(FilterOperator.IS_NULL, ValueArity.SINGLE, IsNull)
_register(FilterOperator.IS_NOT_NULL, ValueArity.SINGLE, partial(IsNull, negate=True))

_unregistered = [member for member in FilterOperator if member not in _registry]
if _unregistered:
    raise RuntimeError(f"Filter operators without a predicate strategy: {_unregistered}")

OPERATOR_REGISTRY: MappingProxyType[FilterOperator, OperatorDefinition] = MappingProxyType(_registry)


def operator_definition(operator: FilterOperator) -> OperatorDefinition:
    """
    Returns the arity and predicate factory registered for `operator`.

    Raises:
        UnsupportedOperatorError: If the operator has no registered strategy.
    """
    try:
        return OPERATOR_REGISTRY[operator]
    except KeyError as e:
        raise UnsupportedOperatorError(operator) from e
