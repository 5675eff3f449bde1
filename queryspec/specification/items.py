"""
Filter and order-by items: validated, not yet resolved, pieces of a request.

Items are checked for completeness when they are constructed (a missing attribute,
operator, direction or value raises `InvalidConstructionError` straight away).
Whether the operator fits the item, whether the attribute exists and whether the
values convert to the attribute type is only checked once the item is turned into
a specification against a `QueryContext`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement

from queryspec.core.exceptions import InvalidConstructionError, OperatorArityMismatchError
from queryspec.schemas.specification.ordering import OrderDirection

from .context import QueryContext
from .converter import ValueConverter
from .operators import FilterOperator, ValueArity, operator_definition
from .predicates import FilterSpecification, OrderBySpecification


def _require(value: Any, name: str, item_type: str) -> None:
    if value is None:
        raise InvalidConstructionError(f"{item_type} requires a non-null {name}")


class FilterItem(ABC):
    """
    An (attribute, operator, value-or-values) triple waiting for predicate production.
    """

    accepted_arities: frozenset[ValueArity] = frozenset()

    def __init__(self, attribute: str, operator: FilterOperator) -> None:
        _require(attribute, "attribute", type(self).__name__)
        _require(operator, "operator", type(self).__name__)
        self.attribute = attribute
        self.operator = operator

    @property
    @abstractmethod
    def raw_value(self) -> Any: ...

    @property
    @abstractmethod
    def value_count(self) -> int: ...

    def _check_arity(self) -> None:
        arity = operator_definition(self.operator).arity
        if arity not in self.accepted_arities:
            raise OperatorArityMismatchError(
                self.operator, type(self).__name__, f"the operator expects {arity.value} value(s)"
            )
        if not arity.accepts(self.value_count):
            raise OperatorArityMismatchError(
                self.operator,
                type(self).__name__,
                f"the operator expects {arity.value} value(s), got {self.value_count}",
            )

    def create_specification(self, context: QueryContext, converter: ValueConverter) -> FilterSpecification:
        """
        Creates the predicate strategy registered for this item's operator.

        The operator arity is checked before anything touches the context.

        Raises:
            InvalidConstructionError: If `context` or `converter` is None.
            OperatorArityMismatchError: If the operator does not fit this item type or value count.
            UnsupportedOperatorError: If the operator has no registered strategy.
        """
        _require(context, "query context", type(self).__name__)
        _require(converter, "value converter", type(self).__name__)
        self._check_arity()
        factory = operator_definition(self.operator).factory
        return factory(context.path_for(self.attribute), self.raw_value, context, converter)

    def produce(self, context: QueryContext, converter: ValueConverter) -> ColumnElement[bool]:
        """Creates the specification and returns its predicate."""
        return self.create_specification(context, converter).to_predicate()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.attribute, self.operator, self.raw_value) == (other.attribute, other.operator, other.raw_value)

    def __hash__(self) -> int:
        raw = self.raw_value
        return hash((type(self), self.attribute, self.operator, tuple(raw) if isinstance(raw, list) else raw))


class SingleFilterItem(FilterItem):
    """A filter carrying exactly one raw value."""

    accepted_arities = frozenset({ValueArity.SINGLE})

    def __init__(self, attribute: str, operator: FilterOperator, value: str) -> None:
        super().__init__(attribute, operator)
        _require(value, "value", type(self).__name__)
        self.value = value

    @property
    def raw_value(self) -> str:
        return self.value

    @property
    def value_count(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"SingleFilterItem({self.attribute!r}, {self.operator}, {self.value!r})"


class MultiFilterItem(FilterItem):
    """A filter carrying an ordered, non-empty list of raw values."""

    accepted_arities = frozenset({ValueArity.PAIR, ValueArity.MULTIPLE})

    def __init__(self, attribute: str, operator: FilterOperator, values: Sequence[str]) -> None:
        super().__init__(attribute, operator)
        _require(values, "values", type(self).__name__)
        if isinstance(values, str) or len(values) == 0:
            raise InvalidConstructionError("MultiFilterItem requires a non-empty sequence of values")
        if any(value is None for value in values):
            raise InvalidConstructionError("MultiFilterItem values cannot contain null entries")
        self.values = list(values)

    @property
    def raw_value(self) -> list[str]:
        return list(self.values)

    @property
    def value_count(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return f"MultiFilterItem({self.attribute!r}, {self.operator}, {self.values!r})"


class OrderByItem:
    """
    An (attribute, direction) pair waiting for ordering production. Immutable.
    """

    __slots__ = ("attribute", "direction")

    def __init__(self, attribute: str, direction: OrderDirection) -> None:
        _require(attribute, "attribute", "OrderByItem")
        _require(direction, "direction", "OrderByItem")
        object.__setattr__(self, "attribute", attribute)
        try:
            direction = OrderDirection(direction)
        except ValueError as e:
            choices = [d.value for d in OrderDirection]
            raise InvalidConstructionError(f"OrderByItem direction must be one of {choices}") from e
        object.__setattr__(self, "direction", direction)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("OrderByItem is immutable")

    def create_specification(self, context: QueryContext) -> OrderBySpecification:
        _require(context, "query context", "OrderByItem")
        return OrderBySpecification(context.path_for(self.attribute), context, self.direction)

    def produce(self, context: QueryContext) -> list[ColumnElement[Any]]:
        """Returns the ordering clauses for this item: the null-rank key, then the attribute."""
        return self.create_specification(context).to_order_by()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderByItem):
            return NotImplemented
        return (self.attribute, self.direction) == (other.attribute, other.direction)

    def __hash__(self) -> int:
        return hash((self.attribute, self.direction))

    def __repr__(self) -> str:
        return f"OrderByItem({self.attribute!r}, {self.direction.value})"
