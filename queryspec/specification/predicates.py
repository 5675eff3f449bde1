"""
Predicate and ordering specifications.

A specification is the produced artifact for one filter or order-by item. It keeps
the attribute path, the raw value(s) and the query context it was created with,
and builds its SQLAlchemy expression on demand:

- `FilterSpecification.to_predicate()` returns a boolean `ColumnElement`.
- `OrderBySpecification.to_order_by()` returns the ordering clauses for the item.

Filter strategies form a closed set: `Comparison`, `Like`, `In`, `Between` and
`IsNull`. The operator registry in `operators.py` binds each operator to one of
them.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, case, literal
from sqlalchemy.sql import sqltypes

from queryspec.core.exceptions import ValueConversionError
from queryspec.schemas.specification.ordering import OrderDirection

if TYPE_CHECKING:
    from .context import QueryContext
    from .converter import ValueConverter

LIKE_ESCAPE_CHAR = "\\"


def escape_like(value: str) -> str:
    """Escapes LIKE wildcards so the value is matched literally."""
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


class CriteriaExpressionSpecification:
    """
    Base for specifications built on a single attribute expression.

    The expression is resolved through the query context when the specification
    is turned into SQL, so joins are created lazily and shared through the
    context's join cache.
    """

    def __init__(self, attribute_path: str, context: QueryContext) -> None:
        self.attribute_path = attribute_path
        self.context = context

    def build_criteria_expression(self) -> ColumnElement[Any]:
        expression, _ = self.context.resolve(self.attribute_path)
        return expression

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.attribute_path}>"


class FilterSpecification(CriteriaExpressionSpecification, ABC):
    """
    A filter strategy: produces the boolean predicate for one filter item.

    `value` is the raw string of a single-value item or the raw list of a
    multi-value item.
    """

    def __init__(self, attribute_path: str, value: Any, context: QueryContext, converter: ValueConverter) -> None:
        super().__init__(attribute_path, context)
        self.value = value
        self.converter = converter

    @abstractmethod
    def build_predicate(self, expression: ColumnElement[Any]) -> ColumnElement[bool]: ...

    def to_predicate(self) -> ColumnElement[bool]:
        with self.context.atomic():
            return self.build_predicate(self.build_criteria_expression())

    def convert(self, expression: ColumnElement[Any], value: str) -> Any:
        return self.converter.convert(value, expression.type)


class Comparison(FilterSpecification):
    """`=`, `!=`, `>`, `>=`, `<`, `<=` against a single converted value."""

    def __init__(
        self,
        attribute_path: str,
        value: str,
        context: QueryContext,
        converter: ValueConverter,
        *,
        compare: Callable[[Any, Any], ColumnElement[bool]],
    ) -> None:
        super().__init__(attribute_path, value, context, converter)
        self.compare = compare

    def build_predicate(self, expression: ColumnElement[Any]) -> ColumnElement[bool]:
        return self.compare(expression, self.convert(expression, self.value))


class Like(FilterSpecification):
    """Case-insensitive "contains" match on string attributes."""

    def __init__(
        self, attribute_path: str, value: str, context: QueryContext, converter: ValueConverter, *, negate: bool = False
    ) -> None:
        super().__init__(attribute_path, value, context, converter)
        self.negate = negate

    def build_predicate(self, expression: ColumnElement[Any]) -> ColumnElement[bool]:
        if not isinstance(expression.type, sqltypes.String):
            raise ValueConversionError(
                self.value, expression.type, f"LIKE can only be used with string attributes, not '{self.attribute_path}'"
            )
        pattern = f"%{escape_like(self.value)}%"
        if self.negate:
            return expression.not_ilike(pattern, escape=LIKE_ESCAPE_CHAR)
        return expression.ilike(pattern, escape=LIKE_ESCAPE_CHAR)


class In(FilterSpecification):
    """Membership in a list of converted values."""

    def __init__(
        self,
        attribute_path: str,
        value: list[str],
        context: QueryContext,
        converter: ValueConverter,
        *,
        negate: bool = False,
    ) -> None:
        super().__init__(attribute_path, value, context, converter)
        self.negate = negate

    def build_predicate(self, expression: ColumnElement[Any]) -> ColumnElement[bool]:
        values = self.converter.convert_all(self.value, expression.type)
        if self.negate:
            return expression.not_in(values)
        return expression.in_(values)


class Between(FilterSpecification):
    """Inclusive range between the two converted values, lower bound first."""

    def build_predicate(self, expression: ColumnElement[Any]) -> ColumnElement[bool]:
        lower, upper = self.converter.convert_all(self.value, expression.type)
        return expression.between(lower, upper)


class IsNull(FilterSpecification):
    """
    Null check. The single value is a boolean flag: `isnull=true` selects rows
    where the attribute is null, `isnull=false` rows where it is not.
    """

    def __init__(
        self, attribute_path: str, value: str, context: QueryContext, converter: ValueConverter, *, negate: bool = False
    ) -> None:
        super().__init__(attribute_path, value, context, converter)
        self.negate = negate

    def build_predicate(self, expression: ColumnElement[Any]) -> ColumnElement[bool]:
        expect_null = self.converter.convert(self.value, bool)
        if self.negate:
            expect_null = not expect_null
        return expression.is_(None) if expect_null else expression.is_not(None)


class OrderBySpecification(CriteriaExpressionSpecification):
    """
    Ordering for one attribute with a fixed null placement.

    Two clauses are produced, in this order:
    1. a null-rank key, ascending: `CASE WHEN attr IS NULL THEN -1 ELSE 0 END` for an
       ascending sort, `... THEN 1 ...` for a descending sort;
    2. the attribute itself in the requested direction.

    Nulls therefore come first in ascending and last in descending order on every
    database engine, whatever its own NULL ordering is.
    """

    def __init__(self, attribute_path: str, context: QueryContext, direction: OrderDirection) -> None:
        super().__init__(attribute_path, context)
        self.direction = direction

    def to_order_by(self) -> list[ColumnElement[Any]]:
        expression = self.build_criteria_expression()
        null_rank = case(
            (expression.is_(None), literal(-1 if self.direction.is_ascending else 1)),
            else_=literal(0),
        )
        value_order = expression.asc() if self.direction.is_ascending else expression.desc()
        return [null_rank.asc(), value_order]
