"""
Turns a `SpecificationRequest` into a SQLAlchemy `Select` for one root entity.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, Select, and_, select

from queryspec.core.root_logger import get_logger
from queryspec.schemas.specification.query_config import SpecificationQueryConfig

from .context import QueryContext
from .converter import ValueConverter
from .items import FilterItem, OrderByItem
from .manager import SpecificationParserManager

if TYPE_CHECKING:
    from queryspec.schemas.specification.request import SpecificationRequest

logger = get_logger("builder")


class SpecificationQueryBuilder:
    """
    Builds filtered and ordered select statements for `model`.

    Every call to `build` gets a fresh `QueryContext`, so a builder can be shared
    between requests. The statement is returned, never executed.

    Attributes:
        model: The root ORM entity.
        query_config (SpecificationQueryConfig): Attribute path mapping and join options.
        value_converter (ValueConverter): Converter for raw filter values.
        parser_manager (SpecificationParserManager): Aggregates the request channels.
        default_request (SpecificationRequest | None): Channels used when a request leaves them unset,
            e.g. a default `sort_param`.
    """

    def __init__(
        self,
        model: Any,
        query_config: SpecificationQueryConfig | None = None,
        value_converter: ValueConverter | None = None,
        parser_manager: SpecificationParserManager | None = None,
        default_request: SpecificationRequest | None = None,
    ) -> None:
        self.model = model
        self.query_config = query_config or SpecificationQueryConfig()
        self.value_converter = value_converter or ValueConverter()
        self.parser_manager = parser_manager or SpecificationParserManager.with_default_parsers()
        self.default_request = default_request

    def new_context(self) -> QueryContext:
        return QueryContext(self.model, self.query_config)

    def _with_defaults(self, request: SpecificationRequest | None) -> SpecificationRequest | None:
        if self.default_request is None:
            return request
        merged = self.default_request.model_copy(deep=True)
        if request is not None:
            merged.merge(request)
        return merged

    def predicates(self, items: Iterable[FilterItem], context: QueryContext) -> list[ColumnElement[bool]]:
        return [item.produce(context, self.value_converter) for item in items]

    @staticmethod
    def order_by_clauses(items: Iterable[OrderByItem], context: QueryContext) -> list[ColumnElement[Any]]:
        clauses: list[ColumnElement[Any]] = []
        for item in items:
            clauses.extend(item.produce(context))
        return clauses

    def build(self, request: SpecificationRequest | None, statement: Select | None = None) -> Select:
        """
        Applies the filters and orderings of `request` to `statement`.

        Args:
            request (SpecificationRequest | None): The filter and sort channels; None means no filtering.
            statement (Select | None, optional): The statement to extend. Defaults to `select(model)`.

        Returns:
            Select: The statement with the joins, the AND-ed predicates and the orderings applied.

        Raises:
            SpecificationError: If any channel cannot be parsed, resolved or converted.
        """
        request = self._with_defaults(request)
        context = self.new_context()

        filter_items = self.parser_manager.produce_filter_items(request)
        order_by_items = self.parser_manager.produce_order_by_items(request)

        predicates = self.predicates(filter_items, context)
        order_by = self.order_by_clauses(order_by_items, context)

        stmt = context.apply_joins(select(self.model) if statement is None else statement)
        if predicates:
            stmt = stmt.where(and_(*predicates))
        if order_by:
            stmt = stmt.order_by(*order_by)

        logger.debug(
            f"Built query for {getattr(self.model, '__name__', self.model)}: "
            f"{len(predicates)} predicate(s), {len(order_by_items)} ordering(s), {len(context.joins)} join(s)"
        )
        return stmt
