"""
Interfaces of the expression parsers used by the `SpecificationParserManager`.

There is one parser per request channel: a single combined filter expression, a
list of independent filter expressions, and the same two shapes for sorting.
"""
from abc import ABC, abstractmethod

from queryspec.core.config import get_app_settings
from queryspec.core.exceptions import ExpressionParseError
from queryspec.schemas.specification.ordering import OrderDirection

from ..items import FilterItem, OrderByItem


class SingleFilterParser(ABC):
    @abstractmethod
    def parse_filter_param(self, filter_param: str) -> list[FilterItem]:
        """Parses one expression holding every filter condition."""


class MultipleFilterParser(ABC):
    @abstractmethod
    def parse_filter_params(self, filter_params: list[str]) -> list[FilterItem]:
        """Parses a list of expressions holding one filter condition each."""


class SingleSortParser(ABC):
    @abstractmethod
    def parse_sort_param(self, sort_param: str) -> list[OrderByItem]:
        """Parses one expression holding every sort entry."""


class MultipleSortParser(ABC):
    @abstractmethod
    def parse_sort_params(self, sort_params: list[str]) -> list[OrderByItem]:
        """Parses a list of expressions holding one sort entry each."""


class SortEntryParser:
    """
    Shared handling of `attribute[:direction]` sort entries, e.g. `title:desc`.
    Entries without a direction use `default_direction`, which defaults to the
    `DEFAULT_ORDER_DIRECTION` setting.
    """

    direction_sep: str = ":"

    def __init__(self, default_direction: OrderDirection | None = None) -> None:
        self.default_direction = default_direction or OrderDirection(get_app_settings().DEFAULT_ORDER_DIRECTION)

    def parse_sort_entry(self, entry: str) -> OrderByItem:
        attribute, sep, direction_str = entry.strip().partition(self.direction_sep)
        attribute = attribute.strip()
        if not attribute:
            raise ExpressionParseError(entry, "sort attribute cannot be empty")

        if not sep:
            return OrderByItem(attribute, self.default_direction)

        try:
            direction = OrderDirection(direction_str.strip().lower())
        except ValueError as e:
            raise ExpressionParseError(entry, f"unknown sort direction '{direction_str.strip()}'") from e
        return OrderByItem(attribute, direction)
