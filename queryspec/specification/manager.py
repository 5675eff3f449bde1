"""
Aggregation of the request channels into one filter item list and one order-by item list.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, TypeVar

from queryspec.core.exceptions import ParserNotProvidedError
from queryspec.core.root_logger import get_logger

from .items import FilterItem, OrderByItem
from .parsers import (
    BracketFilterParser,
    CommaSortParser,
    MultipleFilterParser,
    MultipleSortParser,
    QueryFilterParser,
    RepeatedSortParser,
    SingleFilterParser,
    SingleSortParser,
)

if TYPE_CHECKING:
    from queryspec.schemas.specification.request import SpecificationRequest

logger = get_logger("manager")

Item = TypeVar("Item")
Raw = TypeVar("Raw")
P = TypeVar("P")


class SpecificationParserManager:
    """
    Merges every filter/sort channel of a `SpecificationRequest`.

    Channels are concatenated in a fixed order: the single combined expression,
    then the list of independent expressions, then the items supplied directly.
    Within a channel, items keep the order their parser produced them in.

    A parser is only needed for the channels a request actually uses; a populated
    channel without a parser raises `ParserNotProvidedError`. Errors raised by the
    parsers propagate unchanged, so one malformed expression fails the whole call.
    """

    def __init__(
        self,
        single_filter_parser: SingleFilterParser | None = None,
        multiple_filter_parser: MultipleFilterParser | None = None,
        single_sort_parser: SingleSortParser | None = None,
        multiple_sort_parser: MultipleSortParser | None = None,
    ) -> None:
        self.single_filter_parser = single_filter_parser
        self.multiple_filter_parser = multiple_filter_parser
        self.single_sort_parser = single_sort_parser
        self.multiple_sort_parser = multiple_sort_parser

    @classmethod
    def with_default_parsers(cls) -> SpecificationParserManager:
        return cls(
            single_filter_parser=QueryFilterParser(),
            multiple_filter_parser=BracketFilterParser(),
            single_sort_parser=CommaSortParser(),
            multiple_sort_parser=RepeatedSortParser(),
        )

    @staticmethod
    def _parse_channel(
        channel: str,
        raw: Raw | None,
        parser: P | None,
        parse: Callable[[P, Raw], list[Item] | None],
    ) -> list[Item] | None:
        if raw is None:
            return []
        if parser is None:
            raise ParserNotProvidedError(channel)
        return parse(parser, raw)

    @staticmethod
    def _concat(channels: Iterable[list[Item] | None]) -> list[Item]:
        return [item for channel in channels if channel is not None for item in channel]

    def produce_filter_items(self, request: SpecificationRequest | None) -> list[FilterItem]:
        """
        Returns the filter items of every channel of `request`, in channel order.

        Raises:
            ParserNotProvidedError: If a filter channel is populated but has no parser.
        """
        if request is None:
            return []

        items = self._concat(
            [
                self._parse_channel(
                    "filter_param",
                    request.filter_param,
                    self.single_filter_parser,
                    lambda parser, raw: parser.parse_filter_param(raw),
                ),
                self._parse_channel(
                    "filter_params",
                    request.filter_params,
                    self.multiple_filter_parser,
                    lambda parser, raw: parser.parse_filter_params(raw),
                ),
                request.filter_items,
            ]
        )
        logger.debug(f"Produced {len(items)} filter item(s)")
        return items

    def produce_order_by_items(self, request: SpecificationRequest | None) -> list[OrderByItem]:
        """
        Returns the order-by items of every channel of `request`, in channel order.

        Raises:
            ParserNotProvidedError: If a sort channel is populated but has no parser.
        """
        if request is None:
            return []

        items = self._concat(
            [
                self._parse_channel(
                    "sort_param",
                    request.sort_param,
                    self.single_sort_parser,
                    lambda parser, raw: parser.parse_sort_param(raw),
                ),
                self._parse_channel(
                    "sort_params",
                    request.sort_params,
                    self.multiple_sort_parser,
                    lambda parser, raw: parser.parse_sort_params(raw),
                ),
                request.sort_items,
            ]
        )
        logger.debug(f"Produced {len(items)} order-by item(s)")
        return items
