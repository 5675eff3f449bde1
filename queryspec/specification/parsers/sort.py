"""
Default sort parsers.

- `CommaSortParser` reads one parameter with comma separated entries:
  `?sort=genre.name:asc,releaseYear:desc`
- `RepeatedSortParser` reads a repeated parameter, one entry each:
  `?sorts=genre.name:asc&sorts=releaseYear:desc`
"""
from queryspec.core.root_logger import get_logger

from ..items import OrderByItem
from .base import MultipleSortParser, SingleSortParser, SortEntryParser

logger = get_logger("parsers")


class CommaSortParser(SortEntryParser, SingleSortParser):
    entry_sep: str = ","

    def parse_sort_param(self, sort_param: str) -> list[OrderByItem]:
        items = [
            self.parse_sort_entry(entry) for entry in sort_param.split(self.entry_sep) if entry.strip()
        ]
        logger.debug(f"Parsed sort param '{sort_param}' into {items}")
        return items


class RepeatedSortParser(SortEntryParser, MultipleSortParser):
    def parse_sort_params(self, sort_params: list[str]) -> list[OrderByItem]:
        items = [self.parse_sort_entry(entry) for entry in sort_params if entry.strip()]
        logger.debug(f"Parsed sort params {sort_params} into {items}")
        return items
