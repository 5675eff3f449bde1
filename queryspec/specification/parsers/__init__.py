from .base import MultipleFilterParser, MultipleSortParser, SingleFilterParser, SingleSortParser
from .param_filter import BracketFilterParser
from .query_filter import QueryFilterParser
from .sort import CommaSortParser, RepeatedSortParser

__all__ = [
    "BracketFilterParser",
    "CommaSortParser",
    "MultipleFilterParser",
    "MultipleSortParser",
    "QueryFilterParser",
    "RepeatedSortParser",
    "SingleFilterParser",
    "SingleSortParser",
]
