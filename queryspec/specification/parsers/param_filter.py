"""
Parser for repeated filter parameters, one condition per entry:

    ?filters=releaseYear[gte]=1990&filters=genre.name[in]=Drama,Comedy&filters=title=Alien

Each entry is `attribute[operator]=value`; `attribute=value` is shorthand for
`attribute[eq]=value`. Operator tokens are the `FilterOperator` values
(`eq`, `neq`, `gt`, `gte`, `lt`, `lte`, `like`, `notlike`, `in`, `notin`,
`between`, `isnull`, `isnotnull`). Operators taking more than one value read a
comma separated list.
"""
import re

from queryspec.core.exceptions import ExpressionParseError
from queryspec.core.root_logger import get_logger

from ..items import FilterItem, MultiFilterItem, SingleFilterItem
from ..operators import FilterOperator, ValueArity, operator_definition
from .base import MultipleFilterParser

logger = get_logger("parsers")


class BracketFilterParser(MultipleFilterParser):
    list_item_sep: str = ","

    _entry_regex = re.compile(r"^\s*(?P<attribute>[^\[\]=\s]+)\s*(?:\[(?P<operator>[^\[\]]*)\])?\s*=(?P<value>.*)$")

    def parse_filter_params(self, filter_params: list[str]) -> list[FilterItem]:
        items = [self.parse_filter_entry(entry) for entry in filter_params if entry.strip()]
        logger.debug(f"Parsed filter params {filter_params} into {items}")
        return items

    def parse_filter_entry(self, entry: str) -> FilterItem:
        match = self._entry_regex.match(entry)
        if match is None:
            raise ExpressionParseError(entry, "expected 'attribute[operator]=value'")

        attribute = match.group("attribute")
        operator_token = match.group("operator")
        operator = FilterOperator.EQUAL if operator_token is None else FilterOperator.from_token(operator_token)
        value = match.group("value").strip()

        if operator_definition(operator).arity is ValueArity.SINGLE:
            return SingleFilterItem(attribute, operator, value)

        values = [v.strip() for v in value.split(self.list_item_sep)]
        if not all(values):
            raise ExpressionParseError(entry, f"'{operator}' expects a '{self.list_item_sep}' separated list of values")
        return MultiFilterItem(attribute, operator, values)
