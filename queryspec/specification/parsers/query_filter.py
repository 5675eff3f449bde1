"""
Parser for the single combined filter expression.

The expression is a list of conditions joined by `AND`:

    title LIKE "matrix" AND releaseYear BETWEEN 1990 AND 2000 AND genre.name IN [Drama, "Sci-Fi"]

Each condition is `attribute OPERATOR value`. Supported operators:

- relational operators: `=`, `<>` (or `!=`), `>`, `>=`, `<`, `<=`
- relational keywords: `LIKE`, `NOT LIKE`, `IN [...]`, `NOT IN [...]`,
  `BETWEEN a AND b` (or `BETWEEN [a, b]`), `IS NULL`, `IS NOT NULL`

Keywords are case-insensitive. Values may be double-quoted to keep spaces,
commas, brackets or keywords (`\\"` escapes a quote inside a quoted value).
Lists are enclosed by `[` and `]` and separated by `,`. All conditions are
AND-ed; `OR` and parentheses are rejected.
"""
import re
from typing import NamedTuple

from queryspec.core.exceptions import ExpressionParseError
from queryspec.core.root_logger import get_logger

from ..items import FilterItem, MultiFilterItem, SingleFilterItem
from ..operators import FilterOperator
from .base import SingleFilterParser

logger = get_logger("parsers")


class Token(NamedTuple):
    kind: str  # "string", "symbol" or "word"
    text: str


class QueryFilterParser(SingleFilterParser):
    """
    Parses the combined filter expression into filter items, in the order the
    conditions appear.
    """

    l_list_sep: str = "["
    r_list_sep: str = "]"
    list_item_sep: str = ","
    group_seps: set[str] = {"(", ")"}

    relational_operators: dict[str, FilterOperator] = {
        "=": FilterOperator.EQUAL,
        "<>": FilterOperator.NOT_EQUAL,
        "!=": FilterOperator.NOT_EQUAL,
        ">": FilterOperator.GREATER_THAN,
        ">=": FilterOperator.GREATER_OR_EQUAL,
        "<": FilterOperator.LESS_THAN,
        "<=": FilterOperator.LESS_OR_EQUAL,
    }

    _token_regex = re.compile(
        r"""
        \s*(?:
            (?P<string>"(?:[^"\\]|\\.)*")
          | (?P<symbol><>|!=|>=|<=|=|<|>|\[|\]|,|\(|\))
          | (?P<word>[^\s"\[\](),=<>!]+)
        )
        """,
        re.VERBOSE,
    )
    _escape_regex = re.compile(r"\\(.)")

    def parse_filter_param(self, filter_param: str) -> list[FilterItem]:
        reader = _ConditionReader(self, filter_param, self._tokenize(filter_param))

        items: list[FilterItem] = []
        if reader.at_end():
            return items

        while True:
            items.append(reader.parse_condition())
            if reader.at_end():
                break

            token = reader.next()
            keyword = token.text.upper() if token.kind == "word" else None
            if keyword == "OR":
                raise reader.error("'OR' is not supported, conditions can only be combined with 'AND'")
            if keyword != "AND":
                raise reader.error(f"expected 'AND' between conditions, found '{token.text}'")

        logger.debug(f"Parsed filter param '{filter_param}' into {items}")
        return items

    def _tokenize(self, expression: str) -> list[Token]:
        tokens: list[Token] = []
        position = 0
        stripped_end = len(expression.rstrip())
        while position < stripped_end:
            match = self._token_regex.match(expression, position)
            if match is None or match.end() == position:
                raise ExpressionParseError(expression, f"unexpected character at position {position}")
            kind = match.lastgroup
            text = match.group(kind)
            if kind == "symbol" and text in self.group_seps:
                raise ExpressionParseError(expression, "grouping with parentheses is not supported")
            if kind == "string":
                text = self._escape_regex.sub(r"\1", text[1:-1])
            tokens.append(Token(kind, text))
            position = match.end()
        return tokens


class _ConditionReader:
    """Cursor over the tokens of one expression; created per parse call."""

    def __init__(self, parser: QueryFilterParser, expression: str, tokens: list[Token]) -> None:
        self.parser = parser
        self.expression = expression
        self.tokens = tokens
        self.position = 0

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def peek(self) -> Token | None:
        return None if self.at_end() else self.tokens[self.position]

    def next(self) -> Token:
        if self.at_end():
            raise self.error("unexpected end of expression")
        token = self.tokens[self.position]
        self.position += 1
        return token

    def error(self, reason: str) -> ExpressionParseError:
        return ExpressionParseError(self.expression, reason)

    def expect_keyword(self, *keywords: str) -> str:
        token = self.next()
        if token.kind == "word" and token.text.upper() in keywords:
            return token.text.upper()
        raise self.error(f"expected {' or '.join(keywords)}, found '{token.text}'")

    def expect_symbol(self, symbol: str) -> None:
        token = self.next()
        if token.kind != "symbol" or token.text != symbol:
            raise self.error(f"expected '{symbol}', found '{token.text}'")

    def parse_condition(self) -> FilterItem:
        attribute = self.next()
        if attribute.kind != "word":
            raise self.error(f"expected an attribute name, found '{attribute.text}'")

        token = self.next()
        if token.kind == "symbol":
            operator = self.parser.relational_operators.get(token.text)
            if operator is None:
                raise self.error(f"expected an operator after '{attribute.text}', found '{token.text}'")
            return SingleFilterItem(attribute.text, operator, self.parse_value())

        if token.kind != "word":
            raise self.error(f"expected an operator after '{attribute.text}', found '{token.text}'")

        keyword = token.text.upper()
        if keyword == "LIKE":
            return SingleFilterItem(attribute.text, FilterOperator.LIKE, self.parse_value())
        if keyword == "IN":
            return MultiFilterItem(attribute.text, FilterOperator.IN, self.parse_list())
        if keyword == "NOT":
            if self.expect_keyword("LIKE", "IN") == "LIKE":
                return SingleFilterItem(attribute.text, FilterOperator.NOT_LIKE, self.parse_value())
            return MultiFilterItem(attribute.text, FilterOperator.NOT_IN, self.parse_list())
        if keyword == "BETWEEN":
            return MultiFilterItem(attribute.text, FilterOperator.BETWEEN, self.parse_range())
        if keyword == "IS":
            if self.expect_keyword("NOT", "NULL") == "NOT":
                self.expect_keyword("NULL")
                return SingleFilterItem(attribute.text, FilterOperator.IS_NOT_NULL, "true")
            return SingleFilterItem(attribute.text, FilterOperator.IS_NULL, "true")

        raise self.error(f"unknown operator '{token.text}'")

    def parse_value(self) -> str:
        token = self.next()
        if token.kind == "symbol":
            raise self.error(f"expected a value, found '{token.text}'")
        return token.text

    def parse_list(self) -> list[str]:
        self.expect_symbol(self.parser.l_list_sep)
        values = [self.parse_value()]
        while True:
            token = self.next()
            if token.kind == "symbol" and token.text == self.parser.r_list_sep:
                return values
            if token.kind == "symbol" and token.text == self.parser.list_item_sep:
                values.append(self.parse_value())
                continue
            raise self.error(
                f"expected '{self.parser.list_item_sep}' or '{self.parser.r_list_sep}', found '{token.text}'"
            )

    def parse_range(self) -> list[str]:
        token = self.peek()
        if token is not None and token.kind == "symbol" and token.text == self.parser.l_list_sep:
            bounds = self.parse_list()
            if len(bounds) != 2:
                raise self.error(f"BETWEEN expects two values, got {len(bounds)}")
            return bounds

        lower = self.parse_value()
        self.expect_keyword("AND")
        return [lower, self.parse_value()]
