"""
Conversion of raw request strings into the native value type of a filtered attribute.

The target type is taken from the SQLAlchemy column type of the resolved attribute
(`Integer`, `Date`, `Boolean`, ...) through its `python_type`, or given directly as
a Python type. Dates and datetimes are parsed with `dateutil` so that the formats
accepted by the API are not limited to ISO 8601.
"""
import datetime
import enum
import uuid
from collections.abc import Callable
from decimal import Decimal
from typing import Any

from dateutil import parser as date_parser
from sqlalchemy.types import TypeEngine

from queryspec.core.exceptions import ValueConversionError

TRUE_VALUES = {"true", "t", "yes", "y", "1"}
FALSE_VALUES = {"false", "f", "no", "n", "0"}

# missing date parts default to the start of the period, never to the current date
PARSE_DEFAULT = datetime.datetime(1, 1, 1)


def to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"unrecognized boolean value '{value}'")


def to_datetime(value: str) -> datetime.datetime:
    return date_parser.parse(value, default=PARSE_DEFAULT)


def to_date(value: str) -> datetime.date:
    return date_parser.parse(value, default=PARSE_DEFAULT).date()


def to_time(value: str) -> datetime.time:
    return date_parser.parse(value, default=PARSE_DEFAULT).timetz()


class ValueConverter:
    """
    Converts raw string values into the Python type expected by an attribute.

    Converters are looked up by exact Python type first, then along the type's MRO,
    so `datetime` (a subclass of `date`) keeps its own converter. `Enum` subclasses
    are matched by member name and then by member value. Types with no converter
    and SQLAlchemy types without a `python_type` pass the raw string through.
    """

    def __init__(self, converters: dict[type, Callable[[str], Any]] | None = None) -> None:
        self._converters: dict[type, Callable[[str], Any]] = {
            str: str,
            int: int,
            float: float,
            Decimal: Decimal,
            bool: to_bool,
            datetime.datetime: to_datetime,
            datetime.date: to_date,
            datetime.time: to_time,
            uuid.UUID: uuid.UUID,
        }
        if converters:
            self._converters.update(converters)

    def register(self, python_type: type, converter: Callable[[str], Any]) -> None:
        """Registers (or replaces) the converter used for `python_type`."""
        self._converters[python_type] = converter

    @staticmethod
    def python_type_of(target_type: Any) -> type | None:
        """
        Returns the Python type behind `target_type`.

        Args:
            target_type: A SQLAlchemy `TypeEngine` instance or class, or a Python type.

        Returns:
            type | None: The Python type, or None when the SQLAlchemy type does not declare one.
        """
        if isinstance(target_type, type) and issubclass(target_type, TypeEngine):
            target_type = target_type()

        if isinstance(target_type, TypeEngine):
            # sa.Enum declares `str` as its python_type unless built from an Enum class
            enum_class = getattr(target_type, "enum_class", None)
            if enum_class is not None:
                return enum_class
            try:
                return target_type.python_type
            except NotImplementedError:
                return None

        if isinstance(target_type, type):
            return target_type

        return None

    def _converter_for(self, python_type: type) -> Callable[[str], Any] | None:
        if issubclass(python_type, enum.Enum):
            return lambda value: self._to_enum(python_type, value)
        for candidate in python_type.__mro__:
            if candidate in self._converters:
                return self._converters[candidate]
        return None

    @staticmethod
    def _to_enum(enum_class: type[enum.Enum], value: str) -> enum.Enum:
        if value in enum_class.__members__:
            return enum_class[value]
        for member in enum_class:
            if str(member.value) == value:
                return member
        raise ValueError(f"expected one of {[member.name for member in enum_class]}")

    def convert(self, value: str, target_type: Any) -> Any:
        """
        Converts `value` to the native type of `target_type`.

        Args:
            value (str): The raw value taken from the request.
            target_type: A SQLAlchemy column type (instance or class) or a Python type.

        Returns:
            Any: The converted value.

        Raises:
            ValueConversionError: If the value cannot be represented in the target type.
        """
        python_type = self.python_type_of(target_type)
        if python_type is None:
            return value

        converter = self._converter_for(python_type)
        if converter is None:
            return value

        try:
            return converter(value)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ValueConversionError(value, python_type, str(e)) from e

    def convert_all(self, values: list[str], target_type: Any) -> list[Any]:
        return [self.convert(value, target_type) for value in values]
