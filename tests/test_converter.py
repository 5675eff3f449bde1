import datetime
import uuid
from decimal import Decimal

import pytest
from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.types import NullType

from queryspec.core.exceptions import ValueConversionError
from queryspec.specification.converter import to_bool

from .models import MovieStatus


@pytest.mark.parametrize(
    "value, target_type, expected",
    [
        ("42", Integer(), 42),
        ("42", Integer, 42),
        ("1.50", Numeric(), Decimal("1.50")),
        ("alien", String(50), "alien"),
        ("yes", Boolean(), True),
        ("0", bool, False),
        ("2024-02-29", Date(), datetime.date(2024, 2, 29)),
        ("2024-02-29T10:30:00", DateTime(), datetime.datetime(2024, 2, 29, 10, 30)),
    ],
)
def test_convert_to_column_type(converter, value, target_type, expected):
    assert converter.convert(value, target_type) == expected


def test_convert_datetime_keeps_time(converter):
    # datetime is a subclass of date and must not be truncated
    value = converter.convert("1979-05-25 20:15", datetime.datetime)
    assert value == datetime.datetime(1979, 5, 25, 20, 15)


def test_convert_uuid(converter):
    raw = "6f1c8c3e-5c1a-4bb0-9f5b-2d9f0e1a7c11"
    assert converter.convert(raw, uuid.UUID) == uuid.UUID(raw)


def test_convert_enum_by_name_then_value(converter):
    column_type = SAEnum(MovieStatus)
    assert converter.convert("ANNOUNCED", column_type) is MovieStatus.ANNOUNCED
    assert converter.convert("released", column_type) is MovieStatus.RELEASED


def test_unknown_type_passes_value_through(converter):
    assert converter.convert("anything", NullType()) == "anything"


@pytest.mark.parametrize(
    "value, target_type",
    [
        ("abc", Integer()),
        ("maybe", Boolean()),
        ("not-a-date", Date()),
        ("x", Numeric()),
        ("PREMIERED", SAEnum(MovieStatus)),
    ],
)
def test_convert_failure(converter, value, target_type):
    with pytest.raises(ValueConversionError) as exc_info:
        converter.convert(value, target_type)

    assert exc_info.value.value == value


def test_registered_converter_wins(converter):
    converter.register(int, lambda value: int(value, 16))
    assert converter.convert("ff", Integer()) == 255


def test_convert_all(converter):
    assert converter.convert_all(["1", "2"], Integer()) == [1, 2]


@pytest.mark.parametrize("value", ["true", "T", " Yes ", "y", "1"])
def test_to_bool_true(value):
    assert to_bool(value) is True


def test_to_bool_rejects_unknown():
    with pytest.raises(ValueError):
        to_bool("nope")


@pytest.mark.parametrize(
    "value, target_type, expected",
    [
        ("1982", datetime.date, datetime.date(1982, 1, 1)),
        ("1982-06", Date(), datetime.date(1982, 6, 1)),
        ("1982", DateTime(), datetime.datetime(1982, 1, 1)),
    ],
)
def test_partial_dates_start_at_the_period(converter, value, target_type, expected):
    # missing parts never come from the current date
    assert converter.convert(value, target_type) == expected
