import pytest
from sqlalchemy import ColumnElement

from queryspec.core.exceptions import (
    AttributeResolutionError,
    InvalidConstructionError,
    OperatorArityMismatchError,
    ValueConversionError,
)
from queryspec.schemas.specification import OrderDirection, SpecificationQueryConfig
from queryspec.specification import FilterOperator, MultiFilterItem, OrderByItem, QueryContext, SingleFilterItem
from queryspec.specification.predicates import Between, Comparison, In, Like, OrderBySpecification

from .models import Movie


class TestConstruction:
    @pytest.mark.parametrize(
        "attribute, operator, value",
        [
            (None, FilterOperator.EQUAL, "1"),
            ("title", None, "1"),
            ("title", FilterOperator.EQUAL, None),
        ],
    )
    def test_single_item_requires_every_field(self, attribute, operator, value):
        with pytest.raises(InvalidConstructionError):
            SingleFilterItem(attribute, operator, value)

    @pytest.mark.parametrize("values", [None, [], "1,2", ["1", None]])
    def test_multi_item_requires_values(self, values):
        with pytest.raises(InvalidConstructionError):
            MultiFilterItem("rating", FilterOperator.IN, values)

    def test_invalid_construction_is_a_value_error(self):
        with pytest.raises(ValueError):
            OrderByItem(None, OrderDirection.asc)

    def test_order_by_item_requires_direction(self):
        with pytest.raises(InvalidConstructionError):
            OrderByItem("title", None)

    @pytest.mark.parametrize("direction", ["up", "ASCENDING", ""])
    def test_order_by_item_rejects_unknown_direction(self, direction):
        with pytest.raises(InvalidConstructionError):
            OrderByItem("title", direction)

    def test_order_by_item_is_immutable(self):
        item = OrderByItem("title", OrderDirection.desc)
        with pytest.raises(AttributeError):
            item.direction = OrderDirection.asc
        assert item.direction is OrderDirection.desc

    def test_item_equality(self):
        assert SingleFilterItem("title", FilterOperator.EQUAL, "Alien") == SingleFilterItem(
            "title", FilterOperator.EQUAL, "Alien"
        )
        assert MultiFilterItem("rating", FilterOperator.IN, ["1", "2"]) == MultiFilterItem(
            "rating", FilterOperator.IN, ("1", "2")
        )
        assert OrderByItem("title", "asc") == OrderByItem("title", OrderDirection.asc)
        assert len({OrderByItem("title", "asc"), OrderByItem("title", OrderDirection.asc)}) == 1


class TestCreateSpecification:
    def test_requires_context_and_converter(self, context, converter):
        item = SingleFilterItem("title", FilterOperator.EQUAL, "Alien")
        with pytest.raises(InvalidConstructionError):
            item.create_specification(None, converter)
        with pytest.raises(InvalidConstructionError):
            item.create_specification(context, None)
        with pytest.raises(InvalidConstructionError):
            OrderByItem("title", OrderDirection.asc).create_specification(None)

    @pytest.mark.parametrize(
        "item, strategy, path",
        [
            (SingleFilterItem("releaseYear", FilterOperator.GREATER_THAN, "1980"), Comparison, "release_year"),
            (SingleFilterItem("title", FilterOperator.LIKE, "alien"), Like, "title"),
            (MultiFilterItem("releaseYear", FilterOperator.IN, ["1979", "1986"]), In, "release_year"),
            (MultiFilterItem("director.birthYear", FilterOperator.BETWEEN, ["1930", "1960"]), Between, "director.birth_year"),
        ],
    )
    def test_specification_type(self, context, converter, item, strategy, path):
        specification = item.create_specification(context, converter)
        assert isinstance(specification, strategy)
        assert specification.attribute_path == path

    def test_unmapped_attribute_is_used_as_path(self, converter):
        context = QueryContext(Movie, SpecificationQueryConfig(attribute_paths={"genre": "genre.name"}))

        mapped = SingleFilterItem("genre", FilterOperator.EQUAL, "Horror").create_specification(context, converter)
        direct = SingleFilterItem("title", FilterOperator.EQUAL, "Heat").create_specification(context, converter)

        assert mapped.attribute_path == "genre.name"
        assert direct.attribute_path == "title"

    @pytest.mark.parametrize(
        "item",
        [
            MultiFilterItem("title", FilterOperator.EQUAL, ["Alien"]),
            SingleFilterItem("title", FilterOperator.IN, "Alien"),
            MultiFilterItem("releaseYear", FilterOperator.BETWEEN, ["1979"]),
            MultiFilterItem("releaseYear", FilterOperator.BETWEEN, ["1979", "1980", "1981"]),
        ],
    )
    def test_arity_mismatch_leaves_context_untouched(self, context, converter, item):
        with pytest.raises(OperatorArityMismatchError) as exc_info:
            item.create_specification(context, converter)

        assert exc_info.value.operator is item.operator
        assert exc_info.value.item_type == type(item).__name__
        assert context.joins == {}

    def test_creation_does_not_resolve(self, context, converter):
        # resolution is deferred until the predicate is produced
        specification = SingleFilterItem("genre.name", FilterOperator.EQUAL, "Horror").create_specification(
            context, converter
        )
        assert context.joins == {}

        specification.to_predicate()
        assert list(context.joins) == ["genre"]

    def test_order_by_specification(self, context):
        specification = OrderByItem("releaseYear", OrderDirection.desc).create_specification(context)
        assert isinstance(specification, OrderBySpecification)
        assert specification.attribute_path == "release_year"


class TestProduce:
    def test_produce_returns_predicate(self, context, converter):
        predicate = SingleFilterItem("rating", FilterOperator.GREATER_OR_EQUAL, "2").produce(context, converter)
        assert isinstance(predicate, ColumnElement)

    def test_unknown_attribute(self, context, converter):
        with pytest.raises(AttributeResolutionError) as exc_info:
            SingleFilterItem("budget", FilterOperator.EQUAL, "1").produce(context, converter)
        assert exc_info.value.attribute_path == "budget"

    def test_unconvertible_value(self, context, converter):
        with pytest.raises(ValueConversionError):
            SingleFilterItem("releaseYear", FilterOperator.EQUAL, "last year").produce(context, converter)

    @pytest.mark.parametrize(
        "item, error",
        [
            (SingleFilterItem("actors.budget", FilterOperator.EQUAL, "1"), AttributeResolutionError),
            (SingleFilterItem("director.birthYear", FilterOperator.EQUAL, "soon"), ValueConversionError),
            (MultiFilterItem("director.birthYear", FilterOperator.IN, ["1937", "later"]), ValueConversionError),
            (SingleFilterItem("genre.id", FilterOperator.LIKE, "1"), ValueConversionError),
        ],
    )
    def test_failed_item_leaves_no_join(self, context, converter, item, error):
        context.resolve("genre.name")
        with pytest.raises(error):
            item.produce(context, converter)

        assert list(context.joins) == ["genre"]

    def test_like_on_non_string_attribute(self, context, converter):
        with pytest.raises(ValueConversionError):
            SingleFilterItem("releaseYear", FilterOperator.LIKE, "19").produce(context, converter)

    def test_order_by_produces_null_rank_then_value(self, context):
        clauses = OrderByItem("rating", OrderDirection.asc).produce(context)
        assert len(clauses) == 2
