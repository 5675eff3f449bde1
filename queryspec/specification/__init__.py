from .builder import SpecificationQueryBuilder
from .context import QueryContext
from .converter import ValueConverter
from .items import FilterItem, MultiFilterItem, OrderByItem, SingleFilterItem
from .manager import SpecificationParserManager
from .operators import OPERATOR_REGISTRY, FilterOperator, ValueArity, operator_definition
from .predicates import FilterSpecification, OrderBySpecification

__all__ = [
    "OPERATOR_REGISTRY",
    "FilterItem",
    "FilterOperator",
    "FilterSpecification",
    "MultiFilterItem",
    "OrderByItem",
    "OrderBySpecification",
    "QueryContext",
    "SingleFilterItem",
    "SpecificationParserManager",
    "SpecificationQueryBuilder",
    "ValueArity",
    "ValueConverter",
    "operator_definition",
]
