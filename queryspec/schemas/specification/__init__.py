from .ordering import OrderDirection
from .query_config import JoinType, SpecificationQueryConfig

__all__ = ["JoinType", "OrderDirection", "SpecificationQueryConfig"]
