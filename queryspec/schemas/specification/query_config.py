"""
Configuration consumed by the query context when it maps logical attribute names
to attribute paths and joins the relationships those paths cross.
"""

import enum

from pydantic import Field

from queryspec.core.config import get_app_settings
from queryspec.schemas._queryspec import _QueryspecModel


class JoinType(str, enum.Enum):
    """
    Enumeration of the join types used for relationships crossed by an attribute path.
    """

    left = "left"  # LEFT OUTER JOIN, rows without a related entity are kept.
    inner = "inner"  # INNER JOIN, rows without a related entity are dropped.


def _default_join_type() -> JoinType:
    return JoinType(get_app_settings().DEFAULT_JOIN_TYPE)


def _default_decamelize() -> bool:
    return get_app_settings().DECAMELIZE_ATTRIBUTES


class SpecificationQueryConfig(_QueryspecModel):
    """
    Per-entity configuration for resolving filter and sort attributes.

    Example:
        `SpecificationQueryConfig(attribute_paths={"genre": "genre.name", "director": "director.last_name"})`
        lets a request filter on `genre` while the query compares `Genre.name`
        through a join on `Movie.genre`.
    """

    attribute_paths: dict[str, str] = {}
    """Logical attribute name (as it appears in a request) to dotted attribute path on the root entity."""
    join_type: JoinType = Field(default_factory=_default_join_type)
    """Join type for relationships crossed by attribute paths."""
    decamelize_attributes: bool = Field(default_factory=_default_decamelize)
    """Convert unmapped camelCase attribute names to snake_case before resolving them."""
