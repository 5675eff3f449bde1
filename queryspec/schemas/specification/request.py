"""
Request schema carrying the filter and sort channels of one query.

Every channel is optional:

- `filter_param`: a single combined filter expression
- `filter_params`: a list of independent filter expressions
- `filter_items`: filter items built by the caller
- `sort_param`, `sort_params`, `sort_items`: the same three channels for sorting
"""
from pydantic import ConfigDict

from queryspec.schemas._queryspec import _QueryspecModel
from queryspec.specification.items import FilterItem, OrderByItem


class SpecificationRequest(_QueryspecModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    filter_param: str | None = None
    """Combined filter expression, e.g. `title LIKE "alien" AND releaseYear >= 1979`."""
    filter_params: list[str] | None = None
    """Independent filter expressions, e.g. `["releaseYear[gte]=1979", "genre.name[in]=Horror,Sci-Fi"]`."""
    filter_items: list[FilterItem] | None = None
    """Pre-built filter items, appended after the parsed ones."""

    sort_param: str | None = None
    """Combined sort expression, e.g. `releaseYear:desc,title`."""
    sort_params: list[str] | None = None
    """Independent sort entries, e.g. `["releaseYear:desc", "title"]`."""
    sort_items: list[OrderByItem] | None = None
    """Pre-built order-by items, appended after the parsed ones."""
