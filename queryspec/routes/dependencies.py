"""
FastAPI dependency reading the filter and sort channels from the query string.

    GET /movies?filter=releaseYear >= 1979 AND rating IS NOT NULL&sort=rating:desc
    GET /movies?filters=genre.name[in]=Horror,Sci-Fi&filters=title[like]=alien&sorts=title

`filter` and `sort` carry one combined expression each; `filters` and `sorts` may be
repeated, one expression or sort entry per occurrence.
"""
from fastapi import Query

from queryspec.schemas.specification.request import SpecificationRequest


def specification_request(
    filter_param: str | None = Query(None, alias="filter"),
    filter_params: list[str] | None = Query(None, alias="filters"),
    sort_param: str | None = Query(None, alias="sort"),
    sort_params: list[str] | None = Query(None, alias="sorts"),
) -> SpecificationRequest:
    return SpecificationRequest(
        filter_param=filter_param,
        filter_params=filter_params,
        sort_param=sort_param,
        sort_params=sort_params,
    )
