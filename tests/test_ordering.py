from sqlalchemy import select

from queryspec.schemas.specification import OrderDirection
from queryspec.specification import OrderByItem, SpecificationQueryBuilder

from .models import Movie


def ratings(session, items, context):
    statement = select(Movie).order_by(*SpecificationQueryBuilder.order_by_clauses(items, context))
    return [movie.rating for movie in session.scalars(context.apply_joins(statement))]


def test_nulls_first_ascending(session, context):
    assert ratings(session, [OrderByItem("rating", OrderDirection.asc)], context) == [None, None, 1.0, 2.0, 3.0]


def test_nulls_last_descending(session, context):
    assert ratings(session, [OrderByItem("rating", OrderDirection.desc)], context) == [3.0, 2.0, 1.0, None, None]


def test_items_apply_in_order(session, movie_ids, context):
    items = [OrderByItem("genre.name", OrderDirection.desc), OrderByItem("releaseYear", OrderDirection.asc)]
    statement = context.apply_joins(
        select(Movie).order_by(*SpecificationQueryBuilder.order_by_clauses(items, context))
    )

    # Sci-Fi (1979, 1982, 1986), Horror, Crime
    assert movie_ids(statement) == [1, 5, 2, 3, 4]


def test_null_rank_precedes_the_value(context):
    null_rank, value = OrderByItem("rating", OrderDirection.desc).produce(context)
    sql = str(select(Movie).order_by(null_rank, value).compile(compile_kwargs={"literal_binds": True}))

    assert "movies.rating IS NULL" in sql
    assert "THEN 1 ELSE 0 END ASC, movies.rating DESC" in sql
