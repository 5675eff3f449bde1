import datetime
from collections.abc import Generator

from pytest import MonkeyPatch, fixture

mp = MonkeyPatch()
mp.setenv("PRODUCTION", "True")
mp.setenv("TESTING", "True")

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from queryspec.specification import QueryContext, SpecificationQueryBuilder, ValueConverter

from .models import Actor, Base, Director, Genre, Movie, MovieStatus


def seed(session: Session) -> None:
    sci_fi, horror, crime = Genre(id=1, name="Sci-Fi"), Genre(id=2, name="Horror"), Genre(id=3, name="Crime")
    scott = Director(id=1, name="Ridley Scott", birth_year=1937)
    cameron = Director(id=2, name="James Cameron", birth_year=1954)
    kubrick = Director(id=3, name="Stanley Kubrick", birth_year=1928)
    mann = Director(id=4, name="Michael Mann", birth_year=None)
    weaver = Actor(id=1, name="Sigourney Weaver")
    nicholson = Actor(id=2, name="Jack Nicholson")
    pacino = Actor(id=3, name="Al Pacino")
    ford = Actor(id=4, name="Harrison Ford")

    session.add_all(
        [
            Movie(
                id=1,
                title="Alien",
                release_year=1979,
                rating=None,
                released_on=datetime.date(1979, 5, 25),
                genre=sci_fi,
                director=scott,
                actors=[weaver],
            ),
            Movie(
                id=2,
                title="Aliens",
                release_year=1986,
                rating=3.0,
                released_on=datetime.date(1986, 7, 18),
                genre=sci_fi,
                director=cameron,
                actors=[weaver],
            ),
            Movie(
                id=3,
                title="The Shining",
                release_year=1980,
                rating=1.0,
                released_on=datetime.date(1980, 5, 23),
                genre=horror,
                director=kubrick,
                actors=[nicholson],
            ),
            Movie(
                id=4,
                title="Heat",
                release_year=1995,
                rating=None,
                released_on=None,
                is_active=False,
                status=MovieStatus.ANNOUNCED,
                genre=crime,
                director=mann,
                actors=[pacino],
            ),
            Movie(
                id=5,
                title="Blade Runner",
                release_year=1982,
                rating=2.0,
                released_on=datetime.date(1982, 6, 25),
                genre=sci_fi,
                director=scott,
                actors=[ford],
            ),
        ]
    )
    session.commit()


@fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        seed(session)

    yield engine

    engine.dispose()


@fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@fixture
def context() -> QueryContext:
    return QueryContext(Movie)


@fixture
def converter() -> ValueConverter:
    return ValueConverter()


@fixture
def builder() -> SpecificationQueryBuilder:
    return SpecificationQueryBuilder(Movie)


@fixture
def movie_ids(session: Session):
    """Executes a movie statement and returns the ids of the rows, in result order."""

    def run(statement) -> list[int]:
        return [movie.id for movie in session.scalars(statement)]

    return run
