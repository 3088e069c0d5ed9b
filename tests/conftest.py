# tests/conftest.py
from datetime import datetime, timedelta

import pytest

from movieCollection.settings import DbSettings
from movieCollection.metadata import (
    Category, Movie, Database, DatabaseInitializer,
    CategoryRepo, CatMovieRepo, MovieRepo,
    CategoryManager, MovieManager, MovieWarningService,
)


@pytest.fixture(autouse=True)
def _log_to_tmp(monkeypatch, tmp_path):
    """Keep log_debug() output out of the package folder."""
    import movieCollection.utils as utils
    monkeypatch.setattr(utils, "LOG_PATH", tmp_path / "logs" / "debug.log", raising=True)


@pytest.fixture
def db_settings(tmp_path):
    return DbSettings(database=str(tmp_path / "collection.sqlite"), auto_create=True)


@pytest.fixture
def db(db_settings):
    """Empty database: schema only, no seed rows."""
    database = Database(db_settings)
    DatabaseInitializer(database, seed=False).initialize()
    return database


@pytest.fixture
def movie_repo(db):
    return MovieRepo(db)


@pytest.fixture
def category_repo(db):
    return CategoryRepo(db)


@pytest.fixture
def links(db):
    return CatMovieRepo(db)


@pytest.fixture
def movie_manager(movie_repo):
    return MovieManager(movie_repo)


@pytest.fixture
def category_manager(category_repo):
    return CategoryManager(category_repo)


@pytest.fixture
def warning_service(movie_repo):
    return MovieWarningService(movie_repo)


@pytest.fixture
def categories(category_repo):
    """{name: Category} for a handful of saved categories."""
    names = ["Action", "Comedy", "Crime", "Drama", "Sci-Fi"]
    return {n: category_repo.create(Category(name=n)) for n in names}


@pytest.fixture
def make_movie(movie_repo):
    """Factory that saves a movie and returns it with its id set."""
    def _make(name, imdb=7.0, personal=None, cats=(), last_view=None, file_link=None):
        movie = Movie(
            name            = name,
            imdb_rating     = imdb,
            personal_rating = personal,
            file_link       = file_link or f"/movies/{name}.mp4",
            last_view       = last_view,
            categories      = list(cats),
        )
        return movie_repo.create(movie)
    return _make


def years_ago(years: int, days: int = 2) -> datetime:
    return (datetime.now() - timedelta(days=365 * years + days)).replace(microsecond=0)
