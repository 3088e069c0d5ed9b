from __future__ import annotations
import sqlite3
from dataclasses import dataclass
from typing import Tuple

from movieCollection.settings import DbSettings
from movieCollection.utils    import log_debug
from movieCollection.metadata import (
    Database, DatabaseInitializer,
    CategoryRepo, CatMovieRepo, MovieRepo,
    CategoryManager, MovieManager, MovieWarningService,
)


@dataclass(slots=True)
class Services:
    """Everything the GUI needs, wired to one `Database`."""
    db: Database
    movies: MovieManager
    categories: CategoryManager
    warnings: MovieWarningService
    links: CatMovieRepo


def build_services(db: Database) -> Services:
    movie_repo = MovieRepo(db)
    return Services(
        db         = db,
        movies     = MovieManager(movie_repo),
        categories = CategoryManager(CategoryRepo(db)),
        warnings   = MovieWarningService(movie_repo),
        links      = CatMovieRepo(db),
    )


def start_services(settings: DbSettings) -> Tuple[Services, str]:
    """Bootstrap the database and return ``(services, status_line)``.

    Raises whatever `DatabaseInitializer` raises; the caller decides how to
    show it.
    """
    db     = Database(settings)
    status = DatabaseInitializer(db).initialize_with_status()
    return build_services(db), status


def cleanup_warning(services: Services) -> str:
    """Warning text for the start-up reminder, ``""`` if nothing to report.

    A failing check is logged and otherwise ignored; it must not block start-up.
    """
    try:
        if services.warnings.has_warnings():
            return services.warnings.build_message()
    except sqlite3.Error as e:
        log_debug(f"Warning check failed: {e}")
    return ""
