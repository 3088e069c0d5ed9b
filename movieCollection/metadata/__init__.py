"""
metadata
~~~~~~~~
Top-level package that bundles:

* core        – dataclasses + repositories
* services    – validation, filter / sort, cleanup warnings
* movie_collection_db / initializer – connections and schema bootstrap
"""

# ── core objects ──────────────────────────────────────────────────────────
from movieCollection.metadata.core.models import Category, Movie
from movieCollection.metadata.core.repo   import CategoryRepo, CatMovieRepo, MovieRepo

# ── storage ──────────────────────────────────────────────────────────────
from movieCollection.metadata.movie_collection_db import Database
from movieCollection.metadata.initializer         import DatabaseInitializer

# ── business rules ───────────────────────────────────────────────────────
from movieCollection.metadata.services import (
    CategoryManager,
    MovieManager,
    MovieWarningService,
)

__all__ = [
    "Category",
    "Movie",
    "CategoryRepo",
    "CatMovieRepo",
    "MovieRepo",
    "Database",
    "DatabaseInitializer",
    "CategoryManager",
    "MovieManager",
    "MovieWarningService",
]
