"""
services
~~~~~~~~
Validation + business rules between the GUI and the repositories.
"""

from movieCollection.metadata.services.movie_service import (
    MovieManager,
    SORT_OPTIONS,
    filter_movies,
    is_valid_movie_file,
    sort_movies,
    validate_movie,
)
from movieCollection.metadata.services.category_service import CategoryManager
from movieCollection.metadata.services.warning_service  import MovieWarningService

__all__ = [
    "MovieManager", "CategoryManager", "MovieWarningService",
    "SORT_OPTIONS", "filter_movies", "is_valid_movie_file", "sort_movies", "validate_movie",
]
