"""
movieCollection
~~~~~~~~~~~~~~~

Top-level package for the Private Movie Collection application.

Exports:
  - Settings: load_db_settings, DbSettings
  - Errors: ConfigError, DatabaseConnectionError, ValidationError, PlayerLaunchError
  - Entities, repositories and managers from `movieCollection.metadata`
"""

# settings / errors
from movieCollection.settings import DbSettings, load_db_settings
from movieCollection.errors import (
    ConfigError,
    DatabaseConnectionError,
    ValidationError,
    PlayerLaunchError,
)

# data + business rules
from movieCollection.metadata import (
    Category,
    Movie,
    Database,
    DatabaseInitializer,
    CategoryRepo,
    CatMovieRepo,
    MovieRepo,
    CategoryManager,
    MovieManager,
    MovieWarningService,
)

__version__ = "1.0.0"

__all__ = [
    # settings
    "DbSettings",
    "load_db_settings",
    # errors
    "ConfigError",
    "DatabaseConnectionError",
    "ValidationError",
    "PlayerLaunchError",
    # data
    "Category",
    "Movie",
    "Database",
    "DatabaseInitializer",
    "CategoryRepo",
    "CatMovieRepo",
    "MovieRepo",
    # business rules
    "CategoryManager",
    "MovieManager",
    "MovieWarningService",
]
