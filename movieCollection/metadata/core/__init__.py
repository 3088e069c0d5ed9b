from movieCollection.metadata.core.models import Category, Movie
from movieCollection.metadata.core.repo   import CategoryRepo, CatMovieRepo, MovieRepo

__all__ = ["Category", "Movie", "CategoryRepo", "CatMovieRepo", "MovieRepo"]
