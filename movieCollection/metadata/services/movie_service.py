"""
movie_service
~~~~~~~~~~~~~
Validation rules and in-memory filter / sort on top of `MovieRepo`.
"""
from __future__ import annotations
from typing import Callable, Iterable, List, Optional, Sequence

from movieCollection.errors import ValidationError
from movieCollection.metadata.core.models import Category, Movie
from movieCollection.metadata.core.repo import MovieRepo
from movieCollection.settings import ALLOWED_EXTENSIONS
from movieCollection.utils import log_debug, open_file_host

SortKey = Callable[[Movie], object]

_SORT_KEYS: dict[str, SortKey] = {
    "title":    lambda m: m.name.casefold(),
    "imdb":     lambda m: m.imdb_rating,
    # (is-missing, value): unrated movies after every rated one
    "personal": lambda m: (m.personal_rating is None, m.personal_rating or 0.0),
    "category": lambda m: m.categories_string.casefold(),
}
SORT_OPTIONS = tuple(_SORT_KEYS)


def is_valid_movie_file(file_link: str | None) -> bool:
    """True for a non-blank path ending in an allowed extension (any case)."""
    if not file_link or not file_link.strip():
        return False
    return file_link.lower().endswith(ALLOWED_EXTENSIONS)


def _check_rating(value: float | None, label: str) -> None:
    if value is not None and not 0 <= value <= 10:
        raise ValidationError(f"{label} must be between 0 and 10")


def validate_movie(movie: Movie) -> None:
    """Raise `ValidationError` if *movie* may not be saved."""
    if not movie.name or not movie.name.strip():
        raise ValidationError("Movie name cannot be empty")
    if not movie.file_link or not movie.file_link.strip():
        raise ValidationError("Movie file link cannot be empty")
    if not is_valid_movie_file(movie.file_link):
        exts = " and ".join(ALLOWED_EXTENSIONS)
        raise ValidationError(f"Only {exts} files are allowed")
    _check_rating(movie.imdb_rating, "IMDB rating")
    _check_rating(movie.personal_rating, "Personal rating")


def filter_movies(
    movies: Iterable[Movie],
    title: str | None = None,
    categories: Sequence[Category] | None = None,
    min_imdb_rating: float | None = None,
) -> List[Movie]:
    """Keep movies passing *every* supplied predicate.

    * title      – case-insensitive substring of the name (blank = ignored)
    * categories – movie has at least one of them, matched by name
    * min_imdb_rating – inclusive lower bound
    """
    needle = title.strip().casefold() if title and title.strip() else None
    wanted = [c.name for c in categories] if categories else None

    def keep(movie: Movie) -> bool:
        if needle is not None and needle not in movie.name.casefold():
            return False
        if wanted is not None and not any(movie.has_category(n) for n in wanted):
            return False
        if min_imdb_rating is not None and movie.imdb_rating < min_imdb_rating:
            return False
        return True

    return [m for m in movies if keep(m)]


def sort_movies(movies: Iterable[Movie], sort_by: str, ascending: bool = True) -> List[Movie]:
    """Stable sort by ``title`` | ``imdb`` | ``personal`` | ``category``.

    Unknown keys sort by title. Descending reverses the whole ascending
    order, so unrated movies come *first* when sorting personal ratings
    high-to-low.
    """
    key = _SORT_KEYS.get((sort_by or "").lower(), _SORT_KEYS["title"])
    return sorted(movies, key=key, reverse=not ascending)


class MovieManager:
    """Business rules for movies; GUI talks to this, never to the repo."""

    def __init__(self, repo: MovieRepo) -> None:
        self.repo = repo

    # ─── reads ───────────────────────────────────────────────────────
    def get_all_movies(self) -> List[Movie]:
        return self.repo.list_all()

    def get_movie(self, movie_id: int) -> Optional[Movie]:
        return self.repo.get_by_id(movie_id)

    def search_movies(self, term: str) -> List[Movie]:
        return self.repo.search(term.strip())

    # ─── writes ──────────────────────────────────────────────────────
    def create_movie(self, movie: Movie) -> Movie:
        validate_movie(movie)
        return self.repo.create(movie)

    def update_movie(self, movie: Movie) -> None:
        validate_movie(movie)
        self.repo.update(movie)

    def update_personal_rating(self, movie_id: int, rating: float | None) -> None:
        _check_rating(rating, "Personal rating")
        self.repo.update_personal_rating(movie_id, rating)

    def delete_movie(self, movie_id: int) -> None:
        self.repo.delete(movie_id)

    def play_movie(self, movie: Movie) -> None:
        """Open the file in the default player and record the view time."""
        open_file_host(movie.file_link)
        movie.last_view = self.repo.update_last_viewed(movie.id)
        log_debug(f"Played '{movie.name}' ({movie.file_link})")

    # ─── in-memory helpers (no store access) ─────────────────────────
    is_valid_movie_file = staticmethod(is_valid_movie_file)
    validate            = staticmethod(validate_movie)
    filter_movies       = staticmethod(filter_movies)
    sort_movies         = staticmethod(sort_movies)
