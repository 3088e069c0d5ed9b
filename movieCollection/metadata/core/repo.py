"""metadata.core.repo
Domain-level repositories for the movie collection.

All SQL lives here; other layers import these classes instead of touching
`sqlite3` directly. Each public method opens (and closes) its own connection
through `Database`; the module-level ``_``-helpers take an open connection so
multi-statement writes can share one transaction.
"""

from __future__ import annotations
import sqlite3
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from movieCollection.metadata.movie_collection_db import Database
from movieCollection.metadata.core.models import Category, Movie
from movieCollection.utils import log_debug

_MOVIE_COLS = "id, name, imdbRating, personalRating, filelink, lastview"
_TS_FORMAT  = "%Y-%m-%d %H:%M:%S"


# ───────────────────────────── row mapping ──────────────────────────────
def _to_db_ts(value: datetime | None) -> str | None:
    return value.strftime(_TS_FORMAT) if value is not None else None


def _from_db_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _movie_from_row(row: sqlite3.Row) -> Movie:
    return Movie(
        id              = row["id"],
        name            = row["name"],
        imdb_rating     = float(row["imdbRating"] or 0.0),
        personal_rating = row["personalRating"],
        file_link       = row["filelink"],
        last_view       = _from_db_ts(row["lastview"]),
    )


def _category_from_row(row: sqlite3.Row) -> Category:
    return Category(id=row["id"], name=row["name"])


def _movie_params(movie: Movie) -> tuple:
    return (
        movie.name,
        movie.imdb_rating,
        movie.personal_rating,
        movie.file_link,
        _to_db_ts(movie.last_view),
    )


# ─────────────────────────── association helpers ────────────────────────
def _categories_for_movie(conn: sqlite3.Connection, movie_id: int) -> List[Category]:
    rows = conn.execute(
        "SELECT c.id, c.name FROM Category c "
        "JOIN CatMovie cm ON c.id = cm.categoryId "
        "WHERE cm.movieId=? ORDER BY c.name",
        (movie_id,),
    ).fetchall()
    return [_category_from_row(r) for r in rows]


def _add_category_to_movie(conn: sqlite3.Connection, movie_id: int, category_id: int) -> bool:
    """Insert one association row; an already-present pair is a no-op.

    Returns True when a row was inserted. Any constraint failure other than
    the UNIQUE (categoryId, movieId) one is re-raised.
    """
    try:
        conn.execute(
            "INSERT INTO CatMovie (movieId, categoryId) VALUES (?,?)",
            (movie_id, category_id),
        )
    except sqlite3.IntegrityError as e:
        if e.sqlite_errorcode != sqlite3.SQLITE_CONSTRAINT_UNIQUE:
            raise
        log_debug(f"CatMovie ({movie_id}, {category_id}) already present – ignored")
        return False
    return True


def _replace_categories(conn: sqlite3.Connection, movie_id: int,
                        categories: Iterable[Category]) -> None:
    conn.execute("DELETE FROM CatMovie WHERE movieId=?", (movie_id,))
    for category in categories:
        _add_category_to_movie(conn, movie_id, category.id)


def _hydrate_categories(conn: sqlite3.Connection, movies: List[Movie]) -> None:
    """Attach categories to every movie with ONE query (no N+1).

    Nothing is executed for an empty list (``IN ()`` is not valid SQL).
    """
    if not movies:
        return

    by_id: Dict[int, Movie] = {}
    for movie in movies:
        movie.categories = []
        by_id[movie.id] = movie

    ph   = ",".join("?" * len(by_id))
    rows = conn.execute(
        "SELECT cm.movieId, c.id, c.name FROM CatMovie cm "
        "JOIN Category c ON cm.categoryId = c.id "
        f"WHERE cm.movieId IN ({ph}) "
        "ORDER BY cm.movieId, c.name",
        tuple(by_id),
    ).fetchall()
    for r in rows:
        movie = by_id.get(r["movieId"])
        if movie is not None:
            movie.add_category(_category_from_row(r))


class CategoryRepo:
    """CRUD helpers for Category rows."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # ───────────────────────────── look-ups ──────────────────────────
    def list_all(self) -> List[Category]:
        with self.db.connect() as conn:
            rows = conn.execute("SELECT id, name FROM Category ORDER BY name").fetchall()
        return [_category_from_row(r) for r in rows]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Return the `Category` for *category_id* or **None** if not found."""
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT id, name FROM Category WHERE id=?", (category_id,)
            ).fetchone()
        return _category_from_row(row) if row else None

    def name_exists(self, name: str, exclude_id: int = 0) -> bool:
        """True if a category other than *exclude_id* already uses *name*."""
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM Category WHERE name=? AND id<>?",
                (name, exclude_id),
            ).fetchone()
        return row["n"] > 0

    # ───────────────────────────── writers ──────────────────────────
    def create(self, category: Category) -> Category:
        """Insert *category*, store the generated id on it and return it."""
        with self.db.transaction() as conn:
            cur = conn.execute("INSERT INTO Category (name) VALUES (?)", (category.name,))
        category.id = cur.lastrowid
        return category

    def update(self, category: Category) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                "UPDATE Category SET name=? WHERE id=?", (category.name, category.id)
            )

    def delete(self, category_id: int) -> None:
        """Delete a category; its CatMovie rows go with it (ON DELETE CASCADE)."""
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM Category WHERE id=?", (category_id,))


class CatMovieRepo:
    """The Movie ↔ Category link table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def categories_for_movie(self, movie_id: int) -> List[Category]:
        """Categories of *movie_id*, ordered by name."""
        with self.db.connect() as conn:
            return _categories_for_movie(conn, movie_id)

    def movie_ids_for_category(self, category_id: int) -> List[int]:
        with self.db.connect() as conn:
            rows = conn.execute(
                "SELECT movieId FROM CatMovie WHERE categoryId=? ORDER BY movieId",
                (category_id,),
            ).fetchall()
        return [r["movieId"] for r in rows]

    def add_category_to_movie(self, movie_id: int, category_id: int) -> bool:
        """Link the pair; returns False (no error) when it was already linked."""
        with self.db.transaction() as conn:
            return _add_category_to_movie(conn, movie_id, category_id)

    def remove_category_from_movie(self, movie_id: int, category_id: int) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                "DELETE FROM CatMovie WHERE movieId=? AND categoryId=?",
                (movie_id, category_id),
            )

    def remove_categories_from_movie(self, movie_id: int) -> None:
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM CatMovie WHERE movieId=?", (movie_id,))

    def movie_has_category(self, movie_id: int, category_id: int) -> bool:
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM CatMovie WHERE movieId=? AND categoryId=?",
                (movie_id, category_id),
            ).fetchone()
        return row["n"] > 0

    def count_for_movie(self, movie_id: int) -> int:
        with self.db.connect() as conn:
            return conn.execute(
                "SELECT COUNT(*) AS n FROM CatMovie WHERE movieId=?", (movie_id,)
            ).fetchone()["n"]


class MovieRepo:
    """CRUD and query helpers for Movie objects, categories batch-loaded."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def _select_hydrated(self, where: str = "", params: tuple = (),
                         order_by: str = "name") -> List[Movie]:
        sql = f"SELECT {_MOVIE_COLS} FROM Movie {where} ORDER BY {order_by}"
        with self.db.connect() as conn:
            movies = [_movie_from_row(r) for r in conn.execute(sql, params).fetchall()]
            _hydrate_categories(conn, movies)
        return movies

    # ───────────────────────────── look-ups ──────────────────────────
    def list_all(self) -> List[Movie]:
        """Every movie ordered by name: two queries total, one if empty."""
        return self._select_hydrated()

    def get_by_id(self, movie_id: int) -> Optional[Movie]:
        """Return a `Movie` for *movie_id* or **None** if not found."""
        with self.db.connect() as conn:
            row = conn.execute(
                f"SELECT {_MOVIE_COLS} FROM Movie WHERE id=?", (movie_id,)
            ).fetchone()
            if not row:
                return None
            movie = _movie_from_row(row)
            movie.categories = _categories_for_movie(conn, movie.id)
        return movie

    def search(self, term: str) -> List[Movie]:
        """Case-insensitive (Unicode casefold) substring match on name."""
        return self._select_hydrated(
            "WHERE instr(casefold(name), ?) > 0", (term.casefold(),)
        )

    def find_for_warning(self, rating_threshold: float, years_unplayed: int) -> List[Movie]:
        """Movies rated below *rating_threshold* and unseen for *years_unplayed* years.

        A missing personal rating or a missing last-view never qualifies.
        """
        return self._select_hydrated(
            "WHERE personalRating IS NOT NULL AND personalRating < ? "
            "AND lastview IS NOT NULL "
            "AND lastview < datetime('now', 'localtime', ?)",
            (rating_threshold, f"-{int(years_unplayed)} years"),
        )

    # ───────────────────────────── writers ──────────────────────────
    def create(self, movie: Movie) -> Movie:
        """Insert *movie* + its category links; the generated id is set on it."""
        with self.db.transaction() as conn:
            cur = conn.execute(
                "INSERT INTO Movie (name, imdbRating, personalRating, filelink, lastview) "
                "VALUES (?,?,?,?,?)",
                _movie_params(movie),
            )
            movie_id = cur.lastrowid
            for category in movie.categories:
                _add_category_to_movie(conn, movie_id, category.id)
        movie.id = movie_id
        return movie

    def update(self, movie: Movie) -> None:
        """Overwrite the row and replace (not diff) its category links, atomically."""
        with self.db.transaction() as conn:
            conn.execute(
                "UPDATE Movie SET name=?, imdbRating=?, personalRating=?, filelink=?, lastview=? "
                "WHERE id=?",
                (*_movie_params(movie), movie.id),
            )
            _replace_categories(conn, movie.id, movie.categories)

    def update_last_viewed(self, movie_id: int, when: datetime | None = None) -> datetime:
        """Stamp *movie_id* as played at *when* (default: now); returns the stamp."""
        when = (when or datetime.now()).replace(microsecond=0)
        with self.db.transaction() as conn:
            conn.execute(
                "UPDATE Movie SET lastview=? WHERE id=?", (_to_db_ts(when), movie_id)
            )
        return when

    def update_personal_rating(self, movie_id: int, rating: float | None) -> None:
        """Set, or clear with **None**, the personal rating only."""
        with self.db.transaction() as conn:
            conn.execute(
                "UPDATE Movie SET personalRating=? WHERE id=?", (rating, movie_id)
            )

    def delete(self, movie_id: int) -> None:
        """Delete a movie; CatMovie rows are removed by ON DELETE CASCADE."""
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM Movie WHERE id=?", (movie_id,))
