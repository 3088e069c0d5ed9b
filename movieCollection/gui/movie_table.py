from __future__ import annotations
from typing import List, Optional

from PySide6.QtCore import Qt, QAbstractTableModel, QModelIndex # type: ignore
from PySide6.QtGui  import QColor # type: ignore

from movieCollection.metadata.core.models import Movie
from movieCollection.settings import COLOR_MUTED
from movieCollection.utils import rating_color


class MovieTableModel(QAbstractTableModel):
    """Read-only table over the currently *visible* (filtered + sorted) movies."""

    HEADERS = ("Title", "Categories", "IMDB", "Personal", "Last viewed")

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._movies: List[Movie] = []

    # ── data access ──────────────────────────────────────────────────
    def set_movies(self, movies: List[Movie]) -> None:
        self.beginResetModel()
        self._movies = list(movies)
        self.endResetModel()

    def movie_at(self, row: int) -> Optional[Movie]:
        return self._movies[row] if 0 <= row < len(self._movies) else None

    def row_of(self, movie_id: int) -> int:
        for i, m in enumerate(self._movies):
            if m.id == movie_id:
                return i
        return -1

    # ── Qt overrides ─────────────────────────────────────────────────
    def rowCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._movies)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self.HEADERS)

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            return self.HEADERS[section]
        return None

    def data(self, index, role=Qt.DisplayRole):
        movie = self.movie_at(index.row())
        if movie is None:
            return None
        col = index.column()

        if role == Qt.DisplayRole:
            return (
                movie.name,
                movie.categories_string,
                f"{movie.imdb_rating:.1f}",
                movie.personal_rating_display,
                movie.last_view_display,
            )[col]

        if role == Qt.ForegroundRole:
            if col == 2:
                return QColor(rating_color(movie.imdb_rating))
            if col == 3:
                if movie.personal_rating is None:
                    return QColor(COLOR_MUTED)
                return QColor(rating_color(movie.personal_rating))
            if col == 4 and movie.last_view is None:
                return QColor(COLOR_MUTED)

        if role == Qt.TextAlignmentRole and col in (2, 3):
            return int(Qt.AlignRight | Qt.AlignVCenter)

        if role == Qt.ToolTipRole:
            return movie.file_link
        return None
