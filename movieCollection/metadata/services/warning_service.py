from __future__ import annotations
from typing import List

from movieCollection.metadata.core.models import Movie
from movieCollection.metadata.core.repo import MovieRepo
from movieCollection.settings import WARNING_RATING_THRESHOLD, WARNING_YEARS_NOT_VIEWED


class MovieWarningService:
    """Flags poorly rated movies nobody has played for a long time."""

    RATING_THRESHOLD = WARNING_RATING_THRESHOLD
    YEARS_NOT_VIEWED = WARNING_YEARS_NOT_VIEWED

    def __init__(self, repo: MovieRepo) -> None:
        self.repo = repo

    def movies_for_warning(self) -> List[Movie]:
        return self.repo.find_for_warning(self.RATING_THRESHOLD, self.YEARS_NOT_VIEWED)

    def has_warnings(self) -> bool:
        return bool(self.movies_for_warning())

    def build_message(self) -> str:
        """Bullet list of cleanup candidates, or ``""`` when there are none."""
        movies = self.movies_for_warning()
        if not movies:
            return ""

        lines = [
            f"The following movies have a personal rating below {self.RATING_THRESHOLD:.1f} "
            f"and have not been watched in over {self.YEARS_NOT_VIEWED} years.",
            "",
            "Consider deleting them to free up space:",
            "",
        ]
        for movie in movies:
            entry = f"• {movie.name}"
            if movie.personal_rating is not None:
                entry += f" (Rating: {movie.personal_rating:.1f})"
            lines.append(entry)
        return "\n".join(lines) + "\n"
