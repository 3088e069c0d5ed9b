# Movie / Category dataclasses
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime


def _same_record(a, b) -> bool:
    """Identity by store id; unsaved (id 0) records only equal themselves."""
    if a is b:
        return True
    return a.id != 0 and a.id == b.id


@dataclass(slots=True, eq=False)
class Category:
    id: int = 0
    name: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Category):
            return NotImplemented
        return _same_record(self, other)

    # id changes on save, so records are unhashable; key sets and dicts by .id
    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.name


@dataclass(slots=True, eq=False)
class Movie:
    id: int = 0
    name: str = ""
    imdb_rating: float = 0.0
    personal_rating: float | None = None
    file_link: str = ""
    last_view: datetime | None = None
    categories: list[Category] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Movie):
            return NotImplemented
        return _same_record(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f"{self.name} ({self.imdb_rating:.1f})"

    # ── display helpers ──────────────────────────────────────────────
    @property
    def personal_rating_display(self) -> str:
        if self.personal_rating is None:
            return "Not rated"
        return f"{self.personal_rating:.1f}"

    @property
    def categories_string(self) -> str:
        """Comma-joined category names, or ``"No categories"``."""
        if not self.categories:
            return "No categories"
        return ", ".join(c.name for c in self.categories)

    @property
    def last_view_display(self) -> str:
        if self.last_view is None:
            return "Never"
        return self.last_view.strftime("%Y-%m-%d %H:%M")

    # ── category membership ──────────────────────────────────────────
    def has_category(self, category_name: str) -> bool:
        wanted = category_name.casefold()
        return any(c.name.casefold() == wanted for c in self.categories)

    def add_category(self, category: Category) -> None:
        """Append *category* unless one with the same id is already present."""
        if category not in self.categories:
            self.categories.append(category)

    def remove_category(self, category: Category) -> None:
        if category in self.categories:
            self.categories.remove(category)
