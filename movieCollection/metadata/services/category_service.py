from __future__ import annotations
from typing import List, Optional

from movieCollection.errors import ValidationError
from movieCollection.metadata.core.models import Category
from movieCollection.metadata.core.repo import CategoryRepo


class CategoryManager:
    """Name rules (non-empty, unique) layered on `CategoryRepo`."""

    def __init__(self, repo: CategoryRepo) -> None:
        self.repo = repo

    def get_all_categories(self) -> List[Category]:
        return self.repo.list_all()

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.repo.get_by_id(category_id)

    def create_category(self, category: Category | str) -> Category:
        if isinstance(category, str):
            category = Category(name=category)
        self.validate(category, exclude_id=0)
        category.name = category.name.strip()
        return self.repo.create(category)

    def update_category(self, category: Category) -> None:
        self.validate(category, exclude_id=category.id)
        category.name = category.name.strip()
        self.repo.update(category)

    def delete_category(self, category_id: int) -> None:
        self.repo.delete(category_id)

    def category_exists(self, name: str) -> bool:
        return self.repo.name_exists(name.strip(), 0)

    def validate(self, category: Category, exclude_id: int = 0) -> None:
        """Raise `ValidationError` for a blank or already-taken name.

        Uniqueness is checked against the store now; a concurrent writer
        could still race us.
        """
        name = (category.name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.repo.name_exists(name, exclude_id):
            raise ValidationError("A category with this name already exists")
