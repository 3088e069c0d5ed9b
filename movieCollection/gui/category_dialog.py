from __future__ import annotations
import sqlite3
from typing import Optional

from PySide6.QtCore    import Slot # type: ignore
from PySide6.QtWidgets import ( # type: ignore
    QWidget, QDialog, QVBoxLayout, QFormLayout, QLineEdit,
    QDialogButtonBox, QMessageBox,
)

from movieCollection.metadata.core.models import Category
from movieCollection.metadata.services import CategoryManager
from movieCollection.gui.movie_dialog import DoneCallback
from movieCollection.gui.window_center import center_when_shown


class CategoryDialog(QDialog):
    """Add (``category=None``) or rename a category."""

    def __init__(
        self,
        manager: CategoryManager,
        category: Category | None = None,
        parent: QWidget | None = None,
        on_done: DoneCallback | None = None,
    ) -> None:
        super().__init__(parent)
        self._manager  = manager
        self._category = category
        self._on_done  = on_done
        self.saved_category: Optional[Category] = None

        self.setWindowTitle("Edit Category" if category else "Add Category")
        self.setModal(True)
        self.setMinimumWidth(320)

        root = QVBoxLayout(self)
        form = QFormLayout()
        self.txt_name = QLineEdit(category.name if category else "")
        self.txt_name.setPlaceholderText("e.g. Sci-Fi")
        form.addRow("Name:", self.txt_name)
        root.addLayout(form)

        bb = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        if category is not None:
            bb.button(QDialogButtonBox.Save).setText("Update")
        bb.accepted.connect(self._on_save)
        bb.rejected.connect(self.reject)
        root.addWidget(bb)

        self.finished.connect(
            lambda result: self._on_done and self._on_done(result == QDialog.Accepted)
        )
        center_when_shown(self)

    @Slot()
    def _on_save(self) -> None:
        name = self.txt_name.text().strip()
        try:
            if self._category is None:
                category = self._manager.create_category(name)
            else:
                category = Category(id=self._category.id, name=name)
                self._manager.update_category(category)
        except ValueError as e:
            QMessageBox.warning(self, "Validation Error", str(e))
            return
        except sqlite3.Error as e:
            QMessageBox.critical(self, "Save Error", f"Failed to save category: {e}")
            return

        self.saved_category = category
        self.accept()
