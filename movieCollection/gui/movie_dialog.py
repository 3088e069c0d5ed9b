from __future__ import annotations
import sqlite3
from pathlib import Path
from typing import Callable, List, Optional

from PySide6.QtCore    import Qt, Slot # type: ignore
from PySide6.QtWidgets import ( # type: ignore
    QWidget, QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLineEdit,
    QPushButton, QDoubleSpinBox, QCheckBox, QListWidget, QListWidgetItem,
    QDialogButtonBox, QFileDialog, QMessageBox, QLabel, QAbstractItemView,
)

from movieCollection.metadata.core.models import Category, Movie
from movieCollection.metadata.services import MovieManager
from movieCollection.settings import ALLOWED_EXTENSIONS
from movieCollection.gui.window_center import center_when_shown

DoneCallback = Callable[[bool], None]      # True = saved, False = cancelled


def rating_spin(default: float = 0.0) -> QDoubleSpinBox:
    """0‥10 spin box with one decimal, shared by the dialogs and main window."""
    spin = QDoubleSpinBox()
    spin.setRange(0.0, 10.0)
    spin.setDecimals(1)
    spin.setSingleStep(0.1)
    spin.setValue(default)
    return spin


class MovieDialog(QDialog):
    """Add (``movie=None``) or edit a movie.

    *on_done* is called once with True after a successful save or False on
    cancel; the saved record is available as ``saved_movie``.
    """

    def __init__(
        self,
        manager: MovieManager,
        categories: List[Category],
        movie: Movie | None = None,
        parent: QWidget | None = None,
        on_done: DoneCallback | None = None,
    ) -> None:
        super().__init__(parent)
        self._manager    = manager
        self._categories = categories
        self._movie      = movie
        self._on_done    = on_done
        self.saved_movie: Optional[Movie] = None

        self.setWindowTitle("Edit Movie" if movie else "Add New Movie")
        self.setModal(True)
        self.setMinimumWidth(460)
        self._build_ui()
        if movie is not None:
            self._populate(movie)
        self.finished.connect(self._emit_done)
        center_when_shown(self)

    # ------------------------------------------------------------------ UI
    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.addWidget(QLabel(f"<b>{self.windowTitle()}</b>"))

        form = QFormLayout()
        self.txt_name = QLineEdit()
        self.txt_name.setPlaceholderText("Movie title")
        form.addRow("Title:", self.txt_name)

        self.txt_file = QLineEdit()
        self.txt_file.setPlaceholderText("Path to " + " / ".join(ALLOWED_EXTENSIONS) + " file")
        btn_browse = QPushButton("Browse…")
        btn_browse.setAutoDefault(False)
        btn_browse.clicked.connect(self._on_browse)
        file_row = QHBoxLayout()
        file_row.addWidget(self.txt_file, 1)
        file_row.addWidget(btn_browse)
        form.addRow("File:", file_row)

        self.spn_imdb = rating_spin()
        form.addRow("IMDB rating:", self.spn_imdb)

        self.spn_personal = rating_spin(5.0)
        self.chk_no_personal = QCheckBox("Not rated yet")
        self.chk_no_personal.setChecked(True)
        self.spn_personal.setEnabled(False)
        self.chk_no_personal.toggled.connect(lambda on: self.spn_personal.setEnabled(not on))
        personal_row = QHBoxLayout()
        personal_row.addWidget(self.spn_personal)
        personal_row.addWidget(self.chk_no_personal)
        personal_row.addStretch(1)
        form.addRow("Personal rating:", personal_row)

        self.lst_categories = QListWidget()
        self.lst_categories.setSelectionMode(QAbstractItemView.MultiSelection)
        for cat in self._categories:
            item = QListWidgetItem(cat.name)
            item.setData(Qt.UserRole, cat.id)
            self.lst_categories.addItem(item)
        form.addRow("Categories:", self.lst_categories)
        root.addLayout(form)

        bb = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        if self._movie is not None:
            bb.button(QDialogButtonBox.Save).setText("Update")
        bb.accepted.connect(self._on_save)
        bb.rejected.connect(self.reject)
        root.addWidget(bb)

    def _populate(self, movie: Movie) -> None:
        self.txt_name.setText(movie.name)
        self.txt_file.setText(movie.file_link)
        self.spn_imdb.setValue(movie.imdb_rating)
        rated = movie.personal_rating is not None
        self.chk_no_personal.setChecked(not rated)
        if rated:
            self.spn_personal.setValue(movie.personal_rating)

        owned = {c.id for c in movie.categories}
        for i in range(self.lst_categories.count()):
            item = self.lst_categories.item(i)
            item.setSelected(item.data(Qt.UserRole) in owned)

    def _selected_categories(self) -> List[Category]:
        ids = {item.data(Qt.UserRole) for item in self.lst_categories.selectedItems()}
        return [c for c in self._categories if c.id in ids]

    # --------------------------------------------------------------- slots
    @Slot()
    def _on_browse(self) -> None:
        patterns = " ".join(f"*{ext}" for ext in ALLOWED_EXTENSIONS)
        start = str(Path(self.txt_file.text()).parent) if self.txt_file.text() else ""
        path, _ = QFileDialog.getOpenFileName(
            self, "Select Movie File", start,
            f"Movie Files ({patterns});;All Files (*)",
        )
        if path:
            self.txt_file.setText(path)
            if not self.txt_name.text().strip():
                self.txt_name.setText(Path(path).stem)

    @Slot()
    def _on_save(self) -> None:
        movie = Movie(
            id              = self._movie.id if self._movie else 0,
            name            = self.txt_name.text().strip(),
            imdb_rating     = round(self.spn_imdb.value(), 1),
            personal_rating = None if self.chk_no_personal.isChecked()
                              else round(self.spn_personal.value(), 1),
            file_link       = self.txt_file.text().strip(),
            last_view       = self._movie.last_view if self._movie else None,
            categories      = self._selected_categories(),
        )
        try:
            if movie.id == 0:
                self._manager.create_movie(movie)
            else:
                self._manager.update_movie(movie)
        except ValueError as e:
            QMessageBox.warning(self, "Validation Error", str(e))
            return
        except sqlite3.Error as e:
            QMessageBox.critical(self, "Save Error", f"Failed to save movie: {e}")
            return

        self.saved_movie = movie
        self.accept()

    @Slot(int)
    def _emit_done(self, result: int) -> None:
        if self._on_done is not None:
            self._on_done(result == QDialog.Accepted)
