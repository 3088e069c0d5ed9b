# gui/main_window.py
from __future__ import annotations
import sqlite3
from typing import List, Optional

from PySide6.QtCore    import Qt, Slot, QTimer, QModelIndex # type: ignore
from PySide6.QtGui     import QAction, QKeySequence, QShortcut # type: ignore
from PySide6.QtWidgets import ( # type: ignore
    QMainWindow, QWidget, QSplitter, QVBoxLayout, QHBoxLayout, QGroupBox,
    QLineEdit, QComboBox, QCheckBox, QPushButton, QLabel, QTableView,
    QListWidget, QListWidgetItem, QMenu, QMessageBox, QHeaderView,
    QAbstractItemView,
)

from movieCollection.settings import (
    COLOR_SUCCESS, COLOR_MUTED, STATUS_CLEAR_MS, SEARCH_DEBOUNCE_MS,
)
from movieCollection.utils    import log_debug
from movieCollection.metadata.core.models import Category, Movie
from movieCollection.metadata.services    import filter_movies, sort_movies
from movieCollection.gui.controller       import Services
from movieCollection.gui.movie_table      import MovieTableModel
from movieCollection.gui.movie_dialog     import MovieDialog, rating_spin
from movieCollection.gui.category_dialog  import CategoryDialog

# combo label → sort key understood by `sort_movies`
SORT_LABELS = {
    "Title":           "title",
    "IMDB Rating":     "imdb",
    "Personal Rating": "personal",
    "Category":        "category",
}
ALL_CATEGORIES = "All Categories"


class MainWindow(QMainWindow):
    def __init__(self, services: Services, status: str = ""):
        super().__init__()
        self.svc = services
        self.setWindowTitle("Private Movie Collection")
        self.resize(1280, 780)
        self.setMinimumSize(1000, 650)

        # read caches, reloaded after every mutation
        self._all_movies: List[Movie] = []
        self._categories: List[Category] = []

        # ── timers ──────────────────────────────────────────────────────
        self._status_timer = QTimer(self, singleShot=True, interval=STATUS_CLEAR_MS)
        self._status_timer.timeout.connect(lambda: self.lbl_status.setText(""))
        self._search_timer = QTimer(self, singleShot=True, interval=SEARCH_DEBOUNCE_MS)
        self._search_timer.timeout.connect(self.apply_filters)

        self._build_ui()
        self._build_actions()

        self.load_categories()
        self.load_movies()
        self._update_movie_actions(None)
        self._update_category_actions()
        self.set_status(status or "Application ready", auto_clear=True)

    # ───────────────────────────────────────────────────────────────────
    #  UI construction
    # ───────────────────────────────────────────────────────────────────
    def _build_ui(self) -> None:
        # ── filter bar ──────────────────────────────────────────────────
        self.txt_search = QLineEdit(placeholderText="Search title…  (Ctrl+F)")
        self.txt_search.setClearButtonEnabled(True)
        self.txt_search.textEdited.connect(lambda _t: self._search_timer.start())

        self.cmb_category = QComboBox()
        self.cmb_category.currentIndexChanged.connect(lambda _i: self.apply_filters())

        self.spn_min_rating = rating_spin()
        self.spn_min_rating.setSpecialValueText("Any")
        self.spn_min_rating.valueChanged.connect(lambda _v: self.apply_filters())

        self.cmb_sort = QComboBox()
        self.cmb_sort.addItems(list(SORT_LABELS))
        self.cmb_sort.currentIndexChanged.connect(lambda _i: self.apply_filters())

        self.chk_ascending = QCheckBox("Ascending", checked=True)
        self.chk_ascending.toggled.connect(lambda _on: self.apply_filters())

        btn_clear = QPushButton("Clear filters")
        btn_clear.clicked.connect(self._on_clear_filters)

        bar = QHBoxLayout()
        bar.addWidget(self.txt_search, 2)
        bar.addWidget(QLabel("Category:"))
        bar.addWidget(self.cmb_category, 1)
        bar.addWidget(QLabel("Min IMDB:"))
        bar.addWidget(self.spn_min_rating)
        bar.addWidget(QLabel("Sort by:"))
        bar.addWidget(self.cmb_sort)
        bar.addWidget(self.chk_ascending)
        bar.addWidget(btn_clear)

        # ── movie table ─────────────────────────────────────────────────
        self.model = MovieTableModel(self)
        self.tbl_movies = QTableView()
        self.tbl_movies.setModel(self.model)
        self.tbl_movies.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.tbl_movies.setSelectionMode(QAbstractItemView.SingleSelection)
        self.tbl_movies.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.tbl_movies.setAlternatingRowColors(True)
        self.tbl_movies.verticalHeader().setVisible(False)
        self.tbl_movies.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.tbl_movies.horizontalHeader().setSectionResizeMode(1, QHeaderView.Stretch)
        self.tbl_movies.setContextMenuPolicy(Qt.CustomContextMenu)
        self.tbl_movies.customContextMenuRequested.connect(self._on_movie_menu)
        self.tbl_movies.doubleClicked.connect(lambda _ix: self._on_play_movie())
        self.tbl_movies.selectionModel().currentRowChanged.connect(self._on_movie_selected)

        # ── movie buttons + personal rating ─────────────────────────────
        self.btn_add_movie    = QPushButton("Add movie")
        self.btn_edit_movie   = QPushButton("Edit")
        self.btn_delete_movie = QPushButton("Delete")
        self.btn_play_movie   = QPushButton("▶ Play")
        self.btn_add_movie.clicked.connect(self._on_add_movie)
        self.btn_edit_movie.clicked.connect(self._on_edit_movie)
        self.btn_delete_movie.clicked.connect(self._on_delete_movie)
        self.btn_play_movie.clicked.connect(self._on_play_movie)

        self.spn_personal = rating_spin(5.0)
        self.chk_not_rated = QCheckBox("Not rated")
        self.chk_not_rated.toggled.connect(lambda on: self.spn_personal.setEnabled(not on))
        self.btn_save_rating = QPushButton("Save rating")
        self.btn_save_rating.clicked.connect(self._on_save_rating)

        actions = QHBoxLayout()
        for w in (self.btn_add_movie, self.btn_edit_movie, self.btn_delete_movie, self.btn_play_movie):
            w.setAutoDefault(False)
            actions.addWidget(w)
        actions.addStretch(1)
        actions.addWidget(QLabel("My rating:"))
        actions.addWidget(self.spn_personal)
        actions.addWidget(self.chk_not_rated)
        actions.addWidget(self.btn_save_rating)

        left = QWidget()
        lv = QVBoxLayout(left)
        lv.addLayout(bar)
        lv.addWidget(self.tbl_movies, 1)
        lv.addLayout(actions)

        # ── category panel ──────────────────────────────────────────────
        box = QGroupBox("Categories")
        cv  = QVBoxLayout(box)
        self.lst_categories = QListWidget()
        self.lst_categories.setContextMenuPolicy(Qt.CustomContextMenu)
        self.lst_categories.customContextMenuRequested.connect(self._on_category_menu)
        self.lst_categories.currentRowChanged.connect(lambda _r: self._update_category_actions())
        cv.addWidget(self.lst_categories, 1)

        self.btn_add_category    = QPushButton("Add")
        self.btn_edit_category   = QPushButton("Edit")
        self.btn_delete_category = QPushButton("Delete")
        self.btn_add_category.clicked.connect(self._on_add_category)
        self.btn_edit_category.clicked.connect(self._on_edit_category)
        self.btn_delete_category.clicked.connect(self._on_delete_category)
        row = QHBoxLayout()
        for w in (self.btn_add_category, self.btn_edit_category, self.btn_delete_category):
            row.addWidget(w)
        cv.addLayout(row)

        splitter = QSplitter()
        splitter.addWidget(left)
        splitter.addWidget(box)
        splitter.setStretchFactor(0, 1)
        splitter.setSizes([980, 260])
        self.setCentralWidget(splitter)

        # ── status bar ──────────────────────────────────────────────────
        self.lbl_status = QLabel("")
        self.lbl_count  = QLabel("")
        self.statusBar().addWidget(self.lbl_status, 1)
        self.statusBar().addPermanentWidget(self.lbl_count)

    def _build_actions(self) -> None:
        tb = self.addToolBar("Main")
        act = QAction("Add movie", self)
        act.setShortcut(QKeySequence("Ctrl+N"))
        act.triggered.connect(self._on_add_movie)
        tb.addAction(act)

        act = QAction("Reload", self)
        act.setShortcut(QKeySequence("Ctrl+R"))
        act.triggered.connect(self._reload_all)
        tb.addAction(act)

        QShortcut(QKeySequence("Ctrl+F"), self, activated=self._focus_search)
        QShortcut(QKeySequence(Qt.Key_Escape), self, activated=self._clear_search)
        for key in (Qt.Key_Return, Qt.Key_Enter):
            QShortcut(QKeySequence(key), self.tbl_movies, activated=self._on_play_movie,
                      context=Qt.WidgetShortcut)
        QShortcut(QKeySequence(Qt.Key_Delete), self.tbl_movies, activated=self._on_delete_movie,
                  context=Qt.WidgetShortcut)

    # ───────────────────────────────────────────────────────────────────
    #  Loading / filtering
    # ───────────────────────────────────────────────────────────────────
    def load_categories(self) -> None:
        try:
            self._categories = self.svc.categories.get_all_categories()
        except sqlite3.Error as e:
            self.show_error("Database Error", f"Failed to load categories: {e}")
            return

        current = self.cmb_category.currentData()
        self.cmb_category.blockSignals(True)
        self.cmb_category.clear()
        self.cmb_category.addItem(ALL_CATEGORIES, 0)
        for cat in self._categories:
            self.cmb_category.addItem(cat.name, cat.id)
        idx = self.cmb_category.findData(current) if current else 0
        self.cmb_category.setCurrentIndex(max(idx, 0))
        self.cmb_category.blockSignals(False)

        self.lst_categories.clear()
        for cat in self._categories:
            item = QListWidgetItem(cat.name)
            item.setData(Qt.UserRole, cat.id)
            self.lst_categories.addItem(item)
        self._update_category_actions()

    def load_movies(self) -> None:
        try:
            self._all_movies = self.svc.movies.get_all_movies()
        except sqlite3.Error as e:
            self.show_error("Database Error", f"Failed to load movies: {e}")
            return
        self.apply_filters()

    @Slot()
    def _reload_all(self) -> None:
        self.load_categories()
        self.load_movies()
        self.set_status("Reloaded from database", auto_clear=True)

    @Slot()
    def apply_filters(self) -> None:
        selected_id = self.cmb_category.currentData()
        cats = [c for c in self._categories if c.id == selected_id] if selected_id else None
        min_rating = self.spn_min_rating.value()

        shown = filter_movies(
            self._all_movies,
            title=self.txt_search.text(),
            categories=cats,
            min_imdb_rating=min_rating if min_rating > 0 else None,
        )
        shown = sort_movies(
            shown,
            SORT_LABELS.get(self.cmb_sort.currentText(), "title"),
            self.chk_ascending.isChecked(),
        )

        keep = self.selected_movie()
        self.model.set_movies(shown)
        if keep is not None and (row := self.model.row_of(keep.id)) >= 0:
            self.tbl_movies.selectRow(row)
        else:
            self._update_movie_actions(None)
        self.lbl_count.setText(f"Movies: {len(shown)} / {len(self._all_movies)}")

    # ───────────────────────────────────────────────────────────────────
    #  Small helpers
    # ───────────────────────────────────────────────────────────────────
    def set_status(self, message: str, auto_clear: bool = False, color: str = COLOR_MUTED) -> None:
        self.lbl_status.setStyleSheet(f"color: {color};")
        self.lbl_status.setText(message)
        self._status_timer.stop()
        if auto_clear:
            self._status_timer.start()

    def show_error(self, title: str, message: str) -> None:
        log_debug(f"{title}: {message}")
        QMessageBox.critical(self, title, message)

    def selected_movie(self) -> Optional[Movie]:
        index = self.tbl_movies.selectionModel().currentIndex()
        if not index.isValid() or not self.tbl_movies.selectionModel().hasSelection():
            return None
        return self.model.movie_at(index.row())

    def selected_category(self) -> Optional[Category]:
        item = self.lst_categories.currentItem()
        if item is None:
            return None
        cid = item.data(Qt.UserRole)
        return next((c for c in self._categories if c.id == cid), None)

    def _update_movie_actions(self, movie: Optional[Movie]) -> None:
        has = movie is not None
        for w in (self.btn_edit_movie, self.btn_delete_movie, self.btn_play_movie,
                  self.btn_save_rating, self.spn_personal, self.chk_not_rated):
            w.setEnabled(has)
        if has:
            self.chk_not_rated.setChecked(movie.personal_rating is None)
            self.spn_personal.setEnabled(movie.personal_rating is not None)
            self.spn_personal.setValue(movie.personal_rating if movie.personal_rating is not None else 5.0)

    def _update_category_actions(self) -> None:
        has = self.selected_category() is not None
        self.btn_edit_category.setEnabled(has)
        self.btn_delete_category.setEnabled(has)

    def _confirm(self, title: str, message: str) -> bool:
        reply = QMessageBox.question(
            self, title, message, QMessageBox.Yes | QMessageBox.No, QMessageBox.No
        )
        return reply == QMessageBox.Yes

    # ───────────────────────────────────────────────────────────────────
    #  Slots – filters
    # ───────────────────────────────────────────────────────────────────
    @Slot()
    def _focus_search(self) -> None:
        self.txt_search.setFocus()
        self.txt_search.selectAll()
        self.set_status("Search focused (Ctrl+F)", auto_clear=True)

    @Slot()
    def _clear_search(self) -> None:
        self.txt_search.clear()
        self.tbl_movies.setFocus()
        self.apply_filters()
        self.set_status("Cleared search", auto_clear=True)

    @Slot()
    def _on_clear_filters(self) -> None:
        for w in (self.txt_search, self.cmb_category, self.spn_min_rating):
            w.blockSignals(True)
        self.txt_search.clear()
        self.cmb_category.setCurrentIndex(0)
        self.spn_min_rating.setValue(0.0)
        for w in (self.txt_search, self.cmb_category, self.spn_min_rating):
            w.blockSignals(False)
        self.apply_filters()
        self.set_status("Filters cleared", auto_clear=True)

    # ───────────────────────────────────────────────────────────────────
    #  Slots – movies
    # ───────────────────────────────────────────────────────────────────
    @Slot(QModelIndex, QModelIndex)
    def _on_movie_selected(self, current: QModelIndex, _previous: QModelIndex) -> None:
        self._update_movie_actions(self.model.movie_at(current.row()) if current.isValid() else None)

    def _on_movie_menu(self, pos) -> None:
        index = self.tbl_movies.indexAt(pos)
        if not index.isValid():
            return
        self.tbl_movies.selectRow(index.row())
        menu = QMenu(self)
        menu.addAction("Play", self._on_play_movie)
        menu.addAction("Edit", self._on_edit_movie)
        menu.addAction("Delete", self._on_delete_movie)
        menu.exec(self.tbl_movies.viewport().mapToGlobal(pos))

    @Slot()
    def _on_add_movie(self) -> None:
        dlg = MovieDialog(self.svc.movies, self._categories, parent=self,
                          on_done=lambda saved: saved and self._after_movie_saved("added"))
        dlg.exec()

    @Slot()
    def _on_edit_movie(self) -> None:
        movie = self.selected_movie()
        if movie is None:
            self.set_status("Select a movie to edit", auto_clear=True)
            return
        dlg = MovieDialog(self.svc.movies, self._categories, movie=movie, parent=self,
                          on_done=lambda saved: saved and self._after_movie_saved("updated"))
        dlg.exec()

    def _after_movie_saved(self, verb: str) -> None:
        self.load_movies()
        self.set_status(f"Movie {verb}", auto_clear=True, color=COLOR_SUCCESS)

    @Slot()
    def _on_delete_movie(self) -> None:
        movie = self.selected_movie()
        if movie is None:
            return
        if not self._confirm("Delete Movie", f"Delete '{movie.name}' from the collection?"):
            return
        try:
            self.svc.movies.delete_movie(movie.id)
        except sqlite3.Error as e:
            self.show_error("Delete Error", f"Failed to delete movie: {e}")
            return
        self.load_movies()
        self.set_status(f"Deleted '{movie.name}'", auto_clear=True)

    @Slot()
    def _on_play_movie(self) -> None:
        movie = self.selected_movie()
        if movie is None:
            return
        try:
            self.svc.movies.play_movie(movie)
        except OSError as e:          # missing file or no default player
            self.show_error("Playback Error", f"Could not play movie: {e}")
            return
        except sqlite3.Error as e:
            self.show_error("Database Error", f"Played, but the view time was not saved: {e}")
            return
        self.model.layoutChanged.emit()
        self.set_status(f"Playing '{movie.name}'", auto_clear=True, color=COLOR_SUCCESS)

    @Slot()
    def _on_save_rating(self) -> None:
        movie = self.selected_movie()
        if movie is None:
            return
        rating = None if self.chk_not_rated.isChecked() else round(self.spn_personal.value(), 1)
        try:
            self.svc.movies.update_personal_rating(movie.id, rating)
        except ValueError as e:
            QMessageBox.warning(self, "Validation Error", str(e))
            return
        except sqlite3.Error as e:
            self.show_error("Database Error", f"Failed to save rating: {e}")
            return
        self.load_movies()
        shown = "cleared" if rating is None else f"set to {rating:.1f}"
        self.set_status(f"Rating for '{movie.name}' {shown}", auto_clear=True, color=COLOR_SUCCESS)

    # ───────────────────────────────────────────────────────────────────
    #  Slots – categories
    # ───────────────────────────────────────────────────────────────────
    def _on_category_menu(self, pos) -> None:
        menu = QMenu(self)
        menu.addAction("Add", self._on_add_category)
        if self.lst_categories.itemAt(pos) is not None:
            menu.addAction("Edit", self._on_edit_category)
            menu.addAction("Delete", self._on_delete_category)
        menu.exec(self.lst_categories.viewport().mapToGlobal(pos))

    def _after_category_saved(self, verb: str) -> None:
        self.load_categories()
        self.load_movies()          # category names appear in the movie rows
        self.set_status(f"Category {verb}", auto_clear=True, color=COLOR_SUCCESS)

    @Slot()
    def _on_add_category(self) -> None:
        CategoryDialog(self.svc.categories, parent=self,
                       on_done=lambda saved: saved and self._after_category_saved("added")).exec()

    @Slot()
    def _on_edit_category(self) -> None:
        category = self.selected_category()
        if category is None:
            return
        CategoryDialog(self.svc.categories, category=category, parent=self,
                       on_done=lambda saved: saved and self._after_category_saved("renamed")).exec()

    @Slot()
    def _on_delete_category(self) -> None:
        category = self.selected_category()
        if category is None:
            return
        try:
            used_by = len(self.svc.links.movie_ids_for_category(category.id))
        except sqlite3.Error as e:
            self.show_error("Database Error", f"Failed to check category usage: {e}")
            return
        note = f"\n\nIt is assigned to {used_by} movie(s); they keep their other categories." if used_by else ""
        if not self._confirm("Delete Category", f"Delete category '{category.name}'?{note}"):
            return
        try:
            self.svc.categories.delete_category(category.id)
        except sqlite3.Error as e:
            self.show_error("Delete Error", f"Failed to delete category: {e}")
            return
        self._after_category_saved("deleted")
