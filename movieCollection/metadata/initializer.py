"""
initializer
~~~~~~~~~~~
Creates the database file (when allowed), the tables, and the seed rows.

Every step is idempotent, so it runs on each start-up.
"""
from __future__ import annotations
import sqlite3
from pathlib import Path
from typing import List, Tuple

from movieCollection.errors import DatabaseConnectionError
from movieCollection.metadata.movie_collection_db import Database
from movieCollection.settings import SCHEMA_PATH, SEED_CATEGORIES_PATH, SEED_MOVIES_PATH
from movieCollection.utils import log_debug


class DatabaseInitializer:
    def __init__(self, db: Database, seed: bool = True) -> None:
        self.db   = db
        self.seed = seed

    def initialize(self) -> None:
        self.initialize_with_status()

    def initialize_with_status(self) -> str:
        """Run all bootstrap steps and return a one-line status summary.

        Raises
        ------
        DatabaseConnectionError
            Database missing with auto-create off, or the file cannot be opened.
        """
        parts = []
        if self.db.settings.auto_create:
            parts.append("created database" if self._ensure_database_exists() else "database exists")
        else:
            self._ensure_database_exists_or_raise()
            parts.append("database exists")

        try:
            with self.db.transaction() as conn:
                conn.executescript(_read_script(SCHEMA_PATH))
            parts.append("tables ok")

            if self.seed:
                with self.db.transaction() as conn:
                    _seed_if_empty(conn, [("Category", SEED_CATEGORIES_PATH),
                                          ("Movie",    SEED_MOVIES_PATH)])
                parts.append("seed ok")
        except sqlite3.OperationalError as e:
            raise DatabaseConnectionError(
                f"Failed to initialise '{self.db.path}': {e}"
            ) from e

        status = "DB init: " + ", ".join(parts)
        log_debug(f"{status} ({self.db.settings.describe()})")
        return status

    # ─── internal helpers ────────────────────────────────────────────────
    def _ensure_database_exists(self) -> bool:
        """Create the database file if missing; True when it was created."""
        if self.db.exists():
            self._verify()
            return False
        log_debug(f"Database '{self.db.path}' does not exist. Creating…")
        try:
            self.db.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DatabaseConnectionError(
                f"Failed to create database '{self.db.path}': {e}"
            ) from e
        self._verify()
        return True

    def _ensure_database_exists_or_raise(self) -> None:
        if not self.db.exists():
            raise DatabaseConnectionError(
                f"Database '{self.db.path}' does not exist and auto-create is disabled. "
                "Create the database manually or set MOVIE_DB_AUTO_CREATE=true."
            )
        self._verify()

    def _verify(self) -> None:
        if not self.db.test_connection():
            raise DatabaseConnectionError(
                f"Failed to open database '{self.db.path}'. "
                "Check MOVIE_DB_DATABASE and file permissions."
            )


def _read_script(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _seed_if_empty(conn: sqlite3.Connection, seeds: List[Tuple[str, Path]]) -> List[str]:
    """Run the seed script of every empty table; returns the tables seeded.

    `executescript` commits whatever is pending before it starts, so the
    scripts carry their own BEGIN/COMMIT and fail or succeed together.
    """
    pending = [
        (table, script) for table, script in seeds
        if not conn.execute(f"SELECT EXISTS (SELECT 1 FROM {table}) AS n").fetchone()["n"]
    ]
    if pending:
        body = "\n".join(_read_script(script) for _, script in pending)
        conn.executescript(f"BEGIN;\n{body}\nCOMMIT;")
    return [table for table, _ in pending]
