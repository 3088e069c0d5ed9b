# movie_collection_db.py
"""
Connection provider for the movie collection.

Every logical store operation opens its own short-lived sqlite3 connection:

    with db.connect() as conn:        # read-only work, closed afterwards
        ...
    with db.transaction() as conn:    # COMMIT on success, ROLLBACK on error
        ...
"""
from __future__ import annotations
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

from movieCollection.settings import DbSettings

TraceHook = Callable[[str], None]


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


class Database:
    """Opens configured connections to the SQLite file described by *settings*."""

    def __init__(self, settings: DbSettings, trace: TraceHook | None = None) -> None:
        self.settings = settings
        self.trace    = trace             # sqlite3 statement callback (tests/diagnostics)

    @property
    def path(self) -> Path:
        return self.settings.database_path

    def exists(self) -> bool:
        return self.path.is_file()

    # ─── internal helpers ────────────────────────────────────────────────
    def _new_connection(self) -> sqlite3.Connection:
        """Create a fresh sqlite3.Connection with rows-as-mappings and FK checks."""
        conn = sqlite3.connect(
            self.path,
            timeout=self.settings.timeout_seconds,
            isolation_level="DEFERRED",
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        # LIKE and lower() only fold ASCII
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        if self.trace is not None:
            conn.set_trace_callback(self.trace)
        return conn

    # ─── public helpers ──────────────────────────────────────────────────
    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection for reads; always closed on exit."""
        conn = self._new_connection()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection whose statements commit together or not at all."""
        conn = self._new_connection()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def test_connection(self) -> bool:
        """True when a connection can be opened and queried."""
        try:
            with self.connect() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error:
            return False
