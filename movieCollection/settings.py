from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import dotenv_values

from movieCollection.errors import ConfigError

BASE_DIR = Path(__file__).resolve().parent

# File / folder paths
CONFIG_PATH = Path(os.getenv("MOVIE_COLLECTION_CONFIG", BASE_DIR / "config.env"))
LOG_PATH    = Path(os.getenv("MOVIE_COLLECTION_LOG", BASE_DIR / "movie_collection_debug.log"))
SQL_DIR     = BASE_DIR / "sql"
SCHEMA_PATH           = SQL_DIR / "schema.sql"
SEED_CATEGORIES_PATH  = SQL_DIR / "seed_categories.sql"
SEED_MOVIES_PATH      = SQL_DIR / "seed_movies.sql"

# Movie files
ALLOWED_EXTENSIONS = (".mp4", ".mpeg4")

# Cleanup reminder policy
WARNING_RATING_THRESHOLD = 6.0
WARNING_YEARS_NOT_VIEWED = 2

# UI constants
ACCENT_COLOR  = "#3b82f6"
COLOR_SUCCESS = "#16a34a"
COLOR_WARNING = "#f59e0b"
COLOR_DANGER  = "#dc2626"
COLOR_MUTED   = "#64748b"
RATING_GOOD   = 8.0
RATING_FAIR   = 6.0
STATUS_CLEAR_MS     = 6000
SEARCH_DEBOUNCE_MS  = 250

_ENV_PREFIX = "MOVIE_DB_"


@dataclass(frozen=True, slots=True)
class DbSettings:
    """Connection settings, one field per ``MOVIE_DB_*`` key."""
    server: str = "localhost"
    port: int = 1433
    database: str = "movie"
    username: str = ""
    password: str = ""
    trust_cert: bool = True
    timeout_seconds: int = 10
    auto_create: bool = False
    base_dir: Path = BASE_DIR

    @property
    def database_path(self) -> Path:
        """SQLite file backing *database* (``<name>.sqlite`` when no suffix)."""
        path = Path(self.database).expanduser()
        if not path.suffix:
            path = path.with_suffix(".sqlite")
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    def describe(self) -> str:
        """Human-readable label for status lines (never includes the password)."""
        who = f"{self.username}@" if self.username else ""
        return f"{who}{self.server}:{self.port}/{self.database} → {self.database_path}"


def _parse_int(raw: str | None, default: int, key: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        from movieCollection.utils import log_debug
        log_debug(f"Invalid integer for {key}: {raw!r}, using default {default}")
        return default


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_db_settings(path: Path | str | None = None) -> DbSettings:
    """Read *path* (default ``CONFIG_PATH``) and return a `DbSettings`.

    ``MOVIE_DB_*`` variables in the process environment override the file.

    Raises
    ------
    ConfigError
        If the file is missing or cannot be read.
    """
    cfg_path = Path(path) if path is not None else CONFIG_PATH
    if not cfg_path.is_file():
        raise ConfigError(
            f"Configuration file '{cfg_path}' not found. "
            "Copy config.env.example next to it and fill in the MOVIE_DB_* keys."
        )
    try:
        values = dotenv_values(cfg_path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read configuration file '{cfg_path}': {e}") from e

    values.update({k: v for k, v in os.environ.items() if k.startswith(_ENV_PREFIX)})
    get = lambda key: values.get(_ENV_PREFIX + key)

    defaults = DbSettings()
    return DbSettings(
        server          = get("SERVER") or defaults.server,
        port            = _parse_int(get("PORT"), defaults.port, "MOVIE_DB_PORT"),
        database        = get("DATABASE") or defaults.database,
        username        = get("USERNAME") or "",
        password        = get("PASSWORD") or "",
        trust_cert      = _parse_bool(get("TRUST_CERT"), defaults.trust_cert),
        timeout_seconds = _parse_int(get("TIMEOUT"), defaults.timeout_seconds, "MOVIE_DB_TIMEOUT"),
        auto_create     = _parse_bool(get("AUTO_CREATE"), defaults.auto_create),
        base_dir        = cfg_path.resolve().parent,
    )
