from pathlib import Path

import pytest

from movieCollection import utils
from movieCollection.errors import ConfigError
from movieCollection.settings import DbSettings, load_db_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("SERVER", "PORT", "DATABASE", "USERNAME", "PASSWORD",
                "TRUST_CERT", "TIMEOUT", "AUTO_CREATE"):
        monkeypatch.delenv(f"MOVIE_DB_{key}", raising=False)


def _write(tmp_path, text):
    path = tmp_path / "config.env"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_db_settings(tmp_path / "nope.env")


def test_values_are_parsed(tmp_path):
    path = _write(tmp_path, "\n".join([
        "MOVIE_DB_SERVER=db.local",
        "MOVIE_DB_PORT=1500",
        "MOVIE_DB_DATABASE=films",
        "MOVIE_DB_USERNAME=me",
        "MOVIE_DB_PASSWORD=secret",
        "MOVIE_DB_TRUST_CERT=false",
        "MOVIE_DB_TIMEOUT=3",
        "MOVIE_DB_AUTO_CREATE=yes",
    ]))

    cfg = load_db_settings(path)

    assert cfg.server == "db.local"
    assert cfg.port == 1500
    assert cfg.database == "films"
    assert cfg.username == "me"
    assert cfg.password == "secret"
    assert cfg.trust_cert is False
    assert cfg.timeout_seconds == 3
    assert cfg.auto_create is True
    assert cfg.database_path == tmp_path.resolve() / "films.sqlite"
    assert "secret" not in cfg.describe()


def test_defaults_for_missing_keys(tmp_path):
    cfg = load_db_settings(_write(tmp_path, "# empty\n"))
    defaults = DbSettings()

    assert cfg.server == defaults.server
    assert cfg.port == defaults.port
    assert cfg.database == defaults.database
    assert cfg.auto_create is False
    assert cfg.trust_cert is True


def test_bad_integer_falls_back_to_default(tmp_path):
    cfg = load_db_settings(_write(tmp_path, "MOVIE_DB_PORT=abc\nMOVIE_DB_TIMEOUT=\n"))
    assert cfg.port == DbSettings().port
    assert cfg.timeout_seconds == DbSettings().timeout_seconds
    assert "MOVIE_DB_PORT" in utils.LOG_PATH.read_text(encoding="utf-8")


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = _write(tmp_path, "MOVIE_DB_DATABASE=films\nMOVIE_DB_PORT=1500\n")
    monkeypatch.setenv("MOVIE_DB_DATABASE", "override")

    cfg = load_db_settings(path)

    assert cfg.database == "override"
    assert cfg.port == 1500


def test_database_path_keeps_explicit_suffix_and_absolute_paths(tmp_path):
    assert DbSettings(database="a.db", base_dir=tmp_path).database_path == tmp_path / "a.db"
    absolute = tmp_path / "x" / "movies"
    assert DbSettings(database=str(absolute)).database_path == Path(f"{absolute}.sqlite")
