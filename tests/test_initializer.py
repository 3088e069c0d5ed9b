import pytest

from movieCollection.errors import DatabaseConnectionError
from movieCollection.metadata import initializer
from movieCollection.metadata import Database, DatabaseInitializer, MovieRepo
from movieCollection.settings import DbSettings


def _count(db, table):
    with db.connect() as conn:
        return conn.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"]


def test_missing_database_without_auto_create_raises(tmp_path):
    db = Database(DbSettings(database=str(tmp_path / "missing"), auto_create=False))

    with pytest.raises(DatabaseConnectionError, match="auto-create is disabled"):
        DatabaseInitializer(db).initialize()
    assert not db.exists()


def test_first_run_creates_and_seeds(db_settings):
    db = Database(db_settings)

    status = DatabaseInitializer(db).initialize_with_status()

    assert status == "DB init: created database, tables ok, seed ok"
    assert db.exists()
    assert _count(db, "Category") == 22
    assert _count(db, "Movie") == 8
    assert _count(db, "CatMovie") == 17


def test_rerun_is_idempotent(db_settings):
    db = Database(db_settings)
    DatabaseInitializer(db).initialize()

    status = DatabaseInitializer(db).initialize_with_status()

    assert status == "DB init: database exists, tables ok, seed ok"
    assert _count(db, "Category") == 22
    assert _count(db, "Movie") == 8
    assert _count(db, "CatMovie") == 17


def test_existing_database_opens_without_auto_create(db_settings):
    DatabaseInitializer(Database(db_settings), seed=False).initialize()
    settings = DbSettings(database=db_settings.database, auto_create=False)

    status = DatabaseInitializer(Database(settings), seed=False).initialize_with_status()

    assert status == "DB init: database exists, tables ok"


def test_seed_is_skipped_when_user_has_data(db, make_movie):
    make_movie("My own movie")

    DatabaseInitializer(db).initialize()

    assert [m.name for m in MovieRepo(db).list_all()] == ["My own movie"]
    # categories were empty, so they still get seeded
    assert _count(db, "Category") == 22


def test_seeded_movies_are_hydrated(db_settings):
    db = Database(db_settings)
    DatabaseInitializer(db).initialize()

    by_name = {m.name: m for m in MovieRepo(db).list_all()}

    assert [c.name for c in by_name["Schindler's List"].categories] == \
           ["Biography", "Drama", "History"]
    assert by_name["The Godfather"].imdb_rating == pytest.approx(9.2)


def test_broken_seed_script_leaves_no_partial_rows(db_settings, tmp_path, monkeypatch):
    broken = tmp_path / "seed_movies.sql"
    broken.write_text(
        "INSERT INTO Movie (name, filelink) VALUES ('Half seeded', 'half.mp4');\n"
        "INSERT INTO NoSuchTable VALUES (1);\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(initializer, "SEED_MOVIES_PATH", broken)
    db = Database(db_settings)

    with pytest.raises(DatabaseConnectionError):
        DatabaseInitializer(db).initialize()

    assert _count(db, "Movie") == 0
    assert _count(db, "Category") == 0
