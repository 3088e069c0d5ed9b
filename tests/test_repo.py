import sqlite3
from datetime import datetime

import pytest

from movieCollection.metadata.core.models import Category, Movie


def _selects(statements):
    return [s for s in statements if s.lstrip().upper().startswith("SELECT")]


# ───────────────────────────── MovieRepo reads ─────────────────────────────
def test_list_all_on_empty_db_skips_category_query(db, movie_repo):
    statements = []
    db.trace = statements.append

    assert movie_repo.list_all() == []
    assert len(_selects(statements)) == 1


def test_list_all_uses_two_queries_regardless_of_size(db, movie_repo, make_movie, categories):
    for i in range(6):
        make_movie(f"Movie {i}", cats=[categories["Drama"], categories["Crime"]])

    statements = []
    db.trace = statements.append
    movies = movie_repo.list_all()

    assert len(movies) == 6
    assert len(_selects(statements)) == 2


def test_list_all_orders_by_name_and_hydrates_categories(movie_repo, make_movie, categories):
    make_movie("Zodiac", cats=[categories["Drama"], categories["Crime"]])
    make_movie("Alien", cats=[categories["Sci-Fi"]])
    make_movie("Brazil")

    movies = movie_repo.list_all()

    assert [m.name for m in movies] == ["Alien", "Brazil", "Zodiac"]
    assert [c.name for c in movies[0].categories] == ["Sci-Fi"]
    assert movies[1].categories == []
    # categories ordered by name within each movie
    assert [c.name for c in movies[2].categories] == ["Crime", "Drama"]


def test_batch_hydration_matches_single_lookup(movie_repo, make_movie, categories):
    make_movie("Heat", cats=[categories["Crime"], categories["Action"], categories["Drama"]])
    make_movie("Airplane!", cats=[categories["Comedy"]])
    make_movie("Solaris", cats=[categories["Sci-Fi"], categories["Drama"]])
    make_movie("Untagged")

    for movie in movie_repo.list_all():
        single = movie_repo.get_by_id(movie.id)
        assert [(c.id, c.name) for c in movie.categories] == \
               [(c.id, c.name) for c in single.categories]


def test_get_by_id_round_trips_fields(movie_repo, make_movie, categories):
    seen = datetime(2023, 1, 2, 3, 4, 5)
    created = make_movie("Heat", imdb=8.3, personal=7.5, last_view=seen, cats=[categories["Crime"]])

    loaded = movie_repo.get_by_id(created.id)

    assert loaded == created
    assert loaded.name == "Heat"
    assert loaded.imdb_rating == pytest.approx(8.3)
    assert loaded.personal_rating == pytest.approx(7.5)
    assert loaded.file_link == "/movies/Heat.mp4"
    assert loaded.last_view == seen
    assert [c.name for c in loaded.categories] == ["Crime"]


def test_get_by_id_missing_returns_none(movie_repo):
    assert movie_repo.get_by_id(12345) is None


def test_search_is_case_insensitive_and_literal(movie_repo, make_movie):
    make_movie("The Godfather")
    make_movie("The Godfather Part II")
    make_movie("Goodfellas")
    make_movie("100% Wolf")
    make_movie("Top_Gun")
    make_movie("Amélie")
    make_movie("Ōkami")

    assert [m.name for m in movie_repo.search("GODF")] == ["The Godfather", "The Godfather Part II"]
    assert [m.name for m in movie_repo.search("%")] == ["100% Wolf"]
    assert [m.name for m in movie_repo.search("_")] == ["Top_Gun"]
    assert [m.name for m in movie_repo.search("AMÉLIE")] == ["Amélie"]
    assert [m.name for m in movie_repo.search("ōKAMI")] == ["Ōkami"]
    assert movie_repo.search("matrix") == []


# ───────────────────────────── MovieRepo writes ────────────────────────────
def test_create_sets_id_and_links(movie_repo, links, categories):
    movie = Movie(name="Heat", imdb_rating=8.3, file_link="heat.mp4",
                  categories=[categories["Crime"], categories["Drama"]])

    saved = movie_repo.create(movie)

    assert saved is movie
    assert movie.id > 0
    assert links.count_for_movie(movie.id) == 2


def test_update_replaces_categories(movie_repo, links, make_movie, categories):
    movie = make_movie("Heat", cats=[categories["Crime"], categories["Drama"]])

    movie.name = "Heat (1995)"
    movie.categories = [categories["Action"]]
    movie_repo.update(movie)

    loaded = movie_repo.get_by_id(movie.id)
    assert loaded.name == "Heat (1995)"
    assert [c.name for c in loaded.categories] == ["Action"]
    assert links.count_for_movie(movie.id) == 1


def test_update_is_atomic(movie_repo, make_movie, categories):
    movie = make_movie("Heat", cats=[categories["Crime"]])

    movie.name = "Should not stick"
    movie.categories = [categories["Drama"], Category(9999, "Ghost")]
    with pytest.raises(sqlite3.IntegrityError):
        movie_repo.update(movie)

    loaded = movie_repo.get_by_id(movie.id)
    assert loaded.name == "Heat"
    assert [c.name for c in loaded.categories] == ["Crime"]


def test_failed_create_leaves_movie_unsaved(movie_repo, categories):
    movie = Movie(name="Ghost", file_link="ghost.mp4",
                  categories=[categories["Drama"], Category(9999, "Ghost")])

    with pytest.raises(sqlite3.IntegrityError):
        movie_repo.create(movie)

    assert movie.id == 0
    assert movie_repo.list_all() == []


def test_update_last_viewed_and_personal_rating(movie_repo, make_movie):
    movie = make_movie("Heat", personal=6.0)

    stamp = movie_repo.update_last_viewed(movie.id)
    movie_repo.update_personal_rating(movie.id, None)

    loaded = movie_repo.get_by_id(movie.id)
    assert loaded.last_view == stamp
    assert abs((datetime.now() - stamp).total_seconds()) < 60
    assert loaded.personal_rating is None

    movie_repo.update_personal_rating(movie.id, 9.5)
    assert movie_repo.get_by_id(movie.id).personal_rating == pytest.approx(9.5)


def test_delete_movie_removes_link_rows(movie_repo, links, make_movie, categories):
    movie = make_movie("Heat", cats=[categories["Crime"], categories["Drama"]])
    assert links.count_for_movie(movie.id) == 2

    movie_repo.delete(movie.id)

    assert movie_repo.get_by_id(movie.id) is None
    assert links.count_for_movie(movie.id) == 0
    assert links.movie_ids_for_category(categories["Crime"].id) == []


# ───────────────────────────── CatMovieRepo ────────────────────────────────
def test_adding_same_link_twice_keeps_one_row(links, make_movie, categories):
    movie = make_movie("Heat")
    crime = categories["Crime"]

    assert links.add_category_to_movie(movie.id, crime.id) is True
    assert links.add_category_to_movie(movie.id, crime.id) is False

    assert links.count_for_movie(movie.id) == 1
    assert links.movie_has_category(movie.id, crime.id)


def test_link_to_unknown_movie_is_not_swallowed(links, categories):
    with pytest.raises(sqlite3.IntegrityError):
        links.add_category_to_movie(424242, categories["Crime"].id)


def test_remove_links(links, make_movie, categories):
    movie = make_movie("Heat", cats=[categories["Crime"], categories["Drama"], categories["Action"]])

    links.remove_category_from_movie(movie.id, categories["Drama"].id)
    assert [c.name for c in links.categories_for_movie(movie.id)] == ["Action", "Crime"]
    assert not links.movie_has_category(movie.id, categories["Drama"].id)

    links.remove_categories_from_movie(movie.id)
    assert links.categories_for_movie(movie.id) == []


def test_movie_ids_for_category(links, make_movie, categories):
    a = make_movie("A", cats=[categories["Drama"]])
    make_movie("B", cats=[categories["Comedy"]])
    c = make_movie("C", cats=[categories["Drama"], categories["Crime"]])

    assert links.movie_ids_for_category(categories["Drama"].id) == [a.id, c.id]


# ───────────────────────────── CategoryRepo ────────────────────────────────
def test_category_crud(category_repo):
    horror = category_repo.create(Category(name="Horror"))
    western = category_repo.create(Category(name="Western"))
    assert horror.id > 0

    horror.name = "Slasher"
    category_repo.update(horror)

    assert category_repo.get_by_id(horror.id).name == "Slasher"
    assert [c.name for c in category_repo.list_all()] == ["Slasher", "Western"]

    category_repo.delete(western.id)
    assert category_repo.get_by_id(western.id) is None


def test_failed_category_create_keeps_id_zero(category_repo):
    category_repo.create(Category(name="Drama"))
    duplicate = Category(name="Drama")

    with pytest.raises(sqlite3.IntegrityError):
        category_repo.create(duplicate)
    assert duplicate.id == 0


def test_category_name_exists(category_repo):
    drama = category_repo.create(Category(name="Drama"))

    assert category_repo.name_exists("Drama")
    assert not category_repo.name_exists("Drama", exclude_id=drama.id)
    assert not category_repo.name_exists("Musical")


def test_duplicate_category_name_raises(category_repo):
    category_repo.create(Category(name="Drama"))
    with pytest.raises(sqlite3.IntegrityError):
        category_repo.create(Category(name="Drama"))


def test_deleting_category_removes_it_from_movies(category_repo, movie_repo, links,
                                                  make_movie, categories):
    drama = categories["Drama"]
    a = make_movie("A", cats=[drama, categories["Crime"]])
    b = make_movie("B", cats=[drama])

    category_repo.delete(drama.id)

    by_name = {m.name: m for m in movie_repo.list_all()}
    assert [c.name for c in by_name["A"].categories] == ["Crime"]
    assert by_name["B"].categories == []
    assert links.movie_ids_for_category(drama.id) == []
    assert links.count_for_movie(a.id) == 1
    assert links.count_for_movie(b.id) == 0
