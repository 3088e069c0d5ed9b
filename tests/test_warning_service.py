from datetime import datetime

from tests.conftest import years_ago


def test_only_low_rated_and_long_unseen_movies_qualify(warning_service, make_movie):
    make_movie("Flop", personal=5.0, last_view=years_ago(3))
    make_movie("Recent flop", personal=5.0, last_view=years_ago(1))
    make_movie("Old favourite", personal=8.0, last_view=years_ago(5))
    make_movie("Never played", personal=2.0)
    make_movie("Unrated", personal=None, last_view=years_ago(5))
    make_movie("Borderline", personal=6.0, last_view=years_ago(4))

    assert [m.name for m in warning_service.movies_for_warning()] == ["Flop"]
    assert warning_service.has_warnings()


def test_cutoff_is_two_years(warning_service, make_movie):
    make_movie("Just over", personal=1.0, last_view=years_ago(2, days=3))
    make_movie("Just under", personal=1.0, last_view=years_ago(2, days=-3))

    assert [m.name for m in warning_service.movies_for_warning()] == ["Just over"]


def test_no_warnings(warning_service, make_movie):
    make_movie("Fine", personal=9.0, last_view=datetime.now().replace(microsecond=0))

    assert not warning_service.has_warnings()
    assert warning_service.build_message() == ""


def test_message_lists_each_candidate(warning_service, make_movie, categories):
    make_movie("Bad Boys", personal=5.0, last_view=years_ago(3), cats=[categories["Action"]])
    make_movie("Cats", personal=1.5, last_view=years_ago(4))

    assert warning_service.build_message() == (
        "The following movies have a personal rating below 6.0 "
        "and have not been watched in over 2 years.\n"
        "\n"
        "Consider deleting them to free up space:\n"
        "\n"
        "• Bad Boys (Rating: 5.0)\n"
        "• Cats (Rating: 1.5)\n"
    )
