"""
Unit tests for Navigator.
"""

from teafarm.services.navigation import HISTORY_LIMIT, Navigator


def test_redirect_to_login():
    navigator = Navigator()
    navigator.navigate("/fields")

    navigator.redirect_to_login()

    assert navigator.location == "/login"
    assert navigator.at_login
    assert list(navigator.history) == ["/", "/fields", "/login"]


def test_repeated_location_is_not_recorded_twice():
    navigator = Navigator()
    navigator.redirect_to_login()
    navigator.redirect_to_login()
    assert list(navigator.history) == ["/", "/login"]


def test_history_is_capped():
    navigator = Navigator()
    for i in range(HISTORY_LIMIT * 3):
        navigator.navigate(f"/fields/{i}")

    assert len(navigator.history) == HISTORY_LIMIT
    assert navigator.location == f"/fields/{HISTORY_LIMIT * 3 - 1}"
    assert navigator.history[0] == f"/fields/{HISTORY_LIMIT * 2}"
