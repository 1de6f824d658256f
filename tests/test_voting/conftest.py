"""Shared fixtures for voting system tests."""

import pytest
from tests.conftest import make_books, make_voters


@pytest.fixture
def sci_fi_books():
    return make_books("Dune", "Foundation", "Hyperion")


@pytest.fixture
def sci_fi_voters():
    """Dune wins both its pairings 2-1.

              v1  v2  v3
    Dune       1   2   1
    Foundation 2   1   3
    Hyperion   3   3   2

    Pairwise: Dune>Foundation 2-1, Dune>Hyperion 3-0, Foundation>Hyperion 2-1.
    Worst defeats: Dune -1, Foundation 1, Hyperion 3.
    """
    return make_voters({
        "v1": ["Dune", "Foundation", "Hyperion"],
        "v2": ["Foundation", "Dune", "Hyperion"],
        "v3": ["Dune", "Hyperion", "Foundation"],
    })


@pytest.fixture
def abc_books():
    return make_books("A", "B", "C")


@pytest.fixture
def perfect_cycle():
    """Perfect cycle, 3 voters, 3 books.

         v1  v2  v3
    A     1   3   2
    B     2   1   3
    C     3   2   1

    A>B, B>C and C>A each 2-1, so every book has a worst defeat of 1.
    """
    return make_voters({
        "v1": ["A", "B", "C"],
        "v2": ["B", "C", "A"],
        "v3": ["C", "A", "B"],
    })


@pytest.fixture
def shared_top():
    """A and B split 1-1 and both beat C 2-0.

    Worst defeats: A 0, B 0, C 2.
    """
    return make_voters({
        "v1": ["A", "B", "C"],
        "v2": ["B", "A", "C"],
    })
