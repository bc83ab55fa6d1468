"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (in-memory corpora only)
- Deterministic (same result every time)
"""

import pytest

from models import Theta


@pytest.fixture
def small_vectors():
    """
    Seed 1 plus three candidates with a clear probability order
    under theta = seed: 2 > 3 > 4.
    """
    return {
        1: {1: 5, 2: 1},
        2: {1: 2},
        3: {2: 2},
        4: {7: 2},
    }


@pytest.fixture
def small_store(make_store, small_vectors):
    return make_store(small_vectors)


@pytest.fixture
def sample_theta():
    """Theta with distinct counts and one tie (features 3 and 4)."""
    return Theta(counts={1: 10, 2: 7, 3: 4, 4: 4, 5: 1})
