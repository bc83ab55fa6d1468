"""
Root test configuration.

Test organization:
- unit/        Fast, isolated, in-memory corpora, mocked collaborators
- integration/ Component boundaries, real I/O to temp locations

Run specific levels:
    pytest tests/unit -v           # Fast feedback loop
    pytest tests/integration -v    # Before commit
    pytest tests -v                # Everything
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from config import ExtractionSettings
from models import Document
from repositories import InMemoryFeatureStore


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "integration: Component boundary tests")
    config.addinivalue_line("markers", "slow: Tests that take > 1s")


def build_store(vectors: dict[int, dict[int, int]]) -> InMemoryFeatureStore:
    """In-memory corpus from {doc_id: {feature_id: count}}."""
    store = InMemoryFeatureStore()
    for doc_id, vector in vectors.items():
        topic = "even" if doc_id % 2 == 0 else "odd"
        store.add(Document(id=doc_id, topic=topic, title=f"Doc {doc_id}"), vector)
    return store


def two_topic_vectors(n: int) -> dict[int, dict[int, int]]:
    """
    n documents in two topics.

    Shared topic features (1, 2 for even ids; 5, 6 for odd ids), a
    feature every document has (100), and one private feature each.
    """
    vectors = {}
    for doc_id in range(1, n + 1):
        if doc_id % 2 == 0:
            vector = {1: 3, 2: 2 + doc_id % 3}
        else:
            vector = {5: 3, 6: 1 + doc_id % 4}
        vector[100] = 1
        vector[1000 + doc_id] = 1 + doc_id % 2
        vectors[doc_id] = vector
    return vectors


@pytest.fixture
def make_store():
    """Factory: build_store as a fixture."""
    return build_store


@pytest.fixture
def corpus_12():
    """The 12-document two-topic corpus."""
    return build_store(two_topic_vectors(12))


@pytest.fixture
def corpus_40():
    """A 40-document two-topic corpus - large enough to reach convergence."""
    return build_store(two_topic_vectors(40))


@pytest.fixture
def quiet_settings():
    """Settings with console flags off and two evaluator threads."""
    return ExtractionSettings(
        num_threads=2,
        print_initial_document=False,
        print_core_titles=False,
    )


@pytest.fixture
def topic_vectors():
    """Factory: two_topic_vectors as a fixture."""
    return two_topic_vectors
