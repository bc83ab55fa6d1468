"""Unit tests for smoothed log-probability."""

import math

import pytest

from extractor import DocumentScorer, log_probability
from models import Document, Theta


class TestLogProbability:

    def test_matches_formula(self):
        theta = Theta(counts={1: 5, 2: 1})
        # (5 + 1) / (6 + 1 * 3) for feature 1, twice
        expected = 2 * math.log(6 / 9)
        assert log_probability({1: 2}, theta, vocabulary_size=3) == pytest.approx(expected)

    def test_unseen_features_stay_finite(self):
        theta = Theta(counts={1: 5})
        score = log_probability({42: 3}, theta, vocabulary_size=10)
        assert math.isfinite(score)
        assert score < log_probability({1: 3}, theta, vocabulary_size=10)

    def test_empty_model(self):
        score = log_probability({1: 1, 2: 1}, Theta())
        # Uniform over the two features the document brings
        assert score == pytest.approx(2 * math.log(1 / 2))

    def test_empty_document(self):
        assert log_probability({}, Theta(counts={1: 1})) == 0.0

    def test_deterministic(self):
        theta = Theta(counts={1: 5, 2: 1, 3: 7})
        vector = {3: 1, 1: 2, 9: 1}
        first = log_probability(vector, theta, vocabulary_size=20)
        assert all(log_probability(vector, theta, vocabulary_size=20) == first for _ in range(10))

    def test_key_order_irrelevant(self):
        theta = Theta(counts={1: 5, 2: 1, 3: 7})
        a = log_probability({1: 2, 3: 1, 9: 1}, theta, vocabulary_size=20)
        b = log_probability({9: 1, 3: 1, 1: 2}, theta, vocabulary_size=20)
        assert a == b

    def test_better_match_scores_higher(self):
        theta = Theta(counts={1: 10, 2: 10})
        on_topic = log_probability({1: 2, 2: 2}, theta, vocabulary_size=5)
        off_topic = log_probability({3: 2, 4: 2}, theta, vocabulary_size=5)
        assert on_topic > off_topic

    def test_vocabulary_never_below_model_size(self):
        theta = Theta(counts={1: 1, 2: 1, 3: 1})
        assert log_probability({1: 1}, theta, vocabulary_size=1) == \
            log_probability({1: 1}, theta, vocabulary_size=3)

    def test_invalid_alpha(self):
        with pytest.raises(ValueError):
            log_probability({1: 1}, Theta(), alpha=0)


class TestDocumentScorer:

    def test_scores_from_store(self, small_store):
        scorer = DocumentScorer(small_store, vocabulary_size=3)
        theta = Theta(counts={1: 5, 2: 1})
        assert scorer(Document(id=2), theta) == pytest.approx(2 * math.log(6 / 9))

    def test_missing_vector_raises(self, small_store):
        scorer = DocumentScorer(small_store)
        with pytest.raises(LookupError):
            scorer(Document(id=99), Theta())
