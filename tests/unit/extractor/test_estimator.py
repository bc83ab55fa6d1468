"""Unit tests for theta estimation."""

import pytest

from extractor import add_document, build_model, reduce_model
from models import Theta


class TestBuildModel:

    def test_empty_input(self):
        assert build_model([]) == Theta()

    def test_elementwise_sum(self):
        theta = build_model([{1: 2, 2: 1}, {2: 3, 5: 1}])
        assert theta.counts == {1: 2, 2: 4, 5: 1}

    def test_order_independent(self):
        vectors = [{1: 2, 2: 1}, {2: 3, 5: 1}, {9: 4}]
        assert build_model(vectors) == build_model(list(reversed(vectors)))

    def test_zero_counts_not_stored(self):
        theta = build_model([{1: 0, 2: 1}])
        assert 1 not in theta

    def test_inputs_not_mutated(self):
        vector = {1: 2}
        build_model([vector, {1: 3}])
        assert vector == {1: 2}


class TestAddDocument:

    def test_equals_rebuild_from_union(self):
        vectors = [{1: 2, 2: 1}, {2: 3}]
        extra = {2: 1, 7: 4}
        assert add_document(build_model(vectors), extra) == build_model(vectors + [extra])

    def test_into_empty(self):
        assert add_document(Theta(), {3: 2}) == Theta(counts={3: 2})

    def test_returns_new_snapshot(self):
        theta = build_model([{1: 1}])
        updated = add_document(theta, {1: 1})
        assert theta.counts == {1: 1}
        assert updated.counts == {1: 2}


class TestReduceModel:

    def test_keeps_top_k(self, sample_theta):
        reduced = reduce_model(sample_theta, 2)
        assert reduced.counts == {1: 10, 2: 7}

    def test_tie_broken_by_lowest_feature_id(self, sample_theta):
        # Features 3 and 4 both have count 4; only one slot left
        reduced = reduce_model(sample_theta, 3)
        assert reduced.counts == {1: 10, 2: 7, 3: 4}

    def test_k_larger_than_model(self, sample_theta):
        assert reduce_model(sample_theta, 50) == sample_theta

    def test_k_zero(self, sample_theta):
        assert reduce_model(sample_theta, 0).is_empty()

    @pytest.mark.parametrize("k", [1, 2, 3, 4, 5, 6])
    def test_size_and_mass(self, sample_theta, k):
        reduced = reduce_model(sample_theta, k)
        assert len(reduced) == min(k, len(sample_theta))
        assert reduced.total <= sample_theta.total

    def test_original_untouched(self, sample_theta):
        reduce_model(sample_theta, 1)
        assert len(sample_theta) == 5
