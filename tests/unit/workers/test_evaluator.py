"""Unit tests for ParallelEvaluator."""

import threading

import pytest

from models import Document, Theta
from workers.evaluator import ParallelEvaluator


def docs(*ids):
    return [Document(id=i) for i in ids]


def id_scorer(document: Document, theta: Theta) -> float:
    """Score = -id, so lower ids are more probable."""
    return -float(document.id)


class FlakyScorer:
    """Fails for selected ids; optionally only the first time."""

    def __init__(self, failing: set, fail_once: bool = False):
        self.failing = set(failing)
        self.fail_once = fail_once
        self.attempts: dict[int, int] = {}
        self._lock = threading.Lock()

    def __call__(self, document: Document, theta: Theta) -> float:
        with self._lock:
            self.attempts[document.id] = self.attempts.get(document.id, 0) + 1
            attempt = self.attempts[document.id]
        if document.id in self.failing and (not self.fail_once or attempt == 1):
            raise RuntimeError(f"cannot score {document.id}")
        return -float(document.id)


class TestParallelEvaluator:

    def test_scores_every_candidate(self):
        with ParallelEvaluator(id_scorer, num_threads=3) as evaluator:
            result = evaluator.evaluate_all(docs(5, 1, 3, 2), Theta())

        assert [s.document_id for s in result.scores] == [1, 2, 3, 5]
        assert result.best().document_id == 1
        assert result.worst().document_id == 5
        assert not result.has_failures

    def test_empty_pool(self):
        with ParallelEvaluator(id_scorer) as evaluator:
            result = evaluator.evaluate_all([], Theta())
        assert result.scores == []
        assert result.best() is None

    def test_all_tasks_see_same_theta(self):
        seen = []
        lock = threading.Lock()

        def recording_scorer(document, theta):
            with lock:
                seen.append(theta)
            return 0.0

        theta = Theta(counts={1: 2})
        with ParallelEvaluator(recording_scorer, num_threads=4) as evaluator:
            evaluator.evaluate_all(docs(*range(1, 21)), theta)

        assert len(seen) == 20
        assert all(t is theta for t in seen)

    def test_failure_does_not_abort_round(self):
        scorer = FlakyScorer(failing={2, 4})
        with ParallelEvaluator(scorer, num_threads=2) as evaluator:
            result = evaluator.evaluate_all(docs(1, 2, 3, 4, 5), Theta())

        assert [s.document_id for s in result.scores] == [1, 3, 5]
        assert result.failed_count == 2
        assert result.failed_ids == [2, 4]
        assert "cannot score 2" in result.failures[0].error

    def test_failures_recorded_in_stats(self):
        scorer = FlakyScorer(failing={2})
        with ParallelEvaluator(scorer) as evaluator:
            evaluator.evaluate_all(docs(1, 2, 3), Theta())
            stats = evaluator.stats

        assert stats.runs == 1
        assert stats.items_processed == 2
        assert stats.items_failed == 1
        assert "cannot score 2" in stats.last_error_message

    def test_retry_recovers_transient_failure(self):
        scorer = FlakyScorer(failing={2}, fail_once=True)
        with ParallelEvaluator(scorer, retries=1) as evaluator:
            result = evaluator.evaluate_all(docs(1, 2, 3), Theta())

        assert [s.document_id for s in result.scores] == [1, 2, 3]
        assert not result.has_failures
        assert scorer.attempts[2] == 2
        assert evaluator.stats.items_retried == 1

    def test_retry_gives_up_on_persistent_failure(self):
        scorer = FlakyScorer(failing={2})
        with ParallelEvaluator(scorer, retries=2) as evaluator:
            result = evaluator.evaluate_all(docs(1, 2), Theta())

        assert result.failed_ids == [2]
        assert scorer.attempts[2] == 3

    def test_result_independent_of_thread_count(self):
        pool = docs(*range(1, 30))
        with ParallelEvaluator(id_scorer, num_threads=1) as one:
            single = one.evaluate_all(pool, Theta())
        with ParallelEvaluator(id_scorer, num_threads=8) as many:
            multi = many.evaluate_all(pool, Theta())
        assert single == multi

    def test_invalid_thread_count(self):
        with pytest.raises(ValueError):
            ParallelEvaluator(id_scorer, num_threads=0)

    def test_close_is_idempotent(self):
        evaluator = ParallelEvaluator(id_scorer)
        evaluator.evaluate_all(docs(1), Theta())
        evaluator.close()
        evaluator.close()
        # A closed evaluator starts a fresh pool on demand
        assert evaluator.evaluate_all(docs(2), Theta()).best().document_id == 2
        evaluator.close()

    def test_get_stats(self):
        with ParallelEvaluator(id_scorer, num_threads=3) as evaluator:
            evaluator.evaluate_all(docs(1, 2), Theta())
            stats = evaluator.get_stats()

        assert stats["name"] == "EVALUATOR"
        assert stats["threads"] == 3
        assert stats["items_processed"] == 2
