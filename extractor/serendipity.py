"""
Serendipity ranking.

Score the leftover candidates twice: under the full core theta and under
a reduced theta that keeps only the core's top-K features. Documents
that rank noticeably better under the reduced view share the core's
central vocabulary while diverging from it in detail - those are the
serendipitous ones.
"""

from typing import Iterable

from models import Document, ScoredDocument, SerendipityCandidate, Theta
from workers.evaluator import ParallelEvaluator

from .estimator import reduce_model


class SerendipityRanker:
    """Compares full-theta and reduced-theta rankings of a candidate pool."""

    def __init__(self, evaluator: ParallelEvaluator, reduced_k: int = 50):
        self.evaluator = evaluator
        self.reduced_k = reduced_k

    def reduced_model(self, theta: Theta, k: int = None) -> Theta:
        """Top-k features of theta (reduced_k by default)."""
        return reduce_model(theta, self.reduced_k if k is None else k)

    def top_n(
        self,
        pool: Iterable[Document],
        theta: Theta,
        n: int,
        most_probable: bool = True,
    ) -> list[ScoredDocument]:
        """The n most (or least) probable candidates, ties by lowest id."""
        if n <= 0:
            return []
        ranked = self.evaluator.evaluate_all(pool, theta).ranked()
        if not most_probable:
            ranked.sort(key=lambda s: (s.log_probability, s.document.id))
        return ranked[:n]

    def rank(
        self,
        pool: Iterable[Document],
        theta: Theta,
        n: int,
        k: int = None,
    ) -> list[SerendipityCandidate]:
        """
        Top-n candidates by rank divergence.

        divergence = full_rank - reduced_rank (ranks are 1-based, 1 = most
        probable). Only candidates with positive divergence qualify; the
        largest divergence comes first, ties by lowest id. Candidates that
        failed to score under either theta are left out.
        """
        if n <= 0:
            return []

        pool = list(pool)
        reduced = self.reduced_model(theta, k)

        full_round = self.evaluator.evaluate_all(pool, theta)
        reduced_round = self.evaluator.evaluate_all(pool, reduced)

        full_scores = {s.document.id: s for s in full_round.scores}
        reduced_scores = {s.document.id: s for s in reduced_round.scores}
        both = full_scores.keys() & reduced_scores.keys()

        full_ranked = [s for s in full_round.ranked() if s.document.id in both]
        reduced_ranked = [s for s in reduced_round.ranked() if s.document.id in both]
        full_rank = {s.document.id: i for i, s in enumerate(full_ranked, 1)}
        reduced_rank = {s.document.id: i for i, s in enumerate(reduced_ranked, 1)}

        candidates = []
        for document_id in both:
            divergence = full_rank[document_id] - reduced_rank[document_id]
            if divergence <= 0:
                continue
            candidates.append(SerendipityCandidate(
                document=full_scores[document_id].document,
                full_score=full_scores[document_id].log_probability,
                reduced_score=reduced_scores[document_id].log_probability,
                full_rank=full_rank[document_id],
                reduced_rank=reduced_rank[document_id],
                divergence=divergence,
            ))

        candidates.sort(key=lambda c: (-c.divergence, c.document.id))
        return candidates[:n]
