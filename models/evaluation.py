"""
Evaluation models - per-round scores, failures, and evaluator stats.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from .document import Document


class ScoredDocument(BaseModel):
    """A candidate with its log-probability under one theta snapshot."""
    model_config = ConfigDict(frozen=True)

    document: Document
    log_probability: float

    @property
    def document_id(self) -> int:
        return self.document.id


class EvaluationFailure(BaseModel):
    """A candidate whose score could not be computed this round."""
    document_id: int
    error: str = ""


def _best_key(scored: ScoredDocument) -> tuple[float, int]:
    # Highest probability first, lowest id on ties
    return (-scored.log_probability, scored.document.id)


def _worst_key(scored: ScoredDocument) -> tuple[float, int]:
    return (scored.log_probability, scored.document.id)


class EvaluationRound(BaseModel):
    """
    Result of scoring a whole candidate pool against one theta.

    Failures are kept alongside the scores so callers can see when the
    argmax was taken over a partial pool.
    """
    scores: list[ScoredDocument] = Field(default_factory=list)
    failures: list[EvaluationFailure] = Field(default_factory=list)

    @property
    def succeeded_count(self) -> int:
        return len(self.scores)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    @property
    def failed_ids(self) -> list[int]:
        return sorted(f.document_id for f in self.failures)

    def best(self) -> Optional[ScoredDocument]:
        """Most probable document, ties broken by lowest id."""
        if not self.scores:
            return None
        return min(self.scores, key=_best_key)

    def worst(self) -> Optional[ScoredDocument]:
        """Least probable document, ties broken by lowest id."""
        if not self.scores:
            return None
        return min(self.scores, key=_worst_key)

    def ranked(self) -> list[ScoredDocument]:
        """All scores, most probable first."""
        return sorted(self.scores, key=_best_key)


class EvaluatorStats(BaseModel):
    """
    Running statistics for the parallel evaluator.

    One run == one evaluate_all() call; items are individual documents.
    """
    runs: int = 0
    successes: int = 0
    errors: int = 0

    items_processed: int = 0
    items_failed: int = 0
    items_retried: int = 0

    last_run: Optional[datetime] = None
    last_success: Optional[datetime] = None
    last_error: Optional[datetime] = None
    last_error_message: Optional[str] = None

    def record_run(self) -> None:
        """Record a round attempt."""
        self.runs += 1
        self.last_run = datetime.now()

    def record_success(self, items: int = 0) -> None:
        """Record a round that finished (possibly with some failed items)."""
        self.successes += 1
        self.last_success = datetime.now()
        self.items_processed += items

    def record_error(self, message: str = None) -> None:
        """Record a single failed document evaluation."""
        self.errors += 1
        self.items_failed += 1
        self.last_error = datetime.now()
        self.last_error_message = message

    @property
    def success_rate(self) -> float:
        """Fraction of evaluated documents that produced a score."""
        attempted = self.items_processed + self.items_failed
        if attempted == 0:
            return 0.0
        return self.items_processed / attempted

    @property
    def is_healthy(self) -> bool:
        """Healthy while failures stay rare."""
        if self.items_processed + self.items_failed < 3:
            return True  # Not enough data
        return self.success_rate > 0.5

    def to_dict(self) -> dict:
        """Export for reports."""
        return {
            "runs": self.runs,
            "successes": self.successes,
            "errors": self.errors,
            "items_processed": self.items_processed,
            "items_failed": self.items_failed,
            "items_retried": self.items_retried,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "last_error": self.last_error_message,
            "healthy": self.is_healthy,
        }
