"""
Parallel evaluator - scores a whole candidate pool against one theta.

Scatter/gather: one task per candidate on a fixed-size thread pool,
then block until every future is done. There is no early exit because
the caller needs a global argmax, not a first match.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional

from models import (
    Document,
    EvaluationFailure,
    EvaluationRound,
    EvaluatorStats,
    ScoredDocument,
    Theta,
)

Scorer = Callable[[Document, Theta], float]


class ParallelEvaluator:
    """
    Runs a scorer over many documents concurrently.

    Every task in a round reads the same theta snapshot; theta is frozen
    so workers never see a partial update. A failing document does not
    abort the round: it is printed, counted in stats, and returned in
    EvaluationRound.failures (optionally after retries).
    """

    def __init__(
        self,
        scorer: Scorer,
        num_threads: int = 4,
        retries: int = 0,
        name: str = "EVALUATOR",
    ):
        if num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {num_threads}")
        self.scorer = scorer
        self.num_threads = num_threads
        self.retries = retries
        self.name = name
        self.stats = EvaluatorStats()
        self._executor: Optional[ThreadPoolExecutor] = None

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.num_threads,
                thread_name_prefix=self.name.lower(),
            )
        return self._executor

    def _score_batch(
        self, documents: list[Document], theta: Theta
    ) -> tuple[list[ScoredDocument], dict[int, tuple[Document, str]]]:
        scores = []
        failed = {}

        futures = {self._pool().submit(self.scorer, d, theta): d for d in documents}
        for future in as_completed(futures):
            document = futures[future]
            try:
                scores.append(ScoredDocument(document=document, log_probability=future.result()))
            except Exception as e:
                print(f"[{self.name}] Error scoring document {document.id}: {e}")
                self.stats.record_error(str(e))
                failed[document.id] = (document, str(e))

        return scores, failed

    def evaluate_all(self, pool: Iterable[Document], theta: Theta) -> EvaluationRound:
        """
        Score every candidate against theta and wait for all of them.

        Returns:
            EvaluationRound with scores sorted by document id and the
            documents that could not be scored
        """
        documents = sorted(pool, key=lambda d: d.id)
        self.stats.record_run()

        scores, failed = self._score_batch(documents, theta)

        for _ in range(self.retries):
            if not failed:
                break
            retry = [document for document, _ in failed.values()]
            self.stats.items_retried += len(retry)
            print(f"[{self.name}] Retrying {len(retry)} failed document(s)")
            recovered, failed = self._score_batch(retry, theta)
            scores.extend(recovered)

        scores.sort(key=lambda s: s.document.id)
        self.stats.record_success(items=len(scores))

        return EvaluationRound(
            scores=scores,
            failures=[
                EvaluationFailure(document_id=document_id, error=error)
                for document_id, (_, error) in sorted(failed.items())
            ],
        )

    def close(self) -> None:
        """Shut the thread pool down."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "ParallelEvaluator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def get_stats(self) -> dict:
        """Get stats as dict for reports."""
        return {
            "name": self.name,
            "threads": self.num_threads,
            **self.stats.to_dict(),
        }
