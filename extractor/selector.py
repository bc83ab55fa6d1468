"""
Greedy core selection.

Starting from a seed document, repeatedly add the candidate that theta
(the summed counts of the current core) finds most probable, until the
entropy of theta stops moving:

    UNINITIALIZED -> SEEDED -> BOOTSTRAPPING -> CONVERGING -> DONE

Core set, candidate pool and theta are owned here and only change on
the calling thread, between evaluation rounds.
"""

from enum import Enum
from typing import Iterable, Optional

from config import ExtractionSettings
from models import Document, EvaluationRound, FeatureVector, Theta
from repositories.base import FeatureStore
from workers.evaluator import ParallelEvaluator

from . import events
from .comparison import compare_features
from .entropy import EntropyTracker
from .errors import (
    DocumentNotFoundError,
    EmptyCandidatePoolError,
    EvaluationFailedError,
    InvalidStateError,
)
from .estimator import add_document, build_model
from .scoring import DocumentScorer


class SelectorState(str, Enum):
    """Lifecycle of a core extraction."""
    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    BOOTSTRAPPING = "bootstrapping"
    CONVERGING = "converging"
    DONE = "done"


_ACTIVE_STATES = (
    SelectorState.SEEDED,
    SelectorState.BOOTSTRAPPING,
    SelectorState.CONVERGING,
)


class GreedyCoreSelector:
    """
    Grows a core set around a seed document.

    Usage:
        with GreedyCoreSelector(store, settings) as selector:
            selector.seed(3)
            core = selector.extract()
    """

    def __init__(
        self,
        features: FeatureStore,
        settings: ExtractionSettings = None,
        evaluator: ParallelEvaluator = None,
        emitter: events.EventEmitter = None,
    ):
        self.features = features
        self.settings = settings or ExtractionSettings()
        self.emitter = emitter or events.EventEmitter(name="SELECTOR")
        self.entropy = EntropyTracker(self.settings.entropy_threshold)

        self._evaluator = evaluator
        self._owns_evaluator = evaluator is None

        self._state = SelectorState.UNINITIALIZED
        self._seed: Optional[Document] = None
        self._core: dict[int, Document] = {}
        self._core_vectors: dict[int, FeatureVector] = {}
        self._candidates: dict[int, Document] = {}
        self._theta = Theta()
        self._promotions: list[int] = []
        self._rounds = 0
        self._failed_evaluations = 0

    # === Read-only views ===

    @property
    def state(self) -> SelectorState:
        return self._state

    @property
    def seed_document(self) -> Optional[Document]:
        return self._seed

    @property
    def core(self) -> frozenset[Document]:
        return frozenset(self._core.values())

    @property
    def core_ids(self) -> list[int]:
        return sorted(self._core)

    @property
    def candidates(self) -> list[Document]:
        """Candidate pool in id order."""
        return [self._candidates[i] for i in sorted(self._candidates)]

    @property
    def theta(self) -> Theta:
        return self._theta

    @property
    def promotions(self) -> list[int]:
        """Ids promoted by probability, in order."""
        return list(self._promotions)

    @property
    def failed_evaluations(self) -> int:
        """Candidate evaluations that failed across all rounds."""
        return self._failed_evaluations

    @property
    def evaluator(self) -> Optional[ParallelEvaluator]:
        return self._evaluator

    # === Transitions ===

    def seed(self, document_id: int) -> Document:
        """
        Fix the seed: core = {seed}, pool = corpus - {seed}.

        Raises:
            DocumentNotFoundError: id unknown to the feature store
            EmptyCandidatePoolError: the seed is the whole corpus
        """
        if self._state != SelectorState.UNINITIALIZED:
            raise InvalidStateError(f"Cannot seed in state {self._state.value}")

        document = self.features.get_document(document_id)
        vector = self.features.get_feature_vector(document_id) if document else None
        if document is None or vector is None:
            raise DocumentNotFoundError(document_id)

        candidates = {d.id: d for d in self.features.documents() if d.id != document_id}
        if not candidates:
            raise EmptyCandidatePoolError(f"Seed {document_id} leaves no candidate documents")

        if self._evaluator is None:
            scorer = DocumentScorer(
                self.features,
                vocabulary_size=self.features.vocabulary_size(),
                alpha=self.settings.smoothing_alpha,
            )
            self._evaluator = ParallelEvaluator(
                scorer,
                num_threads=self.settings.num_threads,
                retries=self.settings.evaluation_retries,
            )

        self._seed = document
        self._core = {document.id: document}
        self._core_vectors = {document.id: vector}
        self._candidates = candidates
        self._theta = build_model([vector])
        self.entropy.record(self._theta)
        self._state = SelectorState.SEEDED

        self.emitter.notify(events.SEED, {
            "document_id": document.id,
            "topic": document.topic,
            "title": document.title,
            "candidates": len(candidates),
        })
        return document

    def extract(self) -> frozenset[Document]:
        """
        Run bootstrap then converging rounds; ends in DONE.

        Bootstrap promotes unconditionally (bounded by the pool size),
        since the first few additions swing entropy too much to read as
        convergence. After that, promote while the latest entropy delta
        is above threshold and candidates remain.

        A round in which no candidate could be scored ends the run early;
        the failures are already reported through ROUND_FAILURES.
        """
        if self._state != SelectorState.SEEDED:
            raise InvalidStateError(f"Cannot extract in state {self._state.value}")

        self._state = SelectorState.BOOTSTRAPPING
        stalled = False
        for _ in range(min(self.settings.bootstrap_rounds, len(self._candidates))):
            if self._promote_best() is None:
                stalled = True
                break

        self._state = SelectorState.CONVERGING
        while not stalled and self._candidates and not self.entropy.converged():
            stalled = self._promote_best() is None

        if stalled:
            print(f"[SELECTOR] Stopping early: none of the {len(self._candidates)} "
                  f"remaining candidate(s) could be scored")

        self._state = SelectorState.DONE
        print(f"[SELECTOR] Done: core of {len(self._core)} after {self._rounds} rounds "
              f"(delta {self.entropy.latest_delta:.6f})")
        return self.core

    def promote(self) -> Document:
        """
        One promotion round: argmax over the pool, move it into the core.

        Raises:
            EmptyCandidatePoolError: nothing left to promote
            EvaluationFailedError: no candidate could be scored
        """
        self._require_active()
        if not self._candidates:
            raise EmptyCandidatePoolError()

        document = self._promote_best()
        if document is None:
            raise EvaluationFailedError(len(self._candidates))
        return document

    def assign_to_core(self, document_ids: Iterable[int]) -> None:
        """
        Move a batch of candidates straight into the core.

        Used to fold in a result computed elsewhere. Theta is updated
        incrementally and ends up equal to a full rebuild. All ids are
        checked before anything moves.
        """
        if self._state == SelectorState.UNINITIALIZED:
            raise InvalidStateError("Cannot assign before seeding")

        batch = []
        for document_id in dict.fromkeys(document_ids):
            if document_id not in self._candidates:
                raise DocumentNotFoundError(
                    document_id, f"Document {document_id} is not a candidate"
                )
            self._vector(document_id)
            batch.append(self._candidates[document_id])
        if not batch:
            return

        self._move_to_core(batch)
        theta = self._theta
        for document in batch:
            theta = add_document(theta, self._core_vectors[document.id])
        self._theta = theta
        self.entropy.record(self._theta)
        print(f"[SELECTOR] Assigned {len(batch)} document(s) to core")

    # === Queries (no mutation) ===

    def most_probable_document(self) -> Document:
        """argmax_d P(d | theta) over the pool."""
        return self._pick(best=True)

    def least_probable_document(self) -> Document:
        """argmin_d P(d | theta) over the pool."""
        return self._pick(best=False)

    def seed_rank(self) -> int:
        """How many candidates the current theta rates above the seed itself."""
        if self._state == SelectorState.UNINITIALIZED:
            raise InvalidStateError("No seed yet")
        if not self._candidates:
            raise EmptyCandidatePoolError()

        seed_score = self._evaluator.scorer(self._seed, self._theta)
        result = self.evaluate_candidates()
        count = sum(1 for s in result.scores if s.log_probability > seed_score)
        print(f"[SELECTOR] {count} documents score higher than seed {self._seed.id}")
        return count

    def evaluate_candidates(self, theta: Theta = None) -> EvaluationRound:
        """Score the whole pool against theta (current theta by default)."""
        if self._state == SelectorState.UNINITIALIZED:
            raise InvalidStateError("No seed yet")
        return self._evaluate(self._theta if theta is None else theta)

    # === Internals ===

    def _promote_best(self) -> Optional[Document]:
        """Promote the argmax of one round; None when nothing could be scored."""
        self._rounds += 1
        best = self.evaluate_candidates().best()
        if best is None:
            return None

        document = best.document
        if self.settings.print_comparison:
            vector = self._vector(document.id)
            comparison = compare_features(document.id, self._theta, vector)
            self.emitter.notify(events.COMPARISON, comparison.model_dump())

        self._move_to_core([document])
        self._theta = build_model(self._core_vectors.values())
        self.entropy.record(self._theta)
        self._promotions.append(document.id)

        self.emitter.notify(events.PROMOTION, {
            "round": self._rounds,
            "document_id": document.id,
            "topic": document.topic,
            "title": document.title,
            "log_probability": best.log_probability,
            "entropy_delta": self.entropy.latest_delta,
            "core_size": len(self._core),
        })
        return document

    def _require_active(self) -> None:
        if self._state not in _ACTIVE_STATES:
            raise InvalidStateError(f"Cannot promote in state {self._state.value}")

    def _vector(self, document_id: int) -> FeatureVector:
        vector = self.features.get_feature_vector(document_id)
        if vector is None:
            raise DocumentNotFoundError(document_id)
        return vector

    def _move_to_core(self, documents: list[Document]) -> None:
        for document in documents:
            if document.id in self._core:
                raise InvalidStateError(f"Document {document.id} is already in the core")
            vector = self._vector(document.id)
            del self._candidates[document.id]
            self._core[document.id] = document
            self._core_vectors[document.id] = vector

    def _evaluate(self, theta: Theta) -> EvaluationRound:
        result = self._evaluator.evaluate_all(self._candidates.values(), theta)
        if result.has_failures:
            self._failed_evaluations += result.failed_count
            self.emitter.notify(events.ROUND_FAILURES, {
                "round": self._rounds,
                "failed_count": result.failed_count,
                "failed_ids": result.failed_ids,
                "scored": result.succeeded_count,
            })
        return result

    def _pick(self, best: bool) -> Document:
        if self._state == SelectorState.UNINITIALIZED:
            raise InvalidStateError("No seed yet")
        if not self._candidates:
            raise EmptyCandidatePoolError()

        result = self.evaluate_candidates()
        picked = result.best() if best else result.worst()
        if picked is None:
            raise EvaluationFailedError(result.failed_count)
        return picked.document

    def close(self) -> None:
        """Release the evaluator's threads if this selector created it."""
        if self._owns_evaluator and self._evaluator is not None:
            self._evaluator.close()

    def __enter__(self) -> "GreedyCoreSelector":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
