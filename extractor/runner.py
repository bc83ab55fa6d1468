"""
End-to-end run: seed -> extract core -> persist -> recommend.
"""

from dataclasses import dataclass, field
from typing import Optional

from config import ExtractionSettings
from models import CoreAssignment, SerendipityCandidate
from repositories.base import Repository

from . import events
from .errors import CoreExtractionError
from .selector import GreedyCoreSelector
from .serendipity import SerendipityRanker


@dataclass
class ExtractionResult:
    """Everything a run produced."""
    seed_id: int
    core_ids: list[int]
    promotions: list[int]
    entropy_readings: list[float]
    assignment: Optional[CoreAssignment] = None
    recommendations: list[SerendipityCandidate] = field(default_factory=list)
    seed_rank: Optional[int] = None
    failed_evaluations: int = 0
    evaluator_stats: dict = field(default_factory=dict)


def run_extraction(
    seed_id: int,
    num_recommendations: int,
    repository: Repository,
    settings: ExtractionSettings = None,
    emitter: events.EventEmitter = None,
    report_seed_rank: bool = False,
) -> ExtractionResult:
    """
    Run a full extraction for one seed.

    The assignment is recorded exactly once, after the core is final,
    and only when settings.store_data is set. Any CoreExtractionError
    aborts the run before persistence; an ABORT event is emitted and the
    error re-raised for the caller to turn into an exit status.
    """
    settings = settings or ExtractionSettings()
    emitter = emitter or events.EventEmitter()
    selector = GreedyCoreSelector(repository.features, settings, emitter=emitter)

    try:
        emitter.notify(events.STAGE, {"message": "Setting initial document"})
        selector.seed(seed_id)

        emitter.notify(events.STAGE, {"message": "Extracting core documents"})
        selector.extract()

        result = ExtractionResult(
            seed_id=seed_id,
            core_ids=selector.core_ids,
            promotions=selector.promotions,
            entropy_readings=selector.entropy.readings,
        )

        if settings.store_data:
            emitter.notify(events.STAGE, {"message": "Storing data"})
            result.assignment = repository.assignments.record(
                seed_id,
                selector.core,
                settings.advanced_algorithm,
                settings.data_slice,
            )
            emitter.notify(events.ASSIGNMENT, {
                "seed_id": seed_id,
                "core_size": result.assignment.size,
                "data_slice": result.assignment.data_slice,
            })

        if report_seed_rank and selector.candidates:
            result.seed_rank = selector.seed_rank()

        emitter.notify(events.STAGE, {"message": "Requesting serendipitous documents"})
        ranker = SerendipityRanker(selector.evaluator, settings.reduced_k)
        result.recommendations = ranker.rank(
            selector.candidates, selector.theta, num_recommendations
        )
        emitter.notify(events.RECOMMENDATIONS, {
            "candidates": [
                {
                    "document_id": c.document.id,
                    "topic": c.document.topic,
                    "title": c.document.title,
                    "full_rank": c.full_rank,
                    "reduced_rank": c.reduced_rank,
                    "divergence": c.divergence,
                }
                for c in result.recommendations
            ],
        })

        result.failed_evaluations = selector.failed_evaluations
        result.evaluator_stats = selector.evaluator.get_stats()
        return result

    except CoreExtractionError as e:
        emitter.notify(events.ABORT, {
            "reason": str(e),
            "error": type(e).__name__,
            "seed_id": seed_id,
            "state": selector.state.value,
        })
        raise
    finally:
        selector.close()
