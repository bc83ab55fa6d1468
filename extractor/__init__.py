"""
Core extraction - greedy core selection and serendipity ranking.

Pipeline:
1. SEED: fix the seed document, theta = its feature counts
2. BOOTSTRAP: promote the most probable candidate a fixed number of times
3. CONVERGE: keep promoting until theta's entropy stops moving
4. STORE: record the core through the assignment repository
5. RECOMMEND: rank leftovers by full vs reduced theta divergence
"""

from .errors import (
    CoreExtractionError,
    DocumentNotFoundError,
    EmptyCandidatePoolError,
    InvalidStateError,
    EvaluationFailedError,
)
from .estimator import build_model, reduce_model, add_document
from .scoring import log_probability, DocumentScorer
from .entropy import entropy, delta, EntropyTracker
from .comparison import compare_features
from .events import EventEmitter
from .selector import GreedyCoreSelector, SelectorState
from .serendipity import SerendipityRanker
from .runner import run_extraction, ExtractionResult

__all__ = [
    # Errors
    "CoreExtractionError",
    "DocumentNotFoundError",
    "EmptyCandidatePoolError",
    "InvalidStateError",
    "EvaluationFailedError",
    # Model math
    "build_model",
    "reduce_model",
    "add_document",
    "log_probability",
    "DocumentScorer",
    "entropy",
    "delta",
    "EntropyTracker",
    "compare_features",
    # Orchestration
    "EventEmitter",
    "GreedyCoreSelector",
    "SelectorState",
    "SerendipityRanker",
    "run_extraction",
    "ExtractionResult",
]
