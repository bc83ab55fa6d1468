"""
Domain models - single source of truth for all entities.

Design principles:
- Every entity defined once
- Snapshots (Document, Theta) are frozen
- Validation at the boundary
- Backend-agnostic (repository handles persistence)
"""

from .base import BaseEntity, TimestampMixin
from .document import Document, FeatureVector, validate_feature_vector
from .theta import Theta
from .evaluation import ScoredDocument, EvaluationFailure, EvaluationRound, EvaluatorStats
from .assignment import CoreAssignment
from .ranking import SerendipityCandidate, FeatureComparison

__all__ = [
    # Base
    "BaseEntity",
    "TimestampMixin",
    # Corpus
    "Document",
    "FeatureVector",
    "validate_feature_vector",
    # Model
    "Theta",
    # Evaluation
    "ScoredDocument",
    "EvaluationFailure",
    "EvaluationRound",
    "EvaluatorStats",
    # Persistence
    "CoreAssignment",
    # Ranking
    "SerendipityCandidate",
    "FeatureComparison",
]
