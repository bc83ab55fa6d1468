"""
Ranking models - serendipity candidates and core/candidate comparisons.
"""

from pydantic import BaseModel

from .document import Document


class SerendipityCandidate(BaseModel):
    """A candidate ranked under both the full and the reduced theta."""
    document: Document
    full_score: float
    reduced_score: float
    full_rank: int      # 1 = most probable
    reduced_rank: int
    divergence: int     # full_rank - reduced_rank; positive = better under reduced view


class FeatureComparison(BaseModel):
    """Feature overlap between the current core and a candidate."""
    document_id: int
    core_features: int = 0
    candidate_features: int = 0
    shared_features: int = 0
    candidate_only: int = 0
    core_only: int = 0
    shared_mass: float = 0.0  # Fraction of the candidate's counts on shared features

    @property
    def overlap_ratio(self) -> float:
        """Jaccard overlap of the two feature sets."""
        union = self.shared_features + self.candidate_only + self.core_only
        if union == 0:
            return 0.0
        return self.shared_features / union
