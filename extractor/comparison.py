"""
Side-by-side feature comparison of the current core and a candidate.

Purely diagnostic; emitted with each promotion when enabled.
"""

from models import FeatureComparison, FeatureVector, Theta


def compare_features(document_id: int, core: Theta, vector: FeatureVector) -> FeatureComparison:
    """Summarize how a candidate's features overlap the core theta."""
    candidate = {f for f, c in vector.items() if c > 0}
    core_features = set(core.counts)
    shared = candidate & core_features

    candidate_mass = sum(vector[f] for f in candidate)
    shared_mass = sum(vector[f] for f in shared)

    return FeatureComparison(
        document_id=document_id,
        core_features=len(core_features),
        candidate_features=len(candidate),
        shared_features=len(shared),
        candidate_only=len(candidate - core_features),
        core_only=len(core_features - candidate),
        shared_mass=shared_mass / candidate_mass if candidate_mass else 0.0,
    )
