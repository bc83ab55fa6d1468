"""
Model estimation - theta is the summed feature counts of a document set.
"""

import heapq
from collections import Counter
from typing import Iterable

from models import FeatureVector, Theta


def build_model(vectors: Iterable[FeatureVector]) -> Theta:
    """
    Sum feature vectors into a theta snapshot.

    Order independent; an empty input gives an empty theta.
    """
    counts = Counter()
    for vector in vectors:
        counts.update(vector)
    return Theta(counts={f: c for f, c in counts.items() if c > 0})


def add_document(theta: Theta, vector: FeatureVector) -> Theta:
    """
    Fold one more document into theta.

    Equivalent to rebuilding from the union set, but without touching
    the other documents. Returns a new snapshot.
    """
    counts = dict(theta.counts)
    for feature_id, count in vector.items():
        if count > 0:
            counts[feature_id] = counts.get(feature_id, 0) + count
    return Theta(counts=counts)


def reduce_model(theta: Theta, k: int) -> Theta:
    """
    Keep only the k highest-count features.

    Ties go to the lowest feature id so the result is deterministic.
    """
    if k <= 0:
        return Theta()
    if k >= len(theta):
        return Theta(counts=dict(theta.counts))

    top = heapq.nsmallest(k, theta.counts.items(), key=lambda fc: (-fc[1], fc[0]))
    return Theta(counts=dict(top))
