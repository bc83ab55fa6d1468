"""
Smoothed log-probability of a document under theta.

Multinomial likelihood with additive (Laplace) smoothing:

    log P(d | theta) = sum_f c_d(f) * log((theta(f) + alpha) / (|theta| + alpha * V))

V is the vocabulary size. Features theta has never seen still get
alpha / (|theta| + alpha * V), so the score stays finite.
"""

from typing import Optional

import numpy as np

from models import Document, FeatureVector, Theta


def log_probability(
    vector: FeatureVector,
    theta: Theta,
    vocabulary_size: Optional[int] = None,
    alpha: float = 1.0,
) -> float:
    """
    Score a document's feature counts against a theta snapshot.

    Args:
        vector: Document feature counts
        theta: Model to score against (read only)
        vocabulary_size: Corpus-wide distinct feature count. Pass the same
            value for every candidate in a round. Defaults to the features
            of theta plus the document's unseen ones.
        alpha: Additive smoothing constant, must be > 0

    Returns:
        Log-probability (natural log); 0.0 for an empty document
    """
    if alpha <= 0:
        raise ValueError(f"alpha must be positive, got {alpha}")

    features = sorted(f for f, c in vector.items() if c > 0)
    if not features:
        return 0.0

    if vocabulary_size is None:
        vocabulary_size = len(theta) + sum(1 for f in features if f not in theta)
    # A vocabulary smaller than what we can see would break normalization
    vocabulary_size = max(vocabulary_size, len(theta), 1)

    doc_counts = np.array([vector[f] for f in features], dtype=float)
    model_counts = np.array([theta.get(f) for f in features], dtype=float)
    denominator = theta.total + alpha * vocabulary_size

    return float(np.dot(doc_counts, np.log(model_counts + alpha) - np.log(denominator)))


class DocumentScorer:
    """
    log_probability bound to a feature store.

    Callable as scorer(document, theta); this is the unit of work the
    parallel evaluator fans out.
    """

    def __init__(self, features, vocabulary_size: Optional[int] = None, alpha: float = 1.0):
        self.features = features
        self.vocabulary_size = vocabulary_size
        self.alpha = alpha

    def __call__(self, document: Document, theta: Theta) -> float:
        vector = self.features.get_feature_vector(document.id)
        if vector is None:
            raise LookupError(f"No feature vector for document {document.id}")
        return log_probability(vector, theta, self.vocabulary_size, self.alpha)
