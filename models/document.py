"""
Corpus models - documents and their feature counts.
"""

from pydantic import BaseModel, ConfigDict

# feature id -> non-negative count
FeatureVector = dict[int, int]


class Document(BaseModel):
    """
    A corpus document.

    Created by the feature store and shared by reference everywhere else.
    Frozen, so documents can be held in sets and compared by value.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    topic: str = ""
    title: str = ""

    def label(self) -> str:
        """Short human-readable form used in reports."""
        return f"{self.id}({self.topic}): {self.title}"


def validate_feature_vector(vector: dict) -> FeatureVector:
    """Coerce keys/counts to int and reject negative counts."""
    clean: FeatureVector = {}
    for feature_id, count in vector.items():
        count = int(count)
        if count < 0:
            raise ValueError(f"Negative count {count} for feature {feature_id}")
        if count:
            clean[int(feature_id)] = count
    return clean
