"""
Theta - the aggregate feature-count model of a document set.
"""

import numpy as np
from pydantic import BaseModel, Field, ConfigDict


class Theta(BaseModel):
    """
    Immutable snapshot of summed feature counts.

    A new snapshot is produced on every core change; nothing mutates
    an existing one, so worker threads can read it without locks.
    Zero counts are never stored.
    """
    model_config = ConfigDict(frozen=True)

    counts: dict[int, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        """Total feature mass."""
        return sum(self.counts.values())

    def get(self, feature_id: int) -> int:
        return self.counts.get(feature_id, 0)

    def features(self) -> list[int]:
        """Feature ids in ascending order."""
        return sorted(self.counts)

    def to_array(self) -> np.ndarray:
        """Counts as a float vector, ordered like features()."""
        return np.array([self.counts[f] for f in self.features()], dtype=float)

    def is_empty(self) -> bool:
        return not self.counts

    def __len__(self) -> int:
        return len(self.counts)

    def __contains__(self, feature_id: int) -> bool:
        return feature_id in self.counts
