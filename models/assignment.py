"""
Core assignment - the persisted outcome of one extraction run.
"""

from pydantic import Field, field_validator

from .base import BaseEntity


class CoreAssignment(BaseEntity):
    """
    Which documents ended up in the core for a seed.

    One record per (seed_id, data_slice); re-recording replaces it.
    """
    seed_id: int
    core_ids: list[int] = Field(default_factory=list)
    advanced: bool = False  # True when produced by the advanced variant
    data_slice: str = "default"

    @field_validator("core_ids")
    @classmethod
    def _sorted_unique(cls, value: list[int]) -> list[int]:
        return sorted(set(value))

    @field_validator("data_slice", mode="before")
    @classmethod
    def _slice_as_str(cls, value) -> str:
        return str(value)

    @property
    def key(self) -> str:
        return f"{self.data_slice}:{self.seed_id}"

    @property
    def size(self) -> int:
        return len(self.core_ids)
