"""
Repository layer - abstracts the corpus and result persistence.

Usage:
    from repositories import get_repository

    repo = get_repository()  # Returns configured backend
    doc = repo.features.get_document(3)
    repo.assignments.record(3, core, advanced=False, data_slice="2024-q1")

Backends are swappable via configure_backend().
"""

from pathlib import Path

from .base import Repository, FeatureStore, AssignmentRepository
from .json_backend import JsonRepository
from .memory_backend import InMemoryRepository, InMemoryFeatureStore

# Default backend - can be changed via configure_backend
_backend: str = "json"
_base_path: Path = None
_instance: Repository = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        if _backend == "json":
            _instance = JsonRepository(_base_path)
        elif _backend == "memory":
            _instance = InMemoryRepository()
        else:
            raise ValueError(f"Unknown backend: {_backend}")

    return _instance


def configure_backend(backend: str, base_path: Path = None) -> None:
    """Configure the repository backend."""
    global _backend, _base_path, _instance
    _backend = backend
    _base_path = Path(base_path) if base_path else None
    _instance = None  # Force re-initialization


__all__ = [
    "get_repository",
    "configure_backend",
    "Repository",
    "FeatureStore",
    "AssignmentRepository",
    "JsonRepository",
    "InMemoryRepository",
    "InMemoryFeatureStore",
]
