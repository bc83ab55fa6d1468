"""
In-memory backend - used by tests and for corpora built in code.
"""

from typing import Optional

from models import CoreAssignment, Document, FeatureVector, validate_feature_vector
from .base import Repository, FeatureStore, AssignmentRepository


class InMemoryFeatureStore(FeatureStore):
    """Dict-backed corpus."""

    def __init__(self):
        self._documents: dict[int, Document] = {}
        self._vectors: dict[int, FeatureVector] = {}

    def add(self, document: Document, vector: dict) -> None:
        """Add or replace a document and its feature counts."""
        self._documents[document.id] = document
        self._vectors[document.id] = validate_feature_vector(vector)

    def get_document(self, document_id: int) -> Optional[Document]:
        return self._documents.get(document_id)

    def get_feature_vector(self, document_id: int) -> Optional[FeatureVector]:
        vector = self._vectors.get(document_id)
        return dict(vector) if vector is not None else None

    def document_ids(self) -> list[int]:
        return sorted(self._documents)


class InMemoryAssignmentRepository(AssignmentRepository):
    """Dict-backed assignment store."""

    def __init__(self):
        self._assignments: dict[str, CoreAssignment] = {}

    def get(self, id: str) -> Optional[CoreAssignment]:
        return self._assignments.get(id)

    def save(self, entity: CoreAssignment) -> None:
        entity.touch()
        self._assignments[entity.key] = entity

    def delete(self, id: str) -> bool:
        return self._assignments.pop(id, None) is not None

    def list(self) -> list[CoreAssignment]:
        return sorted(self._assignments.values(), key=lambda a: a.updated_at, reverse=True)

    def exists(self, id: str) -> bool:
        return id in self._assignments

    def clear_slice(self, data_slice: str) -> bool:
        keys = [k for k, a in self._assignments.items() if a.data_slice == data_slice]
        for key in keys:
            del self._assignments[key]
        return bool(keys)


class InMemoryRepository(Repository):
    """In-memory backend implementation."""

    def __init__(self, features: InMemoryFeatureStore = None):
        self._features = features or InMemoryFeatureStore()
        self._assignments = InMemoryAssignmentRepository()

    @property
    def features(self) -> InMemoryFeatureStore:
        return self._features

    @property
    def assignments(self) -> AssignmentRepository:
        return self._assignments
