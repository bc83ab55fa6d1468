"""
Repository base classes - define the interface.

Two collaborators sit behind this layer:
- FeatureStore: read-only corpus access (documents + feature vectors)
- AssignmentRepository: durable record of each run's core set
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, Iterable, Iterator

from models import CoreAssignment, Document, FeatureVector

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base for entity repositories."""

    @abstractmethod
    def get(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def save(self, entity: T) -> None:
        """Save entity."""
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete entity by ID. Returns True if deleted."""
        pass

    @abstractmethod
    def list(self) -> list[T]:
        """List all entities."""
        pass

    @abstractmethod
    def exists(self, id: str) -> bool:
        """Check if entity exists."""
        pass


class FeatureStore(ABC):
    """
    Read-only access to the corpus.

    Callers must keep the corpus stable for the duration of a run.
    """

    @abstractmethod
    def get_document(self, document_id: int) -> Optional[Document]:
        """Get document metadata, None if unknown."""
        pass

    @abstractmethod
    def get_feature_vector(self, document_id: int) -> Optional[FeatureVector]:
        """Get the document's feature counts, None if unknown."""
        pass

    @abstractmethod
    def document_ids(self) -> list[int]:
        """All document ids in ascending order."""
        pass

    def documents(self) -> Iterator[Document]:
        """Iterate every document in id order."""
        for document_id in self.document_ids():
            document = self.get_document(document_id)
            if document is not None:
                yield document

    def count(self) -> int:
        return len(self.document_ids())

    def vocabulary_size(self) -> int:
        """Number of distinct features across the whole corpus."""
        features = set()
        for document_id in self.document_ids():
            features.update(self.get_feature_vector(document_id) or {})
        return len(features)


class AssignmentRepository(BaseRepository[CoreAssignment]):
    """Repository for core assignments, keyed by "<data_slice>:<seed_id>"."""

    def record(
        self,
        seed_id: int,
        core: Iterable[Document],
        advanced: bool,
        data_slice: str,
    ) -> CoreAssignment:
        """Durably record the core found for a seed. Replaces any earlier record."""
        assignment = CoreAssignment(
            seed_id=seed_id,
            core_ids=[d.id for d in core],
            advanced=advanced,
            data_slice=data_slice,
        )
        self.save(assignment)
        return assignment

    def get_for_seed(self, seed_id: int, data_slice: str = "default") -> Optional[CoreAssignment]:
        """Look up the assignment for a seed within a data slice."""
        return self.get(f"{data_slice}:{seed_id}")

    @abstractmethod
    def clear_slice(self, data_slice: str) -> bool:
        """Drop every assignment recorded for a data slice. False if there were none."""
        pass


class Repository:
    """
    Aggregate repository - provides access to all collaborators.

    This is what consumers use. Backend implementations provide
    concrete versions of each sub-repository.
    """

    @property
    @abstractmethod
    def features(self) -> FeatureStore:
        """Access the corpus."""
        pass

    @property
    @abstractmethod
    def assignments(self) -> AssignmentRepository:
        """Access persisted core assignments."""
        pass
