"""
JSON file backend - stores data as JSON/JSONL files.

Directory structure:
    {data_dir}/
        corpus.jsonl                      - One document per line:
                                            {"id", "topic", "title", "features": {fid: count}}
        assignments/{slice}/{seed}.json   - Persisted core assignments
"""

import json
import shutil
import threading
from pathlib import Path
from typing import Optional

from config import DATA_DIR
from models import CoreAssignment, Document, FeatureVector, validate_feature_vector
from .base import (
    Repository,
    FeatureStore,
    AssignmentRepository,
)


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write."""
        with self._lock:
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2, default=str)
            temp.replace(path)

    def append_jsonl(self, path: Path, data: dict) -> None:
        """Append to JSONL file."""
        with self._lock:
            with open(path, "a") as f:
                f.write(json.dumps(data, default=str) + "\n")


_write_queue = WriteQueue()


class JsonFeatureStore(FeatureStore):
    """
    Corpus read from corpus.jsonl.

    The file is loaded once, on first access, and cached for the
    lifetime of the store.
    """

    def __init__(self, base_path: Path = None):
        self._base_path = base_path or DATA_DIR
        self._lock = threading.Lock()
        self._documents: Optional[dict[int, Document]] = None
        self._vectors: dict[int, FeatureVector] = {}

    @property
    def corpus_file(self) -> Path:
        return self._base_path / "corpus.jsonl"

    def _load(self) -> dict[int, Document]:
        with self._lock:
            if self._documents is not None:
                return self._documents

            documents: dict[int, Document] = {}
            path = self.corpus_file
            if path.exists():
                with open(path) as f:
                    for line_num, line in enumerate(f, 1):
                        line = line.strip()
                        if not line:
                            continue
                        try:
                            data = json.loads(line)
                            vector = validate_feature_vector(data.pop("features", {}) or {})
                            document = Document.model_validate(data)
                        except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
                            print(f"[REPO] Corrupt line {line_num} in {path}: {e}")
                            continue
                        documents[document.id] = document
                        self._vectors[document.id] = vector
            else:
                print(f"[REPO] No corpus at {path}")

            self._documents = documents
            return documents

    def append(self, document: Document, vector: dict) -> None:
        """Append a document to corpus.jsonl (for building corpora)."""
        self._base_path.mkdir(parents=True, exist_ok=True)
        data = document.model_dump(mode="json")
        data["features"] = {str(k): v for k, v in validate_feature_vector(vector).items()}
        _write_queue.append_jsonl(self.corpus_file, data)
        with self._lock:
            self._documents = None  # Reload on next access
            self._vectors = {}

    def get_document(self, document_id: int) -> Optional[Document]:
        return self._load().get(document_id)

    def get_feature_vector(self, document_id: int) -> Optional[FeatureVector]:
        if document_id not in self._load():
            return None
        return dict(self._vectors[document_id])

    def document_ids(self) -> list[int]:
        return sorted(self._load())


class JsonAssignmentRepository(AssignmentRepository):
    """JSON file implementation of the assignment repository."""

    def __init__(self, base_path: Path = None):
        self._base_path = (base_path or DATA_DIR) / "assignments"

    def _path(self, key: str) -> Path:
        data_slice, _, seed_id = key.rpartition(":")
        return self._base_path / (data_slice or "default") / f"{seed_id}.json"

    def get(self, id: str) -> Optional[CoreAssignment]:
        path = self._path(id)
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"[REPO] Corrupt assignment {path}: {e}")
            return None

        return CoreAssignment.model_validate(data)

    def save(self, entity: CoreAssignment) -> None:
        path = self._path(entity.key)
        path.parent.mkdir(parents=True, exist_ok=True)

        entity.touch()
        _write_queue.write_json(path, entity.model_dump(mode="json"))

    def delete(self, id: str) -> bool:
        path = self._path(id)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list(self) -> list[CoreAssignment]:
        if not self._base_path.exists():
            return []

        assignments = []
        for slice_dir in self._base_path.iterdir():
            if not slice_dir.is_dir():
                continue
            for path in slice_dir.glob("*.json"):
                assignment = self.get(f"{slice_dir.name}:{path.stem}")
                if assignment:
                    assignments.append(assignment)

        return sorted(assignments, key=lambda a: a.updated_at, reverse=True)

    def exists(self, id: str) -> bool:
        return self._path(id).exists()

    def clear_slice(self, data_slice: str) -> bool:
        """Drop every assignment recorded for a data slice."""
        slice_dir = self._base_path / data_slice
        if not slice_dir.exists():
            return False
        shutil.rmtree(slice_dir)
        return True


class JsonRepository(Repository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Path = None):
        self._base_path = base_path or DATA_DIR
        self._features = JsonFeatureStore(self._base_path)
        self._assignments = JsonAssignmentRepository(self._base_path)

    @property
    def features(self) -> JsonFeatureStore:
        return self._features

    @property
    def assignments(self) -> JsonAssignmentRepository:
        return self._assignments
