"""
Integration test fixtures.

Integration tests:
- Test component boundaries
- Use real I/O but to temp locations
- Should be deterministic
"""

import pytest
import tempfile
import shutil
from pathlib import Path

from models import Document
from repositories.json_backend import JsonRepository


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir):
    """Temporary data directory."""
    p = temp_dir / "data"
    p.mkdir()
    return p


@pytest.fixture
def write_corpus(data_dir):
    """Write {doc_id: vector} to data_dir/corpus.jsonl; returns a JsonRepository."""
    def write(vectors: dict[int, dict[int, int]]) -> JsonRepository:
        repo = JsonRepository(base_path=data_dir)
        for doc_id, vector in vectors.items():
            topic = "even" if doc_id % 2 == 0 else "odd"
            repo.features.append(Document(id=doc_id, topic=topic, title=f"Doc {doc_id}"), vector)
        return JsonRepository(base_path=data_dir)
    return write
