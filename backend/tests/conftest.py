"""Root conftest — shared test configuration."""

import os
import tempfile

# Ensure tests never write to the production /data volume
os.environ.setdefault(
    "DIAGRAMS_PATH", tempfile.mkdtemp(prefix="diagram-store-test-"),
)
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from diagram_store.infrastructure.document_store import DocumentStore  # noqa: E402


@pytest.fixture
def store(tmp_path):
    """Document store rooted in a fresh per-test data directory."""
    return DocumentStore(tmp_path / "data")


@pytest.fixture
def make_diagram():
    """Factory for a diagram body carrying every required field."""
    def _make(**overrides):
        diagram = {
            "name": "Diagram",
            "databaseType": "postgresql",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:00.000Z",
        }
        diagram.update(overrides)
        return diagram
    return _make
