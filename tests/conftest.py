"""Test fixtures for the term pipeline.

This module provides:
- A small in-memory vault whose notes mention ``Logos Field`` three and four
  times, so a scan aggregates seven occurrences across two documents
- A document store that fails to read selected paths, for exercising the
  skip-and-continue paths of scanning and linking
- Pytest fixtures wiring the default configuration into a pipeline
"""

import pytest

from vaultterms.config import VaultTermsConfig
from vaultterms.errors import DocumentIOError
from vaultterms.orchestrator import build_pipeline
from vaultterms.storage.memory import InMemoryDocumentStore

NOTE_A = "\n".join(
    [
        "# Note A",
        "",
        "we study the Logos Field today.",
        "later the Logos Field returns.",
        "in closing, the Logos Field again.",
    ]
)

NOTE_B = "\n".join(
    [
        "# Note B",
        "",
        "the Logos Field is one thing.",
        "and the Logos Field is another.",
        "so the Logos Field persists.",
        "finally the Logos Field ends.",
    ]
)


class FailingReadStore(InMemoryDocumentStore):
    """In-memory store whose reads fail for the paths listed in ``failing``."""

    def __init__(self, documents: dict[str, str] | None = None, failing: set[str] | None = None) -> None:
        super().__init__(documents)
        self.failing = failing or set()

    async def read_document(self, path: str) -> str:
        if path in self.failing:
            raise DocumentIOError(path, "permission denied")
        return await super().read_document(path)


@pytest.fixture
def config() -> VaultTermsConfig:
    """Default configuration."""
    return VaultTermsConfig()


@pytest.fixture
def vault_documents() -> dict[str, str]:
    """Two notes mentioning Logos Field, plus an asset note that must be ignored."""
    return {
        "notes/a.md": NOTE_A,
        "notes/b.md": NOTE_B,
        "assets/captions.md": "the Logos Field\nthe Logos Field\nthe Logos Field\n",
    }


@pytest.fixture
def store(vault_documents) -> InMemoryDocumentStore:
    """In-memory vault with the sample notes."""
    return InMemoryDocumentStore(vault_documents)


@pytest.fixture
def failing_store_factory():
    """Build a FailingReadStore from documents and a set of unreadable paths."""

    def _factory(documents: dict[str, str], failing: set[str]) -> FailingReadStore:
        return FailingReadStore(documents, failing)

    return _factory


@pytest.fixture
def pipeline(store, config):
    """Pipeline over the sample vault with default configuration."""
    return build_pipeline(store, config)


def tick(queue_text: str, term: str) -> str:
    """Approve a term in review queue text the way a reviewer would."""
    return queue_text.replace(f"- [ ] **{term}**", f"- [x] **{term}**")


@pytest.fixture
def approve():
    """Tick review-queue checkboxes directly in the store."""

    async def _approve(store: InMemoryDocumentStore, *terms: str, path: str = "_term_review_queue.md") -> None:
        text = await store.read_document(path)
        for term in terms:
            text = tick(text, term)
        await store.write_document(path, text)

    return _approve
