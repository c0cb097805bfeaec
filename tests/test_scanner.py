"""Tests for vault-wide term aggregation.

This module verifies:
- Occurrences of a term are summed across documents
- The frequency threshold drops rare terms
- Owning documents are recorded once each, in first-seen order
- Excluded folders, control documents and scope prefixes limit the scan
- Unreadable documents are skipped and counted without aborting the scan
- Local scope without a folder is a configuration error
"""

import pytest

from vaultterms.config import ScanScope, VaultTermsConfig
from vaultterms.errors import ConfigurationError
from vaultterms.pipeline.scanner import TermScanner
from vaultterms.storage.memory import InMemoryDocumentStore
from vaultterms.term import CandidateOccurrence, TermAggregate, TermCategory


class TestAggregation:
    """Tests for counting and thresholding."""

    async def test_counts_across_documents(self, store, config) -> None:
        """Test that three and four mentions aggregate to seven."""
        result = await TermScanner(store, config).scan(min_frequency=5)

        aggregate = result.get("Logos Field")
        assert aggregate is not None
        assert aggregate.count == 7
        assert aggregate.document_paths == ["notes/a.md", "notes/b.md"]

    async def test_threshold_drops_term(self, store, config) -> None:
        """Test that a term below min_frequency is absent."""
        result = await TermScanner(store, config).scan(min_frequency=8)
        assert result.get("Logos Field") is None

    async def test_no_aggregate_below_threshold(self, config) -> None:
        """Test that every returned aggregate meets the threshold."""
        store = InMemoryDocumentStore(
            {
                "a.md": "PEAR\nPEAR\nPEAR\nNASA\nNASA\n",
                "b.md": "PEAR and CERN\n",
            }
        )
        result = await TermScanner(store, config).scan(min_frequency=2)

        assert all(a.count >= 2 for a in result.terms)
        assert [a.term for a in result.terms] == ["PEAR", "NASA"]

    async def test_sorted_by_descending_count(self, config) -> None:
        """Test that aggregates come back most frequent first."""
        store = InMemoryDocumentStore({"a.md": "NASA\nPEAR\nPEAR\nPEAR\nNASA\nCERN\n"})
        result = await TermScanner(store, config).scan(min_frequency=1)

        assert [(a.term, a.count) for a in result.terms] == [("PEAR", 3), ("NASA", 2), ("CERN", 1)]

    async def test_total_occurrences_counted_before_threshold(self, config) -> None:
        """Test that total_occurrences includes terms later dropped."""
        store = InMemoryDocumentStore({"a.md": "PEAR\nPEAR\nCERN\n"})
        result = await TermScanner(store, config).scan(min_frequency=2)

        assert result.total_occurrences == 3
        assert [a.term for a in result.terms] == ["PEAR"]

    async def test_occurrences_tagged_with_document(self, store, config) -> None:
        """Test that each occurrence knows its owning document."""
        result = await TermScanner(store, config).scan()

        aggregate = result.get("Logos Field")
        assert {o.document_path for o in aggregate.occurrences} == {"notes/a.md", "notes/b.md"}
        assert aggregate.example == "we study the Logos Field today."

    async def test_custom_terms_counted(self, config) -> None:
        """Test that custom-list terms are counted under their canonical spelling."""
        store = InMemoryDocumentStore({"a.md": "grace function\nthe grace function\n"})
        result = await TermScanner(store, config).scan(min_frequency=1, custom_terms=["Grace Function"])

        assert result.get("Grace Function").count == 2


class TestSelection:
    """Tests for which documents take part in a scan."""

    async def test_excluded_folder_not_scanned(self, store, config) -> None:
        """Test that documents under an excluded folder are ignored."""
        result = await TermScanner(store, config).scan(min_frequency=1)

        assert "assets/captions.md" not in result.get("Logos Field").document_paths
        assert result.documents_scanned == 2

    async def test_control_documents_not_scanned(self, config) -> None:
        """Test that the glossary, queue and custom list are never scanned."""
        store = InMemoryDocumentStore(
            {
                "Glossary.md": "## PEAR\n## PEAR\n",
                "_term_review_queue.md": "- [ ] **PEAR**\n",
                "Custom_Terms.md": "PEAR\n",
                "note.md": "nothing here\n",
            }
        )
        result = await TermScanner(store, config).scan(min_frequency=1)

        assert result.terms == []
        assert result.documents_scanned == 1

    async def test_scope_restricts_to_folder(self, config) -> None:
        """Test that an explicit scope only scans documents under it."""
        store = InMemoryDocumentStore(
            {
                "papers/one.md": "PEAR\n",
                "papers/deep/two.md": "PEAR\n",
                "papers-old/three.md": "PEAR\n",
                "journal.md": "PEAR\n",
            }
        )
        result = await TermScanner(store, config).scan(scope="papers/", min_frequency=1)

        assert result.scope == "papers"
        assert result.get("PEAR").document_paths == ["papers/deep/two.md", "papers/one.md"]

    async def test_configured_local_scope(self) -> None:
        """Test that a local scan_scope uses the scoped folder."""
        config = VaultTermsConfig(scan_scope=ScanScope.LOCAL, scoped_folder="papers")
        store = InMemoryDocumentStore({"papers/one.md": "PEAR\n", "other.md": "PEAR\n"})
        result = await TermScanner(store, config).scan(min_frequency=1)

        assert result.get("PEAR").document_paths == ["papers/one.md"]

    async def test_local_scope_without_folder(self) -> None:
        """Test that local scope with no folder fails before reading anything."""
        config = VaultTermsConfig(scan_scope=ScanScope.LOCAL)
        with pytest.raises(ConfigurationError):
            await TermScanner(InMemoryDocumentStore(), config).scan()

    async def test_only_markdown_documents(self, config) -> None:
        """Test that non-markdown files are not scanned."""
        store = InMemoryDocumentStore({"data.txt": "PEAR\n", "a.md": "CERN\n"})
        result = await TermScanner(store, config).scan(min_frequency=1)

        assert [a.term for a in result.terms] == ["CERN"]


class TestFailures:
    """Tests for unreadable documents."""

    async def test_unreadable_document_skipped(self, vault_documents, config, failing_store_factory) -> None:
        """Test that an unreadable document is counted and the rest still scanned."""
        store = failing_store_factory(vault_documents, {"notes/a.md"})
        result = await TermScanner(store, config).scan(min_frequency=1)

        assert result.documents_skipped == 1
        assert result.documents_scanned == 1
        assert result.get("Logos Field").count == 4


def occurrence(path: str) -> CandidateOccurrence:
    return CandidateOccurrence(
        term="PEAR",
        category=TermCategory.ACRONYM,
        document_path=path,
        line_number=1,
        context_line="the PEAR lab",
        start=4,
        end=8,
    )


class TestTermAggregate:
    """Tests for per-term accumulation."""

    def test_documents_recorded_once_in_order(self) -> None:
        """Test that many occurrences across documents keep one entry per document."""
        aggregate = TermAggregate(term="PEAR")
        for index in range(500):
            aggregate.add(occurrence(f"notes/{index % 50}.md"))

        assert aggregate.count == 500
        assert aggregate.document_paths == [f"notes/{i}.md" for i in range(50)]

    def test_prefilled_documents_not_duplicated(self) -> None:
        """Test that documents given at construction are known to add()."""
        aggregate = TermAggregate(term="PEAR", count=2, document_paths=["a.md"])
        aggregate.add(occurrence("a.md"))
        aggregate.add(occurrence("b.md"))

        assert aggregate.count == 4
        assert aggregate.document_paths == ["a.md", "b.md"]
