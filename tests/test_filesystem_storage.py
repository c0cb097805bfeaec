"""Tests for the on-disk document store.

Uses pytest's tmp_path so every test works on a fresh vault directory.
"""

import pytest

from vaultterms.errors import DocumentIOError
from vaultterms.storage.filesystem import FileSystemDocumentStore


@pytest.fixture
def vault(tmp_path):
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "a.md").write_text("alpha", encoding="utf-8")
    (tmp_path / "b.md").write_text("beta", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")
    return tmp_path


class TestFileSystemDocumentStore:
    """Tests for FileSystemDocumentStore."""

    async def test_list_documents(self, vault) -> None:
        """Test that markdown documents are listed as sorted relative paths."""
        store = FileSystemDocumentStore(vault)
        assert await store.list_documents() == ["b.md", "notes/a.md"]
        assert await store.list_documents(None) == ["b.md", "image.png", "notes/a.md"]

    async def test_list_missing_root(self, tmp_path) -> None:
        """Test that a missing vault root lists nothing."""
        assert await FileSystemDocumentStore(tmp_path / "nope").list_documents() == []

    async def test_read_and_write(self, vault) -> None:
        """Test that writes replace content and leave no temporary file."""
        store = FileSystemDocumentStore(vault)
        await store.write_document("notes/a.md", "gamma")

        assert await store.read_document("notes/a.md") == "gamma"
        assert sorted(p.name for p in (vault / "notes").iterdir()) == ["a.md"]

    async def test_write_preserves_newlines(self, vault) -> None:
        """Test that text is written byte-for-byte without newline translation."""
        store = FileSystemDocumentStore(vault)
        await store.write_document("b.md", "one\r\ntwo\n")
        assert (vault / "b.md").read_bytes() == b"one\r\ntwo\n"

    async def test_read_missing(self, vault) -> None:
        """Test that reading a missing document raises DocumentIOError."""
        store = FileSystemDocumentStore(vault)
        with pytest.raises(DocumentIOError) as exc_info:
            await store.read_document("missing.md")
        assert exc_info.value.path == "missing.md"

    async def test_write_missing(self, vault) -> None:
        """Test that writing a missing document raises instead of creating it."""
        store = FileSystemDocumentStore(vault)
        with pytest.raises(DocumentIOError):
            await store.write_document("missing.md", "text")
        assert not (vault / "missing.md").exists()

    async def test_create_nested(self, vault) -> None:
        """Test that create makes parent folders and refuses to overwrite."""
        store = FileSystemDocumentStore(vault)
        await store.create_document("Reference/Glossary.md", "# Central Glossary\n\n")

        assert await store.document_exists("Reference/Glossary.md")
        with pytest.raises(DocumentIOError):
            await store.create_document("Reference/Glossary.md", "again")

    async def test_delete(self, vault) -> None:
        """Test that delete reports whether a document was removed."""
        store = FileSystemDocumentStore(vault)
        assert await store.delete_document("b.md") is True
        assert await store.delete_document("b.md") is False

    async def test_rejects_paths_outside_root(self, vault) -> None:
        """Test that paths escaping the vault are refused."""
        store = FileSystemDocumentStore(vault)
        with pytest.raises(DocumentIOError):
            await store.read_document("../outside.md")
        with pytest.raises(DocumentIOError):
            await store.read_document("/etc/passwd")

    async def test_upsert(self, vault) -> None:
        """Test that upsert creates then overwrites."""
        store = FileSystemDocumentStore(vault)
        await store.upsert_document("queue.md", "one")
        await store.upsert_document("queue.md", "two")
        assert await store.read_document("queue.md") == "two"

    async def test_load_returns_document(self, vault) -> None:
        """Test that load wraps path and content."""
        document = await FileSystemDocumentStore(vault).load("notes/a.md")
        assert document.path == "notes/a.md"
        assert document.content == "alpha"
        assert document.lines == ["alpha"]
