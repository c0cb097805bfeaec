"""Storage interface definitions for the vault document store."""

from abc import ABC, abstractmethod

from vaultterms.document import Document


class DocumentStoreInterface(ABC):
    """Abstract interface for whole-document reads and writes.

    The store is authoritative for document content. The pipeline never
    caches content between operations, so every method must reflect the
    current state of the vault. Paths are slash-separated and relative to
    the vault root.

    Implementations raise DocumentIOError for documents that cannot be
    read or written.
    """

    @abstractmethod
    async def read_document(self, path: str) -> str:
        """Return the full text of a document.

        Raises:
            DocumentIOError: If the document is missing or unreadable.
        """

    @abstractmethod
    async def write_document(self, path: str, text: str) -> None:
        """Replace the full text of an existing document.

        The rewrite is all-or-nothing: readers see either the old or the
        new content.

        Raises:
            DocumentIOError: If the document is missing or unwritable.
        """

    @abstractmethod
    async def list_documents(self, kind_filter: str | None = "md") -> list[str]:
        """List document paths, sorted.

        Args:
            kind_filter: File extension (without the dot) to keep, or None
                for every document.
        """

    @abstractmethod
    async def document_exists(self, path: str) -> bool:
        """Return True if the document exists."""

    @abstractmethod
    async def create_document(self, path: str, initial_text: str) -> None:
        """Create a new document, including any missing parent folders.

        Raises:
            DocumentIOError: If the document already exists or cannot be created.
        """

    @abstractmethod
    async def delete_document(self, path: str) -> bool:
        """Delete a document. Returns True if found and deleted."""

    async def load(self, path: str) -> Document:
        """Read a document and wrap it in a Document snapshot."""
        return Document(path=path, content=await self.read_document(path))

    async def upsert_document(self, path: str, text: str) -> None:
        """Write the document, creating it first if it does not exist."""
        if await self.document_exists(path):
            await self.write_document(path, text)
        else:
            await self.create_document(path, text)
