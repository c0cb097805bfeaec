"""In-memory document store for testing and embedding.

Keeps every document in a ``dict[str, str]`` keyed by path. Suitable for unit
tests and for hosts that already hold the vault in memory and sync it
themselves.

**Not recommended for production** on its own: nothing is persisted when the
process exits.
"""

from vaultterms.errors import DocumentIOError
from vaultterms.storage.interfaces import DocumentStoreInterface


class InMemoryDocumentStore(DocumentStoreInterface):
    """Dictionary-backed document store.

    Example:
        ```python
        store = InMemoryDocumentStore({"notes/a.md": "The Logos Field ..."})
        text = await store.read_document("notes/a.md")
        ```
    """

    def __init__(self, documents: dict[str, str] | None = None) -> None:
        self._documents: dict[str, str] = dict(documents or {})
        self.writes: list[str] = []

    async def read_document(self, path: str) -> str:
        try:
            return self._documents[path]
        except KeyError:
            raise DocumentIOError(path, "no such document") from None

    async def write_document(self, path: str, text: str) -> None:
        if path not in self._documents:
            raise DocumentIOError(path, "no such document")
        self._documents[path] = text
        self.writes.append(path)

    async def list_documents(self, kind_filter: str | None = "md") -> list[str]:
        paths = self._documents.keys()
        if kind_filter is not None:
            suffix = "." + kind_filter.lower()
            paths = [p for p in paths if p.lower().endswith(suffix)]
        return sorted(paths)

    async def document_exists(self, path: str) -> bool:
        return path in self._documents

    async def create_document(self, path: str, initial_text: str) -> None:
        if path in self._documents:
            raise DocumentIOError(path, "document already exists")
        self._documents[path] = initial_text
        self.writes.append(path)

    async def delete_document(self, path: str) -> bool:
        return self._documents.pop(path, None) is not None
