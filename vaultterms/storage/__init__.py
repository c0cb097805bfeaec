"""Document store interface and implementations."""

from vaultterms.storage.filesystem import FileSystemDocumentStore
from vaultterms.storage.interfaces import DocumentStoreInterface
from vaultterms.storage.memory import InMemoryDocumentStore

__all__ = [
    "DocumentStoreInterface",
    "InMemoryDocumentStore",
    "FileSystemDocumentStore",
]
