"""Document store backed by a vault directory on disk."""

from pathlib import Path, PurePosixPath

from vaultterms.errors import DocumentIOError
from vaultterms.storage.interfaces import DocumentStoreInterface


class FileSystemDocumentStore(DocumentStoreInterface):
    """Reads and writes UTF-8 documents under a vault root directory.

    Document paths are POSIX-style and relative to the root. Paths that
    would resolve outside the root are rejected. Writes go to a temporary
    sibling file that is then renamed over the target, so an interrupted
    pass never leaves a half-written document.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path.replace("\\", "/"))
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise DocumentIOError(path, "path must be relative to the vault root")
        return self.root.joinpath(*relative.parts)

    async def read_document(self, path: str) -> str:
        target = self._resolve(path)
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(path, str(e)) from e

    async def write_document(self, path: str, text: str) -> None:
        target = self._resolve(path)
        if not target.is_file():
            raise DocumentIOError(path, "no such document")
        self._atomic_write(path, target, text)

    async def list_documents(self, kind_filter: str | None = "md") -> list[str]:
        if not self.root.is_dir():
            return []
        suffix = "." + kind_filter.lower() if kind_filter is not None else None
        paths: list[str] = []
        for file in self.root.rglob("*"):
            if not file.is_file():
                continue
            if suffix is not None and file.suffix.lower() != suffix:
                continue
            paths.append(file.relative_to(self.root).as_posix())
        return sorted(paths)

    async def document_exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    async def create_document(self, path: str, initial_text: str) -> None:
        target = self._resolve(path)
        if target.exists():
            raise DocumentIOError(path, "document already exists")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DocumentIOError(path, str(e)) from e
        self._atomic_write(path, target, initial_text)

    async def delete_document(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.is_file():
            return False
        try:
            target.unlink()
        except OSError as e:
            raise DocumentIOError(path, str(e)) from e
        return True

    @staticmethod
    def _atomic_write(path: str, target: Path, text: str) -> None:
        temp_file = target.with_name(target.name + ".tmp")
        try:
            with open(temp_file, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            temp_file.replace(target)
        except OSError as e:
            temp_file.unlink(missing_ok=True)
            raise DocumentIOError(path, str(e)) from e
