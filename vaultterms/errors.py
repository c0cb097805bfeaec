"""Exceptions raised by the vaultterms pipeline."""


class DocumentIOError(OSError):
    """A document could not be read, written, created or deleted.

    Raised by document stores. Corpus-wide passes catch it per document and
    count the document as skipped; single-document operations let it
    propagate.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigurationError(ValueError):
    """The configuration cannot drive the requested operation."""
