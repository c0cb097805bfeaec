"""Glossary maintenance and idempotent term linking for markdown vaults.

Terms flow through a fixed lifecycle: detected by a scan, queued for human
review, promoted into the glossary once approved, and linked wherever they
are mentioned in the vault.

    from vaultterms import build_pipeline
    from vaultterms.storage import FileSystemDocumentStore

    pipeline = build_pipeline(FileSystemDocumentStore(Path("vault")))
    await pipeline.scan()
    # ... reviewer ticks terms in _term_review_queue.md ...
    await pipeline.promote()
    await pipeline.link()
"""

from vaultterms.config import ScanScope, VaultTermsConfig, load_config
from vaultterms.document import Document
from vaultterms.errors import ConfigurationError, DocumentIOError
from vaultterms.glossary import GlossaryEntry, GlossaryStore
from vaultterms.linker import GlossaryLinker, LinkedText
from vaultterms.orchestrator import (
    GlossaryStatus,
    LinkPassResult,
    OperationStatus,
    PromotionResult,
    ScanSummary,
    TermPipeline,
    build_pipeline,
)
from vaultterms.review_queue import ReviewQueue, ReviewQueueEntry
from vaultterms.term import CandidateOccurrence, ScanResult, TermAggregate, TermCategory

__all__ = [
    "VaultTermsConfig",
    "ScanScope",
    "load_config",
    "Document",
    "ConfigurationError",
    "DocumentIOError",
    "CandidateOccurrence",
    "TermAggregate",
    "TermCategory",
    "ScanResult",
    "GlossaryEntry",
    "GlossaryStore",
    "ReviewQueue",
    "ReviewQueueEntry",
    "GlossaryLinker",
    "LinkedText",
    "TermPipeline",
    "build_pipeline",
    "OperationStatus",
    "ScanSummary",
    "PromotionResult",
    "LinkPassResult",
    "GlossaryStatus",
]

__version__ = "0.1.0"
