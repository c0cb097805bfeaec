"""Term lifecycle orchestrator.

`TermPipeline` wires the pipeline components to one document store and one
configuration, and exposes the operations a host (CLI, editor plugin, file
watcher) triggers:

- `scan()`: detect and aggregate terms, then regenerate the review queue
- `promote()`: move ticked review-queue terms into the glossary
- `link()`: link glossary terms in one document or the whole vault
- `handle_document_changed()`: link a document after an edit
- `status()`: glossary completeness and pending approvals

Each operation returns a frozen result whose ``message`` is suitable for
showing to the user, including after partial failures.

Example usage:
    ```python
    pipeline = build_pipeline(FileSystemDocumentStore(Path("vault")))
    await pipeline.initialize()
    summary = await pipeline.scan()
    print(summary.message)
    ```
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from vaultterms.config import VaultTermsConfig, is_under
from vaultterms.custom_terms import CustomTermsList
from vaultterms.errors import DocumentIOError
from vaultterms.glossary import GlossaryStore
from vaultterms.linker import GlossaryLinker
from vaultterms.logging import setup_logging
from vaultterms.pipeline.interfaces import TermDetectorInterface
from vaultterms.pipeline.scanner import TermScanner
from vaultterms.review_queue import ReviewQueue
from vaultterms.storage.interfaces import DocumentStoreInterface


class OperationStatus(str, Enum):
    """Outcome of a top-level operation."""

    COMPLETED = "completed"
    """The operation did work (terms queued, promoted or linked)."""

    NOTHING_PENDING = "nothing_pending"
    """Promotion found no ticked terms in the review queue."""

    NOTHING_TO_LINK = "nothing_to_link"
    """A link pass had no terms to link or changed no document."""


class ScanSummary(BaseModel):
    """Result of a scan followed by review queue regeneration.

    Attributes:
        terms_found: Aggregates at or above the frequency threshold.
        terms_queued: Entries written to the review queue.
        approvals_kept: Queue entries still ticked from the previous queue.
        documents_scanned: Documents read and analysed.
        documents_skipped: Documents that could not be read.
        total_occurrences: Raw occurrences before thresholding.
        scope: Path prefix the scan was restricted to, if any.
    """

    model_config = {"frozen": True}

    status: OperationStatus = OperationStatus.COMPLETED
    terms_found: int
    terms_queued: int
    approvals_kept: int = 0
    documents_scanned: int
    documents_skipped: int = 0
    total_occurrences: int
    scope: str | None = None

    @property
    def message(self) -> str:
        where = f"in {self.scope}" if self.scope else "across the vault"
        msg = (
            f"Scan complete {where}: {self.terms_found} terms found, "
            f"{self.terms_queued} queued for review from {self.documents_scanned} documents"
        )
        if self.documents_skipped:
            msg += f" ({self.documents_skipped} unreadable documents skipped)"
        return msg + "."


class PromotionResult(BaseModel):
    """Result of promoting approved review-queue terms into the glossary."""

    model_config = {"frozen": True}

    status: OperationStatus
    approved: tuple[str, ...] = ()
    added: tuple[str, ...] = ()
    queue_cleared: bool = False

    @property
    def already_known(self) -> tuple[str, ...]:
        return tuple(t for t in self.approved if t not in self.added)

    @property
    def message(self) -> str:
        if self.status == OperationStatus.NOTHING_PENDING:
            return "No checked terms found in the review queue."
        msg = f"Glossary updated: {len(self.added)} of {len(self.approved)} approved terms added"
        if self.already_known:
            msg += f", {len(self.already_known)} already present"
        if self.queue_cleared:
            msg += "; review queue cleared"
        return msg + "."


class LinkPassResult(BaseModel):
    """Result of a link pass over one document or the whole vault."""

    model_config = {"frozen": True}

    status: OperationStatus
    terms: int = 0
    documents_examined: int = 0
    modified_paths: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def documents_modified(self) -> int:
        return len(self.modified_paths)

    @property
    def documents_skipped(self) -> int:
        return len(self.errors)

    @property
    def message(self) -> str:
        if self.terms == 0:
            return "Nothing to link: the glossary and custom terms list are empty."
        msg = f"Linked {self.terms} terms: {self.documents_modified} of {self.documents_examined} documents modified"
        if self.errors:
            msg += f" ({self.documents_skipped} documents skipped on I/O errors)"
        return msg + "."


class GlossaryStatus(BaseModel):
    """Completeness of the glossary and size of the pending review."""

    model_config = {"frozen": True}

    total_terms: int
    complete_terms: int
    incomplete_terms: tuple[str, ...] = ()
    queued_terms: int = 0
    pending_approvals: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        return (
            f"Glossary: {self.total_terms} terms, {self.complete_terms} fully defined, "
            f"{len(self.incomplete_terms)} need content. "
            f"Review queue: {self.queued_terms} terms, {len(self.pending_approvals)} approved and awaiting promotion."
        )


class TermPipeline(BaseModel):
    """Coordinates detection, review, promotion and linking over one vault.

    Attributes:
        config: Settings shared by every component.
        store: Document store holding the vault.
        custom_terms: The user's custom terms list.
        scanner: Detects and aggregates candidate terms.
        glossary: The canonical glossary document.
        review_queue: The human review queue document.
        linker: Rewrites term mentions into glossary links.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: VaultTermsConfig
    store: DocumentStoreInterface
    custom_terms: CustomTermsList
    scanner: TermScanner
    glossary: GlossaryStore
    review_queue: ReviewQueue
    linker: GlossaryLinker

    async def initialize(self) -> list[str]:
        """Create the custom terms list and glossary if missing.

        Returns:
            Paths of the documents created.
        """
        created = []
        if await self.custom_terms.ensure_exists():
            created.append(self.custom_terms.path)
        if await self.glossary.ensure_exists():
            created.append(self.glossary.path)
        return created

    async def scan(self, scope: str | None = None, min_frequency: int | None = None) -> ScanSummary:
        """Scan the vault and regenerate the review queue.

        Raises:
            ConfigurationError: If the scan scope is misconfigured. Nothing is
                written in that case.
        """
        logger = setup_logging()
        custom = await self.custom_terms.load()
        result = await self.scanner.scan(
            scope=scope,
            min_frequency=min_frequency,
            custom_terms=custom,
        )
        known = await self.glossary.get_terms()
        entries = await self.review_queue.generate(result, known, custom)

        summary = ScanSummary(
            terms_found=len(result.terms),
            terms_queued=len(entries),
            approvals_kept=sum(e.approved for e in entries),
            documents_scanned=result.documents_scanned,
            documents_skipped=result.documents_skipped,
            total_occurrences=result.total_occurrences,
            scope=result.scope,
        )
        logger.info(summary.message)
        return summary

    async def promote(self) -> PromotionResult:
        """Add ticked review-queue terms to the glossary.

        Stub entries record the counts and documents listed in the queue.
        When configured, the queue is deleted afterwards so a second
        promotion without a new scan reports nothing pending.
        """
        logger = setup_logging()
        approved = [e for e in await self.review_queue.get_entries() if e.approved]
        approved = list({e.term: e for e in approved}.values())
        if not approved:
            logger.info("No checked terms found in the review queue")
            return PromotionResult(status=OperationStatus.NOTHING_PENDING)

        usage = {e.term: e.to_aggregate() for e in approved}
        added = await self.glossary.add_terms([e.term for e in approved], usage)

        cleared = False
        if self.config.clear_queue_after_promotion:
            cleared = await self.review_queue.clear()

        result = PromotionResult(
            status=OperationStatus.COMPLETED,
            approved=tuple(e.term for e in approved),
            added=tuple(added),
            queue_cleared=cleared,
        )
        logger.info(result.message)
        return result

    async def linkable_terms(self) -> list[str]:
        """Glossary terms followed by custom-list terms, read fresh."""
        terms = await self.glossary.get_terms()
        terms.extend(await self.custom_terms.load())
        return list(dict.fromkeys(terms))

    def is_linkable_path(self, path: str) -> bool:
        if self.linker.is_protected(path):
            return False
        return not any(is_under(path, prefix) for prefix in self.config.excluded_folders if prefix.strip())

    async def link(self, path: str | None = None) -> LinkPassResult:
        """Link glossary terms in one document, or in every vault document.

        The term list is read once at the start of the pass. In a vault-wide
        pass, documents that fail to read or write are logged and counted;
        for a single document the error propagates.

        Raises:
            DocumentIOError: If path is given and cannot be read or written.
        """
        logger = setup_logging()
        terms = await self.linkable_terms()
        if not terms:
            logger.info("Nothing to link: no glossary or custom terms")
            return LinkPassResult(status=OperationStatus.NOTHING_TO_LINK)

        if path is not None:
            paths = [path]
        else:
            paths = [p for p in await self.store.list_documents("md") if self.is_linkable_path(p)]

        modified: list[str] = []
        errors: list[str] = []
        for doc_path in paths:
            try:
                if await self.linker.link_document(doc_path, terms):
                    modified.append(doc_path)
            except DocumentIOError as e:
                if path is not None:
                    raise
                logger.warning(f"Skipping {doc_path}: {e.reason}")
                errors.append(str(e))

        result = LinkPassResult(
            status=OperationStatus.COMPLETED if modified else OperationStatus.NOTHING_TO_LINK,
            terms=len(terms),
            documents_examined=len(paths),
            modified_paths=tuple(modified),
            errors=tuple(errors),
        )
        logger.info(result.message)
        return result

    async def handle_document_changed(self, path: str) -> bool:
        """Link a document after it was edited, when auto-linking is enabled.

        Returns:
            True if the document was rewritten. Rewriting fires another change
            event; that second call finds nothing to do.
        """
        if not self.config.auto_linking or not self.is_linkable_path(path):
            return False
        terms = await self.linkable_terms()
        if not terms:
            return False
        return await self.linker.link_document(path, terms)

    async def status(self) -> GlossaryStatus:
        entries = await self.glossary.get_entries()
        queue = await self.review_queue.get_entries()
        return GlossaryStatus(
            total_terms=len(entries),
            complete_terms=sum(e.is_complete for e in entries),
            incomplete_terms=tuple(e.term for e in entries if not e.is_complete),
            queued_terms=len(queue),
            pending_approvals=tuple(e.term for e in queue if e.approved),
        )


def build_pipeline(
    store: DocumentStoreInterface,
    config: VaultTermsConfig | None = None,
    detector: TermDetectorInterface | None = None,
) -> TermPipeline:
    """Wire a TermPipeline with the standard components."""
    config = config or VaultTermsConfig()
    glossary = GlossaryStore(store, config)
    return TermPipeline(
        config=config,
        store=store,
        custom_terms=CustomTermsList(store, config),
        scanner=TermScanner(store, config, detector),
        glossary=glossary,
        review_queue=ReviewQueue(store, config),
        linker=GlossaryLinker(store, config, glossary),
    )
