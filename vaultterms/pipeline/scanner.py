"""Vault-wide term frequency aggregation."""

from typing import Collection, Sequence

from vaultterms.config import VaultTermsConfig, is_under
from vaultterms.errors import DocumentIOError
from vaultterms.logging import setup_logging
from vaultterms.pipeline.detector import PatternTermDetector
from vaultterms.pipeline.interfaces import TermDetectorInterface
from vaultterms.storage.interfaces import DocumentStoreInterface
from vaultterms.term import ScanResult, TermAggregate


class TermScanner:
    """Runs a detector over a scoped subset of the vault and aggregates results.

    Aggregates are keyed by the exact matched string. Each occurrence adds to
    the count; each document is recorded once per term. Documents that cannot
    be read are skipped and counted, and never abort the scan.

    Example:
        ```python
        scanner = TermScanner(store, config)
        result = await scanner.scan(scope="papers", min_frequency=5)
        for aggregate in result.terms:
            print(aggregate.term, aggregate.count)
        ```
    """

    def __init__(
        self,
        store: DocumentStoreInterface,
        config: VaultTermsConfig,
        detector: TermDetectorInterface | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.detector = detector or PatternTermDetector(config)

    def is_selected(self, path: str, scope: str | None, excluded_prefixes: Sequence[str]) -> bool:
        """Return True if a document takes part in a scan."""
        if path in self.config.control_documents:
            return False
        if scope is not None and not is_under(path, scope):
            return False
        return not any(is_under(path, prefix) for prefix in excluded_prefixes if prefix.strip())

    async def scan(
        self,
        scope: str | None = None,
        excluded_prefixes: Sequence[str] | None = None,
        allow_list: Collection[str] = (),
        min_frequency: int | None = None,
        custom_terms: Sequence[str] = (),
    ) -> ScanResult:
        """Scan the vault and aggregate candidate terms.

        Args:
            scope: Path prefix to restrict the scan to. Defaults to the
                configured scope (the whole vault unless scan_scope is local).
            excluded_prefixes: Path prefixes to skip. Defaults to the
                configured excluded folders.
            allow_list: Extra terms the detector must always accept.
            min_frequency: Drop aggregates below this count. Defaults to the
                configured minimum.
            custom_terms: Terms from the user's custom list. They are matched
                directly and treated as allow-listed.

        Returns:
            A ScanResult with aggregates sorted by descending count. Ties keep
            the order in which terms were first seen.

        Raises:
            ConfigurationError: If local scope is configured without a folder.
        """
        logger = setup_logging()
        resolved_scope = self.config.resolve_scope(scope)
        excluded = tuple(self.config.excluded_folders if excluded_prefixes is None else excluded_prefixes)
        threshold = self.config.min_frequency if min_frequency is None else min_frequency
        allowed = set(allow_list) | set(custom_terms)

        paths = [p for p in await self.store.list_documents("md") if self.is_selected(p, resolved_scope, excluded)]
        logger.info(f"Scanning {len(paths)} documents (scope={resolved_scope or 'vault'}, min_frequency={threshold})")

        aggregates: dict[str, TermAggregate] = {}
        total_occurrences = 0
        skipped = 0

        for path in paths:
            try:
                document = await self.store.load(path)
            except DocumentIOError as e:
                logger.warning(f"Skipping unreadable document {path}: {e.reason}")
                skipped += 1
                continue

            occurrences = self.detector.detect(document.content, allowed, custom_terms)
            total_occurrences += len(occurrences)
            for occurrence in occurrences:
                occurrence = occurrence.model_copy(update={"document_path": path})
                aggregate = aggregates.get(occurrence.term)
                if aggregate is None:
                    aggregate = aggregates[occurrence.term] = TermAggregate(term=occurrence.term)
                aggregate.add(occurrence)

        terms = [a for a in aggregates.values() if a.count >= threshold]
        terms.sort(key=lambda a: a.count, reverse=True)

        result = ScanResult(
            terms=terms,
            documents_scanned=len(paths) - skipped,
            documents_skipped=skipped,
            total_occurrences=total_occurrences,
            scope=resolved_scope,
        )
        logger.info(
            f"Scan complete: {len(terms)} terms at or above threshold "
            f"from {result.documents_scanned} documents ({skipped} skipped)"
        )
        logger.debug(
            {"message": "Top terms", "terms": [(a.term, a.count) for a in terms[:10]]},
            pprint=True,
        )
        return result
