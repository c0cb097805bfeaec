"""The human review queue.

Each scan regenerates the queue document from scratch. Terms are grouped into
sections and rendered as unchecked list items; a reviewer approves a term by
ticking its checkbox. Promotion reads the ticked items back.

Item layout::

    - [ ] **Logos Field** (7 occurrences)
      - Files: notes/a.md, notes/b.md
      - Example: "the Logos Field couples to matter"

A term that was ticked in the previous queue document stays ticked when the
queue is regenerated and the same term string appears again.
"""

import re
from typing import Collection, Sequence

from pydantic import BaseModel, Field

from vaultterms.config import VaultTermsConfig
from vaultterms.errors import DocumentIOError
from vaultterms.logging import setup_logging
from vaultterms.storage.interfaces import DocumentStoreInterface
from vaultterms.term import ScanResult, TermAggregate

CUSTOM_SECTION = "From Custom Terms List (user-specified)"
HIGH_SECTION = "Auto-Detected (high confidence)"
MEDIUM_SECTION = "Auto-Detected (medium confidence)"
LOW_SECTION = "Auto-Detected (low confidence)"

APPROVED_PATTERN = re.compile(r"^- \[x\] \*\*(.+?)\*\*", re.IGNORECASE)
ITEM_PATTERN = re.compile(r"^- \[( |x)\] \*\*(.+?)\*\*(?:\s+\((\d+) occurrences?\))?", re.IGNORECASE)
FILES_PATTERN = re.compile(r"^\s+- Files:\s*(.*)$")
SECTION_PATTERN = re.compile(r"^##\s+(.+)$")


class ReviewQueueEntry(BaseModel, frozen=True):
    """One term awaiting (or holding) a reviewer's decision."""

    term: str = Field(description="Canonical term string used for promotion.")
    count: int = Field(default=0, ge=0, description="Occurrences found by the scan.")
    document_paths: tuple[str, ...] = Field(default=(), description="Documents the term was found in.")
    approved: bool = Field(default=False, description="Whether the checkbox is ticked.")
    section: str = Field(default="", description="Queue section the entry is listed under.")

    def to_aggregate(self) -> TermAggregate:
        return TermAggregate(term=self.term, count=self.count, document_paths=list(self.document_paths))


def parse_approved(content: str) -> list[str]:
    """Return the terms of every ticked item, in order, without duplicates."""
    approved = []
    for line in content.split("\n"):
        match = APPROVED_PATTERN.match(line)
        if match:
            approved.append(match.group(1))
    return list(dict.fromkeys(approved))


def parse_entries(content: str) -> list[ReviewQueueEntry]:
    """Parse every checkbox item with its count, files and section."""
    entries: list[ReviewQueueEntry] = []
    section = ""
    pending: dict | None = None

    def flush() -> None:
        if pending is not None:
            entries.append(ReviewQueueEntry(**pending))

    for line in content.split("\n"):
        section_match = SECTION_PATTERN.match(line)
        if section_match:
            flush()
            pending = None
            section = section_match.group(1).strip()
            continue
        item_match = ITEM_PATTERN.match(line)
        if item_match:
            flush()
            pending = {
                "term": item_match.group(2),
                "count": int(item_match.group(3) or 0),
                "approved": item_match.group(1).lower() == "x",
                "section": section,
            }
            continue
        files_match = FILES_PATTERN.match(line)
        if files_match and pending is not None:
            pending["document_paths"] = tuple(p.strip() for p in files_match.group(1).split(",") if p.strip())
    flush()
    return entries


def render_entry(aggregate: TermAggregate, approved: bool = False) -> str:
    mark = "x" if approved else " "
    content = f"- [{mark}] **{aggregate.term}** ({aggregate.count} occurrences)\n"
    content += f"  - Files: {', '.join(aggregate.document_paths)}\n"
    if aggregate.example:
        content += f'  - Example: "{aggregate.example}"\n'
    return content + "\n"


class ReviewQueue:
    """Generates, reads and clears the review queue document."""

    def __init__(self, store: DocumentStoreInterface, config: VaultTermsConfig) -> None:
        self.store = store
        self.config = config

    @property
    def path(self) -> str:
        return self.config.review_queue_file

    def partition(
        self,
        aggregates: Sequence[TermAggregate],
        custom_terms: Collection[str] = (),
    ) -> dict[str, list[TermAggregate]]:
        """Split aggregates into queue sections, preserving their order.

        Custom-list terms (case-insensitive) go to the custom section whatever
        their count. Auto-detected terms are banded by count; those below the
        low threshold are left out.
        """
        custom = {t.lower() for t in custom_terms}
        sections: dict[str, list[TermAggregate]] = {
            CUSTOM_SECTION: [],
            HIGH_SECTION: [],
            MEDIUM_SECTION: [],
            LOW_SECTION: [],
        }
        for aggregate in aggregates:
            if aggregate.term.lower() in custom:
                sections[CUSTOM_SECTION].append(aggregate)
            elif aggregate.count >= self.config.high_confidence_threshold:
                sections[HIGH_SECTION].append(aggregate)
            elif aggregate.count >= self.config.medium_confidence_threshold:
                sections[MEDIUM_SECTION].append(aggregate)
            elif aggregate.count >= self.config.low_confidence_threshold:
                sections[LOW_SECTION].append(aggregate)
        return sections

    def build_content(
        self,
        scan_result: ScanResult,
        sections: dict[str, list[TermAggregate]],
        approved: Collection[str] = (),
    ) -> str:
        listed = sum(len(items) for items in sections.values())
        content = "# Terms Detected - Needs Review\n"
        content += f"Last Scan: {scan_result.scanned_at.isoformat(timespec='seconds')}\n"
        content += f"Files Scanned: {scan_result.documents_scanned}\n"
        content += f"Total Occurrences: {scan_result.total_occurrences}\n"
        content += f"Unique Terms Found: {listed}\n\n"
        for title, items in sections.items():
            if not items:
                continue
            content += f"## {title}\n\n"
            for aggregate in items:
                content += render_entry(aggregate, approved=aggregate.term in approved)
        return content

    async def read(self) -> str | None:
        """Return the queue text, or None if it is missing or unreadable."""
        logger = setup_logging()
        try:
            if not await self.store.document_exists(self.path):
                return None
            return await self.store.read_document(self.path)
        except DocumentIOError as e:
            logger.warning(f"Review queue {self.path} is unreadable: {e.reason}")
            return None

    async def generate(
        self,
        scan_result: ScanResult,
        known_terms: Collection[str],
        custom_terms: Collection[str] = (),
    ) -> list[ReviewQueueEntry]:
        """Replace the queue document with the terms of a scan.

        Terms already in the glossary (case-insensitive) are never listed.
        Ticks from the previous queue document carry over to identical term
        strings.

        Returns:
            The entries written, in document order.
        """
        logger = setup_logging()
        previously_approved = set(await self.get_approved())
        known = {t.lower() for t in known_terms}
        candidates = [a for a in scan_result.terms if a.term.lower() not in known]
        sections = self.partition(candidates, custom_terms)

        content = self.build_content(scan_result, sections, previously_approved)
        await self.store.upsert_document(self.path, content)

        entries = [
            ReviewQueueEntry(
                term=aggregate.term,
                count=aggregate.count,
                document_paths=tuple(aggregate.document_paths),
                approved=aggregate.term in previously_approved,
                section=title,
            )
            for title, items in sections.items()
            for aggregate in items
        ]
        logger.info(
            f"Review queue {self.path}: {len(entries)} terms listed, "
            f"{len(scan_result.terms) - len(candidates)} already in glossary, "
            f"{sum(e.approved for e in entries)} approvals carried over"
        )
        return entries

    async def get_approved(self) -> list[str]:
        """Return the terms whose checkbox is ticked, from any section."""
        content = await self.read()
        return parse_approved(content) if content is not None else []

    async def get_entries(self) -> list[ReviewQueueEntry]:
        content = await self.read()
        return parse_entries(content) if content is not None else []

    async def clear(self) -> bool:
        """Delete the queue document. Returns True if there was one to delete."""
        return await self.store.delete_document(self.path)
