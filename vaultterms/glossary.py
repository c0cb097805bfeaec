"""The canonical glossary document.

The glossary is a markdown document with one level-2 heading per term. New
terms are appended as stub entries; existing entries are never rewritten,
reordered or removed by the pipeline. Humans fill in the ``Brief:`` and
``Full Definition:`` lines, and completeness reporting looks for those lines
still carrying their placeholder text.

Stub layout::

    ## Logos Field
    Used in: notes/a.md, notes/b.md
    Frequency: 7 occurrences
    Brief: [Add short description]
    Full Definition: [To be expanded]
    External Links:
    -
"""

import re
from typing import Iterable, Mapping

from pydantic import BaseModel

from vaultterms.config import VaultTermsConfig
from vaultterms.errors import DocumentIOError
from vaultterms.logging import setup_logging
from vaultterms.storage.interfaces import DocumentStoreInterface
from vaultterms.term import TermAggregate

HEADING_PATTERN = re.compile(r"^##\s+(.+)$")

BRIEF_PLACEHOLDER = "[Add short description]"
DEFINITION_PLACEHOLDER = "[To be expanded]"
PENDING_USAGE = "(pending scan)"

PLACEHOLDER_MARKERS = frozenset(
    {BRIEF_PLACEHOLDER, DEFINITION_PLACEHOLDER, "[Add description]", "*Definition pending*"}
)


class GlossaryEntry(BaseModel, frozen=True):
    """One parsed glossary entry.

    ``brief`` and ``definition`` are None while the entry still carries the
    placeholder text (or lacks the line entirely).
    """

    term: str
    brief: str | None = None
    definition: str | None = None
    usages: tuple[str, ...] = ()
    frequency: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.brief is not None and self.definition is not None


def normalize_term(term: str) -> str:
    """Collapse whitespace so a term always fits on one heading line."""
    return " ".join(term.split())


def parse_terms(content: str) -> list[str]:
    """Return every level-2 heading in glossary text, in document order."""
    terms = []
    for line in content.split("\n"):
        match = HEADING_PATTERN.match(line)
        if match:
            terms.append(match.group(1).strip())
    return terms


def _field_value(value: str) -> str | None:
    value = value.strip()
    if not value or value in PLACEHOLDER_MARKERS:
        return None
    return value


def parse_entries(content: str) -> list[GlossaryEntry]:
    """Parse glossary text into entries. Unknown body lines are ignored."""
    entries: list[GlossaryEntry] = []
    current: dict | None = None
    for line in content.split("\n"):
        match = HEADING_PATTERN.match(line)
        if match:
            if current is not None:
                entries.append(GlossaryEntry(**current))
            current = {"term": match.group(1).strip()}
            continue
        if current is None:
            continue
        stripped = line.strip()
        if stripped.startswith("Brief:"):
            current["brief"] = _field_value(stripped[len("Brief:"):])
        elif stripped.startswith("Full Definition:"):
            current["definition"] = _field_value(stripped[len("Full Definition:"):])
        elif stripped.startswith("Used in:"):
            used = stripped[len("Used in:"):].strip()
            if used and used != PENDING_USAGE:
                current["usages"] = tuple(u.strip() for u in used.split(",") if u.strip())
        elif stripped.startswith("Frequency:"):
            current["frequency"] = stripped[len("Frequency:"):].strip() or None
    if current is not None:
        entries.append(GlossaryEntry(**current))
    return entries


def render_stub(term: str, usage: TermAggregate | None = None) -> str:
    """Render the stub entry appended for a newly accepted term."""
    if usage is not None and usage.document_paths:
        used_in = f"Used in: {', '.join(usage.document_paths)}"
    else:
        used_in = f"Used in: {PENDING_USAGE}"
    frequency = f"Frequency: {usage.count} occurrences" if usage is not None else "Frequency: (New)"
    return (
        f"## {term}\n"
        f"{used_in}\n"
        f"{frequency}\n"
        f"Brief: {BRIEF_PLACEHOLDER}\n"
        f"Full Definition: {DEFINITION_PLACEHOLDER}\n"
        f"External Links:\n"
        f"- \n"
    )


class GlossaryStore:
    """Reads and appends to the glossary document through the document store."""

    def __init__(self, store: DocumentStoreInterface, config: VaultTermsConfig) -> None:
        self.store = store
        self.config = config

    @property
    def path(self) -> str:
        return self.config.glossary_file

    @property
    def page_name(self) -> str:
        """Link target page: the glossary path without its .md suffix."""
        return re.sub(r"\.md$", "", self.path)

    async def _read(self) -> str | None:
        logger = setup_logging()
        try:
            if not await self.store.document_exists(self.path):
                return None
            return await self.store.read_document(self.path)
        except DocumentIOError as e:
            logger.warning(f"Glossary {self.path} is unreadable, treating it as empty: {e.reason}")
            return None

    async def ensure_exists(self) -> bool:
        """Create the glossary with its header if missing. Returns True if created."""
        if await self.store.document_exists(self.path):
            return False
        await self.store.create_document(self.path, f"# {self.config.glossary_title}\n\n")
        return True

    async def get_terms(self) -> list[str]:
        """Return the glossary's terms verbatim, in document order.

        A missing or unreadable glossary yields an empty list.
        """
        content = await self._read()
        return parse_terms(content) if content is not None else []

    async def get_entries(self) -> list[GlossaryEntry]:
        """Return parsed entries for completeness reporting."""
        content = await self._read()
        return parse_entries(content) if content is not None else []

    async def add_terms(
        self,
        terms: Iterable[str],
        usage: Mapping[str, TermAggregate] | None = None,
    ) -> list[str]:
        """Append stub entries for terms not yet in the glossary.

        Existing entries are left untouched. Terms are compared by exact
        heading text after whitespace normalization. The glossary is created
        first if it does not exist.

        Args:
            terms: Terms to add.
            usage: Optional per-term counts and documents for the stub's
                ``Used in`` and ``Frequency`` lines.

        Returns:
            The terms that were actually appended, in input order.
        """
        logger = setup_logging()
        usage = usage or {}
        await self.ensure_exists()
        content = await self.store.read_document(self.path)
        existing = {normalize_term(t) for t in parse_terms(content)}

        added: list[str] = []
        updated = content
        for raw in terms:
            term = normalize_term(raw)
            if not term or term in existing:
                continue
            if not updated.endswith("\n"):
                updated += "\n"
            updated += "\n" + render_stub(term, usage.get(raw) or usage.get(term))
            existing.add(term)
            added.append(term)

        if updated != content:
            await self.store.write_document(self.path, updated)
        logger.info(f"Glossary {self.path}: {len(added)} terms added")
        return added

    def link_target(self, term: str, display: str) -> str:
        """Render a wikilink to the term's glossary heading showing display text."""
        anchor = normalize_term(term)
        return f"[[{self.page_name}#{anchor}|{display}]]"
