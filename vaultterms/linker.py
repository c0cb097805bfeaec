"""Rewrites bare term mentions into links to their glossary headings.

The pass is line-oriented and idempotent:

- fenced code blocks (``` or ~~~, closed only by a run of the same
  character at least as long as the opening one), the leading frontmatter
  block and any line starting with ``---`` pass through untouched;
- terms are tried longest first, so ``Logos Field`` is linked before
  ``Field`` can claim part of it;
- a term is skipped on a line that already holds a link mentioning it,
  otherwise only its first mention outside links, inline code and bare
  URLs is replaced.

A second pass over its own output therefore finds every linked term already
wrapped and changes nothing.
"""

import re
from typing import Sequence

from pydantic import BaseModel

from vaultterms.config import VaultTermsConfig
from vaultterms.glossary import GlossaryStore
from vaultterms.logging import setup_logging
from vaultterms.pipeline.detector import term_pattern
from vaultterms.storage.interfaces import DocumentStoreInterface

FRONTMATTER_DELIMITER = "---"

FENCE_PATTERN = re.compile(r"^(`{3,}|~{3,})")
WIKILINK_PATTERN = re.compile(r"\[\[[^\]]*\]\]")
MARKDOWN_LINK_PATTERN = re.compile(r"\[[^\]]*\]\([^)]*\)")
INLINE_CODE_PATTERN = re.compile(r"`[^`]*`")
URL_PATTERN = re.compile(r"https?://\S+")


class LinkedText(BaseModel, frozen=True):
    """Result of linking one text."""

    text: str
    links_added: int = 0

    @property
    def modified(self) -> bool:
        return self.links_added > 0


def order_terms(terms: Sequence[str]) -> list[str]:
    """De-duplicate terms case-insensitively and sort them longest first.

    Equal-length terms keep their input order.
    """
    unique: dict[str, str] = {}
    for term in terms:
        term = term.strip()
        if term and term.lower() not in unique:
            unique[term.lower()] = term
    return sorted(unique.values(), key=len, reverse=True)


def link_spans(line: str) -> list[tuple[int, int]]:
    """Character spans of wikilinks and markdown links on a line."""
    spans = [m.span() for m in WIKILINK_PATTERN.finditer(line)]
    spans.extend(m.span() for m in MARKDOWN_LINK_PATTERN.finditer(line))
    return spans


def protected_spans(line: str) -> list[tuple[int, int]]:
    """Spans where no link may be inserted: existing links, inline code and bare URLs."""
    spans = link_spans(line)
    spans.extend(m.span() for m in INLINE_CODE_PATTERN.finditer(line))
    spans.extend(m.span() for m in URL_PATTERN.finditer(line))
    return spans


def opening_fence(trimmed: str) -> tuple[str, int] | None:
    """Return (marker character, run length) if a stripped line opens a fence."""
    match = FENCE_PATTERN.match(trimmed)
    if match is None:
        return None
    return match.group(1)[0], len(match.group(1))


def closes_fence(trimmed: str, fence: tuple[str, int]) -> bool:
    """Return True if a stripped line closes the given fence.

    A closing line holds only the opening character, repeated at least as
    many times as in the opening run. ``` inside ~~~ (or inside ````) is
    fenced content, not a close.
    """
    char, length = fence
    return len(trimmed) >= length and trimmed == char * len(trimmed)


def is_linked(line: str, term: str) -> bool:
    """Return True if some link on the line already mentions term."""
    lower = term.lower()
    return any(lower in line[start:end].lower() for start, end in link_spans(line))


class GlossaryLinker:
    """Links glossary terms inside vault documents.

    The glossary, review queue and custom terms documents are never
    rewritten. Document store errors propagate to the caller.
    """

    def __init__(
        self,
        store: DocumentStoreInterface,
        config: VaultTermsConfig,
        glossary: GlossaryStore,
    ) -> None:
        self.store = store
        self.config = config
        self.glossary = glossary

    def is_protected(self, path: str) -> bool:
        return path in self.config.control_documents

    def link_line(self, line: str, terms: Sequence[str]) -> tuple[str, int]:
        """Link each term at most once on a single line.

        Args:
            line: The line to rewrite.
            terms: Terms in the order they should be tried (see order_terms).

        Returns:
            The rewritten line and the number of links added.
        """
        result = line
        added = 0
        for term in terms:
            if is_linked(result, term):
                continue
            spans = protected_spans(result)
            for match in term_pattern(term).finditer(result):
                start, end = match.span()
                if any(start < span_end and end > span_start for span_start, span_end in spans):
                    continue
                link = self.glossary.link_target(term, match.group(0))
                result = result[:start] + link + result[end:]
                added += 1
                break
        return result, added

    def link_text(self, text: str, terms: Sequence[str]) -> LinkedText:
        """Link terms throughout a document's text, skipping structural regions."""
        ordered = order_terms(terms)
        if not ordered:
            return LinkedText(text=text)

        lines = text.split("\n")
        in_frontmatter = bool(lines) and lines[0].strip() == FRONTMATTER_DELIMITER
        fence: tuple[str, int] | None = None
        added = 0
        processed: list[str] = []

        for index, line in enumerate(lines):
            trimmed = line.strip()
            if in_frontmatter:
                processed.append(line)
                if index > 0 and trimmed == FRONTMATTER_DELIMITER:
                    in_frontmatter = False
                continue
            if fence is not None:
                processed.append(line)
                if closes_fence(trimmed, fence):
                    fence = None
                continue
            fence = opening_fence(trimmed)
            if fence is not None or trimmed.startswith(FRONTMATTER_DELIMITER):
                processed.append(line)
                continue
            linked, count = self.link_line(line, ordered)
            processed.append(linked)
            added += count

        return LinkedText(text="\n".join(processed), links_added=added)

    async def link_document(self, path: str, terms: Sequence[str]) -> bool:
        """Link terms in one document and persist it if anything changed.

        Returns:
            True if the document was rewritten.

        Raises:
            DocumentIOError: If the document cannot be read or written.
        """
        logger = setup_logging()
        if self.is_protected(path):
            logger.debug(f"Not linking control document {path}")
            return False

        document = await self.store.load(path)
        linked = self.link_text(document.content, terms)
        if linked.text == document.content:
            return False

        await self.store.write_document(path, linked.text)
        logger.info(f"Linked {linked.links_added} terms in {path}")
        return True
