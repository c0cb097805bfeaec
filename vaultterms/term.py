"""Term occurrence and aggregate records produced by detection and scanning."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr


class TermCategory(str, Enum):
    """Which detection rule produced a candidate occurrence."""

    EQUATION = "equation"
    """Identifier on the left-hand side of an '=' sign."""

    PHRASE = "phrase"
    """Capitalized multi-word phrase."""

    ACRONYM = "acronym"
    """ALL-CAPS word of two or more letters."""

    CITATION = "citation"
    """'Label NN:NN' citation such as a chapter and verse reference."""

    TECHNICAL = "technical"
    """'<word> theorem/law/principle/...' technical phrase."""

    MATH = "math"
    """Inline or display $-delimited math span."""

    CUSTOM = "custom"
    """Mention of a term from the user's custom terms list."""


class CandidateOccurrence(BaseModel, frozen=True):
    """One raw match of a detection rule on one line."""

    term: str = Field(description="The exact matched text.")
    category: TermCategory = Field(description="Rule that produced the match.")
    document_path: str = Field(
        default="",
        description="Owning document; empty when detection ran on bare text.",
    )
    line_number: int = Field(ge=1, description="1-based line number of the match.")
    context_line: str = Field(description="The stripped line the match was found on.")
    start: int = Field(ge=0, description="Column where the match starts within the line.")
    end: int = Field(ge=0, description="Column just past the end of the match.")


class TermAggregate(BaseModel):
    """Per-term summary of one scan pass.

    ``count`` counts every occurrence; ``document_paths`` records each owning
    document once, in first-seen order.
    """

    term: str
    count: int = 0
    document_paths: list[str] = Field(default_factory=list)
    occurrences: list[CandidateOccurrence] = Field(default_factory=list)

    _known_paths: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._known_paths = set(self.document_paths)

    def add(self, occurrence: CandidateOccurrence) -> None:
        self.count += 1
        if occurrence.document_path not in self._known_paths:
            self._known_paths.add(occurrence.document_path)
            self.document_paths.append(occurrence.document_path)
        self.occurrences.append(occurrence)

    @property
    def example(self) -> str:
        """Context line of the first occurrence, or an empty string."""
        return self.occurrences[0].context_line if self.occurrences else ""


class ScanResult(BaseModel):
    """Result of one scan pass over the vault.

    Attributes:
        terms: Aggregates at or above the frequency threshold, most frequent first.
        documents_scanned: Documents that were read and analysed.
        documents_skipped: Documents that could not be read.
        total_occurrences: Raw occurrences across scanned documents, before
            the frequency threshold is applied.
        scope: Path prefix the scan was restricted to, if any.
        scanned_at: When the scan finished.
    """

    terms: list[TermAggregate] = Field(default_factory=list)
    documents_scanned: int = 0
    documents_skipped: int = 0
    total_occurrences: int = 0
    scope: str | None = None
    scanned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, term: str) -> TermAggregate | None:
        """Return the aggregate for an exact term string, if present."""
        for aggregate in self.terms:
            if aggregate.term == term:
                return aggregate
        return None
