"""Pipeline interface definitions for term detection.

The scanner is written against TermDetectorInterface so that the built-in
regex rules can be replaced (for example by an NER model) without touching
aggregation, review or linking.
"""

from abc import ABC, abstractmethod
from typing import Collection, Sequence

from vaultterms.term import CandidateOccurrence


class TermDetectorInterface(ABC):
    """Find candidate term occurrences in document text.

    Implementations must be pure: the same text, allow-list and custom terms
    always give the same occurrences, in the same order. Matching is
    line-scoped so that re-scanning part of a file yields stable results.
    """

    @abstractmethod
    def detect(
        self,
        text: str,
        allow_list: Collection[str] = (),
        custom_terms: Sequence[str] = (),
    ) -> list[CandidateOccurrence]:
        """Detect candidate terms in text.

        Args:
            text: Full document text.
            allow_list: Terms that are always accepted, compared
                case-insensitively. Wins over every rejection rule.
            custom_terms: User-listed terms whose mentions are reported in
                addition to the rule matches.

        Returns:
            Occurrences in line order, with ``document_path`` left empty.
            Returns an empty list for empty text.
        """
