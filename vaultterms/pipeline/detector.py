"""Rule-based candidate term detection.

Each rule is a regular expression whose first group is the candidate term.
Rules run in a fixed order over each non-blank line independently:

1. equation: identifier on the left of '='  (``Psi = ...``)
2. phrase: capitalized multi-word phrase    (``Logos Field``)
3. acronym: ALL-CAPS word                   (``PEAR``)
4. citation: 'Label NN:NN'                  (``John 1:1``)
5. technical: '<word> theorem/law/...'      (``coherence principle``)
6. math: $-delimited span                   (only when enabled)

Every raw match passes through a filter: the allow-list always accepts,
otherwise stop words and terms shorter than MIN_TERM_LENGTH are rejected.
Custom terms are matched last and are always accepted.

When two rules report the same text at the same position of a line, only the
first rule's occurrence is kept, so ``Logos Field`` (phrase and technical)
counts once.
"""

import re
from functools import lru_cache
from typing import Collection, Sequence

from vaultterms.config import VaultTermsConfig
from vaultterms.pipeline.interfaces import TermDetectorInterface
from vaultterms.term import CandidateOccurrence, TermCategory

MIN_TERM_LENGTH = 3

STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "and", "is", "was", "are", "were", "been", "being", "have", "has", "had",
        "do", "does", "did", "will", "would", "system", "framework", "process", "method",
    }
)

EQUATION_PATTERN = re.compile(r"\b([A-Z]\w*)\s*=\s*")
PHRASE_PATTERN = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)\b")
ACRONYM_PATTERN = re.compile(r"\b([A-Z]{2,})\b")
CITATION_PATTERN = re.compile(r"\b([A-Z][a-z]+\s+\d+:\d+(?:-\d+)?)\b")
TECHNICAL_PATTERN = re.compile(
    r"\b(\w+\s+(?:theorem|law|principle|equation|framework|field|coherence))\b",
    re.IGNORECASE,
)
DISPLAY_MATH_PATTERN = re.compile(r"(\$\$[^$]+\$\$)")
INLINE_MATH_PATTERN = re.compile(r"(?<!\$)(\$[^$\n]+\$)(?!\$)")


@lru_cache(maxsize=4096)
def term_pattern(term: str) -> re.Pattern[str]:
    """Case-insensitive pattern matching term as a whole word.

    Word delimiting uses look-arounds instead of ``\\b`` so terms that start
    or end with punctuation (``GCP (Global Consciousness Project)``) still match.
    """
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


def build_rules(config: VaultTermsConfig) -> tuple[tuple[TermCategory, re.Pattern[str]], ...]:
    """Return the enabled (category, pattern) rules in evaluation order."""
    if config.use_custom_terms_only:
        return ()
    candidates = (
        (config.detect_equations, TermCategory.EQUATION, EQUATION_PATTERN),
        (config.detect_phrases, TermCategory.PHRASE, PHRASE_PATTERN),
        (config.detect_acronyms, TermCategory.ACRONYM, ACRONYM_PATTERN),
        (config.detect_citations, TermCategory.CITATION, CITATION_PATTERN),
        (config.detect_technical, TermCategory.TECHNICAL, TECHNICAL_PATTERN),
        (config.detect_math, TermCategory.MATH, DISPLAY_MATH_PATTERN),
        (config.detect_math, TermCategory.MATH, INLINE_MATH_PATTERN),
    )
    return tuple((category, pattern) for enabled, category, pattern in candidates if enabled)


class PatternTermDetector(TermDetectorInterface):
    """Regex rule detector configured from VaultTermsConfig.

    The configured ``allow_list`` and ``deny_list`` are merged with the
    per-call allow-list and the built-in stop words respectively.
    """

    def __init__(self, config: VaultTermsConfig | None = None) -> None:
        self.config = config or VaultTermsConfig()
        self.rules = build_rules(self.config)
        self._base_allowed = frozenset(t.lower() for t in self.config.allow_list)
        self._denied = STOP_WORDS | frozenset(t.lower() for t in self.config.deny_list)

    def should_ignore(self, term: str, allowed: Collection[str]) -> bool:
        """Return True if a raw match must be dropped.

        Args:
            term: The matched text.
            allowed: Lowercased allow-list.
        """
        lower = term.lower()
        if lower in allowed:
            return False
        if lower in self._denied:
            return True
        return len(term) < MIN_TERM_LENGTH

    def detect(
        self,
        text: str,
        allow_list: Collection[str] = (),
        custom_terms: Sequence[str] = (),
    ) -> list[CandidateOccurrence]:
        allowed = self._base_allowed | {t.lower() for t in allow_list}
        custom = [t for t in dict.fromkeys(custom_terms) if t.strip()]
        occurrences: list[CandidateOccurrence] = []

        for line_number, line in enumerate(text.split("\n"), start=1):
            if not line.strip():
                continue
            context = line.strip()
            seen: set[tuple[int, int, str]] = set()

            def emit(term: str, category: TermCategory, start: int, end: int) -> None:
                key = (start, end, term.lower())
                if key in seen:
                    return
                seen.add(key)
                occurrences.append(
                    CandidateOccurrence(
                        term=term,
                        category=category,
                        line_number=line_number,
                        context_line=context,
                        start=start,
                        end=end,
                    )
                )

            for category, pattern in self.rules:
                for match in pattern.finditer(line):
                    term = match.group(1)
                    if not term or self.should_ignore(term, allowed):
                        continue
                    emit(term, category, match.start(1), match.end(1))

            for term in custom:
                for match in term_pattern(term).finditer(line):
                    emit(term, TermCategory.CUSTOM, match.start(), match.end())

        return occurrences


def detect_terms(
    text: str,
    allow_list: Collection[str] = (),
    config: VaultTermsConfig | None = None,
) -> list[CandidateOccurrence]:
    """Run the default rule set over text. Convenience wrapper for one-off calls."""
    return PatternTermDetector(config).detect(text, allow_list)
