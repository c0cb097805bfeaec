"""Term detection and scanning pipeline."""

from vaultterms.pipeline.detector import (
    MIN_TERM_LENGTH,
    STOP_WORDS,
    PatternTermDetector,
    detect_terms,
)
from vaultterms.pipeline.interfaces import TermDetectorInterface
from vaultterms.pipeline.scanner import TermScanner

__all__ = [
    "TermDetectorInterface",
    "PatternTermDetector",
    "TermScanner",
    "detect_terms",
    "MIN_TERM_LENGTH",
    "STOP_WORDS",
]
