"""The user-maintained custom terms list.

One literal term per line. Blank lines and lines starting with ``#``, ``//``
or ``---`` are ignored. The list is the allow-list for detection and an extra
source of linkable terms.
"""

from vaultterms.config import VaultTermsConfig
from vaultterms.errors import DocumentIOError
from vaultterms.logging import setup_logging
from vaultterms.storage.interfaces import DocumentStoreInterface

COMMENT_PREFIXES = ("#", "//", "---")

TEMPLATE = """# Custom Terms to Track
# Add your terms below (one per line)
Master Equation
Grace Function
Logos Field
Consciousness Collapse
"""


def parse_custom_terms(content: str) -> list[str]:
    """Return the terms listed in custom terms text, de-duplicated in order."""
    terms = []
    for line in content.split("\n"):
        term = line.strip()
        if not term or term.startswith(COMMENT_PREFIXES):
            continue
        terms.append(term)
    return list(dict.fromkeys(terms))


class CustomTermsList:
    def __init__(self, store: DocumentStoreInterface, config: VaultTermsConfig) -> None:
        self.store = store
        self.config = config

    @property
    def path(self) -> str:
        return self.config.custom_terms_file

    async def ensure_exists(self) -> bool:
        """Create the list from the starter template if missing. Returns True if created."""
        if await self.store.document_exists(self.path):
            return False
        await self.store.create_document(self.path, TEMPLATE)
        return True

    async def load(self) -> list[str]:
        """Return the listed terms; a missing or unreadable list yields []."""
        logger = setup_logging()
        try:
            if not await self.store.document_exists(self.path):
                return []
            content = await self.store.read_document(self.path)
        except DocumentIOError as e:
            logger.warning(f"Custom terms list {self.path} is unreadable: {e.reason}")
            return []
        return parse_custom_terms(content)
