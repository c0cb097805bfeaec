"""Document representation for the vault."""

from pydantic import BaseModel, Field


class Document(BaseModel):
    """A snapshot of one vault document as read from the document store.

    Documents are owned by the store. A Document is only valid for the
    operation that loaded it; every operation re-reads current content.
    """

    model_config = {"frozen": True}

    path: str = Field(description="Stable, slash-separated path within the vault.")
    content: str = Field(description="Full text content of the document.")

    @property
    def lines(self) -> list[str]:
        """Return the content as lines, without line terminators."""
        return self.content.split("\n")
