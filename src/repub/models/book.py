"""Data models for book metadata and the package manifest."""

import secrets
import string

from pydantic import BaseModel, Field, field_validator

XHTML_MEDIA_TYPE = "application/xhtml+xml"
CSS_MEDIA_TYPE = "text/css"

BOOK_ID_LENGTH = 30
_BOOK_ID_ALPHABET = string.ascii_letters + string.digits


def generate_book_id(length: int = BOOK_ID_LENGTH) -> str:
    """Return a random alphanumeric book identifier."""
    return "".join(secrets.choice(_BOOK_ID_ALPHABET) for _ in range(length))


class BookMetadata(BaseModel):
    """Book-level identity rendered into the package metadata block."""

    title: str
    creator: str
    language: str
    identifier: str = Field(default_factory=generate_book_id)

    @field_validator("identifier")
    @classmethod
    def _no_whitespace(cls, value: str) -> str:
        if not value or any(ch.isspace() for ch in value):
            raise ValueError("book id must be non-empty and contain no whitespace")
        return value


class ManifestEntry(BaseModel):
    """Single file declared in the package manifest."""

    href: str
    media_type: str = XHTML_MEDIA_TYPE
    id: str | None = None  # positional id (book_N) when unset
    properties: str | None = None


class Manifest(BaseModel):
    """Ordered content documents of a book.

    Insertion order gives both the positional manifest ids and the default
    spine order.
    """

    documents: list[ManifestEntry] = Field(default_factory=list)

    def add(self, entry: ManifestEntry) -> None:
        if any(doc.href == entry.href for doc in self.documents):
            raise ValueError(f"Duplicate manifest href: {entry.href}")
        self.documents.append(entry)

    def item_id(self, index: int) -> str:
        entry = self.documents[index]
        return entry.id or f"book_{index}"

    def __len__(self) -> int:
        return len(self.documents)


NAVIGATION_ENTRY = ManifestEntry(
    id="navigation", href="navigation.xhtml", properties="nav"
)
VERTICAL_CSS_ENTRY = ManifestEntry(
    id="vertical_css", href="styles/vertical.css", media_type=CSS_MEDIA_TYPE
)
CUSTOM_CSS_ENTRY = ManifestEntry(
    id="custom_css", href="styles/custom.css", media_type=CSS_MEDIA_TYPE
)
STYLESHEET_ENTRIES = [VERTICAL_CSS_ENTRY, CUSTOM_CSS_ENTRY]
