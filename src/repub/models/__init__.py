"""Data models."""

from repub.models.book import (
    BookMetadata,
    Manifest,
    ManifestEntry,
    generate_book_id,
)
from repub.models.config import BuildConfig, coerce_toc_level
from repub.models.toc import HeadingRecord, TOCForest, TOCNode

__all__ = [
    # Book models
    "BookMetadata",
    "Manifest",
    "ManifestEntry",
    "generate_book_id",
    # ToC models
    "HeadingRecord",
    "TOCNode",
    "TOCForest",
    # Configuration
    "BuildConfig",
    "coerce_toc_level",
]
