"""Resolve the Markdown sources of a book."""

import re
from pathlib import Path

from repub.core.converter import document_stem
from repub.exceptions import InvalidInputPath

MARKDOWN_SUFFIX = ".md"


def resolve_sources(path: Path) -> list[Path]:
    """Return the Markdown files to convert, in reading order.

    A file must carry the .md extension. For a directory, its immediate .md
    entries are returned in lexicographic order and everything else is
    ignored.

    Raises:
        InvalidInputPath: If the path is missing or has the wrong extension, if
            a directory holds no Markdown files, or if two files map to the
            same document name
    """
    path = path if path.is_absolute() else Path.cwd() / path

    if not path.exists():
        raise InvalidInputPath(f"{path} does not exist")

    if path.is_file():
        if path.suffix != MARKDOWN_SUFFIX:
            raise InvalidInputPath(f"{path} is not a .md file")
        return [path]

    sources = sorted(
        entry
        for entry in path.iterdir()
        if entry.is_file() and entry.suffix == MARKDOWN_SUFFIX
    )
    if not sources:
        raise InvalidInputPath(f"No markdown files found in {path}")

    seen: dict[str, Path] = {}
    for source in sources:
        stem = document_stem(source)
        if stem in seen:
            raise InvalidInputPath(
                f"Duplicate document name {stem!r}: {seen[stem].name} and {source.name}"
            )
        seen[stem] = source
    return sources


def safe_filename(title: str) -> str:
    """Make a file name from a book title."""
    name = (
        title.replace("/", "-").replace("\\", "-").replace(":", " - ")
        .replace("*", " ").replace("?", " ").replace('"', "'")
        .replace("<", "(").replace(">", ")").replace("|", "-")
        .strip()
    )
    name = re.sub(r"\s+", " ", name)
    return name or "book"
