"""Render the OPF package description (metadata, manifest, spine)."""

from datetime import datetime, timezone
from xml.sax.saxutils import escape, quoteattr

from repub.models.book import (
    NAVIGATION_ENTRY,
    STYLESHEET_ENTRIES,
    BookMetadata,
    Manifest,
    ManifestEntry,
)

MODIFIED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_modified(moment: datetime | None = None) -> str:
    """Format a timestamp for dcterms:modified (UTC, seconds precision)."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(MODIFIED_FORMAT).replace('"', "")


def render_metadata(metadata: BookMetadata, modified: datetime | None = None) -> str:
    """Render the <metadata> block."""
    return (
        "<metadata>\n"
        f"<dc:title>{escape(metadata.title)}</dc:title>\n"
        f"<dc:language>{escape(metadata.language)}</dc:language>\n"
        f"<dc:creator>{escape(metadata.creator)}</dc:creator>\n"
        f'<dc:identifier id="BookId">{escape(metadata.identifier)}</dc:identifier>\n'
        f'<meta property="dcterms:modified">{format_modified(modified)}</meta>\n'
        "</metadata>\n"
    )


def _item(item_id: str, entry: ManifestEntry) -> str:
    attrs = [
        f"id={quoteattr(item_id)}",
        f"href={quoteattr(entry.href)}",
        f"media-type={quoteattr(entry.media_type)}",
    ]
    if entry.properties:
        attrs.append(f"properties={quoteattr(entry.properties)}")
    return f"<item {' '.join(attrs)} />"


def render_manifest(manifest: Manifest) -> str:
    """Render the <manifest> block.

    The navigation document comes first, then content documents in insertion
    order, then the stylesheets.
    """
    lines = [_item(NAVIGATION_ENTRY.id, NAVIGATION_ENTRY)]
    lines.extend(
        _item(manifest.item_id(index), entry)
        for index, entry in enumerate(manifest.documents)
    )
    lines.extend(_item(entry.id, entry) for entry in STYLESHEET_ENTRIES)
    return "<manifest>\n" + "\n".join(lines) + "\n</manifest>\n"


def render_spine(manifest: Manifest, vertical: bool = False) -> str:
    """Render the <spine> block; vertical books read right to left."""
    refs = [f'<itemref idref="{NAVIGATION_ENTRY.id}" />']
    refs.extend(
        f"<itemref idref={quoteattr(manifest.item_id(index))} />"
        for index in range(len(manifest))
    )
    opening = '<spine page-progression-direction="rtl">' if vertical else "<spine>"
    return opening + "\n" + "\n".join(refs) + "\n</spine>\n"


def render_package(
    metadata: BookMetadata,
    manifest: Manifest,
    vertical: bool = False,
    modified: datetime | None = None,
) -> str:
    """Render the complete package.opf document."""
    return (
        "<?xml version='1.0' encoding='utf-8'?>\n"
        '<package unique-identifier="BookId" version="3.0" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns="http://www.idpf.org/2007/opf">\n'
        f"{render_metadata(metadata, modified)}"
        f"{render_manifest(manifest)}"
        f"{render_spine(manifest, vertical)}"
        "</package>\n"
    )
