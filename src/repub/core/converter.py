"""Convert Markdown source files into XHTML content documents."""

import logging
import warnings
from abc import ABC, abstractmethod
from pathlib import Path

import markdown
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from markdown.extensions.toc import TocExtension, slugify_unicode
from pydantic import BaseModel, Field
from soupsieve import SelectorSyntaxError

from repub.core.templates import content_document
from repub.exceptions import IOFailure, MalformedHeadingQuery
from repub.models.book import ManifestEntry
from repub.models.toc import HeadingRecord

# Content documents carry an XML declaration but are queried as HTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)

ANCHOR_PREFIX = "header-"
HEADING_SELECTOR = "h1, h2, h3, h4, h5"
UNTITLED_HEADING = "Untitled"


def document_stem(source: Path) -> str:
    """Name used for a source's content document and ToC links."""
    return source.stem.replace(" ", "_")


class MarkdownRenderer(ABC):
    """Turns Markdown text into an HTML body fragment."""

    @abstractmethod
    def render(self, text: str) -> str:
        pass


class PythonMarkdownRenderer(MarkdownRenderer):
    """Markdown rendering with hard line breaks and prefixed heading ids."""

    def __init__(self, anchor_prefix: str = ANCHOR_PREFIX):
        self.anchor_prefix = anchor_prefix

    def _slugify(self, value: str, separator: str) -> str:
        return self.anchor_prefix + slugify_unicode(value, separator)

    def render(self, text: str) -> str:
        md = markdown.Markdown(
            extensions=[
                "extra",
                "sane_lists",
                "nl2br",
                TocExtension(slugify=self._slugify),
            ],
            output_format="xhtml",
        )
        return md.convert(text)


class HeadingQuery(ABC):
    """Extracts heading records from a rendered HTML document."""

    @abstractmethod
    def headings(self, html: str, document: str) -> list[HeadingRecord]:
        pass


class SoupHeadingQuery(HeadingQuery):
    """Heading extraction with BeautifulSoup CSS selectors.

    Only h1-h5 are collected; h6 headings never reach the table of contents.
    """

    def __init__(self, selector: str = HEADING_SELECTOR):
        self.selector = selector

    def headings(self, html: str, document: str) -> list[HeadingRecord]:
        try:
            soup = BeautifulSoup(html, "lxml")
            elements = soup.select(self.selector)
        except SelectorSyntaxError as e:
            raise MalformedHeadingQuery(
                f"Invalid heading selector {self.selector!r}: {e}"
            ) from e
        except (ValueError, TypeError) as e:
            raise MalformedHeadingQuery(f"Cannot parse document {document}: {e}") from e

        records = []
        for element in elements:
            level = self._level(element.name)
            if level is None:
                continue
            records.append(
                HeadingRecord(
                    document=document,
                    anchor=self._anchor(element),
                    text=self._first_text(element),
                    level=level,
                )
            )
        return records

    def _level(self, tag_name: str) -> int | None:
        if len(tag_name) == 2 and tag_name[0] == "h" and tag_name[1] in "12345":
            return int(tag_name[1])
        return None

    def _anchor(self, element) -> str | None:
        if element.get("id"):
            return element["id"]
        link = element.select_one("a[id]")
        if link is not None and link.get("id"):
            return link["id"]
        return None

    def _first_text(self, element) -> str:
        for text in element.strings:
            if text.strip():
                return text.strip()
        return UNTITLED_HEADING


class ConvertedDocument(BaseModel):
    """Result of converting one Markdown source."""

    source: Path
    stem: str
    xhtml: str
    entry: ManifestEntry
    headings: list[HeadingRecord] = Field(default_factory=list)

    @property
    def file_name(self) -> str:
        return self.entry.href


class DocumentConverter:
    """Convert Markdown sources into XHTML content documents."""

    def __init__(
        self,
        vertical: bool = False,
        renderer: MarkdownRenderer | None = None,
        query: HeadingQuery | None = None,
    ):
        self.vertical = vertical
        self.renderer = renderer or PythonMarkdownRenderer()
        self.query = query or SoupHeadingQuery()

    def convert(self, source: Path) -> ConvertedDocument:
        """Render one source file without touching the working tree."""
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailure(f"Cannot read {source}: {e}") from e

        stem = document_stem(source)
        body = self.renderer.render(text)
        xhtml = content_document(source.name, body, self.vertical)
        headings = self.query.headings(xhtml, stem)
        log.debug("Converted %s: %d heading(s)", source.name, len(headings))

        return ConvertedDocument(
            source=source,
            stem=stem,
            xhtml=xhtml,
            entry=ManifestEntry(href=f"{stem}.xhtml"),
            headings=headings,
        )

    def write(self, document: ConvertedDocument, oebps_dir: Path) -> Path:
        """Write a converted document into the OEBPS directory."""
        target = oebps_dir / document.file_name
        try:
            target.write_text(document.xhtml, encoding="utf-8")
        except OSError as e:
            raise IOFailure(f"Cannot write {target}: {e}") from e
        return target
