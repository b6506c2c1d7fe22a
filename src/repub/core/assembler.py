"""Lay out, fill and pack the EPUB working tree."""

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from repub.core.converter import ConvertedDocument, DocumentConverter
from repub.core.package import render_package
from repub.core.packer import pack_epub, pack_with_zip_command
from repub.core.sources import resolve_sources, safe_filename
from repub.core.templates import CONTAINER_XML, EPUB_MIMETYPE, VERTICAL_CSS
from repub.core.toc_builder import build_toc, render_navigation
from repub.exceptions import InvalidInputPath, IOFailure, RepubError
from repub.models.book import Manifest
from repub.models.config import BuildConfig
from repub.models.toc import HeadingRecord, TOCForest

log = logging.getLogger(__name__)


class BuildState(str, Enum):
    """Progress of a single build."""

    INITIALIZING = "initializing"
    LAYOUT_WRITTEN = "layout_written"
    CONTENT_CONVERTED = "content_converted"
    DESCRIPTIONS_WRITTEN = "descriptions_written"
    PACKED = "packed"
    CLEANED = "cleaned"
    FAILED = "failed"


@dataclass
class WorkingTree:
    """On-disk layout that is archived into the book."""

    root: Path

    @property
    def mimetype(self) -> Path:
        return self.root / "mimetype"

    @property
    def meta_inf(self) -> Path:
        return self.root / "META-INF"

    @property
    def oebps(self) -> Path:
        return self.root / "OEBPS"

    @property
    def styles(self) -> Path:
        return self.oebps / "styles"

    @property
    def container(self) -> Path:
        return self.meta_inf / "container.xml"

    @property
    def package(self) -> Path:
        return self.oebps / "package.opf"

    @property
    def navigation(self) -> Path:
        return self.oebps / "navigation.xhtml"

    def exists(self) -> bool:
        return any(p.exists() for p in (self.mimetype, self.meta_inf, self.oebps))

    def remove(self) -> None:
        """Remove whatever part of the tree exists."""
        try:
            self.mimetype.unlink(missing_ok=True)
            for directory in (self.meta_inf, self.oebps):
                if directory.exists():
                    shutil.rmtree(directory)
        except OSError as e:
            raise IOFailure(f"Cannot remove working tree in {self.root}: {e}") from e


class BookAssembler:
    """Build one EPUB from a resolved configuration.

    An assembler owns its working tree and accumulators for exactly one
    build; create a new instance for every book.
    """

    def __init__(
        self,
        config: BuildConfig,
        converter: DocumentConverter | None = None,
        on_document: Callable[[ConvertedDocument], None] | None = None,
    ):
        self.config = config
        self.tree = WorkingTree(config.output_dir)
        self.converter = converter or DocumentConverter(vertical=config.vertical)
        self.on_document = on_document
        self.epub_path = config.output_dir / f"{safe_filename(config.metadata.title)}.epub"

        self.state = BuildState.INITIALIZING
        self.error: Exception | None = None
        self.manifest = Manifest()
        self.headings: list[HeadingRecord] = []
        self.forest: TOCForest | None = None

    def build(self) -> Path:
        """Run the whole build and return the path of the archive.

        On failure the working tree is removed (unless intermediate files are
        kept) and the first error is re-raised.
        """
        if self.state != BuildState.INITIALIZING:
            raise RepubError("This assembler has already run; create a new one per build")

        log.debug("Build configuration: %r", self.config)
        try:
            sources = resolve_sources(self.config.source)
        except InvalidInputPath as e:
            self.error = e
            self.state = BuildState.FAILED
            raise

        try:
            self._write_layout()
            self._convert(sources)
            self._write_descriptions()
            self._pack()
            self._cleanup()
        except OSError as e:
            failure = IOFailure(str(e))
            self._fail(failure)
            raise failure from e
        except Exception as e:
            self._fail(e)
            raise

        return self.epub_path

    # -- transitions ---------------------------------------------------

    def _advance(self, state: BuildState) -> None:
        log.info("Build state: %s -> %s", self.state.value, state.value)
        self.state = state

    def _write_layout(self) -> None:
        tree = self.tree
        if tree.exists():
            log.warning("Removing stale working tree in %s", tree.root)
            tree.remove()

        tree.root.mkdir(parents=True, exist_ok=True)
        tree.mimetype.write_bytes(EPUB_MIMETYPE.encode("ascii"))

        tree.meta_inf.mkdir()
        tree.container.write_text(CONTAINER_XML, encoding="utf-8")

        tree.styles.mkdir(parents=True)
        (tree.styles / "vertical.css").write_text(VERTICAL_CSS, encoding="utf-8")
        custom_css = tree.styles / "custom.css"
        if self.config.stylesheet is not None:
            shutil.copyfile(self.config.stylesheet, custom_css)
        else:
            custom_css.touch()

        self._advance(BuildState.LAYOUT_WRITTEN)

    def _convert(self, sources: list[Path]) -> None:
        for source in sources:
            document = self.converter.convert(source)
            self.manifest.add(document.entry)
            self.converter.write(document, self.tree.oebps)
            self.headings.extend(document.headings)
            if self.on_document:
                self.on_document(document)

        self._advance(BuildState.CONTENT_CONVERTED)

    def _write_descriptions(self) -> None:
        config = self.config
        self.tree.package.write_text(
            render_package(config.metadata, self.manifest, config.vertical),
            encoding="utf-8",
        )

        self.forest = build_toc(self.headings)
        self.tree.navigation.write_text(
            render_navigation(
                self.forest,
                config.toc_level,
                config.vertical,
                language=config.metadata.language,
            ),
            encoding="utf-8",
        )

        self._advance(BuildState.DESCRIPTIONS_WRITTEN)

    def _pack(self) -> None:
        pack = pack_with_zip_command if self.config.use_zip_command else pack_epub
        pack(
            self.tree.root,
            self.tree.mimetype,
            [self.tree.meta_inf, self.tree.oebps],
            self.epub_path,
        )
        self._advance(BuildState.PACKED)

    def _cleanup(self) -> None:
        if self.config.keep_intermediate:
            log.info("Keeping working tree in %s", self.tree.root)
            return
        self.tree.remove()
        self._advance(BuildState.CLEANED)

    def _fail(self, error: Exception) -> None:
        if self.error is None:
            self.error = error
        if self.state == BuildState.DESCRIPTIONS_WRITTEN:
            self.epub_path.unlink(missing_ok=True)
        self.state = BuildState.FAILED
        log.error("Build failed: %s", error)

        if self.config.keep_intermediate:
            return
        try:
            self.tree.remove()
        except IOFailure:
            log.exception("Cleanup after failure did not complete")
