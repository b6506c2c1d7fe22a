"""Build the table-of-contents tree and render the navigation document.

Headings arrive as a flat, document-order sequence carrying only a level.
Nesting follows the relative levels actually seen: a book that only uses h2
and h3 still nests one level deep, and a jump from h2 straight to h4 inserts
a single placeholder for the missing h3.
"""

import logging
from collections.abc import Iterable
from xml.sax.saxutils import escape, quoteattr

from repub.core.templates import navigation_document
from repub.models.config import DEFAULT_TOC_LEVEL
from repub.models.toc import HeadingRecord, TOCForest, TOCNode

log = logging.getLogger(__name__)

NAVIGATION_TITLE = "Table of Contents"


def open_path(forest: TOCForest) -> list[TOCNode]:
    """Return the currently open nodes, shallowest first.

    The open node at each depth is the last child of the open node above it,
    so the path is found by descending through last children.
    """
    path: list[TOCNode] = []
    nodes = forest.children
    while nodes:
        node = nodes[-1]
        path.append(node)
        nodes = node.children
    return path


def insert_heading(forest: TOCForest, heading: HeadingRecord) -> TOCNode:
    """Insert one heading into the forest and return its node."""
    node = TOCNode(
        level=heading.level,
        text=heading.text,
        document=heading.document,
        anchor=heading.anchor,
    )
    path = open_path(forest)

    # The first top-level node always holds the shallowest level seen so far.
    if not path or heading.level <= path[0].level:
        forest.children.append(node)
        return node

    parent = [open_node for open_node in path if open_node.level < heading.level][-1]
    for level in range(parent.level + 1, heading.level):
        filler = TOCNode(level=level, document=heading.document, placeholder=True)
        parent.children.append(filler)
        parent = filler
    parent.children.append(node)
    return node


def build_toc(headings: Iterable[HeadingRecord]) -> TOCForest:
    """Build a ToC forest from headings in document order."""
    forest = TOCForest()
    count = 0
    for heading in headings:
        insert_heading(forest, heading)
        count += 1
    log.debug("Built table of contents from %d heading(s), depth %d", count, forest.depth())
    return forest


def _render_node(node: TOCNode, toc_level: int) -> str:
    if node.placeholder:
        label = "<span></span>"
    elif node.href is not None:
        label = f"<a href={quoteattr(node.href)}>{escape(node.text)}</a>"
    else:
        label = f"<span>{escape(node.text)}</span>"

    if not node.children:
        return f"<li>{label}</li>"

    items = "".join(_render_node(child, toc_level) for child in node.children)
    if node.level >= toc_level:
        nested = f'<ol hidden="hidden">{items}</ol>'
    else:
        nested = f"<ol>{items}</ol>"
    return f"<li>{label}{nested}</li>"


def render_toc(forest: TOCForest, toc_level: int = DEFAULT_TOC_LEVEL) -> str:
    """Render the forest as a single nested ordered list.

    Children of nodes whose level is at or beyond ``toc_level`` are hidden
    (collapsed) by default.
    """
    items = "".join(_render_node(node, toc_level) for node in forest.children)
    return f"<ol>{items}</ol>"


def render_navigation(
    forest: TOCForest,
    toc_level: int = DEFAULT_TOC_LEVEL,
    vertical: bool = False,
    language: str = "en",
    title: str = NAVIGATION_TITLE,
) -> str:
    """Render the complete navigation.xhtml document."""
    return navigation_document(render_toc(forest, toc_level), title, language, vertical)
