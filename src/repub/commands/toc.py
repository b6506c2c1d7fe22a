"""Preview the table of contents without building a book."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from repub.core.converter import DocumentConverter
from repub.core.sources import resolve_sources
from repub.core.toc_builder import build_toc
from repub.models.toc import TOCForest, TOCNode


def _label(node: TOCNode, toc_level: int) -> str:
    if node.placeholder:
        text = f"[dim](h{node.level})[/]"
    elif node.href:
        text = f"{escape(node.text)} [dim]{escape(node.href)}[/]"
    else:
        text = f"{escape(node.text)} [dim](no anchor)[/]"
    if node.children and node.level >= toc_level:
        text += " [cyan]collapsed[/]"
    return text


def execute_toc(source: Path, toc_level: int, console: Console) -> TOCForest:
    """Convert the sources in memory and print the resulting outline."""
    converter = DocumentConverter()
    headings = []
    for path in resolve_sources(source):
        headings.extend(converter.convert(path).headings)

    forest = build_toc(headings)
    if not forest.children:
        console.print("[yellow]No headings found.[/]")
        return forest

    tree = Tree(f"[bold]Table of Contents[/] [dim](depth {forest.depth()})[/]")
    branches = {0: tree}
    for depth, node in forest.walk():
        branches[depth] = branches[depth - 1].add(_label(node, toc_level))
    console.print(tree)
    return forest
