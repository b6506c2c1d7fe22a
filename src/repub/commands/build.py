"""Build command implementation."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from repub.core.assembler import BookAssembler
from repub.core.converter import ConvertedDocument
from repub.core.sources import resolve_sources
from repub.models.config import BuildConfig


def execute_build(config: BuildConfig, console: Console, quiet: bool = False) -> Path:
    """Execute the build command."""
    sources = resolve_sources(config.source)

    if not quiet:
        info_lines = [
            f"[bold]{escape(config.metadata.title)}[/]",
            f"[dim]Creator:[/] {escape(config.metadata.creator)}",
            f"[dim]Language:[/] {escape(config.metadata.language)}",
            f"[dim]Book ID:[/] {config.metadata.identifier}",
            f"[dim]Documents:[/] {len(sources)}",
            f"[dim]Writing:[/] {'vertical (rtl)' if config.vertical else 'horizontal'}",
        ]
        if config.warnings:
            info_lines.append("")
            for warning in config.warnings:
                info_lines.append(f"[yellow]! {escape(warning)}[/]")
        console.print()
        console.print(Panel("\n".join(info_lines), title="Book Info", border_style="green"))
        console.print()

    if quiet:
        epub_path = BookAssembler(config).build()
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Converting...", total=len(sources))

            def on_document(document: ConvertedDocument) -> None:
                progress.update(
                    task, advance=1, description=f"Converted: {document.source.name[:40]}"
                )

            epub_path = BookAssembler(config, on_document=on_document).build()

    if not quiet:
        summary_lines = [
            f"[green]Built {escape(epub_path.name)}[/]",
            "",
            f"[dim]Output:[/] {epub_path}",
        ]
        if config.keep_intermediate:
            summary_lines.append(f"[dim]Working tree kept in:[/] {config.output_dir}")
        console.print()
        console.print(Panel("\n".join(summary_lines), title="Complete", border_style="green"))

    return epub_path
