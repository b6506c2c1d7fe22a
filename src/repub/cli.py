"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from repub.exceptions import RepubError
from repub.models.book import BookMetadata
from repub.models.config import BuildConfig, coerce_toc_level

app = typer.Typer(
    name="repub",
    help="Convert Markdown documents into an EPUB 3 book.",
    add_completion=False,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def build(
    input_path: Annotated[
        Path,
        typer.Argument(
            metavar="INPUT",
            help="Markdown file, or directory of Markdown files to convert",
        ),
    ],
    title: Annotated[
        str,
        typer.Option("--title", "-t", prompt="Title", help="Book title"),
    ],
    creator: Annotated[
        str,
        typer.Option(
            "--creator",
            "-c",
            prompt="Creator",
            envvar="REPUB_CREATOR",
            help="Author, editor, translator, ...",
        ),
    ],
    language: Annotated[
        str,
        typer.Option(
            "--language",
            "-l",
            prompt="Language",
            envvar="REPUB_LANGUAGE",
            help="Book language (e.g. en, ja)",
        ),
    ],
    book_id: Annotated[
        Optional[str],
        typer.Option("--bookid", help="Book identifier (default: 30 random characters)"),
    ] = None,
    vertical: Annotated[
        bool,
        typer.Option(
            "--vertical",
            "-v",
            help="Vertical writing with right-to-left page progression",
        ),
    ] = False,
    css: Annotated[
        Optional[Path],
        typer.Option(
            "--css",
            "-s",
            help="Stylesheet copied into the book as styles/custom.css",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    toc_level: Annotated[
        Optional[str],
        typer.Option(
            "--toc-level",
            "-h",
            help="Heading level from which ToC entries start collapsed (default: 2)",
        ),
    ] = None,
    keep: Annotated[
        bool,
        typer.Option(
            "--keep",
            "-k",
            help="Keep the intermediate mimetype, META-INF and OEBPS files",
        ),
    ] = False,
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output-dir",
            "-o",
            help="Directory for the working tree and the .epub (default: current directory)",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    zip_command: Annotated[
        bool,
        typer.Option("--zip-command", help="Pack with the external zip utility"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging"),
    ] = False,
) -> None:
    """Build an EPUB from Markdown sources."""
    configure_logging(verbose)

    level, warning = coerce_toc_level(toc_level)
    try:
        metadata_fields = {"title": title, "creator": creator, "language": language}
        if book_id is not None:
            metadata_fields["identifier"] = book_id
        config = BuildConfig(
            source=input_path,
            metadata=BookMetadata(**metadata_fields),
            vertical=vertical,
            stylesheet=css,
            toc_level=level,
            keep_intermediate=keep,
            output_dir=output_dir or Path.cwd(),
            use_zip_command=zip_command,
            warnings=[warning] if warning else [],
        )
    except ValidationError as e:
        for err in e.errors():
            console.print(f"[red]Invalid {err['loc'][-1]}: {err['msg']}[/]")
        raise typer.Exit(1)

    try:
        from repub.commands.build import execute_build

        execute_build(config, console=console, quiet=quiet)
    except RepubError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/]")
        raise typer.Exit(1)


@app.command()
def toc(
    input_path: Annotated[
        Path,
        typer.Argument(
            metavar="INPUT",
            help="Markdown file, or directory of Markdown files",
        ),
    ],
    toc_level: Annotated[
        Optional[str],
        typer.Option(
            "--toc-level",
            "-h",
            help="Heading level from which ToC entries start collapsed (default: 2)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging"),
    ] = False,
) -> None:
    """Show the table of contents the sources would produce."""
    configure_logging(verbose)

    level, _ = coerce_toc_level(toc_level)

    try:
        from repub.commands.toc import execute_toc

        execute_toc(input_path, level, console)
    except RepubError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
