"""Command line interface for docbuild."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docbuild.config import DEFAULT_VERSION, BuildConfig
from docbuild.errors import DocBuildError
from docbuild.index.builder import DocumentationBuilder
from docbuild.index.ndjson import iter_lexemes_from_ndjson
from docbuild.index.validator import validate_lexemes


console = Console()
app = typer.Typer(help="docbuild - compile Markdown docs into HTML fragments and a search index")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def build(
    input_dir: Path = typer.Option(
        None, "--input", help="Directory containing Markdown files (default: docs/)"
    ),
    output_dir: Path = typer.Option(
        None, "--output", help="Directory for build artifacts (default: dist/docs/)"
    ),
    version: str = typer.Option(DEFAULT_VERSION, "--doc-version", help="Documentation version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Compile Markdown to HTML fragments, the NDJSON search index and meta.json."""
    _setup_logging(verbose)
    config = BuildConfig(input_dir=input_dir, output_dir=output_dir, version=version, verbose=verbose)

    resolved_input = config.resolve_input_dir(Path.cwd())
    if not resolved_input.is_dir():
        raise typer.BadParameter(f"Input directory does not exist: {resolved_input}")

    if verbose:
        console.print(f"Input:  [bold]{resolved_input}[/bold]")
        console.print(f"Output: [bold]{config.resolve_output_dir(Path.cwd())}[/bold]")

    try:
        result = DocumentationBuilder().build(config, base_dir=Path.cwd())
    except DocBuildError as exc:
        console.print(f"[red]Build failed:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc

    if result.documents_processed == 0:
        console.print("[yellow]No Markdown files found.[/yellow]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Output")
    table.add_column("Location")
    table.add_row("Rendered HTML", f"{len(result.rendered_files)} files in {config.rendered_dir(Path.cwd())}")
    table.add_row("Search index", str(result.lexemes_path))
    table.add_row("Metadata", str(result.meta_path))

    console.print(
        f"Documents processed: {result.documents_processed}, "
        f"lexemes generated: {result.lexemes_generated}"
    )
    console.print(table)


@app.command()
def validate(
    lexemes: Path = typer.Argument(..., help="NDJSON search index to check", exists=True, dir_okay=False),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Check an existing NDJSON search index against the lexeme invariants."""
    _setup_logging(verbose)
    try:
        records = list(iter_lexemes_from_ndjson(lexemes))
        validate_lexemes(records)
    except (DocBuildError, ValueError) as exc:
        console.print(f"[red]Invalid index:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc

    console.print(f"{len(records)} lexemes OK")
