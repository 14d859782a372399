"""CLI entry point for card identity resolution."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from card_identity.batch import BatchLoader
from card_identity.config import PairingConfig
from card_identity.fingerprint import fingerprint
from card_identity.matcher import is_front_back_pair, is_same_person
from card_identity.pairing import compute_match_score, has_strong_evidence
from card_identity.resolver import CardResolver
from card_identity.strategies import create_strategy

app = typer.Typer(
    name="cardid",
    help="Merge OCR'd business card records that describe the same card or person.",
    add_completion=False,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_path: Path | None) -> PairingConfig:
    if config_path is None:
        return PairingConfig()
    return PairingConfig.from_file(config_path)


@app.command()
def resolve(
    inputs: Annotated[
        list[Path],
        typer.Argument(
            help="Extraction JSON files or directories to process",
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path (JSON or CSV); prints to stdout when omitted",
        ),
    ] = None,
    format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: json or csv",
        ),
    ] = "json",
    strategy: Annotated[
        str,
        typer.Option(
            "--strategy",
            "-s",
            help="Merge strategy: rules or pairing",
        ),
    ] = "rules",
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="JSON file with pairing weights and thresholds",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every merge decision",
        ),
    ] = False,
):
    """Consolidate extraction records into one entry per card or person."""
    _configure_logging(verbose)

    # Validate format
    format = format.lower()
    if format not in ("json", "csv"):
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Use 'json' or 'csv'.")
        raise typer.Exit(1)

    try:
        resolver = CardResolver(create_strategy(strategy, _load_config(config_path)))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    loader = BatchLoader()
    files = loader.collect_files(inputs)

    if not files:
        console.print("[yellow]Warning:[/yellow] No extraction files found to process.")
        raise typer.Exit(0)

    load = loader.load(files)
    for error in load.errors:
        console.print(f"[yellow]Skipped:[/yellow] {escape(error['path'])}: {escape(error['error'])}")

    result = resolver.resolve(load.records)

    # Format output
    if format == "csv":
        content = loader.to_csv(result)
    else:
        content = loader.to_json(result, load)

    if output is None:
        print(content)
        return

    output.write_text(content, encoding="utf-8")

    # Print summary
    console.print(
        f"[green]Done:[/green] {result.metadata.input_count} records -> "
        f"{result.metadata.output_count} entities ({result.metadata.strategy}), "
        f"{load.failed} file(s) skipped, {result.metadata.processing_time_ms:.1f}ms"
    )
    console.print(f"Output: {output}")


@app.command()
def compare(
    first: Annotated[
        Path,
        typer.Argument(
            help="First extraction JSON file",
            exists=True,
            readable=True,
        ),
    ],
    second: Annotated[
        Path,
        typer.Argument(
            help="Second extraction JSON file",
            exists=True,
            readable=True,
        ),
    ],
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="JSON file with pairing weights and thresholds",
        ),
    ] = None,
):
    """Show how both strategies judge a pair of extraction records."""
    loader = BatchLoader()
    load = loader.load([first, second])

    if load.errors or load.loaded != 2:
        for error in load.errors:
            console.print(f"[red]Error:[/red] {escape(error['path'])}: {escape(error['error'])}")
        if not load.errors:
            console.print("[red]Error:[/red] Each file must hold exactly one record.")
        raise typer.Exit(1)

    try:
        config = _load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    a, b = (fingerprint(r) for r in load.records)
    score = compute_match_score(a, b, config)

    table = Table(show_header=False, box=None)
    table.add_column("Check", style="dim")
    table.add_column("Result")
    table.add_row("Same person", _yes_no(is_same_person(a, b)))
    table.add_row("Front/back pair", _yes_no(is_front_back_pair(a, b)))
    table.add_row("Match score", f"{score.score:.2f}")
    table.add_row("Signals", ", ".join(score.signals) or "-")
    table.add_row("Strong evidence", _yes_no(has_strong_evidence(a, b)))
    console.print(table)


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


@app.command()
def version():
    """Show version information."""
    from card_identity import __version__

    console.print(f"cardid version {__version__}")


if __name__ == "__main__":
    app()
