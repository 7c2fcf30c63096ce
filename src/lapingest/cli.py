"""Command-line interface for lapingest."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from lapingest.config.settings import IngestConfig

app = typer.Typer(
    name="lapingest",
    help="Load learning analytics input collections into the temporary store.",
    no_args_is_help=True,
)

console = Console()


def _load_ingest_config(config: Path | None) -> "IngestConfig":
    """Load the config file, or the bundled sample setup if none is given."""
    from lapingest.config.loader import load_config
    from lapingest.config.settings import IngestConfig

    if config is None:
        console.print("[dim]No config given, using the bundled sample data[/dim]")
        return IngestConfig.default()
    console.print(f"[blue]Loading configuration from {config}[/blue]")
    return load_config(config)


@app.command()
def load(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    collection: Annotated[
        list[str] | None,
        typer.Option(
            "--collection",
            "-C",
            help="Collection to load (repeatable). Omit to load all collections.",
        ),
    ] = None,
    reload: Annotated[
        bool,
        typer.Option("--reload", help="Reload collections even if already loaded."),
    ] = False,
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Wipe the temporary store before loading."),
    ] = False,
) -> None:
    """Load input collections and report what was loaded."""
    from lapingest.errors import IngestError
    from lapingest.ingestion.orchestrator import LoadOrchestrator
    from lapingest.ingestion.types import Collection
    from lapingest.utils.logging import configure_from

    try:
        ingest_config = _load_ingest_config(config)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    configure_from(ingest_config.logging)

    try:
        orchestrator = LoadOrchestrator(ingest_config)
        report = orchestrator.load(
            reload_data=reload,
            reset_store=reset,
            requested=collection or [],
        )
    except IngestError as e:
        console.print(f"[red]Load failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Collection load ({ingest_config.project})")
    table.add_column("Collection", style="cyan")
    table.add_column("Status")
    table.add_column("Source")
    table.add_column("Records", justify="right")
    table.add_column("Detail", style="dim")

    for c in Collection:
        result = report.results.get(c)
        if result is None:
            status = "already loaded" if orchestrator.is_loaded(c) else "-"
            table.add_row(c.name, f"[dim]{status}[/dim]", "", "", "")
            continue
        source = result.source_type.name if result.source_type else ""
        if result.success:
            table.add_row(c.name, "[green]loaded[/green]", source, str(result.records), "")
        else:
            table.add_row(c.name, "[red]failed[/red]", source, "", result.error or "")

    console.print(table)

    if report.failures:
        console.print(f"[red]{len(report.failures)} collection(s) failed to load[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Loaded {len(report.loaded)} collection(s), {report.records} records[/green]")


@app.command()
def sources() -> None:
    """List source types and whether a handler is available."""
    from lapingest.ingestion.registry import HandlerRegistry
    from lapingest.ingestion.types import SourceType

    registry = HandlerRegistry()

    table = Table(title="Source types")
    table.add_column("Source type", style="cyan")
    table.add_column("Handler")
    table.add_column("Input kind")

    for source_type in SourceType:
        factory = registry.factory_for(source_type)
        if factory is None:
            table.add_row(source_type.name, "[dim]not available[/dim]", "")
            continue
        kind = getattr(factory, "input_kind", None)
        table.add_row(
            source_type.name,
            getattr(factory, "__name__", repr(factory)),
            kind.name if kind is not None else "",
        )

    console.print(table)


@app.command()
def collections() -> None:
    """List input collections in load order."""
    from lapingest.schemas.registry import SchemaRegistry

    table = Table(title="Input collections")
    table.add_column("Collection", style="cyan")
    table.add_column("File")
    table.add_column("Description")

    for c in SchemaRegistry.list_collections():
        info = SchemaRegistry.get_info(c)
        table.add_row(c.name, info.file_name, info.description)

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from lapingest import __version__

    console.print(f"lapingest version {__version__}")


if __name__ == "__main__":
    app()
