"""Command line interface for inspecting and flattening JSON sources."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import rich
import rich.traceback
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import connector as connector_module
from .config import ConnectorConfig, load_config
from .errors import ConnectorError
from .fetch import load_document

rich.traceback.install(show_locals=False)

app = typer.Typer(help="Infer a flat schema from JSON and project it into rows.")
console = Console()


def _resolve_path(path: Path | str) -> Path:
    """Resolve a string or path to an absolute Path."""
    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        raise typer.BadParameter(f"Path does not exist: {resolved}")
    return resolved


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_config(
    config_path: Optional[Path],
    nested: Optional[str],
    annotated: Optional[bool],
) -> ConnectorConfig:
    try:
        config = load_config(_resolve_path(config_path)) if config_path else ConnectorConfig()
        return ConnectorConfig(
            url=config.url,
            nested_data=nested or config.nested_data,
            annotated=config.annotated if annotated is None else annotated,
            max_depth=config.max_depth,
            timeout=config.timeout,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load(source: Optional[str], config: ConnectorConfig) -> object:
    target = source or config.url
    if not target:
        raise typer.BadParameter("Provide a SOURCE or a config file with a url.")
    return load_document(target, timeout=config.timeout)


@app.command()
def schema(
    source: Optional[str] = typer.Argument(None, help="URL or path of the JSON document."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML connector config."),
    nested: Optional[str] = typer.Option(
        None, "--nested", help="Nested object handling: 'inline' or 'json'."
    ),
    annotated: Optional[bool] = typer.Option(
        None,
        "--annotated/--heuristic",
        help="Read field types from annotations instead of sniffing values.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the host schema as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Describe the fields inferred from the first record."""

    _configure_logging(verbose)
    config = _build_config(config_path, nested, annotated)

    try:
        described = connector_module.describe_schema(_load(source, config), config)
    except ConnectorError as error:
        console.print(f"[red]{error.message}[/red]")
        raise typer.Exit(code=1) from error

    if as_json:
        console.print_json(data=described.build())
        return

    table = Table(title=f"Fields ({described.mode.value})")
    for column in ("id", "name", "type", "concept", "aggregation"):
        table.add_column(column)
    for field in described:
        table.add_row(
            field.id,
            field.name,
            field.semantic_type.value,
            "METRIC" if field.is_metric else "DIMENSION",
            field.aggregation.value if field.aggregation else "",
        )
    console.print(table)


@app.command()
def rows(
    source: Optional[str] = typer.Argument(None, help="URL or path of the JSON document."),
    field_ids: list[str] = typer.Option(..., "--field", "-f", help="Field id to include, in order."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML connector config."),
    nested: Optional[str] = typer.Option(
        None, "--nested", help="Nested object handling: 'inline' or 'json'."
    ),
    annotated: Optional[bool] = typer.Option(
        None,
        "--annotated/--heuristic",
        help="Read field types from annotations instead of sniffing values.",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write rows to a .csv or .json file instead of printing."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Project every record onto the requested fields."""

    _configure_logging(verbose)
    config = _build_config(config_path, nested, annotated)

    try:
        projected = connector_module.project_rows(_load(source, config), field_ids, config)
    except ConnectorError as error:
        console.print(f"[red]{error.message}[/red]")
        raise typer.Exit(code=1) from error

    if output is not None:
        output = output.expanduser().resolve()
        output.parent.mkdir(parents=True, exist_ok=True)
        if output.suffix.lower() == ".csv":
            pd.DataFrame(projected, columns=field_ids).to_csv(output, index=False)
        else:
            output.write_text(json.dumps(projected, indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"{len(projected)} rows written to [green]{output}[/green]")
        return

    table = Table()
    for field_id in field_ids:
        table.add_column(field_id)
    for values in projected:
        table.add_row(*["" if value is None else str(value) for value in values])
    console.print(table)


def main() -> None:
    """Entrypoint for the `jsonrows` console script."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
