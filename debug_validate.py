#!/usr/bin/env python3
"""
Reproduce a rejected write outside the store.

Runs the schema checks for one document and prints a per-field report:

    python debug_validate.py libraryItem item.json --path users/u1/libraries/lib1
    python debug_validate.py gameSession session.json --path tournaments/t1/gameSessions/s1 --parent t1.json
"""
import json
import sys

import click
from rich.console import Console
from rich.table import Table

from core.logging_config import setup_logging
from models.document import DocumentKind
from services.paths import InvalidPath, parse_path
from services.schemas import failures, validate_document

console = Console()


def _load_json(stream):
    try:
        return json.load(stream)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{stream.name} is not valid JSON: {e}")


def render_report(results, verbose: bool = False) -> Table:
    table = Table(title="Field checks")
    table.add_column("", width=2)
    table.add_column("Field", style="cyan")
    table.add_column("Check")
    table.add_column("Actual")
    table.add_column("Expected")
    for result in results:
        if result.passed:
            actual = json.dumps(result.actual, default=str) if verbose else ""
            table.add_row("[green]✓[/green]", result.field, result.check, actual, "")
        else:
            table.add_row("[red]✗[/red]", result.field, result.check,
                          json.dumps(result.actual, default=str), result.expected or "")
    return table


@click.command()
@click.argument("kind", type=click.Choice([kind.value for kind in DocumentKind]))
@click.argument("payload", type=click.File("r"))
@click.option("--path", "path", required=True, help="Storage path the document is written to")
@click.option("--parent", type=click.File("r"), help="Parent tournament JSON (game sessions)")
@click.option("--verbose", "-v", is_flag=True, help="Show actual values for passing checks too")
def cli(kind, payload, path, parent, verbose):
    """Print a pass/fail report for PAYLOAD as a KIND document; exit 1 if any check fails."""
    setup_logging("WARNING")
    try:
        location = parse_path(path)
    except InvalidPath as e:
        raise click.BadParameter(str(e), param_hint="--path")
    if location.kind.value != kind:
        raise click.BadParameter(f"{path} holds a {location.kind.value}, not a {kind}", param_hint="--path")

    document = _load_json(payload)
    parent_document = _load_json(parent) if parent else None

    results = validate_document(location, document, parent_document)
    failed = failures(results)
    console.print(render_report(results, verbose))

    if not failed:
        console.print(f"[green]All {len(results)} checks passed.[/green]")
        return
    console.print(f"[red]{len(failed)} of {len(results)} checks failed:[/red]")
    for result in failed:
        console.print(f"  - {result.field}: {result.check} ({result.category})")
    if isinstance(document, dict):
        console.print(f"Fields in payload: {', '.join(document.keys())}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
