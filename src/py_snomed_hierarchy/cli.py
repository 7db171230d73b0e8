# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, List, Optional
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# We wrap the settings import in a try-except block to provide a nicer
# error message if an environment variable holds an invalid value.
try:
    from .config import settings
except Exception as e:
    console = Console()
    console.print(Panel(
        f"[bold red]Configuration Error:[/bold red]\n{e}\n\nPlease check your .env file and the [bold cyan]PYSNOMEDHIERARCHY_*[/bold cyan] environment variables.",
        title="[bold red]Initialization Failed[/bold red]",
        border_style="red"
    ))
    raise SystemExit(1)

from .loader import load_snapshot
from .terminology import Terminology
from .transitive import ClosureTable


app = typer.Typer(
    name="py-snomed-hierarchy",
    help="Query the SNOMED CT is-a hierarchy and attributes of an RF2 snapshot."
)
console = Console()

SNAPSHOT_HELP = "RF2 snapshot directory. Defaults to PYSNOMEDHIERARCHY_SNAPSHOT_DIR."
TABLE_HELP = "Relationship table to use; repeat for several. Defaults to all configured tables."


def _load(snapshot_dir: Optional[Path]) -> Terminology:
    directory = snapshot_dir or settings.snapshot_dir
    if not directory:
        raise ValueError("No snapshot directory given. Use --snapshot-dir or set PYSNOMEDHIERARCHY_SNAPSHOT_DIR.")
    return load_snapshot(directory)


@contextmanager
def _reporting(action: str):
    try:
        yield
    except Exception as e:
        console.print_exception()
        console.print(Panel(f"[bold red]An error occurred while {action}: {e}", title="[bold red]Error[/bold red]"))
        raise typer.Exit(code=1)


def _print_concepts(terminology: Terminology, concept_ids: Iterable[int], title: str):
    concept_ids = list(concept_ids)
    table = Table(title=title)
    table.add_column("Concept ID", style="cyan", no_wrap=True)
    table.add_column("Term")
    for concept_id, term in zip(concept_ids, terminology.descriptions.terms(concept_ids)):
        table.add_row(str(concept_id), term or "")
    console.print(table)
    console.print(f"{len(concept_ids)} concept(s).")


@app.command(name="related", help="Concepts with a given relationship to the supplied concepts.")
def related(
    concept_ids: List[str] = typer.Argument(..., help="SNOMED CT concept ids."),
    type_id: Optional[List[str]] = typer.Option(None, "--type-id", help="Relationship type id; defaults to is-a."),
    table: Optional[List[str]] = typer.Option(None, "--table", "-t", help=TABLE_HELP),
    reverse: bool = typer.Option(False, "--reverse", help="Follow relationships from destination to source."),
    recursive: bool = typer.Option(False, "--recursive", help="Repeat until no new concept is found."),
    include_inactive: bool = typer.Option(False, "--include-inactive", help="Also follow inactive relationships."),
    snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", "-s", help=SNAPSHOT_HELP),
):
    with _reporting("resolving related concepts"):
        terminology = _load(snapshot_dir)
        result = terminology.resolver.related_concepts(
            concept_ids,
            type_id=type_id or None,
            tables=table or None,
            reverse=reverse,
            recursive=recursive,
            active_only=not include_inactive,
        )
        _print_concepts(terminology, result.sorted(), "Related concepts")


def _hierarchy_command(name: str, help_text: str):
    def command(
        concept_ids: List[str] = typer.Argument(..., help="SNOMED CT concept ids."),
        include_self: bool = typer.Option(False, "--include-self", help="Include the supplied concepts in the output."),
        closure: Optional[Path] = typer.Option(
            None, "--closure", help="Closure table CSV written by the `closure` command."
        ),
        table: Optional[List[str]] = typer.Option(None, "--table", "-t", help=TABLE_HELP),
        snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", "-s", help=SNAPSHOT_HELP),
    ):
        with _reporting(f"querying {name}"):
            terminology = _load(snapshot_dir)
            closure_table = ClosureTable.read_csv(closure) if closure else None
            query = getattr(terminology.hierarchy, name)
            result = query(concept_ids, include_self=include_self, closure=closure_table, tables=table or None)
            _print_concepts(terminology, result, name.capitalize())

    app.command(name=name, help=help_text)(command)


_hierarchy_command("parents", "Direct is-a parents of the supplied concepts.")
_hierarchy_command("children", "Direct is-a children of the supplied concepts.")
_hierarchy_command("ancestors", "All is-a ancestors of the supplied concepts.")
_hierarchy_command("descendants", "All is-a descendants of the supplied concepts.")


@app.command(name="closure", help="Build a transitive closure table for a subset of concepts.")
def closure(
    concept_ids: List[str] = typer.Argument(..., help="Concepts to include in the closure table."),
    output: Path = typer.Option(..., "--output", "-o", help="CSV file to write the closure table to."),
    with_descendants: bool = typer.Option(
        False, "--with-descendants", help="Extend the subset with all descendants of the supplied concepts."
    ),
    table: Optional[List[str]] = typer.Option(None, "--table", "-t", help=TABLE_HELP),
    snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", "-s", help=SNAPSHOT_HELP),
):
    with _reporting("building the closure table"):
        terminology = _load(snapshot_dir)
        subset = concept_ids
        if with_descendants:
            subset = terminology.hierarchy.descendants(concept_ids, include_self=True, tables=table or None)
        closure_table = terminology.closure_builder.create_transitive(subset, tables=table or None)
        closure_table.write_csv(output)
        console.print(f"[green]Closure table with {len(closure_table)} rows written to {output}.[/green]")


@app.command(name="has-attributes", help="Check whether source concepts have the given attributes.")
def has_attributes(
    source: List[str] = typer.Option(..., "--source", help="Source concept id; repeat for several."),
    destination: List[str] = typer.Option(..., "--destination", help="Destination concept id; repeat for several."),
    type_id: Optional[List[str]] = typer.Option(None, "--type-id", help="Relationship type id; defaults to is-a."),
    table: Optional[List[str]] = typer.Option(None, "--table", "-t", help=TABLE_HELP),
    snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", "-s", help=SNAPSHOT_HELP),
):
    with _reporting("checking attributes"):
        terminology = _load(snapshot_dir)
        type_ids = type_id or [settings.is_a_type_id]
        found = terminology.attributes.has_attributes(source, destination, type_ids, tables=table or None)
        result = Table(title="Attributes")
        for column in ("Source", "Destination", "Type", "Present"):
            result.add_column(column)
        for i, present in enumerate(found):
            result.add_row(
                str(source[i % len(source)]),
                str(destination[i % len(destination)]),
                str(type_ids[i % len(type_ids)]),
                "[green]yes[/green]" if present else "[red]no[/red]",
            )
        console.print(result)


@app.command(name="attributes", help="List the relationships of the supplied concepts.")
def attributes(
    concept_ids: List[str] = typer.Argument(..., help="SNOMED CT concept ids."),
    include_inactive: bool = typer.Option(False, "--include-inactive", help="Also list inactive relationships."),
    table: Optional[List[str]] = typer.Option(None, "--table", "-t", help=TABLE_HELP),
    snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", "-s", help=SNAPSHOT_HELP),
):
    with _reporting("retrieving attributes"):
        terminology = _load(snapshot_dir)
        frame = terminology.attributes.attr_concept(
            concept_ids, tables=table or None, active_only=not include_inactive
        )
        result = Table(title="Attributes")
        for column in ("Source", "Type", "Destination", "Group"):
            result.add_column(column)
        for row in frame.iter_rows(named=True):
            result.add_row(
                f"{row['source_id']} {row['source_desc'] or ''}".strip(),
                f"{row['type_id']} {row['type_desc'] or ''}".strip(),
                f"{row['destination_id']} {row['destination_desc'] or ''}".strip(),
                str(row["relationship_group"]),
            )
        console.print(result)


@app.command(name="simplify", help="Map concepts to their closest single ancestor among a target set.")
def simplify(
    concept_ids: List[str] = typer.Argument(..., help="Concepts to simplify."),
    ancestor: List[str] = typer.Option(..., "--ancestor", "-a", help="Allowed ancestor; repeat for several."),
    table: Optional[List[str]] = typer.Option(None, "--table", "-t", help=TABLE_HELP),
    snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", "-s", help=SNAPSHOT_HELP),
):
    with _reporting("simplifying concepts"):
        terminology = _load(snapshot_dir)
        rows = terminology.simplifier.simplify(concept_ids, ancestor, tables=table or None)
        terms = terminology.descriptions
        result = Table(title="Simplified concepts")
        for column in ("Original", "Ancestor", "Term"):
            result.add_column(column)
        for row in rows:
            result.add_row(str(row.original_id), str(row.ancestor_id), terms.term(row.ancestor_id) or "")
        console.print(result)


@app.command(name="semantic-type", help="Semantic tags of the supplied concepts.")
def semantic_type(
    concept_ids: List[str] = typer.Argument(..., help="SNOMED CT concept ids."),
    snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", "-s", help=SNAPSHOT_HELP),
):
    with _reporting("reading semantic types"):
        terminology = _load(snapshot_dir)
        result = Table(title="Semantic types")
        result.add_column("Concept ID", no_wrap=True)
        result.add_column("Semantic tag")
        for concept_id, tag in zip(concept_ids, terminology.descriptions.semantic_type(concept_ids)):
            result.add_row(str(concept_id), tag)
        console.print(result)


if __name__ == "__main__":
    app()
