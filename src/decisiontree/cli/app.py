"""
Decision tree CLI: build, edit and evaluate probabilistic decision trees.

Every command works on one tree document (./decision_tree.json unless
--file is given): it loads the document, applies one engine operation and
writes the document back. Derived fields are recomputed on every load and
after every change.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from decisiontree.cli.formatters import (
    build_options_table,
    build_summary_table,
    build_tree_view,
    format_edit_error,
)
from decisiontree.cli.load_helpers import load_or_exit
from decisiontree.cli.paths import find_document, resolve_export_path, working_document_path
from decisiontree.core.tree.errors import TreeEditError
from decisiontree.io import TreeDocumentError, save_tree_document
from decisiontree.repositories import SampleRepository
from decisiontree.services import EditorSession, TreeEditor, ValidationService
from decisiontree.utils.error_formatting import PROBABILITY_ADVISORY, format_expected_cost
from decisiontree.utils.logging import configure_logging

app = typer.Typer(help="Decision tree CLI: build, edit and evaluate probabilistic decision trees.")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Build, edit and evaluate probabilistic decision trees."""
    configure_logging(verbose)


def _resolve_node(editor: TreeEditor, node_ref: str) -> str:
    node_id = editor.tree.match_node_id(node_ref)
    if node_id is None:
        console.print(f"[red]Node not found or ambiguous[/red]: {node_ref}")
        raise typer.Exit(code=2)
    return node_id


def _raw_fields(
    name: Optional[str],
    probability: Optional[str],
    cost: Optional[str],
    time: Optional[str],
) -> Dict[str, Any]:
    raw = {"name": name, "probability": probability, "cost": cost, "time": time}
    return {key: value for key, value in raw.items() if value is not None}


def _report_rejection(error: TreeEditError) -> None:
    console.print("[red]Rejected:[/red]")
    for line in format_edit_error(error):
        console.print(f"  - {escape(line)}")


def _save_and_report(editor: TreeEditor, session: EditorSession, path: str) -> None:
    save_tree_document(editor.tree, path)
    if session.consume_advisory():
        console.print(f"[yellow]Warning:[/yellow] {PROBABILITY_ADVISORY}")
    console.print(f"Expected cost: {format_expected_cost(editor.tree.root.expected_cost)}")
    console.print(f"[dim]Saved: {path}[/dim]")


@app.command()
def new(
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to create"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing document"),
) -> None:
    """Create a tree holding only the start node."""
    path = working_document_path(file)
    if Path(path).exists() and not force:
        console.print(f"[red]Document already exists[/red]: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    editor = TreeEditor()
    editor.reset_tree()
    save_tree_document(editor.tree, path)
    console.print(f"[green]Created[/green] {path}")
    console.print(f"Start node: {editor.tree.root.id}")


@app.command()
def show(
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to show"),
    ids: bool = typer.Option(True, "--ids/--no-ids", help="Show node id prefixes"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Show the tree with its derived fields and a summary."""
    editor = load_or_exit(working_document_path(file), console=console, verbose_errors=verbose)
    console.print(build_tree_view(editor.tree, show_ids=ids))
    console.print(build_summary_table(editor.summary()))
    if editor.last_report.needs_attention:
        console.print(f"[yellow]Warning:[/yellow] {PROBABILITY_ADVISORY}")


@app.command()
def options(
    node: str = typer.Argument(..., help="Node id or unique id prefix"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to inspect"),
) -> None:
    """Show which child types can be added under a node, with suggested values."""
    editor = load_or_exit(working_document_path(file), console=console)
    node_id = _resolve_node(editor, node)
    session = EditorSession()

    allowed = editor.select_node(node_id, session)
    suggestions = [editor.suggest_new_node_fields(node_id, node_type) for node_type in allowed]
    target = editor.get_node(node_id)

    if not allowed:
        console.print(f"[dim]No children can be added under {target.node_type.value} nodes[/dim]")
    console.print(build_options_table(target, editor.permissions(node_id), suggestions))


@app.command()
def add(
    parent: str = typer.Argument(..., help="Parent node id or unique id prefix"),
    node_type: str = typer.Argument(..., help="decision, action, outcome or exit"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Node name"),
    probability: Optional[str] = typer.Option(None, "--probability", "-p", help="Probability in [0, 1]"),
    cost: Optional[str] = typer.Option(None, "--cost", "-c", help="Cost (>= 0)"),
    time: Optional[str] = typer.Option(None, "--time", "-t", help="Duration (>= 0)"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to edit"),
) -> None:
    """Add a child node."""
    path = working_document_path(file)
    editor = load_or_exit(path, console=console)
    parent_id = _resolve_node(editor, parent)
    session = EditorSession()

    try:
        raw = editor.suggest_new_node_fields(parent_id, node_type.lower())
        raw.update(_raw_fields(name, probability, cost, time))
        editor.add_node(parent_id, node_type.lower(), raw, session=session)
    except TreeEditError as exc:
        _report_rejection(exc)
        raise typer.Exit(code=1)

    added = editor.get_node(parent_id).children[-1]
    console.print(f"[green]Added[/green] {added.node_type.value} '{escape(added.name)}' ({added.id})")
    _save_and_report(editor, session, path)


@app.command()
def edit(
    node: str = typer.Argument(..., help="Node id or unique id prefix"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Node name"),
    probability: Optional[str] = typer.Option(None, "--probability", "-p", help="Probability in [0, 1]"),
    cost: Optional[str] = typer.Option(None, "--cost", "-c", help="Cost (>= 0)"),
    time: Optional[str] = typer.Option(None, "--time", "-t", help="Duration (>= 0)"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to edit"),
) -> None:
    """Edit the name, probability, cost or time of a node."""
    path = working_document_path(file)
    editor = load_or_exit(path, console=console)
    node_id = _resolve_node(editor, node)
    session = EditorSession()

    try:
        editor.edit_node(node_id, _raw_fields(name, probability, cost, time), session=session)
    except TreeEditError as exc:
        _report_rejection(exc)
        raise typer.Exit(code=1)

    console.print(f"[green]Edited[/green] {escape(editor.get_node(node_id).describe())}")
    _save_and_report(editor, session, path)


@app.command()
def delete(
    node: str = typer.Argument(..., help="Node id or unique id prefix"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to edit"),
) -> None:
    """Delete a node and its whole subtree."""
    path = working_document_path(file)
    editor = load_or_exit(path, console=console)
    node_id = _resolve_node(editor, node)
    session = EditorSession()

    removed = sum(1 for _ in editor.get_node(node_id).iter_subtree())
    try:
        editor.delete_node(node_id, session=session)
    except TreeEditError as exc:
        _report_rejection(exc)
        raise typer.Exit(code=1)

    console.print(f"[green]Deleted[/green] {removed} node(s)")
    _save_and_report(editor, session, path)


@app.command()
def normalize(
    node: str = typer.Argument(..., help="Node whose children should be normalized"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to edit"),
) -> None:
    """Scale a node's children probabilities so they sum to 1."""
    path = working_document_path(file)
    editor = load_or_exit(path, console=console)
    node_id = _resolve_node(editor, node)
    session = EditorSession()

    try:
        editor.normalize_children(node_id, session=session)
    except TreeEditError as exc:
        _report_rejection(exc)
        raise typer.Exit(code=1)

    for child in editor.get_node(node_id).children:
        console.print(f"  {escape(child.name)}: p={child.probability:.4f}")
    _save_and_report(editor, session, path)


@app.command()
def samples() -> None:
    """List the built-in sample trees."""
    repo = SampleRepository()
    table = Table(title="Built-in samples")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    for name in repo.list_all():
        table.add_row(name, repo.get_title(name))
    console.print(table)


@app.command()
def sample(
    name: str = typer.Argument(..., help="Sample name (see 'dtree samples')"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to write"),
) -> None:
    """Replace the working document with a built-in sample tree."""
    path = working_document_path(file)
    editor = TreeEditor()
    session = EditorSession()
    try:
        editor.load_sample(name, session=session)
    except KeyError:
        console.print(f"[red]Sample not found[/red]: {name}")
        raise typer.Exit(code=2)
    except TreeDocumentError as exc:
        console.print(f"[red]Failed to load sample:[/red] {exc}")
        raise typer.Exit(code=1)

    console.print(f"[green]Loaded[/green] {editor.samples.get_title(name)}")
    _save_and_report(editor, session, path)


@app.command("import")
def import_document(
    source: str = typer.Argument(..., help="JSON or YAML tree document to import"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to replace"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Replace the working document with an imported tree."""
    try:
        resolved = find_document(source)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    path = working_document_path(file)
    editor = load_or_exit(resolved, console=console, verbose_errors=verbose)
    session = EditorSession()
    console.print(f"[green]Imported[/green] {len(editor.tree)} node(s) from {resolved}")
    if editor.last_report.needs_attention:
        session.raise_advisory()
    _save_and_report(editor, session, path)


@app.command()
def export(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (default: exports/decision_tree.json)"),
    fmt: str = typer.Option("json", "--format", help="json or yaml"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Tree document to export"),
) -> None:
    """Export the tree, derived fields included."""
    if fmt not in ("json", "yaml"):
        console.print(f"[red]Unsupported format[/red]: {fmt} (expected json or yaml)")
        raise typer.Exit(code=2)

    editor = load_or_exit(working_document_path(file), console=console)
    target = resolve_export_path(output, fmt)
    written = editor.export_document(target, fmt)
    console.print(f"[green]Exported[/green] {written}")


@app.command()
def validate(
    path: Optional[str] = typer.Argument(None, help="Tree document to validate (default: working document)"),
) -> None:
    """Validate a tree document."""
    target = path or working_document_path(None)
    try:
        resolved = find_document(target)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    service = ValidationService()
    errors = service.validate_document(resolved)
    if errors:
        console.print("[red]Validation errors detected:[/red]")
        for error in errors:
            console.print(f" - {escape(error)}")
        raise typer.Exit(code=1)

    editor = load_or_exit(resolved, console=console)
    summary = service.get_validation_summary(editor.tree)
    console.print(f"[green]OK[/green] Loaded {summary['node_count']} node(s)")
    for warning in summary["warnings"]:
        console.print(f"[yellow]Probabilities do not sum to 1[/yellow]: {escape(warning)}")
    console.print(f"Expected cost: {format_expected_cost(summary['expected_cost'])}")
    console.print("[green]All validations passed[/green]")


__all__ = ["app"]
