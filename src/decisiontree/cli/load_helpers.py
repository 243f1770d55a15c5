from __future__ import annotations

"""Shared helpers for loading the working tree with CLI-friendly errors."""

from pathlib import Path

import typer
from rich.console import Console

from decisiontree.io import TreeDocumentError
from decisiontree.services import TreeEditor


def load_or_exit(
    path: str,
    *,
    console: Console,
    verbose_errors: bool = False,
) -> TreeEditor:
    """Load a tree document into a TreeEditor, exiting with code 1 on failure."""
    if not Path(path).exists():
        console.print(f"[red]Path not found:[/red] {path}")
        console.print("[dim]Run 'dtree new' or 'dtree sample <name>' to create it.[/dim]")
        raise typer.Exit(code=1)
    editor = TreeEditor()
    try:
        editor.import_document(path)
    except TreeDocumentError as err:
        if verbose_errors and err.problems:
            console.print(f"[red]Failed to load tree:[/red] {err.message}")
            for problem in err.problems:
                console.print(f"  - {problem}")
        elif verbose_errors and err.cause:
            console.print(f"[red]Failed to load tree:[/red] {err.message}\n{err.cause}")
        else:
            console.print(f"[red]Failed to load tree:[/red] {err}")
        raise typer.Exit(code=1)
    return editor


__all__ = ["load_or_exit"]
