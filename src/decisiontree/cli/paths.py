from __future__ import annotations

"""Utilities for resolving the working document and export paths."""

from pathlib import Path

from decisiontree.io.tree_document import DEFAULT_EXPORT_NAME, FORMAT_BY_SUFFIX

EXTENSIONS = {"json": ".json", "yaml": ".yaml"}


def working_document_path(path: str | None) -> str:
    """The tree document commands operate on (./decision_tree.json by default)."""
    return path or str(Path.cwd() / DEFAULT_EXPORT_NAME)


def exports_dir() -> Path:
    return Path.cwd() / "exports"


def resolve_export_path(name: str | None, fmt: str = "json") -> str:
    """Resolve an export filename.

    Without a name the default export name is used under exports/. A bare
    name gets the extension matching ``fmt``; names with a directory part are
    used as given.
    """
    ext = EXTENSIONS.get(fmt, ".json")
    if not name:
        return str(exports_dir() / Path(DEFAULT_EXPORT_NAME).with_suffix(ext).name)
    p = Path(name)
    if p.suffix.lower() not in FORMAT_BY_SUFFIX:
        p = p.with_name(f"{p.name}{ext}")
    if p.parent == Path("."):
        return str(exports_dir() / p.name)
    return str(p)


def find_document(name_or_path: str) -> str:
    """
    Find a tree document with smart resolution.

    1. If path exists as-is, use it
    2. If path exists with a .json/.yaml/.yml extension, use it
    3. Otherwise, look in the exports/ folder

    Args:
        name_or_path: Either full path or just a filename (with or without extension)

    Returns:
        Resolved path to the document

    Raises:
        FileNotFoundError: If the document cannot be found
    """
    p = Path(name_or_path)

    if p.exists():
        return str(p)

    candidates = [Path(f"{name_or_path}{ext}") for ext in FORMAT_BY_SUFFIX]
    candidates += [exports_dir() / p.name]
    candidates += [exports_dir() / f"{p.name}{ext}" for ext in FORMAT_BY_SUFFIX]
    for candidate in candidates:
        if candidate.exists():
            return str(candidate)

    raise FileNotFoundError(
        f"Tree document not found: '{name_or_path}'\nLooked in:\n  - {name_or_path}\n  - {exports_dir() / p.name}"
    )


__all__ = [
    "exports_dir",
    "find_document",
    "resolve_export_path",
    "working_document_path",
]
