"""
Load and save whole decision trees as one nested document.

The document is the root node dictionary, nested through ``children``. JSON
is the exchange format; YAML holds the same structure and is used for the
built-in samples and for human inspection.

Derived fields present in a document are discarded on load and recomputed,
so a loaded tree is trustworthy whatever the file contained. Loading is all
or nothing: any failure raises TreeDocumentError before a tree is returned.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from decisiontree.core.tree.constraints import find_structural_violations
from decisiontree.core.tree.models import DERIVED_FIELDS, DecisionNode, DecisionTree
from decisiontree.core.tree.propagation import propagate
from decisiontree.io.errors import TreeDocumentError

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "decision_tree.json"

FORMAT_BY_SUFFIX = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def format_for_path(path: str | Path, default: str = "json") -> str:
    """Pick the document format from a file suffix."""
    return FORMAT_BY_SUFFIX.get(Path(path).suffix.lower(), default)


def strip_derived_fields(data: Any) -> Any:
    """Return a copy of a raw document without any derived fields."""
    if isinstance(data, dict):
        cleaned: Dict[str, Any] = {}
        for key, value in data.items():
            if key in DERIVED_FIELDS:
                continue
            cleaned[key] = strip_derived_fields(value) if key == "children" else value
        return cleaned
    if isinstance(data, list):
        return [strip_derived_fields(item) for item in data]
    return data


def parse_tree_document(data: Any, *, source: Optional[str] = None) -> DecisionTree:
    """
    Build a propagated tree from a raw (already decoded) document.

    Args:
        data: Decoded document (dict rooted at the start node)
        source: File path or label used in error messages

    Returns:
        A new DecisionTree with all derived fields recomputed

    Raises:
        TreeDocumentError: If the document is malformed or breaks a structural rule
    """
    if not isinstance(data, dict):
        raise TreeDocumentError(source, "Tree document must be an object rooted at the start node")

    try:
        cleaned = strip_derived_fields(data)
        root = DecisionNode.model_validate(cleaned)
    except ValidationError as exc:
        raise TreeDocumentError(source, "Invalid tree document", cause=exc) from exc
    except RecursionError as exc:
        raise TreeDocumentError(source, "Tree document is nested too deeply", cause=exc) from exc

    problems = find_structural_violations(root)
    if problems:
        raise TreeDocumentError(source, "Tree document breaks structural rules", problems=problems)

    tree = DecisionTree(root=root)
    propagate(tree)
    logger.info("Loaded tree with %d node(s)%s", len(tree), f" from {source}" if source else "")
    return tree


def loads_tree_document(text: str, fmt: str = "json", *, source: Optional[str] = None) -> DecisionTree:
    """Parse a tree document from a JSON or YAML string."""
    try:
        if fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TreeDocumentError(source, f"Could not parse {fmt.upper()} document", cause=exc) from exc
    return parse_tree_document(data, source=source)


def load_tree_document(path: str | Path) -> DecisionTree:
    """
    Load a tree document from a file.

    Raises:
        TreeDocumentError: If the file cannot be read, parsed or validated
    """
    source = str(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise TreeDocumentError(source, "Could not read tree document", cause=exc) from exc
    return loads_tree_document(text, format_for_path(path), source=source)


def dumps_tree_document(tree: DecisionTree, fmt: str = "json") -> str:
    """Serialize the whole tree, derived fields included."""
    data = tree.to_dict()
    if fmt == "yaml":
        return yaml.dump(data, default_flow_style=False, indent=2, sort_keys=False)
    return json.dumps(data, indent=2)


def save_tree_document(tree: DecisionTree, path: str | Path, fmt: Optional[str] = None) -> str:
    """
    Save the tree to a file.

    Args:
        tree: Tree to save
        path: Output file path
        fmt: "json" or "yaml" (inferred from the suffix when omitted)

    Returns:
        The path written
    """
    fmt = fmt or format_for_path(path)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_tree_document(tree, fmt))
    logger.info("Saved tree with %d node(s) to %s", len(tree), path)
    return str(path)


__all__ = [
    "DEFAULT_EXPORT_NAME",
    "dumps_tree_document",
    "format_for_path",
    "load_tree_document",
    "loads_tree_document",
    "parse_tree_document",
    "save_tree_document",
    "strip_derived_fields",
]
