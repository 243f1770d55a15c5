"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from decisiontree.core.tree.errors import FieldRangeError, TreeEditError
from decisiontree.core.tree.models import DecisionNode, DecisionTree, NodeType
from decisiontree.utils.error_formatting import format_expected_cost

NODE_STYLES = {
    NodeType.START: "bold blue",
    NodeType.DECISION: "green",
    NodeType.ACTION: "yellow",
    NodeType.OUTCOME: "red",
    NodeType.EXIT: "dim",
}

ID_PREFIX_LENGTH = 8


def short_id(node_id: str) -> str:
    return node_id[:ID_PREFIX_LENGTH]


def format_node_label(node: DecisionNode, *, show_ids: bool = True) -> str:
    style = NODE_STYLES.get(node.node_type, "")
    label = f"[{style}]{escape(node.name)}[/{style}] [dim]({node.node_type.value})[/dim]"
    details = f"p={node.probability:g} cost={node.cost:g} t={node.time:g} cum_t={node.cumulative_time:g}"
    cost = format_expected_cost(node.expected_cost)
    if node.expected_cost is None:
        details += f" E\\[cost]=[yellow]{cost}[/yellow]"
    else:
        details += f" E\\[cost]={cost}"
    if not node.valid_prob:
        details += " [red bold]invalid probability[/red bold]"
    if show_ids:
        details += f" [dim]#{short_id(node.id)}[/dim]"
    return f"{label} {details}"


def build_tree_view(tree: DecisionTree, *, show_ids: bool = True) -> Tree:
    """Render the whole decision tree as a rich Tree."""
    view = Tree(format_node_label(tree.root, show_ids=show_ids))

    def _add(branch: Tree, node: DecisionNode) -> None:
        for child in node.children:
            _add(branch.add(format_node_label(child, show_ids=show_ids)), child)

    _add(view, tree.root)
    return view


def build_summary_table(stats: Mapping[str, Any]) -> Table:
    table = Table(title="Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Expected cost", format_expected_cost(stats.get("expected_cost")))
    table.add_row("Nodes", str(stats.get("total_nodes", 0)))
    table.add_row("Depth", str(stats.get("depth", 0)))
    table.add_row("Leaves", str(stats.get("leaf_nodes", 0)))
    table.add_row("Branch points", str(stats.get("branch_points", 0)))
    table.add_row("Invalid probability groups", str(stats.get("invalid_groups", 0)))
    table.add_row("Max cumulative time", f"{stats.get('max_cumulative_time', 0):g}")
    return table


def build_options_table(
    node: DecisionNode,
    permissions: Mapping[str, bool],
    suggestions: List[Dict[str, Any]],
) -> Table:
    table = Table(title=f"Options for {escape(node.name)} ({node.node_type.value})")
    table.add_column("Add child type", style="cyan")
    table.add_column("Name")
    table.add_column("Probability")
    table.add_column("Cost")
    table.add_column("Time")
    for suggestion in suggestions:
        table.add_row(
            suggestion["nodeType"],
            suggestion["name"] or "[dim]<New Node>[/dim]",
            f"{suggestion['probability']:g}",
            f"{suggestion['cost']:g}",
            f"{suggestion['time']:g}",
        )
    flags = ", ".join(f"{key}: {'yes' if allowed else 'no'}" for key, allowed in permissions.items())
    table.caption = flags
    return table


def format_edit_error(error: TreeEditError) -> List[str]:
    """Lines describing a rejected edit, one per violated field."""
    if isinstance(error, FieldRangeError):
        return [f"{v.field}: {v.message}" for v in error.violations]
    return [error.message]


__all__ = [
    "build_options_table",
    "build_summary_table",
    "build_tree_view",
    "format_edit_error",
    "format_node_label",
    "short_id",
]
