"""
Structural rules for decision trees.

The adjacency table below decides which node types may be added under a
parent. It has no side effects; the mutation service consults it before any
change, and the document loader uses ``find_structural_violations`` to reject
imported trees that break the same rules.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Set

from decisiontree.core.tree.models import DecisionNode, NodeType
from decisiontree.utils.error_formatting import (
    format_cost_error,
    format_probability_error,
    format_time_error,
)

ALLOWED_CHILD_TYPES: Dict[NodeType, FrozenSet[NodeType]] = {
    NodeType.START: frozenset({NodeType.DECISION}),
    NodeType.DECISION: frozenset({NodeType.ACTION, NodeType.EXIT}),
    NodeType.ACTION: frozenset({NodeType.OUTCOME, NodeType.DECISION}),
    NodeType.OUTCOME: frozenset({NodeType.ACTION, NodeType.DECISION, NodeType.EXIT}),
    NodeType.EXIT: frozenset(),
}

# Display order for "add child" choices
NODE_TYPE_ORDER = (NodeType.DECISION, NodeType.ACTION, NodeType.OUTCOME, NodeType.EXIT)

NOT_EDITABLE_TYPES = frozenset({NodeType.START, NodeType.EXIT})


def allowed_child_types(node_type: NodeType) -> FrozenSet[NodeType]:
    """Node types that may be added as children of a node of ``node_type``."""
    return ALLOWED_CHILD_TYPES[NodeType(node_type)]


def ordered_child_types(node_type: NodeType) -> List[NodeType]:
    """Allowed child types in display order."""
    allowed = allowed_child_types(node_type)
    return [t for t in NODE_TYPE_ORDER if t in allowed]


def can_add_child(node: DecisionNode) -> bool:
    return bool(allowed_child_types(node.node_type))


def can_delete(node: DecisionNode) -> bool:
    """Every node except the start node can be deleted."""
    return node.node_type != NodeType.START


def can_edit(node: DecisionNode) -> bool:
    """Whether name/cost/time are user-editable for this node."""
    return node.node_type not in NOT_EDITABLE_TYPES


def find_structural_violations(root: DecisionNode) -> List[str]:
    """
    Check a whole tree against the structural invariants.

    Checks:
    - The root is a start node and no other start node exists
    - Node ids are unique
    - Every child type is allowed under its parent (exit nodes have none)
    - Start nodes have cost 0, probability 1, time 0
    - Decision nodes have probability 1
    - Probability, cost and time are within range

    Returns:
        List of violation messages (empty if the tree is valid)
    """
    errors: List[str] = []
    seen: Set[str] = set()

    if root.node_type != NodeType.START:
        errors.append(f"Root node '{root.id}' must be of type 'start', got '{root.node_type.value}'")

    stack = [root]
    while stack:
        node = stack.pop()
        label = f"Node '{node.name}' ({node.id})"

        if node.id in seen:
            errors.append(f"Duplicate node id '{node.id}'")
        seen.add(node.id)

        if node.node_type == NodeType.START:
            if node is not root:
                errors.append(f"{label} is a start node but is not the root")
            if node.cost != 0 or node.probability != 1 or node.time != 0:
                errors.append(f"{label} must have cost 0, probability 1 and time 0")
        elif node.node_type == NodeType.DECISION and node.probability != 1:
            errors.append(f"{label} is a decision node and must have probability 1")

        if not 0 <= node.probability <= 1:
            errors.append(f"{label}: {format_probability_error()}")
        if node.cost < 0:
            errors.append(f"{label}: {format_cost_error()}")
        if node.time < 0:
            errors.append(f"{label}: {format_time_error()}")

        allowed = allowed_child_types(node.node_type)
        for child in node.children:
            if child.node_type not in allowed:
                errors.append(
                    f"{label} of type '{node.node_type.value}' cannot have a child of type '{child.node_type.value}'"
                )
        stack.extend(reversed(node.children))

    return errors


__all__ = [
    "ALLOWED_CHILD_TYPES",
    "NODE_TYPE_ORDER",
    "allowed_child_types",
    "can_add_child",
    "can_delete",
    "can_edit",
    "find_structural_violations",
    "ordered_child_types",
]
