"""
Decision tree engine core.

Provides the data model, structural rules and propagation passes for
probabilistic decision trees.

Components:
- NodeType: start / decision / action / outcome / exit
- DecisionNode: A node with cost, time, probability and derived fields
- DecisionTree: The rooted tree with an id index
- allowed_child_types: Node-type adjacency rules
- propagate: Recompute cumulative time, expected cost and probability flags

Example:
    from decisiontree.core.tree import DecisionTree, propagate

    tree = DecisionTree.default()
    report = propagate(tree)
    print(tree.root.expected_cost, report.invalid_groups)
"""

from decisiontree.core.tree.constraints import (
    allowed_child_types,
    can_delete,
    can_edit,
    find_structural_violations,
)
from decisiontree.core.tree.errors import (
    FieldRangeError,
    FieldViolation,
    NodeNotFoundError,
    StructuralConstraintError,
    TreeEditError,
)
from decisiontree.core.tree.models import DecisionNode, DecisionTree, NodeType
from decisiontree.core.tree.propagation import PROBABILITY_TOLERANCE, PropagationReport, propagate

__all__ = [
    "NodeType",
    "DecisionNode",
    "DecisionTree",
    "allowed_child_types",
    "can_delete",
    "can_edit",
    "find_structural_violations",
    "PROBABILITY_TOLERANCE",
    "PropagationReport",
    "propagate",
    "TreeEditError",
    "NodeNotFoundError",
    "StructuralConstraintError",
    "FieldRangeError",
    "FieldViolation",
]
