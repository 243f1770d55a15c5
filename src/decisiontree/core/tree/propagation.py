"""
Propagation of derived fields through a decision tree.

Two passes run over the whole tree after every accepted change:

Time pass (top-down):
    cumulative_time = parent.cumulative_time + time   (root: time)

Cost/probability pass (bottom-up):
    leaf:      expected_cost = cost
    internal:  the children's probabilities must sum to 1 (within
               PROBABILITY_TOLERANCE). If they do, every child is marked
               valid_prob=True and
                   expected_cost = cost + sum(child.expected_cost * child.probability)
               If they do not, every child is marked valid_prob=False and
               expected_cost is None (unavailable).

Unavailability propagates: a node with any unavailable child is itself
unavailable, all the way up to the root. Every subtree is evaluated even
under an invalid group, so nested groups are flagged and valid subtrees
still carry their own expected cost.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from decisiontree.core.tree.models import DecisionNode, DecisionTree
from decisiontree.core.tree.utils.value_helpers import parse_number

logger = logging.getLogger(__name__)

PROBABILITY_TOLERANCE = 1e-4


@dataclass
class PropagationReport:
    """Outcome of a propagation run."""

    # Ids of nodes whose children's probabilities do not sum to 1
    invalid_groups: List[str] = field(default_factory=list)
    expected_cost: Optional[float] = None

    @property
    def needs_attention(self) -> bool:
        """True when at least one probability group must be fixed."""
        return bool(self.invalid_groups)


def probabilities_sum_to_one(probabilities: List[float], tolerance: float = PROBABILITY_TOLERANCE) -> bool:
    return abs(sum(probabilities) - 1.0) <= tolerance


def compute_cumulative_time(node: DecisionNode, parent_time: float = 0.0) -> None:
    """Recompute cumulative_time for a node and its subtree."""
    stack = [(node, parent_time)]
    while stack:
        current, base = stack.pop()
        current.cumulative_time = base + (parse_number(current.time) or 0.0)
        stack.extend((child, current.cumulative_time) for child in current.children)


def compute_expected_cost(node: DecisionNode, report: Optional[PropagationReport] = None) -> Optional[float]:
    """
    Recompute expected_cost and the children's valid_prob flags for a subtree.

    Groups are checked in pre-order, then expected costs are filled in from
    the leaves up, so every child is finished before its parent.

    Args:
        node: Subtree root
        report: Collects the ids of invalid probability groups

    Returns:
        The node's expected cost, or None if unavailable
    """
    order: List[DecisionNode] = []
    group_valid: Dict[int, bool] = {}
    stack = [node]
    while stack:
        current = stack.pop()
        order.append(current)
        if current.children:
            valid = probabilities_sum_to_one([child.probability for child in current.children])
            if not valid:
                logger.debug("Children of %s do not sum to 1", current.id)
                if report is not None:
                    report.invalid_groups.append(current.id)
            for child in current.children:
                child.valid_prob = valid
            group_valid[id(current)] = valid
        stack.extend(reversed(current.children))

    for current in reversed(order):
        if not current.children:
            current.expected_cost = current.cost
            continue
        available = group_valid[id(current)] and all(
            child.expected_cost is not None for child in current.children
        )
        if available:
            current.expected_cost = current.cost + sum(
                child.expected_cost * child.probability for child in current.children
            )
        else:
            current.expected_cost = None

    return node.expected_cost


def propagate(target: Union[DecisionTree, DecisionNode]) -> PropagationReport:
    """
    Run both passes over a whole tree, starting at the root.

    Args:
        target: A DecisionTree or its root node

    Returns:
        PropagationReport listing invalid probability groups
    """
    root = target.root if isinstance(target, DecisionTree) else target

    # The root has no siblings, so its own group is always valid
    root.valid_prob = True
    compute_cumulative_time(root)

    report = PropagationReport()
    report.expected_cost = compute_expected_cost(root, report)

    if report.needs_attention:
        logger.info("%d probability group(s) do not sum to 1", len(report.invalid_groups))
    return report


__all__ = [
    "PROBABILITY_TOLERANCE",
    "PropagationReport",
    "compute_cumulative_time",
    "compute_expected_cost",
    "probabilities_sum_to_one",
    "propagate",
]
