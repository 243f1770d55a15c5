"""
Node factory for decision trees.

This module turns raw field values (from a form, the CLI or an API caller)
into validated node fields:
- Coerce probability, cost and time to numbers
- Check their ranges, collecting every violation before failing
- Force the fields that a node type fixes (start, decision, exit)
- Fill in per-type defaults for new nodes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from decisiontree.core.tree.errors import FieldRangeError, FieldViolation
from decisiontree.core.tree.models import (
    DEFAULT_NODE_NAME,
    EXIT_NODE_NAME,
    DecisionNode,
    NodeType,
)
from decisiontree.core.tree.utils.value_helpers import UNPARSABLE, coerce_number
from decisiontree.utils.error_formatting import (
    format_cost_error,
    format_not_a_number,
    format_probability_error,
    format_time_error,
)

DEFAULT_TIMES: Dict[NodeType, float] = {
    NodeType.START: 0.0,
    NodeType.DECISION: 1.0,
    NodeType.ACTION: 2.0,
    NodeType.OUTCOME: 0.0,
    NodeType.EXIT: 0.0,
}


@dataclass
class NodeFields:
    """User-settable node fields; None means 'not supplied'."""

    name: Optional[str] = None
    probability: Optional[float] = None
    cost: Optional[float] = None
    time: Optional[float] = None


def default_time(node_type: NodeType) -> float:
    return DEFAULT_TIMES.get(node_type, 0.0)


def parse_node_fields(raw: Mapping[str, Any]) -> NodeFields:
    """
    Coerce and range-check raw field values.

    Unparsable time counts as 0. Unparsable probability or cost is reported
    as a violation. All fields are checked before raising.

    Args:
        raw: Mapping with any of name, probability, cost, time

    Returns:
        NodeFields with parsed values (None for fields not supplied)

    Raises:
        FieldRangeError: If any supplied value is out of range
    """
    violations: List[FieldViolation] = []

    probability = coerce_number(raw.get("probability"))
    if probability is UNPARSABLE:
        violations.append(
            FieldViolation(field="probability", value=raw.get("probability"), message=format_not_a_number("probability"))
        )
        probability = None
    elif probability is not None and not 0.0 <= probability <= 1.0:
        violations.append(FieldViolation(field="probability", value=probability, message=format_probability_error()))

    cost = coerce_number(raw.get("cost"))
    if cost is UNPARSABLE:
        violations.append(FieldViolation(field="cost", value=raw.get("cost"), message=format_not_a_number("cost")))
        cost = None
    elif cost is not None and cost < 0:
        violations.append(FieldViolation(field="cost", value=cost, message=format_cost_error()))

    time = coerce_number(raw.get("time"))
    if time is UNPARSABLE:
        time = 0.0
    elif time is not None and time < 0:
        violations.append(FieldViolation(field="time", value=time, message=format_time_error()))

    if violations:
        raise FieldRangeError(violations)

    name = raw.get("name")
    if name is not None:
        name = str(name).strip()

    return NodeFields(name=name, probability=probability, cost=cost, time=time)


def apply_forced_fields(node_type: NodeType, fields: NodeFields) -> NodeFields:
    """
    Override the fields a node type fixes. Shared by add and edit.

    - start: cost 0, probability 1, time 0
    - decision: probability 1
    - exit: name "Exit", time 0
    """
    if node_type == NodeType.START:
        fields.cost = 0.0
        fields.probability = 1.0
        fields.time = 0.0
    elif node_type == NodeType.DECISION:
        fields.probability = 1.0
    elif node_type == NodeType.EXIT:
        fields.name = EXIT_NODE_NAME
        fields.time = 0.0
    return fields


def build_node(node_type: NodeType, raw: Mapping[str, Any]) -> DecisionNode:
    """
    Create a new node from raw field values.

    Raises:
        FieldRangeError: If any supplied value is out of range
    """
    node_type = NodeType(node_type)
    fields = parse_node_fields(raw)

    if not fields.name:
        fields.name = DEFAULT_NODE_NAME
    if fields.cost is None:
        fields.cost = 0.0
    if fields.probability is None:
        fields.probability = 0.0
    if fields.time is None:
        fields.time = default_time(node_type)
    apply_forced_fields(node_type, fields)

    return DecisionNode(
        name=fields.name,
        node_type=node_type,
        probability=fields.probability,
        cost=fields.cost,
        time=fields.time,
        children=[],
        valid_prob=True,
    )


def resolve_edit_fields(node: DecisionNode, raw: Mapping[str, Any]) -> NodeFields:
    """
    Work out the new field values for an edit of ``node``.

    Fields missing from ``raw`` keep their current value. Forced fields are
    reapplied so an edit cannot undo them.

    Raises:
        FieldRangeError: If any supplied value is out of range
    """
    try:
        fields = parse_node_fields(raw)
    except FieldRangeError as exc:
        raise FieldRangeError(exc.violations, node_id=node.id) from None

    if not fields.name:
        fields.name = node.name
    if fields.probability is None:
        fields.probability = node.probability
    if fields.cost is None:
        fields.cost = node.cost
    if fields.time is None:
        fields.time = node.time
    return apply_forced_fields(node.node_type, fields)


def suggest_fields(parent: DecisionNode, node_type: NodeType) -> Dict[str, Any]:
    """
    Pre-filled values offered when a user starts adding a child.

    Probability is 1 for decision nodes and for the first child of a parent,
    otherwise 0.
    """
    node_type = NodeType(node_type)
    if node_type == NodeType.DECISION or not parent.children:
        probability = 1.0
    else:
        probability = 0.0
    return {
        "nodeType": node_type.value,
        "name": EXIT_NODE_NAME if node_type == NodeType.EXIT else "",
        "cost": 0.0,
        "time": default_time(node_type),
        "probability": probability,
    }


__all__ = [
    "DEFAULT_TIMES",
    "NodeFields",
    "apply_forced_fields",
    "build_node",
    "default_time",
    "parse_node_fields",
    "resolve_edit_fields",
    "suggest_fields",
]
