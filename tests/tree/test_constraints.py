"""
Tests for structural rules.
"""

import pytest

from decisiontree.core.tree.constraints import (
    allowed_child_types,
    can_add_child,
    can_delete,
    can_edit,
    find_structural_violations,
    ordered_child_types,
)
from decisiontree.core.tree.models import NodeType


@pytest.mark.parametrize(
    "parent,expected",
    [
        (NodeType.START, [NodeType.DECISION]),
        (NodeType.DECISION, [NodeType.ACTION, NodeType.EXIT]),
        (NodeType.ACTION, [NodeType.DECISION, NodeType.OUTCOME]),
        (NodeType.OUTCOME, [NodeType.DECISION, NodeType.ACTION, NodeType.EXIT]),
        (NodeType.EXIT, []),
    ],
)
def test_ordered_child_types(parent, expected):
    assert ordered_child_types(parent) == expected


def test_allowed_child_types_accepts_string():
    assert allowed_child_types("decision") == {NodeType.ACTION, NodeType.EXIT}


def test_start_never_a_child():
    for node_type in NodeType:
        assert NodeType.START not in allowed_child_types(node_type)


def test_permissions(make_node):
    start = make_node(NodeType.START)
    exit_node = make_node(NodeType.EXIT)
    action = make_node(NodeType.ACTION)

    assert can_add_child(start) and not can_delete(start) and not can_edit(start)
    assert not can_add_child(exit_node) and can_delete(exit_node) and not can_edit(exit_node)
    assert can_add_child(action) and can_delete(action) and can_edit(action)


class TestStructuralViolations:
    def test_valid_tree(self, make_node):
        d = make_node(
            NodeType.DECISION,
            "D",
            children=[make_node(NodeType.ACTION, probability=0.5), make_node(NodeType.EXIT, probability=0.5)],
        )
        assert find_structural_violations(make_node(NodeType.START, children=[d])) == []

    def test_root_must_be_start(self, make_node):
        errors = find_structural_violations(make_node(NodeType.DECISION))
        assert any("must be of type 'start'" in e for e in errors)

    def test_second_start_rejected(self, make_node):
        d = make_node(NodeType.DECISION, children=[make_node(NodeType.START)])
        errors = find_structural_violations(make_node(NodeType.START, children=[d]))
        assert any("is not the root" in e for e in errors)

    def test_duplicate_ids(self, make_node):
        d = make_node(NodeType.DECISION, node_id="same")
        errors = find_structural_violations(make_node(NodeType.START, node_id="same", children=[d]))
        assert "Duplicate node id 'same'" in errors

    def test_adjacency(self, make_node):
        root = make_node(NodeType.START, children=[make_node(NodeType.ACTION)])
        errors = find_structural_violations(root)
        assert any("cannot have a child of type 'action'" in e for e in errors)

    def test_exit_has_no_children(self, make_node):
        e = make_node(NodeType.EXIT, children=[make_node(NodeType.ACTION)])
        d = make_node(NodeType.DECISION, children=[e])
        errors = find_structural_violations(make_node(NodeType.START, children=[d]))
        assert any("of type 'exit'" in err for err in errors)

    def test_start_forced_values(self, make_node):
        errors = find_structural_violations(make_node(NodeType.START, cost=5))
        assert any("cost 0, probability 1 and time 0" in e for e in errors)

    def test_decision_probability(self, make_node):
        d = make_node(NodeType.DECISION, probability=0.5)
        errors = find_structural_violations(make_node(NodeType.START, children=[d]))
        assert any("must have probability 1" in e for e in errors)

    def test_all_problems_reported(self, make_node):
        d = make_node(NodeType.DECISION, probability=0.5, children=[make_node(NodeType.OUTCOME)])
        errors = find_structural_violations(make_node(NodeType.START, cost=1, children=[d]))
        assert len(errors) == 3
