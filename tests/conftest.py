"""
Shared fixtures for decision tree tests.
"""

from typing import Optional

import pytest

from decisiontree.core.tree.models import DecisionNode, DecisionTree
from decisiontree.services import EditorSession, TreeEditor


def find_by_name(tree: DecisionTree, name: str) -> Optional[DecisionNode]:
    """Find the first node with the given name (pre-order)."""
    return next((node for node in tree.iter_nodes() if node.name == name), None)


def build_scenario(editor: TreeEditor, p1: float = 0.5, p2: float = 0.5) -> TreeEditor:
    """Start -> Decision D (time 1) -> Actions A1 (cost 10) and A2 (cost 20)."""
    editor.add_node(editor.tree.root.id, "decision", {"name": "D", "time": 1})
    decision = find_by_name(editor.tree, "D")
    editor.add_node(decision.id, "action", {"name": "A1", "probability": p1, "cost": 10})
    editor.add_node(decision.id, "action", {"name": "A2", "probability": p2, "cost": 20})
    return editor


@pytest.fixture
def editor() -> TreeEditor:
    """A fresh editor holding only the start node."""
    return TreeEditor()


@pytest.fixture
def session() -> EditorSession:
    return EditorSession()


@pytest.fixture
def scenario(editor) -> TreeEditor:
    """Editor holding the two-action scenario with a valid probability group."""
    return build_scenario(editor)


@pytest.fixture
def find_node():
    """Look up a node by name in a tree."""
    return find_by_name


@pytest.fixture
def scenario_builder():
    """Build the two-action scenario with chosen probabilities."""
    return build_scenario
