"""
Shared fixtures for tree core tests.
"""

from typing import Callable, List, Optional

import pytest

from decisiontree.core.tree.models import DecisionNode, NodeType


def _make_node(
    node_type: NodeType,
    name: str = "node",
    *,
    probability: float = 1.0,
    cost: float = 0.0,
    time: float = 0.0,
    children: Optional[List[DecisionNode]] = None,
    node_id: Optional[str] = None,
) -> DecisionNode:
    kwargs = {}
    if node_id is not None:
        kwargs["id"] = node_id
    return DecisionNode(
        name=name,
        node_type=node_type,
        probability=probability,
        cost=cost,
        time=time,
        children=children or [],
        **kwargs,
    )


@pytest.fixture
def make_node() -> Callable[..., DecisionNode]:
    """Factory building nodes directly, bypassing the mutation service."""
    return _make_node
