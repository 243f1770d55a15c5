"""
Decision tree data models.

These models represent a probabilistic decision tree:
- NodeType: The five kinds of node (start, decision, action, outcome, exit)
- DecisionNode: A node carrying a cost, a duration and a probability
- DecisionTree: The rooted tree plus an id index over all of its nodes

Tree Structure:
    Start
    └── Decision "Who reviews?"
        ├── Action "Expert alone" (p=0.5, cost=10)
        │   └── Outcome ...
        └── Action "AI delegate" (p=0.5, cost=20)

Each node stores three derived fields (cumulative_time, valid_prob,
expected_cost). They are recomputed by the propagation pass after every
change and are never set by users. An expected_cost of ``None`` means the
value is unavailable because some probability group below it is invalid.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from decisiontree.core.tree.utils.value_helpers import parse_number

DEFAULT_NODE_NAME = "New Node"
EXIT_NODE_NAME = "Exit"
START_NODE_NAME = "Start"

DERIVED_FIELDS = ("cumulative_time", "valid_prob", "expected_cost")


class NodeType(str, Enum):
    """Kind of a decision tree node."""

    START = "start"  # Root, exactly one per tree, never deleted
    DECISION = "decision"
    ACTION = "action"
    OUTCOME = "outcome"
    EXIT = "exit"  # Terminal, never has children


def generate_node_id() -> str:
    """Generate a globally unique node id."""
    return str(uuid.uuid4())


class DecisionNode(BaseModel):
    """
    A node in the decision tree.

    The node exclusively owns its children. ``node_type`` is serialized as
    ``nodeType`` to match the exchanged document format.
    """

    id: str = Field(default_factory=generate_node_id)
    name: str = DEFAULT_NODE_NAME
    node_type: NodeType = Field(alias="nodeType")
    probability: float = Field(default=1.0, ge=0.0, le=1.0)
    cost: float = Field(default=0.0, ge=0.0)
    time: float = Field(default=0.0, ge=0.0)

    # Derived fields (recomputed, never user-set)
    cumulative_time: float = 0.0
    valid_prob: bool = True
    expected_cost: Optional[float] = 0.0

    children: List[DecisionNode] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "allow_inf_nan": False}

    @field_validator("time", mode="before")
    @classmethod
    def coerce_time(cls, v: Any) -> Any:
        """Treat missing or non-numeric time as 0."""
        parsed = parse_number(v)
        return 0.0 if parsed is None else parsed

    @property
    def is_leaf(self) -> bool:
        """Check if this node has no children."""
        return len(self.children) == 0

    def describe(self) -> str:
        """Human-readable one-line description of this node."""
        cost = "n/a" if self.expected_cost is None else f"{self.expected_cost:g}"
        desc = f"[{self.node_type.value}] {self.name} (p={self.probability:g}, cost={self.cost:g}, E[cost]={cost})"
        if not self.valid_prob:
            desc += " !prob"
        return desc

    def iter_subtree(self) -> Iterator[DecisionNode]:
        """Iterate over this node and all its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        """Convert node (and subtree) to the document dictionary form."""
        return self.model_dump(mode="json", by_alias=True)


class DecisionTree(BaseModel):
    """
    A rooted decision tree.

    The tree keeps a side index from node id to node and to parent id. The
    index is rebuilt by ``reindex()`` after any structural change.
    """

    root: DecisionNode

    _index: Dict[str, DecisionNode] = PrivateAttr(default_factory=dict)
    _parents: Dict[str, Optional[str]] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self.reindex()

    @classmethod
    def default(cls) -> DecisionTree:
        """Create a tree holding only a default start node."""
        root = DecisionNode(
            name=START_NODE_NAME,
            node_type=NodeType.START,
            probability=1.0,
            cost=0.0,
            time=0.0,
        )
        return cls(root=root)

    def copy_tree(self) -> DecisionTree:
        """Deep copy of the tree with its own index."""
        root = self.root.model_copy(update={"children": []})
        stack = [(self.root, root)]
        while stack:
            original, clone = stack.pop()
            for child in original.children:
                child_copy = child.model_copy(update={"children": []})
                clone.children.append(child_copy)
                stack.append((child, child_copy))
        return DecisionTree(root=root)

    # =========================================================================
    # Node Access
    # =========================================================================

    def reindex(self) -> None:
        """Rebuild the id -> node and id -> parent id indexes."""
        index: Dict[str, DecisionNode] = {}
        parents: Dict[str, Optional[str]] = {}
        stack: List[tuple[DecisionNode, Optional[str]]] = [(self.root, None)]
        while stack:
            node, parent_id = stack.pop()
            index[node.id] = node
            parents[node.id] = parent_id
            for child in reversed(node.children):
                stack.append((child, node.id))
        self._index = index
        self._parents = parents

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def get_node(self, node_id: str) -> Optional[DecisionNode]:
        """Get a node by ID."""
        return self._index.get(node_id)

    def get_parent(self, node_id: str) -> Optional[DecisionNode]:
        """Get the parent of a node (None for the root or unknown ids)."""
        parent_id = self._parents.get(node_id)
        if parent_id is None:
            return None
        return self._index.get(parent_id)

    def get_children(self, node_id: str) -> List[DecisionNode]:
        """Get all direct children of a node."""
        node = self._index.get(node_id)
        if not node:
            return []
        return list(node.children)

    def get_siblings(self, node_id: str) -> List[DecisionNode]:
        """Get all siblings of a node (same parent, excluding self)."""
        parent = self.get_parent(node_id)
        if not parent:
            return []
        return [child for child in parent.children if child.id != node_id]

    def match_node_id(self, id_or_prefix: str) -> Optional[str]:
        """
        Resolve a full node id or a unique id prefix.

        Returns:
            The full id, or None if nothing (or more than one node) matches
        """
        if id_or_prefix in self._index:
            return id_or_prefix
        matches = [node_id for node_id in self._index if node_id.startswith(id_or_prefix)]
        if len(matches) == 1:
            return matches[0]
        return None

    # =========================================================================
    # Tree Traversal
    # =========================================================================

    def iter_nodes(self) -> Iterator[DecisionNode]:
        """Iterate over all nodes in pre-order (root first)."""
        return self.root.iter_subtree()

    def get_leaf_nodes(self) -> List[DecisionNode]:
        """Get all leaf nodes (nodes with no children)."""
        return [node for node in self.iter_nodes() if node.is_leaf]

    def get_path_to_node(self, node_id: str) -> List[DecisionNode]:
        """Get the path from root to a specific node."""
        path: List[DecisionNode] = []
        current_id: Optional[str] = node_id

        while current_id is not None:
            node = self._index.get(current_id)
            if node is None:
                break
            path.insert(0, node)
            current_id = self._parents.get(current_id)

        return path

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_depth(self) -> int:
        """Get the maximum depth of the tree (a lone root has depth 1)."""
        depth = 0
        stack = [(self.root, 1)]
        while stack:
            node, level = stack.pop()
            depth = max(depth, level)
            stack.extend((child, level + 1) for child in node.children)
        return depth

    def count_branches(self) -> int:
        """Count branch points (nodes with multiple children)."""
        return sum(1 for n in self.iter_nodes() if len(n.children) > 1)

    def get_invalid_groups(self) -> List[str]:
        """Ids of nodes whose children are flagged with invalid probabilities."""
        return [n.id for n in self.iter_nodes() if n.children and not n.children[0].valid_prob]

    def get_statistics(self) -> Dict[str, Any]:
        """Get summary statistics about the tree."""
        return {
            "expected_cost": self.root.expected_cost,
            "total_nodes": len(self._index),
            "depth": self.get_depth(),
            "leaf_nodes": len(self.get_leaf_nodes()),
            "branch_points": self.count_branches(),
            "invalid_groups": len(self.get_invalid_groups()),
            "max_cumulative_time": max(n.cumulative_time for n in self.iter_nodes()),
        }

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert tree to the nested document dictionary (rooted at start)."""
        return self.root.to_dict()


__all__ = [
    "DEFAULT_NODE_NAME",
    "DERIVED_FIELDS",
    "EXIT_NODE_NAME",
    "START_NODE_NAME",
    "DecisionNode",
    "DecisionTree",
    "NodeType",
    "generate_node_id",
]
