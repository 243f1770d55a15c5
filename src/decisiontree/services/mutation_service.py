"""Mutation Service: The only way to change a decision tree."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from decisiontree.core.tree.constraints import (
    allowed_child_types,
    can_add_child,
    can_delete,
    can_edit,
    ordered_child_types,
)
from decisiontree.core.tree.errors import (
    NodeNotFoundError,
    StructuralConstraintError,
    TreeEditError,
)
from decisiontree.core.tree.models import DecisionNode, DecisionTree, NodeType, generate_node_id
from decisiontree.core.tree.node_factory import build_node, resolve_edit_fields, suggest_fields
from decisiontree.core.tree.propagation import PropagationReport, propagate
from decisiontree.io.errors import TreeDocumentError
from decisiontree.io.tree_document import (
    DEFAULT_EXPORT_NAME,
    load_tree_document,
    parse_tree_document,
    save_tree_document,
)
from decisiontree.repositories.sample_repository import SampleRepository
from decisiontree.services.session import EditorSession
from decisiontree.utils.logging import log_calls

logger = logging.getLogger(__name__)


@contextmanager
def _recording(session: Optional[EditorSession]) -> Iterator[None]:
    """Record any rejection on the session before re-raising it."""
    try:
        yield
    except (TreeEditError, TreeDocumentError) as exc:
        if session is not None:
            session.record_failure(exc)
        raise


class TreeEditor:
    """
    Service owning one in-memory decision tree.

    Every change goes through add_node, edit_node, delete_node or
    normalize_children. Each one validates first and rejects with no change
    (raising a TreeEditError), or applies the change and re-runs propagation
    over the whole tree before returning it.
    """

    def __init__(
        self,
        tree: Optional[DecisionTree] = None,
        sample_repository: Optional[SampleRepository] = None,
    ):
        """
        Initialize the editor.

        Args:
            tree: Tree to edit (a default start-only tree if None)
            sample_repository: Source of built-in sample trees
        """
        self.tree = tree if tree is not None else DecisionTree.default()
        self.samples = sample_repository or SampleRepository()
        self.last_report: PropagationReport = propagate(self.tree)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_tree(self) -> DecisionTree:
        """Get a read-only snapshot (deep copy) of the current tree."""
        return self.tree.copy_tree()

    def get_node(self, node_id: str) -> DecisionNode:
        """
        Get a node by id.

        Raises:
            NodeNotFoundError: If no node has this id
        """
        node = self.tree.get_node(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def allowed_child_types(self, node_id: str) -> List[NodeType]:
        """Node types that may be added under a node, in display order."""
        return ordered_child_types(self.get_node(node_id).node_type)

    def permissions(self, node_id: str) -> Dict[str, bool]:
        """Which of add/edit/delete are offered for a node."""
        node = self.get_node(node_id)
        return {"add": can_add_child(node), "edit": can_edit(node), "delete": can_delete(node)}

    def select_node(self, node_id: str, session: EditorSession) -> List[NodeType]:
        """
        Select a node in the session and compute the allowed child types.

        Returns:
            Allowed child types of the selected node
        """
        with _recording(session):
            allowed = self.allowed_child_types(node_id)
        session.selected_id = node_id
        session.allowed_child_types = allowed
        session.clear_errors()
        return allowed

    def suggest_new_node_fields(self, parent_id: str, node_type: Union[NodeType, str]) -> Dict[str, Any]:
        """
        Pre-filled values for a new child of ``parent_id``.

        Raises:
            NodeNotFoundError: If the parent does not exist
            StructuralConstraintError: If the type is not allowed under the parent
        """
        parent = self.get_node(parent_id)
        node_type = self._check_child_type(parent, node_type)
        return suggest_fields(parent, node_type)

    def summary(self) -> Dict[str, Any]:
        """Summary statistics of the current tree."""
        return self.tree.get_statistics()

    # =========================================================================
    # Mutations
    # =========================================================================

    @log_calls()
    def add_node(
        self,
        parent_id: str,
        node_type: Union[NodeType, str],
        fields: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[EditorSession] = None,
    ) -> DecisionTree:
        """
        Add a new child node.

        Args:
            parent_id: Id of the parent node
            node_type: Type of the new node
            fields: Raw name/probability/cost/time values
            session: Session to record errors and advisories on

        Returns:
            The updated tree

        Raises:
            NodeNotFoundError: If the parent does not exist
            StructuralConstraintError: If the type is not allowed under the parent
            FieldRangeError: If any field value is out of range
        """
        with _recording(session):
            parent = self.get_node(parent_id)
            node_type = self._check_child_type(parent, node_type)
            node = build_node(node_type, fields or {})

        while node.id in self.tree:
            node.id = generate_node_id()

        parent.children.append(node)
        self.tree.reindex()
        logger.info("Added %s node %s under %s", node_type.value, node.id, parent_id)
        return self._finish(session)

    @log_calls()
    def edit_node(
        self,
        node_id: str,
        fields: Mapping[str, Any],
        *,
        session: Optional[EditorSession] = None,
    ) -> DecisionTree:
        """
        Overwrite the name, probability, cost and time of a node.

        Fields missing from ``fields`` keep their value. The id and node type
        never change, and type-forced values are reapplied.

        Raises:
            NodeNotFoundError: If the node does not exist
            FieldRangeError: If any field value is out of range
        """
        with _recording(session):
            node = self.get_node(node_id)
            resolved = resolve_edit_fields(node, fields)

        node.name = resolved.name
        node.probability = resolved.probability
        node.cost = resolved.cost
        node.time = resolved.time
        logger.info("Edited node %s", node_id)
        return self._finish(session)

    @log_calls()
    def delete_node(self, node_id: str, *, session: Optional[EditorSession] = None) -> DecisionTree:
        """
        Delete a node together with its whole subtree.

        Raises:
            NodeNotFoundError: If the node does not exist
            StructuralConstraintError: If the node is the start node
        """
        with _recording(session):
            node = self.get_node(node_id)
            if not can_delete(node):
                raise StructuralConstraintError("Cannot delete start node", node_id=node_id)
            parent = self.tree.get_parent(node_id)
            if parent is None:
                raise NodeNotFoundError(node_id)

        parent.children = [child for child in parent.children if child.id != node_id]
        self.tree.reindex()
        logger.info("Deleted node %s and its subtree", node_id)
        return self._finish(session)

    @log_calls()
    def normalize_children(self, node_id: str, *, session: Optional[EditorSession] = None) -> DecisionTree:
        """
        Scale a node's children probabilities so they sum to 1.

        Only runs when explicitly requested; propagation never normalizes.

        Raises:
            NodeNotFoundError: If the node does not exist
            StructuralConstraintError: If the group is empty, sums to 0 or
                contains a decision node
        """
        with _recording(session):
            node = self.get_node(node_id)
            if not node.children:
                raise StructuralConstraintError(f"Node '{node.name}' has no children to normalize", node_id=node_id)
            if any(child.node_type == NodeType.DECISION for child in node.children):
                raise StructuralConstraintError(
                    f"Children of '{node.name}' include a decision node, whose probability is fixed at 1",
                    node_id=node_id,
                )
            total = sum(child.probability for child in node.children)
            if total <= 0:
                raise StructuralConstraintError(
                    f"Children of '{node.name}' have zero total probability", node_id=node_id
                )

        for child in node.children:
            child.probability = child.probability / total
        logger.info("Normalized %d child probabilities of %s (sum was %g)", len(node.children), node_id, total)
        return self._finish(session)

    # =========================================================================
    # Whole-tree replacement
    # =========================================================================

    @log_calls()
    def reset_tree(self, *, session: Optional[EditorSession] = None) -> DecisionTree:
        """Discard the tree and start over with a single start node."""
        return self._replace(DecisionTree.default(), session)

    @log_calls()
    def load_sample(self, name: str, *, session: Optional[EditorSession] = None) -> DecisionTree:
        """
        Replace the tree with a built-in sample.

        Raises:
            KeyError: If the sample does not exist
        """
        with _recording(session):
            tree = self.samples.get_by_name(name)
        return self._replace(tree, session)

    @log_calls()
    def import_document(
        self,
        source: Union[str, Path, Mapping[str, Any]],
        *,
        session: Optional[EditorSession] = None,
    ) -> DecisionTree:
        """
        Replace the tree with an imported document.

        Args:
            source: Path to a JSON/YAML document, or an already decoded document

        Raises:
            TreeDocumentError: If the document is malformed; the current tree
                is left untouched
        """
        with _recording(session):
            if isinstance(source, Mapping):
                tree = parse_tree_document(dict(source), source="<document>")
            else:
                tree = load_tree_document(source)
        return self._replace(tree, session)

    def export_document(self, path: Union[str, Path] = DEFAULT_EXPORT_NAME, fmt: Optional[str] = None) -> str:
        """Write the current tree, derived fields included, to ``path``."""
        return save_tree_document(self.tree, path, fmt)

    # =========================================================================
    # Internals
    # =========================================================================

    def _check_child_type(self, parent: DecisionNode, node_type: Union[NodeType, str]) -> NodeType:
        try:
            node_type = NodeType(node_type)
        except ValueError:
            raise StructuralConstraintError(f"Unknown node type '{node_type}'", node_id=parent.id) from None
        if node_type not in allowed_child_types(parent.node_type):
            raise StructuralConstraintError(
                f"A {parent.node_type.value} node cannot have children of type '{node_type.value}'",
                node_id=parent.id,
            )
        return node_type

    def _replace(self, tree: DecisionTree, session: Optional[EditorSession]) -> DecisionTree:
        self.tree = tree
        if session is not None:
            session.reset()
        return self._finish(session)

    def _finish(self, session: Optional[EditorSession]) -> DecisionTree:
        self.last_report = propagate(self.tree)
        if session is not None:
            session.clear_errors()
            session.clear_selection()
            if self.last_report.needs_attention:
                session.raise_advisory()
        return self.tree


__all__ = ["TreeEditor"]
