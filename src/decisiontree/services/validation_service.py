"""Validation Service: Checks trees and tree documents for consistency."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

from decisiontree.core.tree.constraints import find_structural_violations
from decisiontree.core.tree.models import DecisionTree
from decisiontree.core.tree.propagation import propagate
from decisiontree.io.errors import TreeDocumentError
from decisiontree.io.tree_document import load_tree_document
from decisiontree.utils.error_formatting import format_group_sum


class ValidationService:
    """
    Service for validating decision trees without raising.

    Structural problems make a tree unusable; probability groups that do not
    sum to 1 are reported separately as warnings since the tree can still be
    edited.
    """

    def validate_tree(self, tree: DecisionTree) -> List[str]:
        """
        Validate the structural invariants of a tree.

        Args:
            tree: Tree to check

        Returns:
            List of validation error messages (empty if valid)
        """
        return find_structural_violations(tree.root)

    def probability_warnings(self, tree: DecisionTree) -> List[str]:
        """
        Describe every sibling group whose probabilities do not sum to 1.

        Args:
            tree: Tree to check (propagated in place first)

        Returns:
            List of warning messages
        """
        report = propagate(tree)
        warnings = []
        for node_id in report.invalid_groups:
            node = tree.get_node(node_id)
            if node is None:
                continue
            warnings.append(format_group_sum(node.name, [child.probability for child in node.children]))
        return warnings

    def validate_document(self, path: Union[str, Path]) -> List[str]:
        """
        Validate a tree document on disk.

        Args:
            path: JSON or YAML document path

        Returns:
            List of validation error messages
        """
        try:
            tree = load_tree_document(path)
        except TreeDocumentError as exc:
            return exc.problems or [str(exc)]
        return self.validate_tree(tree)

    def get_validation_summary(self, tree: DecisionTree) -> Dict[str, Any]:
        """
        Get a summary of the validation state of a tree.

        Returns:
            Dict with validation statistics
        """
        errors = self.validate_tree(tree)
        warnings = self.probability_warnings(tree)

        return {
            "valid": len(errors) == 0,
            "error_count": len(errors),
            "errors": errors,
            "warning_count": len(warnings),
            "warnings": warnings,
            "node_count": len(tree),
            "expected_cost": tree.root.expected_cost,
        }


__all__ = ["ValidationService"]
