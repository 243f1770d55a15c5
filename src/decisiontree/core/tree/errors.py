"""
Errors raised when a tree edit is rejected.

Every rejection happens before the tree is touched, so catching one of these
always means the tree is unchanged. Probability groups that do not sum to 1
are not errors; they are reported by the propagation pass instead.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class FieldViolation(BaseModel):
    """One out-of-range or unparsable field value."""

    field: str
    value: Any = None
    message: str


class TreeEditError(RuntimeError):
    """Base class for rejected tree edits."""

    kind = "edit_rejected"

    def __init__(self, message: str, *, node_id: Optional[str] = None):
        self.message = message
        self.node_id = node_id
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form of the failure for callers that render it."""
        return {"kind": self.kind, "message": self.message, "node_id": self.node_id}


class NodeNotFoundError(TreeEditError):
    """The requested node id does not exist in the tree."""

    kind = "node_not_found"

    def __init__(self, node_id: str):
        super().__init__(f"Node '{node_id}' not found", node_id=node_id)


class StructuralConstraintError(TreeEditError):
    """The edit would break the node-type adjacency rules or remove the start node."""

    kind = "structural_constraint"


class FieldRangeError(TreeEditError):
    """One or more field values are out of range; all of them are reported."""

    kind = "field_range"

    def __init__(self, violations: List[FieldViolation], *, node_id: Optional[str] = None):
        self.violations = list(violations)
        message = " ".join(v.message for v in self.violations)
        super().__init__(message, node_id=node_id)

    @property
    def fields(self) -> List[str]:
        return [v.field for v in self.violations]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["violations"] = [v.model_dump() for v in self.violations]
        return data


__all__ = [
    "FieldRangeError",
    "FieldViolation",
    "NodeNotFoundError",
    "StructuralConstraintError",
    "TreeEditError",
]
