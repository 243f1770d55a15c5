"""Editor Session: Caller-held state around a tree being edited."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from decisiontree.core.tree.errors import FieldRangeError, TreeEditError
from decisiontree.core.tree.models import NodeType


@dataclass
class EditorSession:
    """
    Transient state of one editing session.

    The session is never stored in the tree. The mutation service records
    rejections and probability advisories here; the presentation layer reads
    and clears them.
    """

    selected_id: Optional[str] = None
    allowed_child_types: List[NodeType] = field(default_factory=list)
    field_errors: Set[str] = field(default_factory=set)
    message: Optional[str] = None
    probability_advisory: bool = False

    def reset(self) -> None:
        """Restore the default state (used on reset, sample load and import)."""
        self.selected_id = None
        self.allowed_child_types = []
        self.clear_errors()
        self.probability_advisory = False

    def clear_errors(self) -> None:
        self.field_errors = set()
        self.message = None

    def clear_selection(self) -> None:
        self.selected_id = None
        self.allowed_child_types = []

    def record_failure(self, error: Exception) -> None:
        """Remember a rejected edit or import so it can be shown to the user."""
        self.message = error.message if isinstance(error, TreeEditError) else str(error)
        if isinstance(error, FieldRangeError):
            self.field_errors = set(error.fields)
        else:
            self.field_errors = set()

    def raise_advisory(self) -> None:
        self.probability_advisory = True

    def consume_advisory(self) -> bool:
        """Return the pending probability advisory and clear it."""
        pending = self.probability_advisory
        self.probability_advisory = False
        return pending


__all__ = ["EditorSession"]
