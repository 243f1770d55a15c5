"""Service Layer: Business logic and orchestration."""

from __future__ import annotations

from .mutation_service import TreeEditor
from .session import EditorSession
from .validation_service import ValidationService

__all__ = [
    "EditorSession",
    "TreeEditor",
    "ValidationService",
]
