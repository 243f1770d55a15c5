from __future__ import annotations

"""Shared document error utilities."""

import os
from typing import Iterable, List, Optional

from pydantic import ValidationError


class TreeDocumentError(RuntimeError):
    """Wraps tree document failures with source context."""

    def __init__(
        self,
        source: Optional[str],
        message: str,
        *,
        cause: Exception | None = None,
        problems: Optional[List[str]] = None,
    ):
        self.source = source
        self.message = message
        self.cause = cause
        self.problems = list(problems or [])
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = self.message
        if self.source:
            base = f"{base} ({self._relative_path(self.source)})"
        if isinstance(self.cause, ValidationError):
            detail = self._format_validation_errors(self.cause.errors())
            return f"{base}: {detail}"
        if self.problems:
            return f"{base}: {self._summarize(self.problems)}"
        if self.cause:
            return f"{base}: {self.cause}"
        return base

    @staticmethod
    def _relative_path(path: str) -> str:
        try:
            return os.path.relpath(path)
        except ValueError:  # pragma: no cover - different drive on Windows
            return path

    @staticmethod
    def _format_validation_errors(errors: Iterable[dict]) -> str:
        snippets = []
        for err in errors:
            loc = ".".join(str(entry) for entry in err.get("loc", [])) or "<root>"
            msg = err.get("msg") or err.get("type") or "validation error"
            snippets.append(f"{loc}: {msg}")
        return TreeDocumentError._summarize(snippets)

    @staticmethod
    def _summarize(items: List[str], limit: int = 3) -> str:
        shown = items[:limit]
        remaining = len(items) - len(shown)
        if remaining > 0:
            shown = shown + [f"... ({remaining} more)"]
        return "; ".join(shown)

    def __str__(self) -> str:
        return self._build_message()


__all__ = ["TreeDocumentError"]
