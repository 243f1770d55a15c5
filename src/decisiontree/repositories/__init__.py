"""Repository Layer: Access to stored tree documents."""

from __future__ import annotations

from .sample_repository import BUILTIN_SAMPLES, SampleRepository

__all__ = [
    "BUILTIN_SAMPLES",
    "SampleRepository",
]
