"""Sample Repository: Access to the built-in example trees."""

from __future__ import annotations

import os
from typing import Dict, List, Optional

from decisiontree.core.tree.models import DecisionTree
from decisiontree.io.tree_document import load_tree_document

SAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "kb", "samples")

# name -> display title
BUILTIN_SAMPLES: Dict[str, str] = {
    "expert_alone": "Expert-Alone Tree",
    "ai_delegate": "AI-Delegate Tree",
}


class SampleRepository:
    """Repository for the fixed set of named built-in sample documents."""

    def __init__(self, samples_dir: Optional[str] = None, samples: Optional[Dict[str, str]] = None):
        """
        Initialize sample repository.

        Args:
            samples_dir: Folder holding ``<name>.yaml`` documents
            samples: Mapping of sample name to display title
        """
        self.samples_dir = samples_dir or SAMPLES_DIR
        self.samples = dict(samples if samples is not None else BUILTIN_SAMPLES)

    def list_all(self) -> List[str]:
        """
        List all sample names.

        Returns:
            List of sample names
        """
        return list(self.samples)

    def exists(self, name: str) -> bool:
        """
        Check if a sample exists.

        Args:
            name: Sample name

        Returns:
            True if the sample is known
        """
        return name in self.samples

    def get_title(self, name: str) -> str:
        """
        Get the display title of a sample.

        Raises:
            KeyError: If sample not found
        """
        if name not in self.samples:
            raise KeyError(f"Sample '{name}' not found")
        return self.samples[name]

    def get_path(self, name: str) -> str:
        """
        Get the document path of a sample.

        Raises:
            KeyError: If sample not found
        """
        self.get_title(name)
        return os.path.join(self.samples_dir, f"{name}.yaml")

    def get_by_name(self, name: str) -> DecisionTree:
        """
        Load a fresh, propagated copy of a sample tree.

        Args:
            name: Sample name

        Returns:
            DecisionTree

        Raises:
            KeyError: If sample not found
            TreeDocumentError: If the sample document is invalid
        """
        return load_tree_document(self.get_path(name))


__all__ = ["BUILTIN_SAMPLES", "SAMPLES_DIR", "SampleRepository"]
