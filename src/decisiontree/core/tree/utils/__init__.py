"""
Utility functions for the decision tree.

These are pure functions that don't require class state:
- value_helpers: Coerce raw field values into numbers
"""

from decisiontree.core.tree.utils.value_helpers import (
    UNPARSABLE,
    coerce_number,
    is_blank,
    parse_number,
)

__all__ = [
    "UNPARSABLE",
    "coerce_number",
    "is_blank",
    "parse_number",
]
