"""
Helpers for coercing raw field values into numbers.

Raw values come from forms, CLI options and imported documents, so they can
be numbers, numeric strings, blanks or junk.
"""

from __future__ import annotations

import math
from typing import Any, Optional


class _Unparsable:
    """Marker for a value that was supplied but is not a number."""

    def __repr__(self) -> str:
        return "UNPARSABLE"


UNPARSABLE = _Unparsable()


def is_blank(value: Any) -> bool:
    """Check if a raw value counts as 'not supplied'."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a raw value into a finite float.

    Returns:
        The float, or None if the value is blank or cannot be parsed
    """
    result = coerce_number(value)
    return None if result is UNPARSABLE else result


def coerce_number(value: Any) -> Any:
    """
    Coerce a raw value into a float, keeping track of why it failed.

    Returns:
        A float; None when the value is blank; UNPARSABLE when a value was
        supplied but is not a finite number
    """
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return UNPARSABLE
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return UNPARSABLE
    if math.isnan(number) or math.isinf(number):
        return UNPARSABLE
    return number


__all__ = ["UNPARSABLE", "coerce_number", "is_blank", "parse_number"]
