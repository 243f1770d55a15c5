"""Shared error message formatting utilities."""

from typing import Iterable, List, Optional

# Canonical field messages - import these instead of duplicating
FIELD_RANGE_MESSAGES = {
    "probability": "The value of probability must be between 0 and 1.",
    "cost": "The value of cost must be greater than or equal to 0.",
    "time": "The value of time must be greater than or equal to 0.",
}

PROBABILITY_ADVISORY = (
    "The probability of the children of a node should sum to 1. "
    "Fix the highlighted probabilities to compute the expected cost."
)


def format_probability_error() -> str:
    return FIELD_RANGE_MESSAGES["probability"]


def format_cost_error() -> str:
    return FIELD_RANGE_MESSAGES["cost"]


def format_time_error() -> str:
    return FIELD_RANGE_MESSAGES["time"]


def format_not_a_number(field: str) -> str:
    """Message for a field value that could not be parsed."""
    return f"The value of {field} must be a number."


def format_expected_cost(value: Optional[float], *, precision: int = 2) -> str:
    """
    Format an expected cost for display.

    Args:
        value: Expected cost, or None when unavailable
        precision: Number of decimals to show

    Returns:
        Formatted string like "15.00" or "not available"
    """
    if value is None:
        return "not available"
    return f"{value:.{precision}f}"


def format_group_sum(parent_name: str, probabilities: Iterable[float]) -> str:
    """
    Format a sibling group whose probabilities do not sum to 1.

    Returns:
        Formatted message like "Decide: 0.5 + 0.6 = 1.1 (expected 1)"
    """
    values: List[float] = list(probabilities)
    terms = " + ".join(f"{p:g}" for p in values) or "0"
    return f"{parent_name}: {terms} = {sum(values):g} (expected 1)"
