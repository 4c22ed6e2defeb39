"""Free-text cell coercion and display formatting.

Upstream feeds routinely carry blank or placeholder cells ("NA", "-", "*"),
so parsing never raises: anything that is not a clean number becomes zero.
"""

import math
import re

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_vote_count(text: str | None) -> int:
    """Parse a vote-count cell as a base-10 integer.

    Negative values are returned as parsed.

    Args:
        text: Raw cell text.

    Returns:
        The parsed integer, or 0 when the text is not an integer.
    """
    if text is None:
        return 0
    value = text.strip()
    if not _INTEGER_RE.fullmatch(value):
        return 0
    return int(value)


def parse_percentage(text: str | None) -> float:
    """Parse a percentage cell, accepting an optional trailing ``%``.

    Args:
        text: Raw cell text (e.g. ``"55%"``, ``" 12.5 "``).

    Returns:
        The parsed value, or 0.0 when the text is not a finite decimal.
    """
    if text is None:
        return 0.0
    value = text.strip().removesuffix("%").strip()
    if not _DECIMAL_RE.fullmatch(value):
        return 0.0
    result = float(value)
    if not math.isfinite(result):
        return 0.0
    return result


def format_vote_count(votes: int) -> str:
    """Render a vote count for display; 0 means "not reported" and renders as ``NA``."""
    if votes == 0:
        return "NA"
    return str(votes)


def format_percentage(percentage: float) -> str:
    """Render a percentage with one decimal place (``0%`` for zero)."""
    if percentage == 0:
        return "0%"
    return f"{percentage:.1f}%"
