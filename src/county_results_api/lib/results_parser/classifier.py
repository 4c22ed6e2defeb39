"""Candidate vs. ballot-measure classification of parsed rows.

The rule is a fixed heuristic over the contest title and choice name:

  1. choice is "yes" / "no", or mentions "bond" → measure
  2. anything else → candidate

A measure is a bond measure when its contest title mentions "bond".
A candidate literally named "Yes" is classified as a measure; that is a
known limitation of the heuristic.
"""

from county_results_api.lib.results_parser.types import RawEntry
from county_results_api.lib.results_store.types import ClassifiedResult, ResultType

_MEASURE_CHOICES = frozenset({"yes", "no"})


def _mentions_bond(text: str) -> bool:
    # "bonds" contains "bond"
    return "bond" in text


def classify_entry(title: str, choice_name: str) -> tuple[ResultType, bool | None]:
    """Classify a row by its contest title and choice name.

    Args:
        title: Contest title.
        choice_name: Choice (candidate or option) name.

    Returns:
        ``(type, is_bond)`` where ``is_bond`` is None for candidates.
    """
    choice_lower = choice_name.lower()
    if choice_lower in _MEASURE_CHOICES or _mentions_bond(choice_lower):
        return ResultType.MEASURE, _mentions_bond(title.lower())
    return ResultType.CANDIDATE, None


def classify(entry: RawEntry) -> ClassifiedResult:
    """Build the persisted result for a raw entry."""
    result_type, is_bond = classify_entry(entry.title, entry.choice_name)
    return ClassifiedResult(
        county_link=entry.county_id,
        type=result_type,
        contest_name=entry.title,
        choice_name=entry.choice_name,
        votes=entry.votes,
        percentage=entry.percentage,
        is_bond=is_bond,
    )
