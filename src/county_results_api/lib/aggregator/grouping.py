"""Group stored results into contest-keyed display groups.

Contest titles are grouping keys as-is: no trimming or case folding, so
titles that differ only by whitespace or casing form separate groups.
Groups and their members keep first-seen input order.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from county_results_api.lib.results_parser.coercion import format_percentage, format_vote_count
from county_results_api.lib.results_store.types import ClassifiedResult

NOT_AVAILABLE = "NA"


@dataclass
class Measure:
    """One choice row of a ballot measure, rendered for display."""

    name: str
    description: str = ""
    yes_votes_display: str = NOT_AVAILABLE
    no_votes_display: str = NOT_AVAILABLE


@dataclass
class MeasureGroup:
    title: str
    measures: list[Measure] = field(default_factory=list)


@dataclass
class Candidate:
    """One candidate in a race; ``position`` is the 1-based order within the race."""

    name: str
    position: int
    votes_display: str
    percentage_display: str


@dataclass
class Race:
    title: str
    candidates: list[Candidate] = field(default_factory=list)


def _measure_from_result(result: ClassifiedResult) -> Measure:
    choice = result.choice_name.strip().lower()
    measure = Measure(name=result.choice_name)
    if choice == "yes":
        measure.yes_votes_display = format_vote_count(result.votes)
    elif choice == "no":
        measure.no_votes_display = format_vote_count(result.votes)
    return measure


def group_measures(results: Iterable[ClassifiedResult]) -> list[MeasureGroup]:
    """Group measure results by contest title.

    Each result becomes one Measure. A "Yes" row fills ``yes_votes_display``
    and a "No" row fills ``no_votes_display``; the other side (and both
    sides for any other choice name) render as ``NA``.

    Args:
        results: Measure results, in query order.

    Returns:
        Measure groups in first-seen title order.
    """
    groups: dict[str, MeasureGroup] = {}
    for result in results:
        group = groups.get(result.contest_name)
        if group is None:
            group = groups[result.contest_name] = MeasureGroup(title=result.contest_name)
        group.measures.append(_measure_from_result(result))
    return list(groups.values())


def group_candidates(results: Iterable[ClassifiedResult]) -> list[Race]:
    """Group candidate results into races by contest title.

    Args:
        results: Candidate results, in query order.

    Returns:
        Races in first-seen title order, candidates in input order.
    """
    races: dict[str, Race] = {}
    for result in results:
        race = races.get(result.contest_name)
        if race is None:
            race = races[result.contest_name] = Race(title=result.contest_name)
        race.candidates.append(
            Candidate(
                name=result.choice_name,
                position=len(race.candidates) + 1,
                votes_display=format_vote_count(result.votes),
                percentage_display=format_percentage(result.percentage),
            )
        )
    return list(races.values())
