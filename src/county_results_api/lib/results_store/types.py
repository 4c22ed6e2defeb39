"""Persisted result record shared by the store implementations and the aggregator."""

from dataclasses import dataclass
from enum import StrEnum


class ResultType(StrEnum):
    """Derived classification of a parsed row."""

    CANDIDATE = "candidate"
    MEASURE = "measure"


@dataclass
class ClassifiedResult:
    """A parsed row tagged as a candidate or measure choice.

    ``is_bond`` is only meaningful for measures and is ``None`` for candidates.
    ``county_link`` refers back to the county the row was parsed for.
    """

    county_link: str
    type: ResultType
    contest_name: str
    choice_name: str
    votes: int
    percentage: float
    is_bond: bool | None = None
    id: str | None = None

    def to_dict(self) -> dict:
        """Flat JSON-ready shape; ``is_bond`` is omitted for candidates."""
        data = {
            "id": self.id,
            "type": str(self.type),
            "contest_name": self.contest_name,
            "choice_name": self.choice_name,
            "votes": self.votes,
            "percentage": self.percentage,
        }
        if self.type == ResultType.MEASURE:
            data["is_bond"] = bool(self.is_bond)
        return data
