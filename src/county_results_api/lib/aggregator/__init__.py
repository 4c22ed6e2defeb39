"""Presentation aggregator: contest-keyed display groups for stored results.

Public API:
    - group_measures: Measure results → list[MeasureGroup]
    - group_candidates: Candidate results → list[Race]
    - MeasureGroup / Measure / Race / Candidate: Display dataclasses
"""

from county_results_api.lib.aggregator.grouping import (
    Candidate,
    Measure,
    MeasureGroup,
    Race,
    group_candidates,
    group_measures,
)

__all__ = [
    "Candidate",
    "Measure",
    "MeasureGroup",
    "Race",
    "group_candidates",
    "group_measures",
]
