"""Pydantic v2 schemas for stored results and their grouped display views."""

from typing import Literal

from pydantic import BaseModel


class ResultRecord(BaseModel):
    """One stored result; ``is_bond`` is only present for measures."""

    id: str | None
    type: Literal["candidate", "measure"]
    contest_name: str
    choice_name: str
    votes: int
    percentage: float
    is_bond: bool | None = None


class ResultsResponse(BaseModel):
    total: int
    results: list[ResultRecord]


class MeasureSchema(BaseModel):
    model_config = {"from_attributes": True}

    name: str
    description: str
    yes_votes_display: str
    no_votes_display: str


class MeasureGroupSchema(BaseModel):
    model_config = {"from_attributes": True}

    title: str
    measures: list[MeasureSchema]


class CandidateSchema(BaseModel):
    model_config = {"from_attributes": True}

    name: str
    position: int
    votes_display: str
    percentage_display: str


class RaceSchema(BaseModel):
    model_config = {"from_attributes": True}

    title: str
    candidates: list[CandidateSchema]


class MeasureGroupsResponse(BaseModel):
    county_id: str
    groups: list[MeasureGroupSchema]


class RacesResponse(BaseModel):
    county_id: str
    races: list[RaceSchema]


class CleanupResponse(BaseModel):
    deleted: list[str]
    skipped: list[str]
    message: str
