"""Pydantic v2 schemas for parse endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

from county_results_api.schemas.county_link import CountyLinkCreateRequest
from county_results_api.schemas.results import MeasureGroupSchema, RaceSchema

# --- Request schemas ---


class ParseRequest(CountyLinkCreateRequest):
    """Parse an arbitrary source without storing a county link.

    ``result_type`` is only used by the parse-and-format endpoint.
    """

    result_type: Literal["measures", "candidates"] | None = None


class DirectBulkParseRequest(BaseModel):
    requests: list[CountyLinkCreateRequest] = Field(min_length=1)


# --- Response schemas ---


class ParseSummaryResponse(BaseModel):
    """Counters for one completed parse."""

    model_config = {"from_attributes": True}

    county_id: str
    url: str
    files_processed: int
    files_skipped: int
    rows_read: int
    rows_saved: int
    rows_failed: int


class BulkParseSummary(BaseModel):
    """Outcome of parsing every county configured for one method.

    Attributes:
        method: Parse method that was run.
        total_counties: Number of county links considered.
        processed: Counties whose method matched and were attempted.
        successful: Counties parsed without error.
        failed: One message per failed county ("County <name>: <error>").
    """

    method: str
    total_counties: int = 0
    processed: int = 0
    successful: int = 0
    failed: list[str] = Field(default_factory=list)


class DirectParseResult(BaseModel):
    county_name: str
    success: bool
    error: str | None = None


class DirectBulkParseResponse(BaseModel):
    results: list[DirectParseResult]
    total: int
    successful: int


class FormattedParseResponse(BaseModel):
    """Parse result plus the grouped view of the requested result type."""

    summary: ParseSummaryResponse
    result_type: Literal["measures", "candidates"]
    measure_groups: list[MeasureGroupSchema] | None = None
    races: list[RaceSchema] | None = None
