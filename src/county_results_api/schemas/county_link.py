"""Pydantic v2 schemas for county link administration endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from county_results_api.lib.results_parser.types import validate_parse_method

# --- Request schemas ---


class CountyLinkCreateRequest(BaseModel):
    """Request body for registering a county data source."""

    county_name: str = Field(min_length=1, max_length=200)
    link: str = Field(min_length=1)
    parse_method: str = Field(description="Ingestion strategy: 'zip' or 'html'")

    @field_validator("county_name", "link")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "must not be blank"
            raise ValueError(msg)
        return v

    @field_validator("parse_method")
    @classmethod
    def _known_method(cls, v: str) -> str:
        return str(validate_parse_method(v))


class CountyLinkUpdateRequest(BaseModel):
    """Request body for updating a county link (partial update)."""

    county_name: str | None = Field(default=None, min_length=1, max_length=200)
    link: str | None = Field(default=None, min_length=1)
    parse_method: str | None = None

    @field_validator("parse_method")
    @classmethod
    def _known_method(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return str(validate_parse_method(v))


class BulkCountyLinkRequest(BaseModel):
    """Request body for saving many county links at once."""

    links: list[CountyLinkCreateRequest] = Field(min_length=1)


# --- Response schemas ---


class CountyLinkResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: uuid.UUID
    county_name: str
    link: str
    parse_method: str
    created_at: datetime
    updated_at: datetime


class CountyLinkListResponse(BaseModel):
    items: list[CountyLinkResponse]
    total: int


class BulkSaveResponse(BaseModel):
    """Outcome of a bulk save; failed links are reported in ``errors``."""

    total_submitted: int
    saved_count: int
    errors: list[str] = Field(default_factory=list)
