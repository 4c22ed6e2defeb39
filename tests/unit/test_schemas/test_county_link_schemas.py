"""Unit tests for county link and parse request schemas."""

import pytest
from pydantic import ValidationError

from county_results_api.schemas.county_link import (
    BulkCountyLinkRequest,
    CountyLinkCreateRequest,
    CountyLinkUpdateRequest,
)
from county_results_api.schemas.parsing import ParseRequest
from county_results_api.schemas.results import ResultRecord


class TestCountyLinkCreateRequest:
    def test_valid(self):
        req = CountyLinkCreateRequest(county_name=" Marin ", link="https://example.gov/r.zip", parse_method="zip")
        assert req.county_name == "Marin"
        assert req.parse_method == "zip"
        assert type(req.parse_method) is str

    @pytest.mark.parametrize("method", ["pdf", "ZIP", ""])
    def test_unknown_parse_method_rejected(self, method):
        with pytest.raises(ValidationError, match="invalid parse method"):
            CountyLinkCreateRequest(county_name="Marin", link="https://example.gov", parse_method=method)

    @pytest.mark.parametrize("field", ["county_name", "link"])
    def test_blank_fields_rejected(self, field):
        data = {"county_name": "Marin", "link": "https://example.gov", "parse_method": "zip"}
        data[field] = "   "
        with pytest.raises(ValidationError):
            CountyLinkCreateRequest(**data)

    def test_missing_fields_rejected(self):
        with pytest.raises(ValidationError):
            CountyLinkCreateRequest(county_name="Marin", parse_method="zip")


class TestCountyLinkUpdateRequest:
    def test_partial(self):
        req = CountyLinkUpdateRequest(parse_method="html")
        assert req.model_dump(exclude_unset=True) == {"parse_method": "html"}

    def test_invalid_method(self):
        with pytest.raises(ValidationError):
            CountyLinkUpdateRequest(parse_method="ftp")


class TestBulkAndParseRequests:
    def test_bulk_rejects_when_any_link_invalid(self):
        with pytest.raises(ValidationError):
            BulkCountyLinkRequest(
                links=[
                    {"county_name": "Marin", "link": "https://a.gov", "parse_method": "zip"},
                    {"county_name": "Napa", "link": "https://b.gov", "parse_method": "bogus"},
                ]
            )

    def test_bulk_requires_links(self):
        with pytest.raises(ValidationError):
            BulkCountyLinkRequest(links=[])

    def test_parse_request_result_type(self):
        req = ParseRequest(county_name="Marin", link="https://a.gov", parse_method="zip", result_type="measures")
        assert req.result_type == "measures"
        with pytest.raises(ValidationError):
            ParseRequest(county_name="Marin", link="https://a.gov", parse_method="zip", result_type="races")


class TestResultRecord:
    def test_excludes_bond_flag_for_candidates(self):
        record = ResultRecord(
            id="1", type="candidate", contest_name="Mayor", choice_name="Alice", votes=1, percentage=1.0
        )
        assert "is_bond" not in record.model_dump(exclude_none=True)
