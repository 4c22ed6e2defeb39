"""Unit tests for the candidate / measure classifier."""

import pytest

from county_results_api.lib.results_parser.classifier import classify, classify_entry
from county_results_api.lib.results_parser.types import RawEntry
from county_results_api.lib.results_store.types import ResultType


class TestClassifyEntry:
    @pytest.mark.parametrize("choice", ["Yes", "YES", "yes", "No", "NO", "no"])
    def test_yes_no_choices_are_measures(self, choice):
        result_type, _ = classify_entry("Measure A", choice)
        assert result_type == ResultType.MEASURE

    @pytest.mark.parametrize("choice", ["Bonds Yes", "BOND - No", "Against the bond"])
    def test_choice_mentioning_bond_is_measure(self, choice):
        result_type, _ = classify_entry("Measure B", choice)
        assert result_type == ResultType.MEASURE

    @pytest.mark.parametrize("choice", ["Alice Smith", "Yesenia Ortiz", "Write-in", "", "Noah"])
    def test_other_choices_are_candidates(self, choice):
        assert classify_entry("Mayor", choice) == (ResultType.CANDIDATE, None)

    def test_choice_with_whitespace_is_not_trimmed(self):
        assert classify_entry("Measure C", " Yes ")[0] == ResultType.CANDIDATE

    @pytest.mark.parametrize("title", ["School Bond", "MEASURE J - BONDS", "water bond measure"])
    def test_bond_title_sets_is_bond(self, title):
        assert classify_entry(title, "Yes") == (ResultType.MEASURE, True)

    def test_non_bond_measure(self):
        assert classify_entry("Measure K - Parcel Tax", "No") == (ResultType.MEASURE, False)

    def test_candidate_named_yes_is_a_measure(self):
        # Known heuristic limitation.
        assert classify_entry("City Council", "Yes")[0] == ResultType.MEASURE


class TestClassify:
    def test_builds_classified_result(self):
        entry = RawEntry(
            county_id="marin",
            title="School Bond",
            choice_name="Yes",
            votes=800,
            percentage=0.0,
        )
        result = classify(entry)
        assert result.county_link == "marin"
        assert result.type == ResultType.MEASURE
        assert result.is_bond is True
        assert result.contest_name == "School Bond"
        assert result.votes == 800

    def test_candidate_has_no_bond_flag(self):
        entry = RawEntry(county_id="marin", title="Mayor", choice_name="Alice", votes=1000, percentage=55.0)
        result = classify(entry)
        assert result.type == ResultType.CANDIDATE
        assert result.is_bond is None
        assert "is_bond" not in result.to_dict()
