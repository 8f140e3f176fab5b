"""Tests for query parsing and result objects."""

import pytest

from bn_elimination.errors import ErrorKind, InconsistentEvidenceError
from bn_elimination.query import Evidence, Query, QueryResult, format_probability_query, parse_bool


class TestParseBool:
    @pytest.mark.parametrize("text", ["T", "true", "1", "Yes", " t "])
    def test_true(self, text):
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["F", "False", "0", "no"])
    def test_false(self, text):
        assert parse_bool(text) is False

    def test_garbage(self):
        with pytest.raises(ValueError):
            parse_bool("maybe")


class TestQuery:
    def test_parse(self):
        query = Query.parse("D:T", ["A:T", "B:f"])
        assert query.target == "D"
        assert query.value is True
        assert query.evidence == (Evidence("A", True), Evidence("B", False))

    def test_parse_requires_colon(self):
        with pytest.raises(ValueError):
            Query.parse("D")

    def test_pairs_become_evidence(self):
        query = Query("D", True, [("A", True)])
        assert query.evidence == (Evidence("A", True),)
        assert query.has_evidence
        assert query.labels == ["D", "A"]

    def test_str(self):
        assert str(Query("D", True)) == "P(D=T)"
        assert str(Query("D", True, [("A", True), ("B", False)])) == "P(D=T | A=T, B=F)"

    def test_format_mixes_bools_and_state_names(self):
        assert format_probability_query("S", True, {"Q": "F"}) == "P(S=T | Q=F)"


class TestQueryResult:
    def test_failure(self):
        exc = InconsistentEvidenceError("zero mass")
        result = QueryResult.failure(exc, ["A"])
        assert not result.ok
        assert result.error is ErrorKind.INCONSISTENT_EVIDENCE
        assert result.message == "zero mass"
        assert result.order == ["A"]
        with pytest.raises(InconsistentEvidenceError):
            result.raise_for_error()

    def test_success_passes_through(self):
        result = QueryResult(probability=0.5, order=[])
        assert result.raise_for_error() is result
