"""Unit tests for the job filter builder (no database involved)."""

import re

import pytest

from app.core.errors import ValidationError
from app.services.filter_builder import (
    SearchCriteria, all_of, build_filter, job_type_in, keyword_match,
    location_match, owner_listing_query, parse_job_types, public_search_query,
    salary_overlap
)


def regex_of(clause):
    return clause["$regex"]


class TestKeywordMatch:
    def test_matches_title_description_or_requirements(self):
        clause = keyword_match("python")
        fields = [list(c.keys())[0] for c in clause["$or"]]
        assert fields == ["title", "description", "requirements"]
        for c in clause["$or"]:
            assert list(c.values())[0] == {"$regex": "python", "$options": "i"}

    def test_metacharacters_are_literal(self):
        clause = keyword_match("C++ (backend)")
        pattern = regex_of(clause["$or"][0]["title"])
        assert re.search(pattern, "Senior C++ (backend) engineer", re.IGNORECASE)
        assert not re.search(pattern, "C (backend) engineer", re.IGNORECASE)

    def test_dot_is_not_a_wildcard(self):
        pattern = regex_of(keyword_match("C.")["$or"][0]["title"])
        assert not re.search(pattern, "C engineer", re.IGNORECASE)
        assert re.search(pattern, "Objective-C. engineer", re.IGNORECASE)

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_blank_keyword_adds_nothing(self, blank):
        assert keyword_match(blank) == {}


class TestLocationMatch:
    def test_case_insensitive_escaped(self):
        assert location_match("New York (NY)") == {
            "location": {"$regex": re.escape("New York (NY)"), "$options": "i"}
        }

    def test_blank_location_adds_nothing(self):
        assert location_match("  ") == {}


class TestJobType:
    def test_single_type_is_equality(self):
        assert job_type_in("remote") == {"job_type": "remote"}

    def test_comma_list_is_set_membership(self):
        assert job_type_in("remote, contract") == {"job_type": {"$in": ["remote", "contract"]}}

    def test_list_input_and_duplicates(self):
        assert parse_job_types(["Remote", "remote", "", "internship"]) == ["remote", "internship"]

    def test_empty_entries_only(self):
        assert job_type_in(" , ") == {}

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            job_type_in("remote,freelance")


class TestSalaryOverlap:
    def test_no_bounds(self):
        assert salary_overlap(None, None) == {}

    def test_only_min_checks_upper_bound_first(self):
        clause = salary_overlap(60000, None)
        assert {"salary_max": {"$gte": 60000}} in clause["$or"]
        assert {"salary_max": None, "salary_min": {"$gte": 60000}} in clause["$or"]

    def test_only_max_checks_lower_bound_first(self):
        clause = salary_overlap(None, 55000)
        assert {"salary_min": {"$lte": 55000}} in clause["$or"]
        assert {"salary_min": None, "salary_max": {"$lte": 55000}} in clause["$or"]

    def test_both_bounds_interval_intersection(self):
        clause = salary_overlap(40000, 55000)
        low, high, has_any = clause["$and"]
        assert {"salary_min": {"$lte": 55000}} in low["$or"]
        assert {"salary_max": {"$gte": 40000}} in high["$or"]
        assert len(has_any["$or"]) == 2

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            salary_overlap(70000, 50000)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            salary_overlap(-1, None)


class TestCombination:
    def test_all_of_drops_empty_clauses(self):
        assert all_of({}, {"a": 1}, {}) == {"a": 1}
        assert all_of({}, {}) == {}
        assert all_of({"a": 1}, {"b": 2}) == {"$and": [{"a": 1}, {"b": 2}]}

    def test_build_filter_without_criteria(self):
        assert build_filter(None) == {}
        assert build_filter(SearchCriteria()) == {}

    def test_build_filter_ands_every_criterion(self):
        query = build_filter({"keyword": "api", "location": "berlin", "job_type": "remote", "salary_min": 1})
        assert len(query["$and"]) == 4

    def test_bad_criteria_type_rejected(self):
        with pytest.raises(ValidationError):
            build_filter({"salary_min": "lots"})


class TestQueryConstructors:
    def test_public_search_always_hides_closed(self):
        assert public_search_query() == {"is_closed": False}
        query = public_search_query({"keyword": "python"})
        assert {"is_closed": False} in query["$and"]

    @pytest.mark.parametrize("status, expected", [
        ("open", {"is_closed": False}),
        ("closed", {"is_closed": True}),
    ])
    def test_owner_listing_status_selector(self, status, expected):
        query = owner_listing_query("owner-1", None, status)
        assert query == {"$and": [{"company": "owner-1"}, expected]}

    def test_owner_listing_all_includes_closed(self):
        assert owner_listing_query("owner-1") == {"company": "owner-1"}
        assert owner_listing_query("owner-1", None, None) == {"company": "owner-1"}

    def test_owner_listing_invalid_status(self):
        with pytest.raises(ValidationError):
            owner_listing_query("owner-1", None, "archived")
