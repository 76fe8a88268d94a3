"""
Job Filter Builder

Translates optional search criteria into a MongoDB filter document.
Pure construction - no I/O - so every rule is testable without a database.

Combinators:
- keyword_match   : title OR description OR requirements contains keyword
- location_match  : location contains text
- job_type_in     : one type -> equality, several -> $in
- salary_overlap  : job salary range intersects the requested range
- all_of          : AND of the non-empty clauses

Query constructors:
- public_search_query : open jobs only, always
- owner_listing_query : one employer's jobs, open/closed/all selector

User text is passed through re.escape before it becomes a $regex, so
"C++ (backend)" matches literally and "." never acts as a wildcard.
"""

import re
from typing import List, Optional, Union

from pydantic import BaseModel

from app.core.errors import ValidationError
from app.schemas.schemas import JobStatusFilter, JobType
from app.services.mongo_service import validate_model

KEYWORD_FIELDS = ("title", "description", "requirements")
JOB_TYPES = {t.value for t in JobType}


class SearchCriteria(BaseModel):
    keyword: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[Union[str, List[str]]] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None


def _contains(text: Optional[str]) -> Optional[dict]:
    """Case-insensitive literal substring pattern, or None for blank input."""
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    return {"$regex": re.escape(text), "$options": "i"}


def keyword_match(keyword: Optional[str]) -> dict:
    pattern = _contains(keyword)
    if pattern is None:
        return {}
    return {"$or": [{field: pattern} for field in KEYWORD_FIELDS]}


def location_match(location: Optional[str]) -> dict:
    pattern = _contains(location)
    if pattern is None:
        return {}
    return {"location": pattern}


def parse_job_types(job_type: Union[str, List[str], None]) -> List[str]:
    """
    Accept "remote", "remote,contract" or ["remote", "contract"].
    Blank entries are dropped, duplicates collapsed, unknown types rejected.
    """
    if job_type is None:
        return []
    raw = job_type.split(",") if isinstance(job_type, str) else list(job_type)

    types = []
    for value in raw:
        value = value.strip().lower()
        if not value:
            continue
        if value not in JOB_TYPES:
            raise ValidationError(f"Invalid job type '{value}'")
        if value not in types:
            types.append(value)
    return types


def job_type_in(job_type: Union[str, List[str], None]) -> dict:
    types = parse_job_types(job_type)
    if not types:
        return {}
    if len(types) == 1:
        return {"job_type": types[0]}
    return {"job_type": {"$in": types}}


def salary_overlap(req_min: Optional[float], req_max: Optional[float]) -> dict:
    """
    Match jobs whose [salary_min, salary_max] range overlaps [req_min, req_max].

    A job bound that is missing counts as unbounded on that side, but a job
    with no salary data at all never matches a salary-filtered search.
    """
    if req_min is not None and req_min < 0:
        raise ValidationError("salary_min must be non-negative")
    if req_max is not None and req_max < 0:
        raise ValidationError("salary_max must be non-negative")

    if req_min is not None and req_max is not None:
        if req_min > req_max:
            raise ValidationError("salary_max must be greater than or equal to salary_min")
        return {"$and": [
            {"$or": [{"salary_min": {"$lte": req_max}}, {"salary_min": None}]},
            {"$or": [{"salary_max": {"$gte": req_min}}, {"salary_max": None}]},
            {"$or": [{"salary_min": {"$ne": None}}, {"salary_max": {"$ne": None}}]}
        ]}

    if req_min is not None:
        # Upper bound reaches the requested minimum (lower bound if no upper)
        return {"$or": [
            {"salary_max": {"$gte": req_min}},
            {"salary_max": None, "salary_min": {"$gte": req_min}}
        ]}

    if req_max is not None:
        # Lower bound stays under the requested maximum (upper bound if no lower)
        return {"$or": [
            {"salary_min": {"$lte": req_max}},
            {"salary_min": None, "salary_max": {"$lte": req_max}}
        ]}

    return {}


def all_of(*clauses: dict) -> dict:
    clauses = [c for c in clauses if c]
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _as_criteria(criteria: Union[SearchCriteria, dict, None]) -> SearchCriteria:
    if criteria is None:
        return SearchCriteria()
    if isinstance(criteria, SearchCriteria):
        return criteria
    return validate_model(SearchCriteria, criteria)


def build_filter(criteria: Union[SearchCriteria, dict, None]) -> dict:
    """AND together every supplied criterion. No criteria -> empty filter."""
    c = _as_criteria(criteria)
    return all_of(
        keyword_match(c.keyword),
        location_match(c.location),
        job_type_in(c.job_type),
        salary_overlap(c.salary_min, c.salary_max)
    )


def public_search_query(criteria: Union[SearchCriteria, dict, None] = None) -> dict:
    """Public search: closed jobs are excluded no matter what was asked for."""
    return all_of({"is_closed": False}, build_filter(criteria))


def parse_status(status: Union[JobStatusFilter, str, None]) -> JobStatusFilter:
    if status is None:
        return JobStatusFilter.all
    try:
        return JobStatusFilter(status)
    except ValueError:
        raise ValidationError(f"Invalid status '{status}'. Use open, closed or all")


def owner_listing_query(
    owner_id,
    criteria: Union[SearchCriteria, dict, None] = None,
    status: Union[JobStatusFilter, str, None] = JobStatusFilter.all
) -> dict:
    """An employer's own jobs; the status selector decides about closed ones."""
    selector = parse_status(status)
    status_clause = {}
    if selector == JobStatusFilter.open:
        status_clause = {"is_closed": False}
    elif selector == JobStatusFilter.closed:
        status_clause = {"is_closed": True}
    return all_of({"company": owner_id}, status_clause, build_filter(criteria))
