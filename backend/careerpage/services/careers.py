"""Job search, facets and pagination for the public careers page."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence

DEFAULT_PAGE_SIZE = 5
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100


@dataclass
class JobFilters:
    search: str = ""
    location: str = ""
    job_type: str = ""
    department: str = ""

    @classmethod
    def from_args(cls, args) -> "JobFilters":
        return cls(
            search=(args.get("search") or "").strip(),
            location=(args.get("location") or "").strip(),
            job_type=(args.get("job_type") or "").strip(),
            department=(args.get("department") or "").strip(),
        )


def filter_jobs(jobs: Sequence[dict[str, Any]], filters: JobFilters) -> list[dict[str, Any]]:
    search = filters.search.lower()
    location = filters.location.lower()
    result = []
    for job in jobs:
        if search and search not in (job.get("title") or "").lower():
            continue
        if location and location not in (job.get("location") or "").lower():
            continue
        if filters.job_type and job.get("job_type") != filters.job_type:
            continue
        if filters.department and job.get("department") != filters.department:
            continue
        result.append(job)
    return result


def job_facets(jobs: Sequence[dict[str, Any]]) -> dict[str, list[str]]:
    return {
        "locations": sorted({j["location"] for j in jobs if j.get("location")}),
        "job_types": sorted({j["job_type"] for j in jobs if j.get("job_type")}),
        "departments": sorted({j["department"] for j in jobs if j.get("department")}),
    }


def clamp_page_size(raw: Optional[str]) -> int:
    try:
        size = int(raw) if raw not in (None, "") else DEFAULT_PAGE_SIZE
    except ValueError:
        size = DEFAULT_PAGE_SIZE
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, size))


def paginate(items: Sequence[Any], page: Optional[str], page_size: int) -> dict[str, Any]:
    total = len(items)
    total_pages = max(1, math.ceil(total / page_size))
    try:
        current = int(page) if page not in (None, "") else 1
    except ValueError:
        current = 1
    current = max(1, min(current, total_pages))
    start = (current - 1) * page_size
    return {
        "items": list(items[start:start + page_size]),
        "page": current,
        "page_size": page_size,
        "total": total,
        "total_pages": total_pages,
    }
