"""
Row-level rules for CSV job imports: required-field and column-width validation,
and the mapping from a raw CSV record to a job record ready for insert.

All functions are pure. A raw row is any mapping of column name to value; values
may be None when a column is missing, and unknown columns are ignored.
"""
from __future__ import annotations

import enum
from typing import Any, Mapping, Optional, Sequence

from careerpage.models.job import JOB_FIELD_LENGTHS

RawCsvRow = Mapping[str, Any]

CSV_COLUMNS = [
    "title",
    "work_policy",
    "location",
    "department",
    "employment_type",
    "experience_level",
    "job_type",
    "salary_range",
    "job_slug",
    "posted_days_ago",
]

REQUIRED_FIELDS = ["title", "location", "employment_type"]

EMPLOYMENT_TYPE_MAP = {
    "Full time": "full-time",
    "Part time": "part-time",
    "Contract": "contract",
    "Internship": "internship",
    "Temporary": "contract",
    "Permanent": "full-time",
}

DEFAULT_JOB_TYPE = "full-time"
UNTITLED_POSITION = "Untitled Position"
UNSPECIFIED_LOCATION = "Not specified"


class DescriptionTemplate(str, enum.Enum):
    short = "short"
    detailed = "detailed"


def _text(row: RawCsvRow, field: str) -> str:
    value = row.get(field)
    if value is None:
        return ""
    return str(value).strip()


def missing_required_fields(row: RawCsvRow) -> list[str]:
    return [field for field in REQUIRED_FIELDS if not _text(row, field)]


def oversized_fields(row: RawCsvRow) -> list[str]:
    """Job fields whose mapped value would not fit its column."""
    mapped = {
        "title": _text(row, "title"),
        "location": _text(row, "location"),
        "job_type": map_employment_type(row.get("employment_type")),
        "department": _text(row, "department"),
        "salary_range": _text(row, "salary_range"),
    }
    return [field for field, limit in JOB_FIELD_LENGTHS.items() if len(mapped[field]) > limit]


def validate_field_lengths(rows: Sequence[RawCsvRow]) -> list[str]:
    errors = []
    for index, row in enumerate(rows, start=1):
        for field in oversized_fields(row):
            errors.append(f"Row {index}: {field} exceeds {JOB_FIELD_LENGTHS[field]} characters")
    return errors


def validate_csv_rows(rows: Sequence[RawCsvRow]) -> list[str]:
    """Return one "Row N: missing a,b" message per row lacking a required field,
    followed by one "Row N: <field> exceeds <limit> characters" per oversized value.
    """
    errors = []
    for index, row in enumerate(rows, start=1):
        missing = missing_required_fields(row)
        if missing:
            errors.append(f"Row {index}: missing {','.join(missing)}")
    return errors + validate_field_lengths(rows)


def map_employment_type(value: Optional[Any]) -> str:
    text = "" if value is None else str(value).strip()
    if text in EMPLOYMENT_TYPE_MAP:
        return EMPLOYMENT_TYPE_MAP[text]
    return "-".join(text.lower().split()) or DEFAULT_JOB_TYPE


def short_description(row: RawCsvRow) -> str:
    return f"Role: {_text(row, 'title') or 'Unknown'}"


def detailed_description(row: RawCsvRow) -> str:
    title = _text(row, "title")
    experience = _text(row, "experience_level")
    department = _text(row, "department")
    employment = _text(row, "employment_type").lower()
    location = _text(row, "location")
    work_policy = _text(row, "work_policy")
    salary = _text(row, "salary_range")

    # Blank values are left out of the prose rather than rendered as gaps.
    role = " ".join(p for p in (experience, title) if p) or "new team member"
    team = f"our {department} team" if department else "our team"
    intro = f"We are looking for a {role} to join {team}."
    if employment and location:
        intro += f" This is a {employment} position based in {location}."
    elif employment:
        intro += f" This is a {employment} position."
    elif location:
        intro += f" This position is based in {location}."

    details = [
        f"• Experience Level: {experience}" if experience else None,
        f"• Work Policy: {work_policy}" if work_policy else None,
        f"• Department: {department}" if department else None,
        f"• Salary Range: {salary}" if salary else None,
    ]
    lines = [intro, "", "Key Details:"]
    lines.extend(d for d in details if d)
    lines.extend([
        "",
        "We welcome applications from qualified candidates who are passionate "
        "about making an impact in our organization.",
    ])
    return "\n".join(lines)


_DESCRIBERS = {
    DescriptionTemplate.short: short_description,
    DescriptionTemplate.detailed: detailed_description,
}


def map_csv_row_to_job(
    row: RawCsvRow,
    company_id: str,
    template: DescriptionTemplate | str = DescriptionTemplate.detailed,
) -> dict[str, Any]:
    """Normalize one raw CSV row into a job record (not yet persisted)."""
    describe = _DESCRIBERS[DescriptionTemplate(template)]
    job: dict[str, Any] = {
        "company_id": company_id,
        "title": _text(row, "title") or UNTITLED_POSITION,
        "description": describe(row),
        "location": _text(row, "location") or UNSPECIFIED_LOCATION,
        "job_type": map_employment_type(row.get("employment_type")),
        "is_active": True,
    }
    department = _text(row, "department")
    if department:
        job["department"] = department
    salary_range = _text(row, "salary_range")
    if salary_range:
        job["salary_range"] = salary_range
    return job
