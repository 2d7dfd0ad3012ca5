from __future__ import annotations

from typing import Optional

from flask import Blueprint, g, jsonify
from pydantic import BaseModel, Field

from careerpage.api.v1.common import parse_body
from careerpage.core.database import get_db
from careerpage.core.exceptions import NotFound
from careerpage.models.job import Job, JobType
from careerpage.services.auth import login_required
from careerpage.services.companies import require_owned_company
from careerpage.services.gateway import TableGateway

bp = Blueprint("jobs", __name__)


class JobCreate(BaseModel):
    title: str = Field(default="New Job Opening", min_length=1, max_length=500)
    description: str = "Job description goes here..."
    location: str = Field(default="Remote", min_length=1, max_length=500)
    job_type: JobType = JobType.full_time
    department: Optional[str] = Field(default=None, max_length=200)
    salary_range: Optional[str] = Field(default=None, max_length=200)
    is_active: bool = True


class JobUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=500)
    job_type: Optional[JobType] = None
    department: Optional[str] = Field(default=None, max_length=200)
    salary_range: Optional[str] = Field(default=None, max_length=200)
    is_active: Optional[bool] = None


# department and salary_range may be cleared with an explicit null
NULLABLE_FIELDS = {"department", "salary_range"}


def _owned_job(db, job_id) -> dict:
    job = TableGateway(db, Job).select("*").filter("id", job_id).maybe_single().unwrap()
    if not job:
        raise NotFound("Job not found")
    require_owned_company(db, job["company_id"], g.current_user)
    return job


@bp.get("/companies/<uuid:company_id>/jobs")
@login_required
def list_jobs(company_id):
    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)
        jobs = (
            TableGateway(db, Job).select("*")
            .filter("company_id", company["id"])
            .order("created_at", "desc")
            .execute()
            .unwrap()
        )
        return jsonify(jobs)


@bp.post("/companies/<uuid:company_id>/jobs")
@login_required
def add_job(company_id):
    body = parse_body(JobCreate)
    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)
        record = body.model_dump(mode="json")
        record["company_id"] = company["id"]
        return jsonify(TableGateway(db, Job).insert(record).unwrap()), 201


@bp.patch("/jobs/<uuid:job_id>")
@login_required
def update_job(job_id):
    updates = {
        k: v
        for k, v in parse_body(JobUpdate).model_dump(mode="json", exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    with get_db() as db:
        job = _owned_job(db, job_id)
        if not updates:
            return jsonify(job)
        return jsonify(TableGateway(db, Job).update(job_id, updates).unwrap())


@bp.delete("/jobs/<uuid:job_id>")
@login_required
def delete_job(job_id):
    with get_db() as db:
        _owned_job(db, job_id)
        TableGateway(db, Job).delete(job_id).unwrap()
        return jsonify({"deleted": True, "job_id": str(job_id)})
