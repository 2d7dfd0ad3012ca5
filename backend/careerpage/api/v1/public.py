from __future__ import annotations

from flask import Blueprint, jsonify, request

from careerpage.core.database import get_db
from careerpage.core.exceptions import NotFound
from careerpage.services.careers import JobFilters, clamp_page_size, filter_jobs, job_facets, paginate
from careerpage.services.companies import find_company_by_slug, load_page_content
from careerpage.services.preview_tokens import is_valid_preview_token

bp = Blueprint("public", __name__)


def _page_payload(content: dict) -> dict:
    jobs = content["jobs"]
    filtered = filter_jobs(jobs, JobFilters.from_args(request.args))
    page = paginate(filtered, request.args.get("page"), clamp_page_size(request.args.get("page_size")))
    return {
        "company": content["company"],
        "sections": content["sections"],
        "jobs": page.pop("items"),
        "pagination": page,
        "facets": job_facets(jobs),
    }


@bp.get("/careers/<slug>")
def careers_page(slug):
    """Published page: visible sections and active jobs only."""
    with get_db() as db:
        company = find_company_by_slug(db, slug, published_only=True)
        if not company:
            raise NotFound("Careers page not found")
        content = load_page_content(db, company, include_hidden=False)
    return jsonify(_page_payload(content))


@bp.get("/preview/<slug>")
def preview_page(slug):
    """Any company, published or not, with a valid preview token; shows hidden rows too."""
    with get_db() as db:
        company = find_company_by_slug(db, slug, published_only=False)
        if not company or not is_valid_preview_token(request.args.get("token"), company["id"]):
            raise NotFound("Preview not found")
        content = load_page_content(db, company, include_hidden=True)
    return jsonify(_page_payload(content))
