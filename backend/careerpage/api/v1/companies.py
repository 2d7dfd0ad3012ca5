from __future__ import annotations

from typing import Optional

from flask import Blueprint, g, jsonify, request
from pydantic import BaseModel, Field

from careerpage.api.v1.common import parse_body, parse_company_id
from careerpage.core.database import get_db
from careerpage.core.exceptions import Conflict
from careerpage.models.company import Company
from careerpage.services.auth import login_required
from careerpage.services.companies import get_or_create_company, load_page_content, require_owned_company
from careerpage.services.gateway import TableGateway
from careerpage.services.preview_tokens import issue_preview_token

bp = Blueprint("companies", __name__)

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"
SLUG = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG)
    tagline: Optional[str] = Field(default=None, max_length=500)
    logo_url: Optional[str] = Field(default=None, max_length=1000)
    banner_url: Optional[str] = Field(default=None, max_length=1000)
    video_url: Optional[str] = Field(default=None, max_length=1000)
    primary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    secondary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    is_published: Optional[bool] = None


@bp.get("/editor/company")
@login_required
def get_editor_company():
    with get_db() as db:
        company = get_or_create_company(db, g.current_user)
        return jsonify(load_page_content(db, company, include_hidden=True))


@bp.patch("/companies/<uuid:company_id>")
@login_required
def update_company(company_id):
    updates = parse_body(CompanyUpdate).model_dump(exclude_unset=True)
    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)
        companies = TableGateway(db, Company)

        for field in ("name", "slug", "primary_color", "secondary_color", "is_published"):
            if field in updates and updates[field] is None:
                updates.pop(field)

        slug = updates.get("slug")
        if slug and slug != company["slug"]:
            taken = companies.select("id").filter("slug", slug).maybe_single().unwrap()
            if taken:
                raise Conflict(f"Slug '{slug}' is already in use")

        if not updates:
            return jsonify(company)
        return jsonify(companies.update(company["id"], updates).unwrap())


@bp.post("/preview-token")
@login_required
def create_preview_token():
    data = request.get_json(silent=True)
    company_id = parse_company_id(data.get("companyId") if isinstance(data, dict) else None, "companyId is required")
    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)
    preview = issue_preview_token(company["id"], g.current_user.id)
    return jsonify({"token": preview.token, "expiresAt": preview.expires_at_millis})
