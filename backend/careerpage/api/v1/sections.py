from __future__ import annotations

from typing import Literal, Optional

from flask import Blueprint, g, jsonify
from pydantic import BaseModel, Field

from careerpage.api.v1.common import parse_body
from careerpage.core.database import get_db
from careerpage.core.exceptions import NotFound
from careerpage.models.content_section import ContentSection, SectionType
from careerpage.services.auth import login_required
from careerpage.services.companies import require_owned_company
from careerpage.services.gateway import TableGateway
from careerpage.services.sections import load_sections, move_section, write_positions

bp = Blueprint("sections", __name__)


class SectionCreate(BaseModel):
    type: SectionType = SectionType.custom
    title: str = Field(default="New Section", min_length=1, max_length=200)
    content: str = "Add your content here..."
    is_visible: bool = True


class SectionUpdate(BaseModel):
    type: Optional[SectionType] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = None
    is_visible: Optional[bool] = None


class SectionMove(BaseModel):
    direction: Literal["up", "down"]


def _owned_section(db, section_id) -> dict:
    section = TableGateway(db, ContentSection).select("*").filter("id", section_id).maybe_single().unwrap()
    if not section:
        raise NotFound("Section not found")
    require_owned_company(db, section["company_id"], g.current_user)
    return section


@bp.get("/companies/<uuid:company_id>/sections")
@login_required
def list_sections(company_id):
    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)
        return jsonify(load_sections(TableGateway(db, ContentSection), company["id"]))


@bp.post("/companies/<uuid:company_id>/sections")
@login_required
def add_section(company_id):
    body = parse_body(SectionCreate)
    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)
        table = TableGateway(db, ContentSection)
        existing = load_sections(table, company["id"])
        record = body.model_dump(mode="json")
        record.update({"company_id": company["id"], "position": len(existing)})
        return jsonify(table.insert(record).unwrap()), 201


@bp.patch("/sections/<uuid:section_id>")
@login_required
def update_section(section_id):
    updates = {k: v for k, v in parse_body(SectionUpdate).model_dump(mode="json", exclude_unset=True).items() if v is not None}
    with get_db() as db:
        section = _owned_section(db, section_id)
        if not updates:
            return jsonify(section)
        return jsonify(TableGateway(db, ContentSection).update(section_id, updates).unwrap())


@bp.delete("/sections/<uuid:section_id>")
@login_required
def delete_section(section_id):
    with get_db() as db:
        section = _owned_section(db, section_id)
        table = TableGateway(db, ContentSection)
        table.delete(section_id).unwrap()
        # Close the gap left by the deleted row.
        remaining = write_positions(table, load_sections(table, section["company_id"]))
        return jsonify({"deleted": True, "section_id": str(section_id), "sections": remaining})


@bp.post("/sections/<uuid:section_id>/move")
@login_required
def move(section_id):
    body = parse_body(SectionMove)
    with get_db() as db:
        section = _owned_section(db, section_id)
        table = TableGateway(db, ContentSection)
        try:
            ordered = move_section(table, section["company_id"], section["id"], body.direction)
        except LookupError:
            raise NotFound("Section not found")
        return jsonify(ordered)
