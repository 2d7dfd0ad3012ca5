from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Optional

from sqlalchemy.orm import Session

from careerpage.core.exceptions import Forbidden, NotFound
from careerpage.models.company import DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR, Company
from careerpage.models.content_section import ContentSection
from careerpage.models.job import Job
from careerpage.models.user import User
from careerpage.services.gateway import TableGateway

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "My Company"


def _parse_id(value: Any) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def get_company(db: Session, company_id: Any) -> dict[str, Any]:
    parsed = _parse_id(company_id)
    if parsed is None:
        raise NotFound("Company not found")
    company = TableGateway(db, Company).select("*").filter("id", parsed).maybe_single().unwrap()
    if not company:
        raise NotFound("Company not found")
    return company


def require_owned_company(db: Session, company_id: Any, user: User) -> dict[str, Any]:
    company = get_company(db, company_id)
    if company["user_id"] != str(user.id):
        raise Forbidden("You do not have access to this company")
    return company


def find_company_by_slug(db: Session, slug: str, published_only: bool) -> Optional[dict[str, Any]]:
    query = TableGateway(db, Company).select("*").filter("slug", slug)
    if published_only:
        query = query.filter("is_published", True)
    return query.maybe_single().unwrap()


def get_or_create_company(db: Session, user: User) -> dict[str, Any]:
    """Return the user's company, creating a default one on first visit."""
    companies = TableGateway(db, Company)
    existing = companies.select("*").filter("user_id", user.id).maybe_single().unwrap()
    if existing:
        return existing

    millis = int(time.time() * 1000)
    while companies.select("id").filter("slug", f"company-{millis}").maybe_single().unwrap():
        millis += 1

    created = companies.insert({
        "user_id": user.id,
        "slug": f"company-{millis}",
        "name": DEFAULT_COMPANY_NAME,
        "primary_color": DEFAULT_PRIMARY_COLOR,
        "secondary_color": DEFAULT_SECONDARY_COLOR,
    }).unwrap()
    logger.info("Created company %s for user %s", created["id"], user.id)
    return created


def load_page_content(db: Session, company: dict[str, Any], include_hidden: bool) -> dict[str, Any]:
    """Sections by position and jobs newest first; hidden/inactive rows only when include_hidden."""
    sections = TableGateway(db, ContentSection).select("*").filter("company_id", company["id"])
    jobs = TableGateway(db, Job).select("*").filter("company_id", company["id"])
    if not include_hidden:
        sections = sections.filter("is_visible", True)
        jobs = jobs.filter("is_active", True)
    return {
        "company": company,
        "sections": sections.order("position").execute().unwrap(),
        "jobs": jobs.order("created_at", "desc").execute().unwrap(),
    }
