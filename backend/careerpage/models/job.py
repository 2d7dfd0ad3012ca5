from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from careerpage.core.database import Base, utcnow


class JobType(str, enum.Enum):
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"
    internship = "internship"


# Column widths; CSV rows are checked against these before a batch is accepted.
JOB_FIELD_LENGTHS = {
    "title": 500,
    "location": 500,
    "job_type": 50,
    "department": 200,
    "salary_range": 200,
}


class Job(Base):
    """A listing on a company's careers page.

    `job_type` is a plain string column: editor writes are restricted to JobType,
    but CSV imports may carry the hyphenated fallback for unknown employment types.
    """

    __tablename__ = "jobs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(JOB_FIELD_LENGTHS["title"]), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(JOB_FIELD_LENGTHS["location"]), nullable=False)
    job_type: Mapped[str] = mapped_column(String(JOB_FIELD_LENGTHS["job_type"]), nullable=False, default=JobType.full_time.value)
    department: Mapped[Optional[str]] = mapped_column(String(JOB_FIELD_LENGTHS["department"]), nullable=True)
    salary_range: Mapped[Optional[str]] = mapped_column(String(JOB_FIELD_LENGTHS["salary_range"]), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "company_id": str(self.company_id),
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "job_type": self.job_type,
            "department": self.department,
            "salary_range": self.salary_range,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
