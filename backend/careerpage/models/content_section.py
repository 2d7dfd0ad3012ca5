from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from careerpage.core.database import Base, utcnow


class SectionType(str, enum.Enum):
    about = "about"
    culture = "culture"
    benefits = "benefits"
    values = "values"
    custom = "custom"


class ContentSection(Base):
    """Ordered free-text block on a careers page; `position` is a dense 0-based rank."""

    __tablename__ = "content_sections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=SectionType.custom.value)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "company_id": str(self.company_id),
            "type": self.type,
            "title": self.title,
            "content": self.content,
            "position": self.position,
            "is_visible": self.is_visible,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
