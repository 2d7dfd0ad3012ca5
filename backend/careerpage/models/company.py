from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from careerpage.core.database import Base, utcnow

DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_SECONDARY_COLOR = "#1E40AF"


def _dt(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


class Company(Base):
    """Branding/profile record behind one careers page. One per user."""

    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    tagline: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    banner_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    primary_color: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_PRIMARY_COLOR)
    secondary_color: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_SECONDARY_COLOR)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "slug": self.slug,
            "name": self.name,
            "tagline": self.tagline,
            "logo_url": self.logo_url,
            "banner_url": self.banner_url,
            "video_url": self.video_url,
            "primary_color": self.primary_color,
            "secondary_color": self.secondary_color,
            "is_published": self.is_published,
            "created_at": _dt(self.created_at),
            "updated_at": _dt(self.updated_at),
        }
