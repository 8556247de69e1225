"""
SQLAlchemy ORM models for the CraftStory profile store.

Profiles are stored as JSON documents so that keys contributed by the
generative model survive without a schema change.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from craftstory.services.storage.database import Base


class ArtisanProfileRecord(Base):
    """One artisan profile document."""

    __tablename__ = "artisan_profiles"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    is_onboarded: Mapped[bool] = mapped_column(default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    def __repr__(self) -> str:
        return f"<ArtisanProfileRecord id={self.id!r} onboarded={self.is_onboarded}>"
