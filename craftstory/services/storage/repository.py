"""
CRUD repository for artisan profile documents.

``ProfileRepository`` receives an ``AsyncSession`` and calls ``flush()``
rather than ``commit()`` so that transaction boundaries are controlled by
the caller (typically :func:`get_session`).
"""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from craftstory.core.exceptions import ProfileNotFoundError
from craftstory.services.storage.models_db import ArtisanProfileRecord

logger = logging.getLogger(__name__)


class ProfileRepository:
    """Data-access layer for the ``artisan_profiles`` table.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, profile_id: str, update: dict[str, Any]) -> ArtisanProfileRecord:
        """Shallow-merge *update* into the stored document, creating it if absent.

        Applying the same update twice leaves the same stored document as
        applying it once.
        """
        record = await self._session.get(ArtisanProfileRecord, profile_id)
        if record is None:
            record = ArtisanProfileRecord(
                id=profile_id,
                data=dict(update),
                is_onboarded=bool(update.get("is_onboarded", False)),
            )
            self._session.add(record)
            await self._session.flush()
            logger.debug("Created profile %s with fields %s", profile_id, sorted(update))
            return record

        merged = {**(record.data or {}), **update}
        if merged != record.data:
            # Assign a new dict so the JSON column is marked dirty.
            record.data = merged
            record.is_onboarded = bool(merged.get("is_onboarded", False))
            record.updated_at = datetime.now(UTC)
            await self._session.flush()
        return record

    async def get_profile(self, profile_id: str) -> ArtisanProfileRecord:
        """Return a profile by ID or raise :class:`ProfileNotFoundError`."""
        record = await self._session.get(ArtisanProfileRecord, profile_id)
        if record is None:
            raise ProfileNotFoundError(profile_id)
        return record

    async def list_profiles(
        self,
        onboarded: bool | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ArtisanProfileRecord]:
        """Return profiles, most recently updated first."""
        stmt = (
            select(ArtisanProfileRecord)
            .order_by(ArtisanProfileRecord.updated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        if onboarded is not None:
            stmt = stmt.where(ArtisanProfileRecord.is_onboarded == onboarded)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def delete_profile(self, profile_id: str) -> None:
        """Delete a profile or raise :class:`ProfileNotFoundError`."""
        record = await self.get_profile(profile_id)
        await self._session.delete(record)
        await self._session.flush()
