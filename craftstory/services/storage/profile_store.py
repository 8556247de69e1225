"""
Profile Store Adapter used by the onboarding flow.

The flow only needs ``upsert``; reads go through ``ProfileRepository``
directly in the API layer.
"""

from abc import ABC, abstractmethod
from typing import Any

from craftstory.core.exceptions import PersistenceError
from craftstory.services.storage.database import get_session
from craftstory.services.storage.repository import ProfileRepository


class BaseProfileStore(ABC):
    """Interface for persisting partial and final artisan profiles."""

    @abstractmethod
    async def upsert(self, profile_id: str, update: dict[str, Any]) -> None:
        """Merge *update* into the stored profile.

        Raises:
            PersistenceError: If the write fails.
        """


class SQLProfileStore(BaseProfileStore):
    """Profile store backed by the async SQLAlchemy session."""

    async def upsert(self, profile_id: str, update: dict[str, Any]) -> None:
        try:
            async with get_session() as session:
                await ProfileRepository(session).upsert(profile_id, update)
        except Exception as exc:
            raise PersistenceError(detail=f"Failed to save profile {profile_id}: {exc}") from exc
