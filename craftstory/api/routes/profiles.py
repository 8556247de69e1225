"""
Artisan profile REST endpoints.

Thin wrappers around ``ProfileRepository``; no business logic here.
"""

from typing import Any

from fastapi import APIRouter, Body, Query

from craftstory.core.models import DeleteProfileResponse, ProfileResponse
from craftstory.services.storage.database import get_session
from craftstory.services.storage.models_db import ArtisanProfileRecord
from craftstory.services.storage.repository import ProfileRepository

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _to_response(record: ArtisanProfileRecord) -> ProfileResponse:
    return ProfileResponse(
        id=record.id,
        data=record.data or {},
        is_onboarded=record.is_onboarded,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


@router.get("", response_model=list[ProfileResponse])
async def list_profiles(
    onboarded: bool | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """List stored profiles, most recently updated first."""
    async with get_session() as session:
        records = await ProfileRepository(session).list_profiles(
            onboarded=onboarded, limit=limit, offset=offset
        )
    return [_to_response(r) for r in records]


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(profile_id: str):
    """Return a single profile."""
    async with get_session() as session:
        record = await ProfileRepository(session).get_profile(profile_id)
    return _to_response(record)


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(profile_id: str, update: dict[str, Any] = Body(...)):
    """Merge fields into an existing profile."""
    async with get_session() as session:
        repo = ProfileRepository(session)
        await repo.get_profile(profile_id)
        record = await repo.upsert(profile_id, update)
    return _to_response(record)


@router.delete("/{profile_id}", response_model=DeleteProfileResponse)
async def delete_profile(profile_id: str):
    """Delete a profile."""
    async with get_session() as session:
        await ProfileRepository(session).delete_profile(profile_id)
    return DeleteProfileResponse(id=profile_id)
