"""Craft listing endpoints: generated descriptions and social captions."""

from fastapi import APIRouter, Depends

from craftstory.api.deps import get_extractor
from craftstory.core.models import (
    CaptionRequest,
    CaptionResponse,
    CraftDescribeRequest,
    CraftDescribeResponse,
)
from craftstory.services import listing
from craftstory.services.extraction.base import BaseExtractor

router = APIRouter(prefix="/crafts", tags=["crafts"])


@router.post("/describe", response_model=CraftDescribeResponse)
async def describe_craft(
    body: CraftDescribeRequest,
    extractor: BaseExtractor = Depends(get_extractor),
):
    """Generate a description, cultural story and tags for one piece."""
    craft = body.model_dump(exclude={"language"})
    description, generated = await listing.describe_craft(craft, body.language, extractor)
    return CraftDescribeResponse(**description.model_dump(), generated=generated)


@router.post("/captions", response_model=CaptionResponse)
async def suggest_captions(
    body: CaptionRequest,
    extractor: BaseExtractor = Depends(get_extractor),
):
    """Suggest Instagram captions and hashtags for a described piece."""
    suggestions, generated = await listing.suggest_captions(
        body.description,
        body.language,
        extractor,
        tone=body.tone,
        craft_type=body.craft_type,
    )
    return CaptionResponse(**suggestions.model_dump(), generated=generated)
