"""
Template API routes.

GET serves the template catalog, populating the cache from Imgflip on first
use; clear-cache empties both the template and generated-meme stores.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from memecraft.exceptions import UpstreamError
from memecraft.routes.common import UPSTREAM_RESPONSES, server_error
from memecraft.schemas.meme import MessageResponse, Template
from memecraft.services.memes import MemeService, get_meme_service

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/templates",
    tags=["templates"],
)


@router.get(
    "",
    response_model=list[Template],
    status_code=status.HTTP_200_OK,
    responses=UPSTREAM_RESPONSES,
    summary="List meme templates",
)
async def list_templates(
    meme_service: Annotated[MemeService, Depends(get_meme_service)],
) -> list[Template]:
    """Return the cached template catalog, fetching it from Imgflip when empty."""
    try:
        return await meme_service.list_templates()
    except UpstreamError as e:
        raise server_error("Failed to fetch meme templates", e)


@router.post(
    "/clear-cache",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Clear cached templates and memes",
    description="Administrative reset. Empties both in-memory stores unconditionally.",
)
async def clear_cache(
    meme_service: Annotated[MemeService, Depends(get_meme_service)],
) -> MessageResponse:
    meme_service.clear_cache()
    return MessageResponse(message="Cache cleared successfully")
