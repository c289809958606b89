"""
Meme API routes.

Generation forwards to Imgflip and records the result; the read endpoints
serve the in-memory history of generated memes.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from memecraft.exceptions import NotFoundError, UpstreamError
from memecraft.routes.common import UPSTREAM_RESPONSES, VALIDATION_RESPONSES, server_error
from memecraft.schemas.meme import (
    CreateMemeRequest,
    ErrorResponse,
    GeneratedMeme,
    MemeGenerateResponse,
)
from memecraft.services.memes import MemeService, get_meme_service

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/memes",
    tags=["memes"],
)


@router.post(
    "/generate",
    response_model=MemeGenerateResponse,
    status_code=status.HTTP_200_OK,
    responses={**VALIDATION_RESPONSES, **UPSTREAM_RESPONSES},
    summary="Generate a meme",
    description="""
    Caption a template through Imgflip.

    The template name is looked up in the template cache and falls back to
    "Unknown Template" when the cache does not know the id.
    """,
)
async def generate_meme(
    request: CreateMemeRequest,
    meme_service: Annotated[MemeService, Depends(get_meme_service)],
) -> MemeGenerateResponse:
    logger.info(f"Received meme generation request for template {request.template_id}")
    try:
        return await meme_service.generate(request)
    except UpstreamError as e:
        raise server_error("Failed to generate meme", e)


# Declared before /{meme_id} so "recent" is not captured as an id
@router.get(
    "/recent",
    response_model=list[GeneratedMeme],
    status_code=status.HTTP_200_OK,
    responses=VALIDATION_RESPONSES,
    summary="List recently generated memes",
)
async def recent_memes(
    meme_service: Annotated[MemeService, Depends(get_meme_service)],
    limit: Annotated[
        Optional[int],
        Query(ge=0, description="Maximum number of memes (defaults to RECENT_MEMES_LIMIT)"),
    ] = None,
) -> list[GeneratedMeme]:
    """Newest first."""
    return meme_service.list_recent(limit)


@router.get(
    "/{meme_id}",
    response_model=GeneratedMeme,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Meme not found", "model": ErrorResponse}},
    summary="Get a generated meme",
)
async def get_meme(
    meme_id: str,
    meme_service: Annotated[MemeService, Depends(get_meme_service)],
) -> GeneratedMeme:
    try:
        return meme_service.get_meme(meme_id)
    except NotFoundError as e:
        logger.info(str(e))
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Meme not found"},
        )
