"""AI caption routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from memecraft.exceptions import UpstreamError
from memecraft.routes.common import UPSTREAM_RESPONSES, VALIDATION_RESPONSES, server_error
from memecraft.schemas.meme import CaptionGenerateRequest, CaptionGenerateResponse
from memecraft.services.captions import CaptionService, get_caption_service

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/captions",
    tags=["captions"],
)


@router.post(
    "/generate",
    response_model=CaptionGenerateResponse,
    status_code=status.HTTP_200_OK,
    responses={**VALIDATION_RESPONSES, **UPSTREAM_RESPONSES},
    summary="Generate an AI caption",
    description="""
    Ask Gemini for a two-part caption about a topic.

    The reply is parsed into topText/bottomText; originalResponse carries the
    unparsed model output.
    """,
)
async def generate_caption(
    request: CaptionGenerateRequest,
    caption_service: Annotated[CaptionService, Depends(get_caption_service)],
) -> CaptionGenerateResponse:
    logger.info(f"Received caption request. Topic length: {len(request.topic)} chars")
    try:
        caption = await caption_service.generate_caption(request.topic, request.template_name)
    except UpstreamError as e:
        raise server_error("Failed to generate caption", e)

    return CaptionGenerateResponse(
        top_text=caption.top_text,
        bottom_text=caption.bottom_text,
        original_response=caption.original_response,
    )
