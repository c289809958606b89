"""
Meme generation service.

Coordinates the template cache, Imgflip rendering and the generated-meme
store. The service never renders anything itself.
"""

import logging
from typing import Annotated, Any, Optional, Union

from fastapi import Depends

from memecraft.config import Settings, get_settings
from memecraft.exceptions import NotFoundError
from memecraft.schemas.meme import (
    CreateMemeRequest,
    GeneratedMeme,
    MemeGenerateResponse,
    NewGeneratedMeme,
    Template,
)
from memecraft.services.imgflip import ImgflipService, get_imgflip_service
from memecraft.storage import MemStorage, get_storage

# Configure logging
logger = logging.getLogger(__name__)

UNKNOWN_TEMPLATE_NAME = "Unknown Template"


class MemeService:
    """Template listing, meme generation and meme lookup."""

    def __init__(
        self,
        imgflip: ImgflipService,
        storage: MemStorage,
        settings: Optional[Settings] = None,
    ):
        self.imgflip = imgflip
        self.storage = storage
        self.settings = settings or get_settings()

    async def list_templates(self) -> list[Template]:
        """
        Return cached templates, fetching and caching them on a cold cache.

        Raises:
            ImgflipServiceError: If the cache is empty and the fetch fails
        """
        cached = self.storage.list_templates()
        if cached:
            logger.debug(f"Serving {len(cached)} templates from cache")
            return cached

        logger.info("Template cache is empty, fetching from Imgflip")
        templates = await self.imgflip.fetch_templates()
        self.storage.replace_all(templates)
        return templates

    def clear_cache(self) -> None:
        self.storage.clear()

    def resolve_template_name(self, template_id: str) -> str:
        template = self.storage.get_template(template_id)
        if template is None:
            logger.info(f"Template {template_id} not in cache, using '{UNKNOWN_TEMPLATE_NAME}'")
            return UNKNOWN_TEMPLATE_NAME
        return template.name

    async def generate(
        self,
        request: Union[CreateMemeRequest, dict[str, Any]],
    ) -> MemeGenerateResponse:
        """
        Render a meme through Imgflip and record it.

        Args:
            request: Validated request, or a raw body to validate

        Returns:
            MemeGenerateResponse: Stored id and image URL with the request's texts

        Raises:
            pydantic.ValidationError: If a raw body has no string templateId
            ImgflipServiceError: If Imgflip fails; nothing is stored
        """
        if not isinstance(request, CreateMemeRequest):
            request = CreateMemeRequest.model_validate(request)

        top_text = request.top_text or ""
        bottom_text = request.bottom_text or ""

        image = await self.imgflip.caption_image(request.template_id, top_text, bottom_text)
        template_name = self.resolve_template_name(request.template_id)

        meme = self.storage.insert(
            NewGeneratedMeme(
                template_id=request.template_id,
                template_name=template_name,
                top_text=top_text,
                bottom_text=bottom_text,
                image_url=image.url,
            )
        )
        logger.info(f"Stored generated meme {meme.id} for template {request.template_id}")

        return MemeGenerateResponse(
            id=meme.id,
            url=image.url,
            template_id=request.template_id,
            template_name=template_name,
            top_text=top_text,
            bottom_text=bottom_text,
        )

    def list_recent(self, limit: Optional[int] = None) -> list[GeneratedMeme]:
        if limit is None:
            limit = self.settings.RECENT_MEMES_LIMIT
        return self.storage.list_recent(limit)

    def get_meme(self, meme_id: str) -> GeneratedMeme:
        """
        Raises:
            NotFoundError: If no meme has this id
        """
        meme = self.storage.get(meme_id)
        if meme is None:
            raise NotFoundError(f"Meme {meme_id} not found")
        return meme


# Convenience function for dependency injection
async def get_meme_service(
    imgflip: Annotated[ImgflipService, Depends(get_imgflip_service)],
    storage: Annotated[MemStorage, Depends(get_storage)],
) -> MemeService:
    """Get a MemeService bound to the shared storage."""
    return MemeService(imgflip=imgflip, storage=storage)
