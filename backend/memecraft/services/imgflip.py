"""
Imgflip API Service.

This module handles all communication with Imgflip, which provides both
the template catalog and the captioned image rendering:
1. GET  /get_memes      - list popular templates
2. POST /caption_image  - render text onto a template, returns an image URL

Every Imgflip response is an envelope of the form
{"success": true, "data": {...}} or {"success": false, "error_message": "..."}.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from memecraft.config import Settings, get_settings
from memecraft.exceptions import UpstreamError
from memecraft.schemas.meme import Template

# Configure logging
logger = logging.getLogger(__name__)


class ImgflipServiceError(UpstreamError):
    """Base exception for Imgflip service errors."""
    pass


class ImgflipConnectionError(ImgflipServiceError):
    """Raised when unable to reach the Imgflip API."""
    pass


class ImgflipResponseError(ImgflipServiceError):
    """Raised when Imgflip returns an invalid or error response."""
    pass


class CaptionedImage(BaseModel):
    """Rendered meme returned by caption_image."""

    url: str
    page_url: Optional[str] = None


class ImgflipService:
    """
    Service for interacting with the Imgflip API.

    Credentials are only needed for caption_image; the template catalog
    is public.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the Imgflip service.

        Args:
            settings: Optional settings instance. If not provided, uses default settings.
        """
        self.settings = settings or get_settings()

    def _url(self, endpoint: str) -> str:
        return f"{self.settings.IMGFLIP_API_URL.rstrip('/')}/{endpoint}"

    def _unwrap(self, response: httpx.Response, action: str) -> dict[str, Any]:
        """
        Validate the HTTP status and the success envelope, returning `data`.

        Raises:
            ImgflipResponseError: On non-200 status, non-JSON body or success=false
        """
        if response.status_code != 200:
            logger.error(
                f"Imgflip {action} returned status {response.status_code}: "
                f"{response.text[:500]}"
            )
            raise ImgflipResponseError(
                f"Imgflip API returned status {response.status_code}: "
                f"{response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Imgflip {action} returned invalid JSON: {response.text[:500]}")
            raise ImgflipResponseError(f"Imgflip returned invalid JSON: {str(e)}") from e

        logger.debug(f"Imgflip {action} raw response: {body}")

        if not isinstance(body, dict) or not body.get("success"):
            error_msg = None
            if isinstance(body, dict):
                error_msg = body.get("error_message")
            logger.error(f"Imgflip {action} failed: {error_msg}")
            raise ImgflipResponseError(error_msg or f"Failed to {action}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise ImgflipResponseError(f"Imgflip {action} response has no data")
        return data

    async def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        url = self._url(endpoint)
        logger.info(f"Calling Imgflip API: {method} {url}")

        try:
            async with httpx.AsyncClient(timeout=self.settings.IMGFLIP_TIMEOUT) as client:
                if method == "GET":
                    return await client.get(url, **kwargs)
                return await client.post(url, **kwargs)

        except httpx.ConnectError as e:
            logger.error(f"Failed to connect to Imgflip API: {e}")
            raise ImgflipConnectionError(
                f"Failed to connect to Imgflip API at {url}. "
                f"Please check network connectivity."
            ) from e

        except httpx.TimeoutException as e:
            logger.error(f"Imgflip API request timed out: {e}")
            raise ImgflipConnectionError(
                f"Imgflip API request timed out after {self.settings.IMGFLIP_TIMEOUT} seconds."
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Imgflip API: {e}")
            raise ImgflipConnectionError(f"HTTP error calling Imgflip API: {str(e)}") from e

    async def fetch_templates(self) -> list[Template]:
        """
        Fetch the popular template catalog.

        Returns:
            list[Template]: Templates in the order Imgflip lists them

        Raises:
            ImgflipConnectionError: If the API cannot be reached
            ImgflipResponseError: If the API reports failure or the payload is malformed
        """
        response = await self._request("GET", "get_memes")
        data = self._unwrap(response, "fetch templates from Imgflip")

        try:
            templates = [
                Template(
                    id=str(meme["id"]),
                    name=meme["name"],
                    url=meme["url"],
                    width=meme["width"],
                    height=meme["height"],
                    box_count=meme["box_count"],
                )
                for meme in data.get("memes", [])
            ]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse Imgflip templates: {e}")
            raise ImgflipResponseError(f"Malformed template in Imgflip response: {str(e)}") from e

        logger.info(f"Fetched {len(templates)} templates from Imgflip")
        return templates

    async def caption_image(
        self,
        template_id: str,
        top_text: str = "",
        bottom_text: str = "",
    ) -> CaptionedImage:
        """
        Render top/bottom text onto a template.

        Args:
            template_id: Imgflip template id
            top_text: Text for box 0
            bottom_text: Text for box 1

        Returns:
            CaptionedImage: URL of the rendered meme

        Raises:
            ImgflipConnectionError: If the API cannot be reached
            ImgflipResponseError: If Imgflip reports failure (message passed through)
        """
        if not self.settings.imgflip_configured:
            logger.warning("IMGFLIP_USERNAME/IMGFLIP_PASSWORD not configured; Imgflip will reject the request")

        form = {
            "template_id": template_id,
            "username": self.settings.IMGFLIP_USERNAME,
            "password": self.settings.IMGFLIP_PASSWORD,
            "text0": top_text,
            "text1": bottom_text,
        }

        response = await self._request("POST", "caption_image", data=form)
        data = self._unwrap(response, "generate meme")

        if not data.get("url"):
            raise ImgflipResponseError("Imgflip response does not contain an image url")

        image = CaptionedImage(url=data["url"], page_url=data.get("page_url"))
        logger.info(f"Imgflip rendered template {template_id}: {image.url}")
        return image


# Convenience function for dependency injection
async def get_imgflip_service() -> ImgflipService:
    """Get an ImgflipService instance for dependency injection."""
    return ImgflipService()
