"""
AI Caption Service (Gemini).

This module handles all communication with the Gemini generative-text API.
It is responsible for:
1. Building the caption prompt for a topic
2. Calling the Gemini REST API
3. Extracting top/bottom text from the free-form reply

Parsing is best effort: a reply without "Top:"/"Bottom:" labels falls back
to sentence splitting, and the raw reply is always returned alongside the
parsed fields.
"""

import json
import logging
import re
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from memecraft.config import Settings, get_settings
from memecraft.exceptions import UpstreamError

# Configure logging
logger = logging.getLogger(__name__)

FALLBACK_TOP_TEXT_CHARS = 50

_TOP_LABEL = re.compile(r"^.*top:\s*", re.IGNORECASE)
_BOTTOM_LABEL = re.compile(r"^.*bottom:\s*", re.IGNORECASE)
_SENTENCE_END = re.compile(r"[.!?]")
_QUOTES = re.compile(r"['\"]")


class CaptionServiceError(UpstreamError):
    """Base exception for caption service errors."""
    pass


class CaptionConnectionError(CaptionServiceError):
    """Raised when unable to connect to the Gemini API."""
    pass


class CaptionResponseError(CaptionServiceError):
    """Raised when Gemini returns an error or an unusable response."""
    pass


class Caption(BaseModel):
    """Two-part caption extracted from a model reply."""

    top_text: str
    bottom_text: str
    original_response: str


def build_prompt(topic: str, template_name: Optional[str] = None) -> str:
    """
    Build the caption prompt.

    Args:
        topic: What the meme is about
        template_name: Optional template the caption is for

    Returns:
        Complete prompt string
    """
    template_hint = f" for a {template_name} meme" if template_name else ""
    return f"""Write a short, witty meme caption about: {topic}{template_hint}.
      Keep it under 12 words, funny, and internet-style. Provide two options:
      1. Top text
      2. Bottom text

      Return in format:
      Top: [text]
      Bottom: [text]"""


def parse_caption(response_text: str) -> Caption:
    """
    Extract top and bottom text from a model reply.

    Labeled lines win; a later labeled line overrides an earlier one. With no
    usable label, the first two sentences are used instead. Quote characters
    are stripped from both results. Never raises.

    Args:
        response_text: Raw text returned by the model

    Returns:
        Caption: Parsed texts plus the raw reply
    """
    top_text = ""
    bottom_text = ""

    lines = [line for line in response_text.split("\n") if line.strip()]
    for line in lines:
        lowered = line.lower()
        if "top:" in lowered:
            top_text = _TOP_LABEL.sub("", line, count=1).strip()
        elif "bottom:" in lowered:
            bottom_text = _BOTTOM_LABEL.sub("", line, count=1).strip()

    if not top_text and not bottom_text:
        logger.debug("No Top:/Bottom: labels found, falling back to sentence split")
        sentences = [s for s in _SENTENCE_END.split(response_text) if s.strip()]
        top_text = sentences[0].strip() if sentences else response_text[:FALLBACK_TOP_TEXT_CHARS]
        bottom_text = sentences[1].strip() if len(sentences) > 1 else ""

    return Caption(
        top_text=_QUOTES.sub("", top_text),
        bottom_text=_QUOTES.sub("", bottom_text),
        original_response=response_text,
    )


class CaptionService:
    """
    Service for generating meme captions with Gemini.

    This service is responsible for:
    - Constructing the caption prompt
    - Calling the Gemini generateContent endpoint
    - Parsing the reply into top/bottom text
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the caption service.

        Args:
            settings: Optional settings instance. If not provided, uses default settings.
        """
        self.settings = settings or get_settings()

    def _endpoint(self) -> str:
        base = self.settings.GEMINI_API_URL.rstrip("/")
        return f"{base}/models/{self.settings.GEMINI_MODEL}:generateContent"

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.settings.GEMINI_API_KEY:
            headers["x-goog-api-key"] = self.settings.GEMINI_API_KEY
        return headers

    def _build_request_payload(self, prompt: str) -> dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    def _extract_text(self, response_data: Any) -> str:
        """
        Pull the generated text out of a generateContent response.

        Response format:
        {"candidates": [{"content": {"parts": [{"text": "..."}]}}], ...}

        Raises:
            CaptionResponseError: If the response carries no candidate text
        """
        if not isinstance(response_data, dict):
            raise CaptionResponseError(f"Unexpected Gemini response: {str(response_data)[:200]}")

        candidates = response_data.get("candidates") or []
        if not candidates:
            feedback = response_data.get("promptFeedback") or {}
            reason = feedback.get("blockReason")
            if reason:
                raise CaptionResponseError(f"Gemini blocked the prompt: {reason}")
            raise CaptionResponseError("Gemini returned no candidates")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text:
            finish_reason = candidates[0].get("finishReason", "unknown")
            raise CaptionResponseError(f"Gemini returned an empty reply (finishReason: {finish_reason})")
        return text

    async def generate_text(self, prompt: str) -> str:
        """
        Send a prompt to Gemini and return its reply text.

        Raises:
            CaptionConnectionError: If unable to reach the API
            CaptionResponseError: If the API errors or returns no text
        """
        url = self._endpoint()
        payload = self._build_request_payload(prompt)

        logger.info(f"Calling Gemini API at {url}")
        logger.debug(f"Gemini request payload: {json.dumps(payload, indent=2)}")

        try:
            async with httpx.AsyncClient(timeout=self.settings.GEMINI_TIMEOUT) as client:
                response = await client.post(url, headers=self._get_headers(), json=payload)

                # Check for HTTP errors
                if response.status_code != 200:
                    logger.error(
                        f"Gemini API returned status {response.status_code}: "
                        f"{response.text[:500]}"
                    )
                    raise CaptionResponseError(
                        f"Gemini API returned status {response.status_code}: "
                        f"{response.text[:200]}"
                    )

                response_data = response.json()
                logger.debug(f"Gemini raw response: {response_data}")

        except httpx.ConnectError as e:
            logger.error(f"Failed to connect to Gemini API: {e}")
            raise CaptionConnectionError(
                f"Failed to connect to Gemini API at {url}. "
                f"Please check the URL and network connectivity."
            ) from e

        except httpx.TimeoutException as e:
            logger.error(f"Gemini API request timed out: {e}")
            raise CaptionConnectionError(
                f"Gemini API request timed out after {self.settings.GEMINI_TIMEOUT} seconds."
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Gemini API: {e}")
            raise CaptionConnectionError(f"HTTP error calling Gemini API: {str(e)}") from e

        except ValueError as e:
            logger.error(f"Gemini returned invalid JSON: {e}")
            raise CaptionResponseError(f"Gemini returned invalid JSON: {str(e)}") from e

        return self._extract_text(response_data)

    async def generate_caption(self, topic: str, template_name: Optional[str] = None) -> Caption:
        """
        Generate a two-part caption for a topic.

        Args:
            topic: What the meme is about
            template_name: Optional template name to steer the model

        Returns:
            Caption: Parsed top/bottom text and the raw reply

        Raises:
            CaptionServiceError: If the model call fails (never for parse ambiguity)
        """
        if not self.settings.gemini_configured:
            logger.warning("GEMINI_API_KEY is not configured; Gemini will reject the request")

        prompt = build_prompt(topic, template_name)
        reply = await self.generate_text(prompt)
        caption = parse_caption(reply)

        logger.info(
            f"Generated caption: top='{caption.top_text[:50]}', "
            f"bottom='{caption.bottom_text[:50]}'"
        )
        return caption


# Convenience function for dependency injection
async def get_caption_service() -> CaptionService:
    """Get a CaptionService instance for dependency injection."""
    return CaptionService()
