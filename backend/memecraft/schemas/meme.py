"""
Memecraft schemas.

This module contains all Pydantic models for request/response validation
and for the records held in storage. JSON uses camelCase keys; Python code
uses the snake_case field names.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# STORED RECORDS
# =============================================================================

class Template(CamelModel):
    """
    A meme template from the upstream catalog.

    Identity is the upstream id; it is passed back to Imgflip unchanged.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque template id from Imgflip")
    name: str = Field(..., description="Human-readable template name")
    url: str = Field(..., description="Location of the blank template image")
    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    box_count: int = Field(..., description="Number of editable text regions")


class NewGeneratedMeme(CamelModel):
    """Fields supplied by the caller when storing a generated meme."""

    model_config = ConfigDict(frozen=True)

    template_id: str
    template_name: str
    top_text: Optional[str] = None
    bottom_text: Optional[str] = None
    image_url: str


class GeneratedMeme(NewGeneratedMeme):
    """A stored meme: the caller's fields plus an assigned id and timestamp."""

    id: str = Field(..., description="Unique id assigned on insert")
    created_at: datetime = Field(..., description="Insertion time (UTC)")


# =============================================================================
# FRONTEND REQUEST/RESPONSE SCHEMAS
# =============================================================================

class CreateMemeRequest(CamelModel):
    """Request schema for POST /api/memes/generate."""

    template_id: str = Field(
        ...,
        description="Id of the template to caption",
        examples=["181913649"],
    )
    top_text: Optional[str] = Field(None, description="Text for the first box")
    bottom_text: Optional[str] = Field(None, description="Text for the second box")


class MemeGenerateResponse(CamelModel):
    """
    Response schema for a successfully generated meme.

    topText/bottomText echo the request (empty string when omitted),
    not the stored record.
    """

    id: str
    url: str = Field(..., description="URL of the rendered meme image")
    template_id: str
    template_name: str
    top_text: str
    bottom_text: str


class CaptionGenerateRequest(CamelModel):
    """Request schema for POST /api/captions/generate."""

    topic: str = Field(
        ...,
        min_length=1,
        description="What the meme should be about",
        examples=["Mondays"],
    )
    template_name: Optional[str] = Field(None, description="Template the caption is for")


class CaptionGenerateResponse(CamelModel):
    """Parsed caption plus the raw model output it came from."""

    top_text: str
    bottom_text: str
    original_response: str = Field(..., description="Unparsed model output")


# =============================================================================
# GENERIC RESPONSES
# =============================================================================

class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str = Field(..., description="Human-readable error message")
    error: Optional[str] = Field(None, description="Underlying error text")


class ValidationErrorResponse(BaseModel):
    """Body returned for 400 responses."""

    message: str = Field(..., description="Human-readable error message")
    errors: list[dict[str, Any]] = Field(..., description="Field-level validation errors")
