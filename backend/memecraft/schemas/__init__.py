# Schemas package - Pydantic models for request/response validation
from memecraft.schemas.meme import (
    CaptionGenerateRequest,
    CaptionGenerateResponse,
    CreateMemeRequest,
    ErrorResponse,
    GeneratedMeme,
    MemeGenerateResponse,
    MessageResponse,
    NewGeneratedMeme,
    Template,
    ValidationErrorResponse,
)

__all__ = [
    "CaptionGenerateRequest",
    "CaptionGenerateResponse",
    "CreateMemeRequest",
    "ErrorResponse",
    "GeneratedMeme",
    "MemeGenerateResponse",
    "MessageResponse",
    "NewGeneratedMeme",
    "Template",
    "ValidationErrorResponse",
]
