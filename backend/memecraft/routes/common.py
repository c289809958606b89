"""Helpers shared by the routers."""

import logging

from fastapi import HTTPException, status

from memecraft.schemas.meme import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)

VALIDATION_RESPONSES = {
    400: {"description": "Invalid request data", "model": ValidationErrorResponse},
}

UPSTREAM_RESPONSES = {
    500: {"description": "Upstream API failure", "model": ErrorResponse},
}


def server_error(message: str, error: Exception) -> HTTPException:
    """Build the 500 raised when an upstream call fails."""
    logger.error(f"{message}: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"message": message, "error": str(error)},
    )
