"""Health and readiness routes."""

from fastapi import APIRouter, status

from memecraft.config import get_settings

router = APIRouter(
    prefix="/api/health",
    tags=["health"],
)


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Check if the backend service is running.",
)
async def health_check():
    """
    Simple health check endpoint.

    Returns:
        dict: Health status
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@router.get(
    "/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Check whether upstream credentials are configured.",
)
async def readiness_check():
    """
    Readiness check that verifies configuration is loaded.

    Imgflip credentials are required to render memes; the Gemini key only
    matters for AI captions, so its absence is a warning, not a failure.

    Returns:
        dict: Readiness status with configuration info
    """
    settings = get_settings()

    imgflip_configured = settings.imgflip_configured
    gemini_configured = settings.gemini_configured

    warnings = []
    if not imgflip_configured:
        warnings.append("Set IMGFLIP_USERNAME and IMGFLIP_PASSWORD to generate memes")
    if not gemini_configured:
        warnings.append("Set GEMINI_API_KEY to generate AI captions")

    return {
        "status": "ready" if imgflip_configured else "not_ready",
        "configuration": {
            "imgflip_configured": imgflip_configured,
            "gemini_configured": gemini_configured,
            "gemini_model": settings.GEMINI_MODEL,
        },
        "warnings": warnings,
    }
