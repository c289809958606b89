"""
Memecraft Backend - Main Application Entry Point.

This FastAPI application is the API behind the meme studio frontend.
It coordinates between:
1. Frontend - browses templates, requests memes and AI captions
2. Imgflip - template catalog and captioned image rendering
3. Gemini - AI caption text

The backend NEVER renders images itself.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from memecraft.config import get_settings
from memecraft.routes import captions_router, health_router, memes_router, templates_router

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

settings = get_settings()

# Configure logging format
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    # Log configuration status (without exposing secrets)
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"Imgflip API URL: {settings.IMGFLIP_API_URL}")
    logger.info(f"Imgflip credentials configured: {settings.imgflip_configured}")
    logger.info(f"Gemini model: {settings.GEMINI_MODEL}")
    logger.info(f"Gemini API key configured: {settings.gemini_configured}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    # Warn about missing configuration
    if not settings.imgflip_configured:
        logger.warning(
            "⚠️  IMGFLIP_USERNAME/IMGFLIP_PASSWORD are not configured. "
            "Meme generation will fail until they are set in your .env file."
        )
    if not settings.gemini_configured:
        logger.warning(
            "⚠️  GEMINI_API_KEY is not configured. "
            "AI captions will fail until it is set in your .env file."
        )

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutdown")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## Memecraft Backend

Template browsing, meme rendering and AI captions for the meme studio.

### Key Endpoints

- `GET /api/templates` - Popular templates (cached)
- `POST /api/memes/generate` - Caption a template
- `GET /api/memes/recent` - Recently generated memes
- `POST /api/captions/generate` - AI caption for a topic
- `GET /api/health/ready` - Readiness check

### Configuration

Imgflip and Gemini credentials are read from environment variables.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE
# =============================================================================

# Add CORS middleware to allow frontend requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query parameters are client errors: 400, not 422."""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Invalid request data",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Send dict details as the body itself instead of nesting them under "detail"."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "error": str(exc)},
    )


# =============================================================================
# ROUTES
# =============================================================================

app.include_router(templates_router)
app.include_router(memes_router)
app.include_router(captions_router)
app.include_router(health_router)


# Root endpoint
@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint - points at the API documentation."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/api/health",
    }


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def run():
    """Run the application with uvicorn."""
    import uvicorn

    # In production, use: uvicorn memecraft.main:app --host 0.0.0.0 --port 8000
    uvicorn.run(
        "memecraft.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
