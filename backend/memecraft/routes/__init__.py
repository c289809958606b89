# Routes package - FastAPI routers
from memecraft.routes.captions import router as captions_router
from memecraft.routes.health import router as health_router
from memecraft.routes.memes import router as memes_router
from memecraft.routes.templates import router as templates_router

__all__ = [
    "captions_router",
    "health_router",
    "memes_router",
    "templates_router",
]
