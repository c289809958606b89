# Services package - External API integrations and meme orchestration
from memecraft.services.captions import CaptionService
from memecraft.services.imgflip import ImgflipService
from memecraft.services.memes import MemeService

__all__ = [
    "CaptionService",
    "ImgflipService",
    "MemeService",
]
