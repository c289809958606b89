"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from memecraft.config import Settings
from memecraft.main import app
from memecraft.schemas.meme import Template
from memecraft.services.captions import CaptionService, get_caption_service
from memecraft.services.imgflip import CaptionedImage, ImgflipService, get_imgflip_service
from memecraft.storage import MemStorage, get_storage


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's .env file."""
    return Settings(
        _env_file=None,
        IMGFLIP_API_URL="https://imgflip.test",
        IMGFLIP_USERNAME="memer",
        IMGFLIP_PASSWORD="hunter2",
        GEMINI_API_URL="https://gemini.test/v1beta",
        GEMINI_API_KEY="gemini-key",
        GEMINI_MODEL="gemini-1.5-flash",
        RECENT_MEMES_LIMIT=12,
    )


@pytest.fixture
def storage() -> MemStorage:
    return MemStorage()


@pytest.fixture
def sample_templates() -> list[Template]:
    return [
        Template(
            id="181913649",
            name="Drake Hotline Bling",
            url="https://i.imgflip.com/30b1gx.jpg",
            width=1200,
            height=1200,
            box_count=2,
        ),
        Template(
            id="87743020",
            name="Two Buttons",
            url="https://i.imgflip.com/1g8my4.jpg",
            width=600,
            height=908,
            box_count=3,
        ),
    ]


@pytest.fixture
def mock_imgflip(sample_templates) -> MagicMock:
    """ImgflipService double that succeeds by default."""
    service = MagicMock(spec=ImgflipService)
    service.fetch_templates = AsyncMock(return_value=sample_templates)
    service.caption_image = AsyncMock(
        return_value=CaptionedImage(
            url="https://i.imgflip.com/abc123.jpg",
            page_url="https://imgflip.com/i/abc123",
        )
    )
    return service


@pytest.fixture
def mock_caption_service() -> MagicMock:
    return MagicMock(spec=CaptionService)


@pytest.fixture
def client(storage, mock_imgflip, mock_caption_service):
    """TestClient wired to a fresh storage and mocked upstream services."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_imgflip_service] = lambda: mock_imgflip
    app.dependency_overrides[get_caption_service] = lambda: mock_caption_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
