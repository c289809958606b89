"""
In-memory storage for templates and generated memes.

Both stores live for the lifetime of the process. There is no eviction,
no TTL and no locking: templates are only ever upserted in bulk and memes
are append-only, so concurrent requests at worst see a stale template list.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, Optional

from memecraft.schemas.meme import GeneratedMeme, NewGeneratedMeme, Template

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 20


class TemplateStore(ABC):
    """Keyed collection of templates, id -> Template."""

    @abstractmethod
    def list_templates(self) -> list[Template]:
        """Return every cached template (empty if never populated)."""

    @abstractmethod
    def replace_all(self, templates: Iterable[Template]) -> None:
        """Insert templates keyed by id, overwriting entries with the same id."""

    @abstractmethod
    def get_template(self, template_id: str) -> Optional[Template]:
        """Return the template with this id, or None."""

    @abstractmethod
    def clear_templates(self) -> None:
        """Drop every cached template."""


class GeneratedMemeStore(ABC):
    """Insertion-ordered collection of generated memes."""

    @abstractmethod
    def insert(self, meme: NewGeneratedMeme) -> GeneratedMeme:
        """Store a meme, assigning it a unique id and a creation timestamp."""

    @abstractmethod
    def list_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[GeneratedMeme]:
        """Return at most `limit` memes, newest first."""

    @abstractmethod
    def get(self, meme_id: str) -> Optional[GeneratedMeme]:
        """Return the meme with this id, or None."""

    @abstractmethod
    def clear_memes(self) -> None:
        """Drop every stored meme."""


class MemStorage(TemplateStore, GeneratedMemeStore):
    """Dictionary-backed implementation of both stores."""

    def __init__(self):
        self.templates: dict[str, Template] = {}
        self.memes: dict[str, GeneratedMeme] = {}

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    def list_templates(self) -> list[Template]:
        return list(self.templates.values())

    def replace_all(self, templates: Iterable[Template]) -> None:
        count = 0
        for template in templates:
            self.templates[template.id] = template
            count += 1
        logger.debug(f"Cached {count} templates ({len(self.templates)} total)")

    def get_template(self, template_id: str) -> Optional[Template]:
        return self.templates.get(template_id)

    def clear_templates(self) -> None:
        self.templates.clear()

    # -------------------------------------------------------------------------
    # Generated memes
    # -------------------------------------------------------------------------

    def insert(self, meme: NewGeneratedMeme) -> GeneratedMeme:
        record = GeneratedMeme(
            id=str(uuid.uuid4()),
            template_id=meme.template_id,
            template_name=meme.template_name,
            top_text=meme.top_text or None,
            bottom_text=meme.bottom_text or None,
            image_url=meme.image_url,
            created_at=datetime.now(timezone.utc),
        )
        self.memes[record.id] = record
        return record

    def list_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[GeneratedMeme]:
        if limit <= 0:
            return []
        # Walk newest insert first so equal timestamps keep newest-first order
        # under the stable sort.
        newest_first = reversed(list(self.memes.values()))
        ordered = sorted(newest_first, key=lambda meme: meme.created_at, reverse=True)
        return ordered[:limit]

    def get(self, meme_id: str) -> Optional[GeneratedMeme]:
        return self.memes.get(meme_id)

    def clear_memes(self) -> None:
        self.memes.clear()

    def clear(self) -> None:
        """Empty both stores."""
        self.clear_templates()
        self.clear_memes()
        logger.info("Template and meme caches cleared")


# Process-wide storage shared by all requests
_storage = MemStorage()


def get_storage() -> MemStorage:
    """Get the shared MemStorage instance for dependency injection."""
    return _storage
