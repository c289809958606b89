"""
Error taxonomy shared by services and routes.

Request validation errors are pydantic's own and never pass through here;
FastAPI raises them before a route body runs.
"""


class MemecraftError(Exception):
    """Base exception for all Memecraft errors."""
    pass


class UpstreamError(MemecraftError):
    """Raised when a remote API reports a failure or cannot be reached."""
    pass


class NotFoundError(MemecraftError):
    """Raised when a lookup by id misses."""
    pass
