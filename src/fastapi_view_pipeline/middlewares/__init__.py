"""Built-in middleware."""

from fastapi_view_pipeline.middlewares.authentication import (
    LoadSession,
    RequireSession,
    RequireToken,
)
from fastapi_view_pipeline.middlewares.request_logging import LogRequests

__all__ = [
    "LoadSession",
    "LogRequests",
    "RequireSession",
    "RequireToken",
]
