"""Request logging middleware."""

from __future__ import annotations

import logging
import time

from fastapi_view_pipeline._types import Handler
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.middleware import Middleware
from fastapi_view_pipeline.outcome import Outcome

logger = logging.getLogger(__name__)


class LogRequests(Middleware):
    """Logs route pattern, status, outcome and duration of every request."""

    def __init__(self, *, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        start = time.perf_counter()
        outcome: Outcome | None = None
        try:
            outcome = await call_next(ctx)
            return outcome
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self._logger.info(
                "%s %s -> %d %s (%.2fms)",
                ctx.request.method,
                ctx.pattern or ctx.request.url.path,
                ctx.response.status_code if outcome is not None else 500,
                outcome.kind.value if outcome is not None else "raised",
                duration_ms,
            )
