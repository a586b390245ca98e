"""Chain class — ordered container and driver for Middleware."""

from __future__ import annotations

import time
from collections.abc import Awaitable
from dataclasses import dataclass

from fastapi_view_pipeline._types import Handler
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.middleware import Middleware
from fastapi_view_pipeline.outcome import Outcome
from fastapi_view_pipeline.trace import ChainTrace, TraceEntry

TRACE_KEY = "trace"


@dataclass(frozen=True)
class ResolvedChain:
    """Immutable execution plan: middleware outermost-first, then the handler."""

    middlewares: tuple[Middleware, ...]
    handler: Handler
    debug: bool = False

    async def __call__(self, ctx: RequestContext) -> Outcome:
        if not self.debug:
            return await self._dispatch(0, ctx)

        trace = ChainTrace()
        ctx.state[TRACE_KEY] = trace
        start = time.perf_counter()
        try:
            outcome = await self._dispatch(0, ctx)
        finally:
            trace.total_duration_ms = (time.perf_counter() - start) * 1000
        trace.outcome = outcome.kind
        return outcome

    async def _dispatch(self, index: int, ctx: RequestContext) -> Outcome:
        if index == len(self.middlewares):
            link_name = getattr(self.handler, "__name__", "handler")
            return await self._run(link_name, self.handler(ctx), ctx)

        current = self.middlewares[index]

        async def call_next(next_ctx: RequestContext) -> Outcome:
            return await self._dispatch(index + 1, next_ctx)

        return await self._run(current.name, current.intercept(ctx, call_next), ctx)

    async def _run(
        self, name: str, step: Awaitable[Outcome], ctx: RequestContext
    ) -> Outcome:
        if not self.debug:
            return await step

        trace: ChainTrace = ctx.state[TRACE_KEY]
        start = time.perf_counter()
        try:
            outcome: Outcome = await step
        except Exception as exc:
            elapsed = (time.perf_counter() - start) * 1000
            trace.entries.append(TraceEntry(name, elapsed, None, reason=str(exc)))
            raise
        elapsed = (time.perf_counter() - start) * 1000
        reason = str(outcome.error) if outcome.error is not None else None
        trace.entries.append(TraceEntry(name, elapsed, outcome.kind, reason=reason))
        return outcome


class Chain:
    """Ordered container of Middleware for one routing scope."""

    def __init__(self, *middlewares: Middleware, debug: bool = False) -> None:
        self._items: list[Middleware] = list(middlewares)
        self._debug = debug

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return tuple(self._items)

    def add(self, *middlewares: Middleware) -> Chain:
        self._items.extend(middlewares)
        return self

    def resolve(
        self, handler: Handler, *, parents: tuple[Middleware, ...] = ()
    ) -> ResolvedChain:
        return ResolvedChain(
            middlewares=parents + tuple(self._items),
            handler=handler,
            debug=self._debug,
        )
