"""Middleware abstract base class and the function adapter."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fastapi_view_pipeline._types import Handler, InterceptFunc
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.outcome import Outcome


class Middleware(ABC):
    """A link that wraps everything registered after it.

    ``intercept`` decides whether and when ``call_next`` runs. Returning
    without awaiting it stops the chain.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome: ...


class FunctionMiddleware(Middleware):
    """Adapts ``async def fn(ctx, call_next) -> Outcome`` to a Middleware."""

    def __init__(self, func: InterceptFunc) -> None:
        self._func = func

    @property
    def name(self) -> str:
        return getattr(self._func, "__name__", type(self).__name__)

    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        return await self._func(ctx, call_next)


def middleware(func: InterceptFunc) -> FunctionMiddleware:
    """Decorator turning an intercept function into a Middleware."""
    return FunctionMiddleware(func)
