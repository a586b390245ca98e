"""App and Router — routing scopes, middleware registration and the chain boundary."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from fastapi_view_pipeline._types import Handler
from fastapi_view_pipeline.chain import Chain
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.exceptions import HTTPAbort, PipelineInternalError
from fastapi_view_pipeline.htmx import HtmxInterceptor, Interceptor
from fastapi_view_pipeline.middleware import Middleware
from fastapi_view_pipeline.outcome import Outcome, OutcomeKind
from fastapi_view_pipeline.response import ResponseWriter
from fastapi_view_pipeline.views import ViewResolver, view_name_for

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal Server Error"


def join_path(prefix: str, path: str) -> str:
    prefix = prefix.rstrip("/")
    path = path.strip()
    if path in ("", "/"):
        return prefix or "/"
    return f"{prefix}/{path.lstrip('/')}"


@dataclass(frozen=True)
class Route:
    """A registered handler and the scope whose middleware wrap it."""

    method: str
    path: str
    view_name: str
    handler: Handler
    router: Router


class Router:
    """A routing scope: a path prefix plus the middleware registered on it."""

    def __init__(
        self, app: App, prefix: str = "", parent: Router | None = None
    ) -> None:
        self._app = app
        self.prefix = prefix
        self.parent = parent
        self.chain = Chain(debug=app.debug)

    def use(self, *middlewares: Middleware) -> Router:
        """Register middleware; registration order is outer-to-inner order."""
        self.chain.add(*middlewares)
        return self

    def group(self, prefix: str) -> Router:
        """Child scope whose middleware run after this scope's middleware."""
        return Router(self._app, join_path(self.prefix, prefix), parent=self)

    def inherited(self) -> tuple[Middleware, ...]:
        if self.parent is None:
            return ()
        return self.parent.inherited() + self.parent.chain.middlewares

    def route(
        self,
        method: str,
        path: str,
        handler: Handler,
        *,
        view: str | None = None,
    ) -> Route:
        full_path = join_path(self.prefix, path)
        route = Route(
            method=method.upper(),
            path=full_path,
            view_name=view or view_name_for(full_path),
            handler=handler,
            router=self,
        )
        self._app.add_route(route)
        return route

    def get(self, path: str, handler: Handler, *, view: str | None = None) -> Route:
        return self.route("GET", path, handler, view=view)

    def post(self, path: str, handler: Handler, *, view: str | None = None) -> Route:
        return self.route("POST", path, handler, view=view)


class App(Router):
    """Root routing scope mounted on a FastAPI application.

    The App itself is an ASGI application.
    """

    def __init__(
        self,
        *,
        views: ViewResolver | None = None,
        interceptor: Interceptor | None = None,
        debug: bool = False,
        api: FastAPI | None = None,
    ) -> None:
        self.debug = debug
        self.views = views
        self.interceptor = interceptor or HtmxInterceptor()
        self.api = api or FastAPI(debug=debug)
        self.routes: list[Route] = []
        super().__init__(self)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.api(scope, receive, send)

    def add_route(self, route: Route) -> None:
        self.routes.append(route)
        self.api.add_api_route(
            route.path,
            _make_endpoint(self, route),
            methods=[route.method],
            include_in_schema=False,
        )

    def new_context(self, request: Request, route: Route) -> RequestContext:
        return RequestContext(
            request=request,
            response=ResponseWriter(debug=self.debug),
            pattern=route.path,
            view_name=route.view_name,
            views=self.views,
            interceptor=self.interceptor,
        )


def _make_endpoint(app: App, route: Route) -> Callable[..., Any]:
    async def endpoint(request: Request) -> Response:
        ctx = app.new_context(request, route)
        # Resolved per request so middleware registered after the route apply
        chain = route.router.chain.resolve(
            route.handler, parents=route.router.inherited()
        )

        try:
            outcome = await chain(ctx)
        except HTTPAbort as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
        except Exception as exc:
            _log_fault(route, exc)
            wrapped = PipelineInternalError(INTERNAL_ERROR_DETAIL, cause=exc)
            raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

        return _emit(ctx, route, outcome)

    endpoint.__name__ = f"{route.method.lower()}_{route.view_name}"
    return endpoint


def _emit(ctx: RequestContext, route: Route, outcome: Outcome) -> Response:
    if outcome.kind is OutcomeKind.FAILED:
        error = outcome.error
        if isinstance(error, HTTPAbort):
            raise HTTPException(status_code=error.status_code, detail=error.detail)
        _log_fault(route, error)
        wrapped = PipelineInternalError(INTERNAL_ERROR_DETAIL, cause=error)
        raise HTTPException(status_code=500, detail=wrapped.detail) from error

    if outcome.kind is OutcomeKind.HANDLED:
        logger.debug("%s %s handled early", route.method, route.path)

    return ctx.response.to_response()


def _log_fault(route: Route, error: BaseException | None) -> None:
    logger.error(
        "Unhandled error in %s %s",
        route.method,
        route.path,
        exc_info=(type(error), error, error.__traceback__) if error else None,
    )
