"""Authentication middleware — session cookie loading and gates."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi_view_pipeline._types import Handler, TokenValidateCallback
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.middleware import Middleware
from fastapi_view_pipeline.outcome import HANDLED, Outcome
from fastapi_view_pipeline.session import (
    RETURN_PARAM,
    Session,
    get_session,
    set_session,
)

logger = logging.getLogger(__name__)


class LoadSession(Middleware):
    """Stores a Session for a non-empty session cookie. Never stops the chain."""

    def __init__(self, *, cookie_name: str = "session") -> None:
        self._cookie_name = cookie_name

    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        value = ctx.request.cookies.get(self._cookie_name)
        if value:
            set_session(ctx, Session(subject_id=value))
        return await call_next(ctx)


class RequireSession(Middleware):
    """Redirects to the login page unless the request carries a session.

    An empty cookie counts as no cookie. The original path travels in the
    ``return`` query parameter.
    """

    def __init__(
        self,
        *,
        cookie_name: str = "session",
        login_path: str = "/login",
    ) -> None:
        self._cookie_name = cookie_name
        self._login_path = login_path

    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        if get_session(ctx) is None:
            value = ctx.request.cookies.get(self._cookie_name)
            if not value:
                path = ctx.request.url.path
                logger.debug("No session for %s, redirecting to login", path)
                query = urlencode({RETURN_PARAM: path}, safe="/")
                ctx.redirect(f"{self._login_path}?{query}")
                return HANDLED
            set_session(ctx, Session(subject_id=value))

        return await call_next(ctx)


class RequireToken(Middleware):
    """Bearer-token variant of the gate; rejects with 401 instead of redirecting."""

    def __init__(
        self,
        validate: TokenValidateCallback,
        *,
        scheme: str = "Bearer",
        header: str = "Authorization",
    ) -> None:
        self._validate = validate
        self._scheme = scheme
        self._header = header

    def _reject(self, ctx: RequestContext) -> Outcome:
        ctx.response.headers["www-authenticate"] = self._scheme
        ctx.write_status(401)
        return HANDLED

    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        auth_value = ctx.request.headers.get(self._header)
        if not auth_value:
            return self._reject(ctx)

        parts = auth_value.split(" ", 1)
        if len(parts) != 2 or parts[0] != self._scheme or not parts[1]:
            return self._reject(ctx)

        try:
            subject_id = await self._validate(parts[1])
        except Exception:
            logger.info("Token rejected for %s", ctx.request.url.path, exc_info=True)
            return self._reject(ctx)
        if not subject_id:
            return self._reject(ctx)

        set_session(ctx, Session(subject_id=subject_id))
        return await call_next(ctx)
