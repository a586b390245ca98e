"""Session value, typed context accessor and cookie issuer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlsplit

from fastapi_view_pipeline.config import Settings, get_settings

if TYPE_CHECKING:
    from fastapi_view_pipeline.context import RequestContext

SESSION_KEY = "session"
RETURN_PARAM = "return"


@dataclass(frozen=True)
class Session:
    """Identity of the authenticated principal for one request."""

    subject_id: str
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def get_session(ctx: RequestContext) -> Session | None:
    value = ctx.get(SESSION_KEY)
    return value if isinstance(value, Session) else None


def set_session(ctx: RequestContext, session: Session) -> None:
    ctx.set(SESSION_KEY, session)


def issue_session(
    ctx: RequestContext, subject_id: str, settings: Settings | None = None
) -> None:
    """Set the session cookie carrying ``subject_id``."""
    settings = settings or get_settings()
    ctx.response.set_cookie(
        settings.session_cookie_name,
        subject_id,
        max_age=settings.session_max_age,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="lax",
    )


def _is_local_path(target: str) -> bool:
    if any(ch == "\\" or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in target):
        return False
    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return False
    return target.startswith("/") and not target.startswith("//")


def resolve_return_path(ctx: RequestContext, default: str) -> str:
    """Where to send the user after login.

    Reads ``return`` from the request's own query, then from the
    referer's query. Anything that is not a local path falls back to
    ``default``.
    """
    target = ctx.request.query_params.get(RETURN_PARAM, "")
    if not target:
        referer = ctx.request_referer()
        if referer:
            values = parse_qs(urlsplit(referer).query).get(RETURN_PARAM, [""])
            target = values[0]
    if target and _is_local_path(target):
        return target
    return default
