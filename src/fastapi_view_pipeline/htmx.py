"""Partial-update (htmx) request/response protocol."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

if TYPE_CHECKING:
    from fastapi_view_pipeline.context import RequestContext

HX_REQUEST = "HX-Request"
HX_CURRENT_URL = "HX-Current-URL"
HX_TRIGGER = "HX-Trigger"
HX_REDIRECT = "HX-Redirect"

_TRUTHY = {"true", "1", "yes", "on"}


def is_partial_request(request: Request) -> bool:
    """True when the client asked for a fragment rather than a full page."""
    value = request.headers.get(HX_REQUEST, "")
    return value.strip().lower() in _TRUTHY


def _parse_trigger(value: str | None) -> dict[str, Any]:
    """Read an HX-Trigger value, either a JSON object or comma-separated names."""
    if not value:
        return {}
    try:
        parsed = json.loads(value)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed
    return {name.strip(): None for name in value.split(",") if name.strip()}


def write_trigger(ctx: RequestContext, events: dict[str, Any]) -> None:
    """Ask a partial-update client to fire client-side events.

    ``events`` maps event names to their payload. Events already set on
    the response are kept, later names overwrite earlier ones.
    """
    merged = _parse_trigger(ctx.response.headers.get(HX_TRIGGER))
    merged.update(events)
    ctx.response.headers[HX_TRIGGER] = json.dumps(merged)


class Interceptor:
    """Hooks that let a client protocol change how the context responds.

    Each method returns None (or False) to fall back to plain HTTP.
    """

    def redirect(self, ctx: RequestContext, location: str, status_code: int) -> bool:
        return False

    def request_referer(self, ctx: RequestContext) -> str | None:
        return None


class HtmxInterceptor(Interceptor):
    """Redirects and referers understood by htmx clients.

    Partial requests get status 200 with ``HX-Redirect``, since htmx does
    not follow 3xx responses to its own requests.
    """

    def redirect(self, ctx: RequestContext, location: str, status_code: int) -> bool:
        if not is_partial_request(ctx.request):
            return False
        ctx.response.headers[HX_REDIRECT] = location
        ctx.write_status(200)
        return True

    def request_referer(self, ctx: RequestContext) -> str | None:
        if not is_partial_request(ctx.request):
            return None
        return ctx.request.headers.get(HX_CURRENT_URL)
