"""RequestContext — per-request state container."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

from fastapi_view_pipeline.htmx import Interceptor
from fastapi_view_pipeline.i18n import parse_accept_language
from fastapi_view_pipeline.outcome import Outcome
from fastapi_view_pipeline.response import ResponseWriter

if TYPE_CHECKING:
    from fastapi_view_pipeline.views import ViewResolver


@dataclass
class RequestContext:
    """Request, response writer and state for exactly one request.

    ``state`` is shared by every middleware and the handler of the same
    request, and by nothing else.
    """

    request: Request
    response: ResponseWriter = field(default_factory=ResponseWriter)
    state: dict[str, Any] = field(default_factory=dict)
    pattern: str = ""
    view_name: str = "index"
    views: ViewResolver | None = None
    interceptor: Interceptor = field(default_factory=Interceptor)

    def get(self, key: str, default: Any = None) -> Any:
        return self.state.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.state[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self.state

    def write_status(self, status_code: int) -> bool:
        return self.response.write_status(status_code)

    def redirect(self, location: str, status_code: int = 302) -> None:
        """Write a redirect. The caller still returns ``HANDLED``."""
        if self.interceptor.redirect(self, location, status_code):
            return
        self.response.headers["location"] = location
        self.write_status(status_code)

    def accept_language(self) -> Iterator[str]:
        return parse_accept_language(self.request.headers.get("accept-language"))

    def request_referer(self) -> str:
        referer = self.interceptor.request_referer(self)
        if referer:
            return referer
        return self.request.headers.get("referer", "")

    def view(self, data: Any, name: str | None = None) -> Outcome:
        """Render ``data`` with the route's view, or the template ``name``."""
        if self.views is None:
            raise RuntimeError("No view resolver configured for this request")
        return self.views.render(self, data, name)
