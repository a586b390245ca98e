"""Shared pytest fixtures for fastapi-view-pipeline tests."""

from __future__ import annotations

from typing import Any

import pytest
from jinja2 import DictLoader
from starlette.requests import Request

from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.response import ResponseWriter
from fastapi_view_pipeline.views import ViewResolver, ViewStore

TEMPLATES = {
    "layouts/main.html": (
        "<html><body><main>{% include fragment %}</main></body></html>"
    ),
    "pages/index.html": '<p class="name">{{ data.name }}</p>',
    "pages/login.html": (
        '<form>{% for m in data.errors_for("email") %}'
        '<span class="error">{{ m }}</span>{% endfor %}</form>'
    ),
    "text/sitemap.xml": "<urlset><lastmod>{{ data.last_mod }}</lastmod></urlset>",
}


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects with an optional body."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "path_params": {},
        }

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_form_request(make_request: Any) -> Any:
    """Factory for urlencoded POST requests."""

    def _make(
        body: str,
        headers: dict[str, str] | None = None,
    ) -> Request:
        all_headers = {"Content-Type": "application/x-www-form-urlencoded"}
        all_headers.update(headers or {})
        return make_request(
            method="POST", path="/login", headers=all_headers, body=body.encode()
        )

    return _make


@pytest.fixture
def view_store() -> ViewStore:
    return ViewStore(loader=DictLoader(TEMPLATES))


@pytest.fixture
def view_resolver(view_store: ViewStore) -> ViewResolver:
    return ViewResolver(view_store)


@pytest.fixture
def make_ctx(make_request: Any, view_resolver: ViewResolver) -> Any:
    """Factory for RequestContext objects bound to the in-memory views."""

    def _make(
        request: Request | None = None,
        *,
        view_name: str = "index",
        debug: bool = False,
        **request_kwargs: Any,
    ) -> RequestContext:
        return RequestContext(
            request=request or make_request(**request_kwargs),
            response=ResponseWriter(debug=debug),
            view_name=view_name,
            views=view_resolver,
        )

    return _make
