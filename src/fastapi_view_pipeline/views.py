"""View store and resolver — full page vs. fragment rendering."""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    TemplateNotFound,
    select_autoescape,
)
from starlette.requests import Request

from fastapi_view_pipeline.exceptions import ViewNotFound
from fastapi_view_pipeline.htmx import is_partial_request
from fastapi_view_pipeline.outcome import CONTINUE, Outcome

if TYPE_CHECKING:
    from fastapi_view_pipeline.context import RequestContext

logger = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html"
PAGES_DIR = "pages"
DEFAULT_LAYOUT = "layouts/main.html"

Negotiator = Callable[[Request], bool]


def view_name_for(path: str) -> str:
    """Derive a route's view name from its path pattern.

    ``/`` becomes ``index``; ``/user/{id}`` becomes ``user/{id}``.
    """
    name = path.strip("/")
    return name or "index"


MEDIA_TYPES = {
    ".html": HTML_MEDIA_TYPE,
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".json": "application/json",
}


def media_type_for(template_name: str) -> str:
    suffix = Path(template_name).suffix.lower()
    if suffix in MEDIA_TYPES:
        return MEDIA_TYPES[suffix]
    media_type, _ = mimetypes.guess_type(template_name)
    return media_type or HTML_MEDIA_TYPE


@dataclass(frozen=True)
class ViewSnapshot:
    """Immutable template environment used for a whole render."""

    environment: Environment
    layout: str

    def render(self, template_name: str, **context: Any) -> str:
        try:
            template = self.environment.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound as exc:
            raise ViewNotFound(exc.name or template_name) from exc


class ViewStore:
    """Process-wide template store.

    Renders take the current snapshot once; :meth:`reload` builds a fresh
    environment and swaps the reference so in-flight renders are never
    affected.
    """

    def __init__(
        self,
        directory: str | Path | None = None,
        *,
        loader: BaseLoader | None = None,
        layout: str = DEFAULT_LAYOUT,
    ) -> None:
        if loader is None and directory is None:
            raise ValueError("ViewStore needs a directory or a loader")
        self._directory = Path(directory) if directory is not None else None
        self._loader = loader
        self._layout = layout
        self._snapshot = self._build()

    def _build(self) -> ViewSnapshot:
        loader = self._loader or FileSystemLoader(str(self._directory))
        environment = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"]),
        )
        return ViewSnapshot(environment=environment, layout=self._layout)

    def snapshot(self) -> ViewSnapshot:
        return self._snapshot

    def reload(self) -> None:
        self._snapshot = self._build()
        logger.info("Views reloaded from %s", self._directory or self._loader)


class ViewResolver:
    """Chooses fragment, full page or an explicit template for a route."""

    def __init__(
        self,
        store: ViewStore,
        *,
        negotiate: Negotiator = is_partial_request,
    ) -> None:
        self.store = store
        self.negotiate = negotiate

    def render(
        self, ctx: RequestContext, data: Any, name: str | None = None
    ) -> Outcome:
        snapshot = self.store.snapshot()

        if name is not None:
            body = snapshot.render(name, data=data)
            ctx.response.write(body, media_type=media_type_for(name))
            return CONTINUE

        fragment = f"{PAGES_DIR}/{ctx.view_name}.html"
        if self.negotiate(ctx.request):
            body = snapshot.render(fragment, data=data)
        else:
            body = snapshot.render(snapshot.layout, data=data, fragment=fragment)

        ctx.response.write(body, media_type=HTML_MEDIA_TYPE)
        return CONTINUE
