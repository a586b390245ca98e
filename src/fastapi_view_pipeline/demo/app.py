"""Demo admin application wired on the pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from fastapi_view_pipeline.app import App
from fastapi_view_pipeline.config import Settings, get_settings
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.demo.models import (
    LoginForm,
    Sitemap,
    User,
    get_user_by_id,
)
from fastapi_view_pipeline.exceptions import PipelineInternalError
from fastapi_view_pipeline.forms import BoundForm, bind_form
from fastapi_view_pipeline.htmx import write_trigger
from fastapi_view_pipeline.i18n import MessageCatalog
from fastapi_view_pipeline.middlewares import (
    LoadSession,
    LogRequests,
    RequireSession,
)
from fastapi_view_pipeline.outcome import HANDLED, Outcome
from fastapi_view_pipeline.session import (
    get_session,
    issue_session,
    resolve_return_path,
)
from fastapi_view_pipeline.views import ViewResolver, ViewStore

TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_app(settings: Settings | None = None) -> App:
    settings = settings or get_settings()

    if settings.dev and settings.templates_dir is not None:
        views = ViewStore(settings.templates_dir)
    else:
        views = ViewStore(TEMPLATES_DIR)
    catalog = MessageCatalog(default_locale=settings.default_locale)

    app = App(views=ViewResolver(views), debug=settings.debug)
    app.use(LogRequests(), LoadSession(cookie_name=settings.session_cookie_name))

    async def home(ctx: RequestContext) -> Outcome:
        return ctx.view({"name": settings.app_name})

    async def user_detail(ctx: RequestContext) -> Outcome:
        return ctx.view(get_user_by_id(ctx.request.path_params["id"]))

    async def sitemap(ctx: RequestContext) -> Outcome:
        return ctx.view(
            Sitemap(last_mod=datetime.now(timezone.utc)), "text/sitemap.xml"
        )

    async def admin_home(ctx: RequestContext) -> Outcome:
        session = get_session(ctx)
        if session is None:
            return Outcome.failed(PipelineInternalError("Session missing"))
        return ctx.view(User(id=session.subject_id, name=session.subject_id))

    async def login_page(ctx: RequestContext) -> Outcome:
        return ctx.view(BoundForm.empty(LoginForm, catalog))

    async def login(ctx: RequestContext) -> Outcome:
        form = await bind_form(ctx.request, LoginForm, catalog=catalog)

        if not form.validate(*ctx.accept_language()):
            ctx.write_status(400)
            return ctx.view(form)

        if (
            form.data.email != settings.demo_email
            or form.data.password != settings.demo_password
        ):
            message = catalog.message("credentials", ctx.accept_language())
            write_trigger(ctx, {"showMessage": message})
            form.add_error(message)
            ctx.write_status(400)
            return ctx.view(form)

        issue_session(ctx, form.data.email, settings)
        ctx.redirect(resolve_return_path(ctx, settings.default_return_path))
        return HANDLED

    app.get("/", home)
    app.get("/user/{id}", user_detail)
    app.get("/sitemap.xml", sitemap)
    app.get(settings.login_path, login_page, view="login")
    app.post(settings.login_path, login, view="login")

    admin = app.group("/admin")
    admin.use(
        RequireSession(
            cookie_name=settings.session_cookie_name,
            login_path=settings.login_path,
        )
    )
    admin.get("/", admin_home)

    return app
