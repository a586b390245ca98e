"""FastAPI View Pipeline - middleware chains and negotiated views for FastAPI."""

from fastapi_view_pipeline.app import App, Route, Router
from fastapi_view_pipeline.chain import Chain, ResolvedChain
from fastapi_view_pipeline.config import Settings, get_settings
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.exceptions import (
    DecodeError,
    HTTPAbort,
    PipelineException,
    PipelineInternalError,
    ViewNotFound,
)
from fastapi_view_pipeline.forms import (
    BoundForm,
    FieldError,
    FormField,
    bind_form,
)
from fastapi_view_pipeline.htmx import (
    HtmxInterceptor,
    Interceptor,
    is_partial_request,
    write_trigger,
)
from fastapi_view_pipeline.i18n import MessageCatalog, parse_accept_language
from fastapi_view_pipeline.middleware import FunctionMiddleware, Middleware, middleware
from fastapi_view_pipeline.middlewares import (
    LoadSession,
    LogRequests,
    RequireSession,
    RequireToken,
)
from fastapi_view_pipeline.outcome import CONTINUE, HANDLED, Outcome, OutcomeKind
from fastapi_view_pipeline.response import ResponseWriter
from fastapi_view_pipeline.session import (
    SESSION_KEY,
    Session,
    get_session,
    issue_session,
    resolve_return_path,
)
from fastapi_view_pipeline.trace import ChainTrace, TraceEntry
from fastapi_view_pipeline.views import ViewResolver, ViewStore

__all__ = [
    "CONTINUE",
    "HANDLED",
    "SESSION_KEY",
    "App",
    "BoundForm",
    "Chain",
    "ChainTrace",
    "DecodeError",
    "FieldError",
    "FormField",
    "FunctionMiddleware",
    "HTTPAbort",
    "HtmxInterceptor",
    "Interceptor",
    "LoadSession",
    "LogRequests",
    "MessageCatalog",
    "Middleware",
    "Outcome",
    "OutcomeKind",
    "PipelineException",
    "PipelineInternalError",
    "RequestContext",
    "RequireSession",
    "RequireToken",
    "ResolvedChain",
    "ResponseWriter",
    "Route",
    "Router",
    "Session",
    "Settings",
    "TraceEntry",
    "ViewNotFound",
    "ViewResolver",
    "ViewStore",
    "bind_form",
    "get_session",
    "get_settings",
    "is_partial_request",
    "issue_session",
    "middleware",
    "parse_accept_language",
    "resolve_return_path",
    "write_trigger",
]
