"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi_view_pipeline.context import RequestContext
    from fastapi_view_pipeline.outcome import Outcome

# Terminal route handler and the "next" callable passed to middleware
Handler = Callable[["RequestContext"], Awaitable["Outcome"]]
InterceptFunc = Callable[["RequestContext", Handler], Awaitable["Outcome"]]

# Callback used by the token-header authentication gate
TokenValidateCallback = Callable[[str], Awaitable[str]]
