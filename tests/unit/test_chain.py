"""Tests for Outcome, Middleware, Chain and ResolvedChain."""

from __future__ import annotations

from typing import Any

import pytest

from fastapi_view_pipeline._types import Handler
from fastapi_view_pipeline.chain import Chain, ResolvedChain
from fastapi_view_pipeline.context import RequestContext
from fastapi_view_pipeline.middleware import FunctionMiddleware, Middleware, middleware
from fastapi_view_pipeline.outcome import (
    CONTINUE,
    HANDLED,
    Outcome,
    OutcomeKind,
)


class _Recorder(Middleware):
    def __init__(self, label: str, log: list[str]) -> None:
        self.label = label
        self.log = log

    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        self.log.append(f"{self.label}:before")
        outcome = await call_next(ctx)
        self.log.append(f"{self.label}:after")
        return outcome


class _Stop(Middleware):
    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        ctx.write_status(403)
        return HANDLED


class _Forgetful(Middleware):
    async def intercept(self, ctx: RequestContext, call_next: Handler) -> Outcome:
        return CONTINUE


class TestOutcome:
    def test_constants(self) -> None:
        assert CONTINUE.kind is OutcomeKind.CONTINUE
        assert HANDLED.kind is OutcomeKind.HANDLED
        assert HANDLED.is_handled and not HANDLED.is_failed
        assert not CONTINUE.is_handled

    def test_failed_carries_error(self) -> None:
        error = ValueError("x")
        outcome = Outcome.failed(error)
        assert outcome.is_failed
        assert outcome.error is error

    def test_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            CONTINUE.kind = OutcomeKind.FAILED  # type: ignore[misc]


class TestMiddlewareAdapter:
    def test_decorator_returns_function_middleware(self) -> None:
        @middleware
        async def noop(ctx: RequestContext, call_next: Handler) -> Outcome:
            return await call_next(ctx)

        assert isinstance(noop, FunctionMiddleware)
        assert noop.name == "noop"

    def test_class_name(self) -> None:
        assert _Stop().name == "_Stop"


class TestChain:
    def test_add_returns_self(self) -> None:
        chain = Chain()
        assert chain.add(_Stop()) is chain

    def test_resolve_prepends_parents(self) -> None:
        parent = _Stop()
        own = _Forgetful()

        async def handler(ctx: RequestContext) -> Outcome:
            return CONTINUE

        resolved = Chain(own).resolve(handler, parents=(parent,))
        assert isinstance(resolved, ResolvedChain)
        assert resolved.middlewares == (parent, own)
        assert resolved.handler is handler


class TestResolvedChain:
    async def test_empty_chain_runs_handler(self, make_request: Any) -> None:
        async def handler(ctx: RequestContext) -> Outcome:
            ctx.set("ran", True)
            return CONTINUE

        ctx = RequestContext(request=make_request())
        outcome = await Chain().resolve(handler)(ctx)
        assert outcome is CONTINUE
        assert ctx.get("ran") is True

    async def test_registration_order_is_outer_to_inner(
        self, make_request: Any
    ) -> None:
        log: list[str] = []

        async def handler(ctx: RequestContext) -> Outcome:
            log.append("handler")
            return CONTINUE

        chain = Chain(_Recorder("a", log), _Recorder("b", log))
        await chain.resolve(handler)(RequestContext(request=make_request()))
        assert log == ["a:before", "b:before", "handler", "b:after", "a:after"]

    async def test_state_flows_downstream(self, make_request: Any) -> None:
        @middleware
        async def loader(ctx: RequestContext, call_next: Handler) -> Outcome:
            ctx.set("user", "ada")
            return await call_next(ctx)

        seen: list[Any] = []

        @middleware
        async def reader(ctx: RequestContext, call_next: Handler) -> Outcome:
            seen.append(ctx.get("user"))
            return await call_next(ctx)

        async def handler(ctx: RequestContext) -> Outcome:
            seen.append(ctx.get("user"))
            return CONTINUE

        await Chain(loader, reader).resolve(handler)(
            RequestContext(request=make_request())
        )
        assert seen == ["ada", "ada"]

    async def test_short_circuit_skips_rest(self, make_request: Any) -> None:
        log: list[str] = []

        async def handler(ctx: RequestContext) -> Outcome:
            log.append("handler")
            return CONTINUE

        ctx = RequestContext(request=make_request())
        chain = Chain(_Recorder("outer", log), _Stop(), _Recorder("inner", log))
        outcome = await chain.resolve(handler)(ctx)

        assert outcome is HANDLED
        assert log == ["outer:before", "outer:after"]
        assert ctx.response.status_code == 403

    async def test_no_implicit_continuation(self, make_request: Any) -> None:
        called = False

        async def handler(ctx: RequestContext) -> Outcome:
            nonlocal called
            called = True
            return CONTINUE

        outcome = await Chain(_Forgetful()).resolve(handler)(
            RequestContext(request=make_request())
        )
        assert outcome is CONTINUE
        assert called is False

    async def test_failed_outcome_propagates(self, make_request: Any) -> None:
        error = RuntimeError("nope")

        async def handler(ctx: RequestContext) -> Outcome:
            return Outcome.failed(error)

        log: list[str] = []
        outcome = await Chain(_Recorder("a", log)).resolve(handler)(
            RequestContext(request=make_request())
        )
        assert outcome.is_failed
        assert outcome.error is error
        assert log == ["a:before", "a:after"]

    async def test_exception_propagates(self, make_request: Any) -> None:
        async def handler(ctx: RequestContext) -> Outcome:
            raise RuntimeError("boom")

        log: list[str] = []
        with pytest.raises(RuntimeError, match="boom"):
            await Chain(_Recorder("a", log)).resolve(handler)(
                RequestContext(request=make_request())
            )
        assert log == ["a:before"]

    async def test_resolved_chain_is_reusable(self, make_request: Any) -> None:
        count = 0

        async def handler(ctx: RequestContext) -> Outcome:
            nonlocal count
            count += 1
            return CONTINUE

        resolved = Chain().resolve(handler)
        await resolved(RequestContext(request=make_request()))
        await resolved(RequestContext(request=make_request()))
        assert count == 2
