"""Tests for the partial-update protocol helpers."""

from __future__ import annotations

import json
from typing import Any

import pytest

from fastapi_view_pipeline.htmx import (
    HX_TRIGGER,
    is_partial_request,
    write_trigger,
)


class TestIsPartialRequest:
    @pytest.mark.parametrize("value", ["true", "True", "1", " yes "])
    def test_truthy_values(self, make_request: Any, value: str) -> None:
        assert is_partial_request(make_request(headers={"HX-Request": value}))

    @pytest.mark.parametrize("value", ["", "false", "0", "nope"])
    def test_falsy_values(self, make_request: Any, value: str) -> None:
        assert not is_partial_request(make_request(headers={"HX-Request": value}))

    def test_missing_header(self, make_request: Any) -> None:
        assert not is_partial_request(make_request())


class TestWriteTrigger:
    def test_sets_json_header(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        write_trigger(ctx, {"showMessage": "Email or password is incorrect"})
        payload = json.loads(ctx.response.headers[HX_TRIGGER])
        assert payload == {"showMessage": "Email or password is incorrect"}

    def test_merges_events(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        write_trigger(ctx, {"a": 1, "b": 1})
        write_trigger(ctx, {"b": 2})
        payload = json.loads(ctx.response.headers[HX_TRIGGER])
        assert payload == {"a": 1, "b": 2}

    def test_header_reaches_response(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        write_trigger(ctx, {"showMessage": "x"})
        response = ctx.response.to_response()
        assert json.loads(response.headers["hx-trigger"]) == {"showMessage": "x"}

    def test_merges_onto_plain_event_names(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        ctx.response.headers[HX_TRIGGER] = "refreshList, closeModal"
        write_trigger(ctx, {"showMessage": "x"})
        payload = json.loads(ctx.response.headers[HX_TRIGGER])
        assert payload == {
            "refreshList": None,
            "closeModal": None,
            "showMessage": "x",
        }
