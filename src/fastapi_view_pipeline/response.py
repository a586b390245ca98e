"""ResponseWriter — buffered outbound response for one request."""

from __future__ import annotations

import logging
from typing import Any, Literal

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

logger = logging.getLogger(__name__)


class ResponseWriter:
    """Accumulates status, headers, cookies and body until the chain finishes.

    The status can be written once. Later writes are ignored so headers
    that were already decided are never contradicted.
    """

    def __init__(self, *, debug: bool = False) -> None:
        self.headers = MutableHeaders()
        self.body: bytes = b""
        self.media_type: str | None = None
        self._status_code: int | None = None
        self._cookies: list[dict[str, Any]] = []
        self._debug = debug

    @property
    def status_code(self) -> int:
        return self._status_code if self._status_code is not None else 200

    @property
    def status_written(self) -> bool:
        return self._status_code is not None

    def write_status(self, status_code: int) -> bool:
        if self._status_code is not None:
            if self._debug:
                logger.warning(
                    "Superfluous write_status(%d): status already %d",
                    status_code,
                    self._status_code,
                )
            return False
        self._status_code = status_code
        return True

    def write(self, content: str | bytes, *, media_type: str | None = None) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.body += content
        if media_type is not None:
            self.media_type = media_type

    def set_cookie(
        self,
        key: str,
        value: str = "",
        *,
        max_age: int | None = None,
        path: str | None = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = False,
        samesite: Literal["lax", "strict", "none"] | None = "lax",
    ) -> None:
        self._cookies.append(
            {
                "key": key,
                "value": value,
                "max_age": max_age,
                "path": path,
                "domain": domain,
                "secure": secure,
                "httponly": httponly,
                "samesite": samesite,
            }
        )

    def to_response(self) -> Response:
        response = Response(
            content=self.body,
            status_code=self.status_code,
            media_type=self.media_type,
        )
        for key, value in self.headers.items():
            response.headers.append(key, value)
        for cookie in self._cookies:
            response.set_cookie(**cookie)
        return response
