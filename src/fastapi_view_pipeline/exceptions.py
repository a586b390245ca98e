"""PipelineException hierarchy for controlled aborts and render failures."""

from __future__ import annotations


class PipelineException(Exception):
    """Base for all pipeline exceptions."""


class HTTPAbort(PipelineException):
    """Controlled abort with HTTP status code and detail."""

    def __init__(self, detail: str, *, status_code: int = 400) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class DecodeError(HTTPAbort):
    """Request body is malformed or a field failed type conversion (400)."""

    def __init__(
        self, detail: str = "Malformed form data", *, field: str | None = None
    ) -> None:
        super().__init__(detail, status_code=400)
        self.field = field


class ViewNotFound(PipelineException):
    """No template exists for the requested view."""

    def __init__(self, name: str) -> None:
        super().__init__(f"View not found: {name}")
        self.name = name


class PipelineInternalError(PipelineException):
    """Boundary-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: BaseException | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
