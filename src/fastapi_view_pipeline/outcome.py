"""Outcome — tagged result returned by handlers and middleware."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutcomeKind(Enum):
    """How a link in the chain finished."""

    CONTINUE = "continue"
    HANDLED = "handled"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """Result of a handler or middleware.

    ``CONTINUE`` means the link completed normally. ``HANDLED`` means the
    response was fully written and nothing downstream may run. ``FAILED``
    carries the error to report at the chain boundary.
    """

    kind: OutcomeKind
    error: BaseException | None = None

    @classmethod
    def failed(cls, error: BaseException) -> Outcome:
        return cls(OutcomeKind.FAILED, error)

    @property
    def is_handled(self) -> bool:
        return self.kind is OutcomeKind.HANDLED

    @property
    def is_failed(self) -> bool:
        return self.kind is OutcomeKind.FAILED


CONTINUE = Outcome(OutcomeKind.CONTINUE)
HANDLED = Outcome(OutcomeKind.HANDLED)
