"""ChainTrace and TraceEntry — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi_view_pipeline.outcome import OutcomeKind


@dataclass(frozen=True)
class TraceEntry:
    """Single middleware or handler execution record.

    ``duration_ms`` includes everything the link awaited downstream.
    """

    name: str
    duration_ms: float
    outcome: OutcomeKind | None
    reason: str | None = None


@dataclass
class ChainTrace:
    """Structured record of a single chain execution, innermost link first."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: OutcomeKind | None = None
