"""PickTrace and TraceEntry — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from fastapi_request_binding.exceptions import PickError


@dataclass(frozen=True)
class TraceEntry:
    """Single field (or body) binding record."""

    field_name: str
    source: str
    duration_ms: float
    outcome: Literal["OK", "SKIPPED", "FAILED"]
    reason: str | None = None


@dataclass
class PickTrace:
    """Structured record of a single bind call."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: Literal["OK", "FAILED"] = "OK"
    error: PickError | None = None
