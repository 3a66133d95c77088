"""Completed sessions — realized workout occurrences."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class CompletedSession:
    """A finished workout with measured averages.

    ``tss`` and ``intensity_factor`` are computed once when the session is
    saved and are None when they could not be computed. ``sport_type`` is
    the raw stored string; unknown values are treated as cycling.
    """

    user_id: str
    completed_at: datetime | None
    total_duration_seconds: int = 0
    sport_type: str | None = None
    avg_power: float = 0.0
    avg_speed: float = 0.0      # m/s
    avg_hr: float = 0.0
    avg_cadence: float = 0.0
    id: str | None = None
    training_id: str | None = None
    title: str = ""
    tss: float | None = None
    intensity_factor: float | None = None

    @property
    def completed_on(self) -> date | None:
        return self.completed_at.date() if self.completed_at is not None else None


@dataclass(frozen=True)
class SessionMetrics:
    """Session-level TSS/IF, both None when the computation was aborted."""

    tss: float | None = None
    intensity_factor: float | None = None

    @property
    def computed(self) -> bool:
        return self.tss is not None
