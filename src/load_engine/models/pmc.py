"""Performance Management Chart output."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class PmcDataPoint:
    """One calendar day of the chart. Output only, never persisted."""

    date: date
    ctl: float
    atl: float
    tsb: float
    daily_tss: float
    predicted: bool = False
