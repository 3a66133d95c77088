"""Athlete reference thresholds and rolling load state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class AthleteThresholds:
    """Per-athlete reference values, read-only to the engine.

    None means the athlete never set the value. Paces are seconds per km
    except CSS, which is seconds per 100 m.
    """

    athlete_id: str
    ftp: int | None = None                          # watts
    threshold_pace_s_per_km: int | None = None
    css_s_per_100m: int | None = None
    pace_5k_s_per_km: int | None = None
    pace_10k_s_per_km: int | None = None
    pace_half_marathon_s_per_km: int | None = None
    pace_marathon_s_per_km: int | None = None
    vo2max_power: int | None = None                 # watts
    vo2max_pace_s_per_km: int | None = None


@dataclass(frozen=True)
class LoadState:
    """Rolling CTL/ATL/TSB for one athlete as of ``as_of``.

    This is the only state that survives between engine calls; the caller
    persists it (single writer per athlete).
    """

    ctl: float = 0.0
    atl: float = 0.0
    tsb: float = 0.0
    as_of: date | None = None
    computed: bool = True

    @classmethod
    def empty(cls) -> LoadState:
        """State for an athlete with no recorded history."""
        return cls(computed=False)
