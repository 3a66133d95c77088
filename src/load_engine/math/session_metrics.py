"""Session-level TSS and IF from measured averages.

IF is the ratio of the measured intensity proxy to the athlete's threshold
proxy for the sport (power/FTP, speed/threshold speed, speed/CSS speed).
TSS = hours × IF² × 100.
"""

from __future__ import annotations

import dataclasses
from typing import Callable

from load_engine.math.rounding import half_up
from load_engine.models.athlete import AthleteThresholds
from load_engine.models.enums import (
    SESSION_IF_DECIMALS,
    SESSION_TSS_DECIMALS,
    TSS_PER_HOUR_AT_THRESHOLD,
    SportType,
)
from load_engine.models.session import CompletedSession, SessionMetrics


def _power_if(session: CompletedSession, thresholds: AthleteThresholds) -> float | None:
    ftp = thresholds.ftp or 0
    if ftp <= 0 or session.avg_power <= 0:
        return None
    return session.avg_power / ftp


def _run_if(session: CompletedSession, thresholds: AthleteThresholds) -> float | None:
    pace = thresholds.threshold_pace_s_per_km or 0
    if pace <= 0 or session.avg_speed <= 0:
        return None
    return session.avg_speed / (1000.0 / pace)


def _swim_if(session: CompletedSession, thresholds: AthleteThresholds) -> float | None:
    css = thresholds.css_s_per_100m or 0
    if css <= 0 or session.avg_speed <= 0:
        return None
    return session.avg_speed / (100.0 / css)


def _brick_if(session: CompletedSession, thresholds: AthleteThresholds) -> float | None:
    # Power when available, otherwise running pace
    power = _power_if(session, thresholds)
    return power if power is not None else _run_if(session, thresholds)


_INTENSITY_FACTOR: dict[SportType, Callable[[CompletedSession, AthleteThresholds], float | None]] = {
    SportType.CYCLING: _power_if,
    SportType.RUNNING: _run_if,
    SportType.SWIMMING: _swim_if,
    SportType.BRICK: _brick_if,
}


def compute_session_metrics(
    session: CompletedSession,
    thresholds: AthleteThresholds | None,
) -> SessionMetrics:
    """Compute TSS (1 decimal) and IF (3 decimals) for a completed session.

    Any missing or non-positive threshold, measured average or duration
    aborts the computation and returns an empty SessionMetrics.
    """
    if thresholds is None or session.total_duration_seconds <= 0:
        return SessionMetrics()

    sport = SportType.parse(session.sport_type)
    intensity_factor = _INTENSITY_FACTOR[sport](session, thresholds)
    if intensity_factor is None or intensity_factor <= 0:
        return SessionMetrics()

    hours = session.total_duration_seconds / 3600.0
    tss = hours * intensity_factor * intensity_factor * TSS_PER_HOUR_AT_THRESHOLD
    return SessionMetrics(
        tss=half_up(tss, SESSION_TSS_DECIMALS),
        intensity_factor=half_up(intensity_factor, SESSION_IF_DECIMALS),
    )


def apply_session_metrics(
    session: CompletedSession, thresholds: AthleteThresholds | None
) -> CompletedSession:
    """Return ``session`` with TSS/IF attached, or unchanged when aborted."""
    metrics = compute_session_metrics(session, thresholds)
    if not metrics.computed:
        return session
    return dataclasses.replace(
        session, tss=metrics.tss, intensity_factor=metrics.intensity_factor
    )
