"""Performance Management Chart: CTL, ATL and TSB from daily TSS.

Both loads are exponential moving averages of daily TSS with smoothing
constant k = 1 - e^(-1/N):

    load_today = load_yesterday + (tss_today - load_yesterday) × k

Every calendar day is walked, rest days included (TSS 0), so the loads
decay between sessions.

References:
    - Banister et al. (1975): impulse-response model of training
    - Coggan & Allen (2010): CTL (42 d), ATL (7 d), TSB = CTL - ATL
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from load_engine.math.rounding import half_up
from load_engine.models.athlete import LoadState
from load_engine.models.enums import (
    ATL_TIME_CONSTANT_DAYS,
    CTL_TIME_CONSTANT_DAYS,
    FORM_FATIGUED_TSB,
    FORM_FRESH_TSB,
    FORM_NEUTRAL_TSB,
    FORM_VERY_FRESH_TSB,
    LOAD_DECIMALS,
    FormStatus,
)
from load_engine.models.pmc import PmcDataPoint
from load_engine.models.session import CompletedSession

_LOAD_COLUMNS = ["tss", "ctl", "atl", "tsb"]


def smoothing_constant(time_constant_days: float) -> float:
    """EMA smoothing constant k = 1 - e^(-1/N) for an N-day horizon."""
    return 1.0 - math.exp(-1.0 / time_constant_days)


def build_daily_tss(sessions: Iterable[CompletedSession]) -> pd.Series:
    """Sum session TSS per calendar day.

    Sessions without a TSS or a completion time are skipped.

    Returns:
        Float series indexed by ``datetime.date``, one entry per day that
        has at least one scored session.
    """
    rows = [
        (s.completed_on, s.tss)
        for s in sessions
        if s.tss is not None and s.completed_at is not None
    ]
    if not rows:
        return pd.Series(dtype=np.float64)
    frame = pd.DataFrame(rows, columns=["date", "tss"])
    return frame.groupby("date")["tss"].sum().astype(np.float64)


def first_session_date(sessions: Iterable[CompletedSession]) -> date | None:
    """Calendar date of the earliest dated session, scored or not."""
    dates = [s.completed_on for s in sessions if s.completed_at is not None]
    return min(dates) if dates else None


def walk_load(
    daily_tss: pd.Series,
    start: date,
    end: date,
    ctl_days: float = CTL_TIME_CONSTANT_DAYS,
    atl_days: float = ATL_TIME_CONSTANT_DAYS,
    seed: LoadState | None = None,
) -> pd.DataFrame:
    """Run the CTL/ATL recurrence over every day from ``start`` to ``end``.

    Args:
        daily_tss: TSS per date; missing days count as rest (0).
        start: First day to walk (inclusive).
        end: Last day to walk (inclusive).
        ctl_days: Chronic load time constant.
        atl_days: Acute load time constant.
        seed: Load state on the day before ``start``. Zero when None.

    Returns:
        Unrounded frame indexed by date with columns tss, ctl, atl, tsb.
        Empty when ``start`` is after ``end``.
    """
    if start > end:
        return pd.DataFrame(columns=_LOAD_COLUMNS, dtype=np.float64)

    days = pd.date_range(start, end, freq="D").date
    tss = daily_tss.reindex(days, fill_value=0.0).astype(np.float64)

    ctl = _ema(tss, ctl_days, seed.ctl if seed else 0.0)
    atl = _ema(tss, atl_days, seed.atl if seed else 0.0)

    frame = pd.DataFrame({"tss": tss.to_numpy(), "ctl": ctl, "atl": atl}, index=days)
    frame["tsb"] = frame["ctl"] - frame["atl"]
    return frame


def _ema(values: pd.Series, time_constant_days: float, seed: float) -> np.ndarray:
    """Recursive EMA seeded with yesterday's value; the seed is not emitted."""
    seeded = pd.Series(np.concatenate(([seed], values.to_numpy(dtype=np.float64))))
    smoothed = seeded.ewm(alpha=smoothing_constant(time_constant_days), adjust=False).mean()
    return smoothed.to_numpy()[1:]


def recompute_load(
    sessions: Sequence[CompletedSession],
    today: date,
    ctl_days: float = CTL_TIME_CONSTANT_DAYS,
    atl_days: float = ATL_TIME_CONSTANT_DAYS,
) -> LoadState:
    """Walk the athlete's whole history up to ``today`` and return the end state.

    The walk starts at the first session's date. An athlete with no dated
    session gets ``LoadState.empty()``.
    """
    first = first_session_date(sessions)
    if first is None:
        return LoadState.empty()

    frame = walk_load(build_daily_tss(sessions), first, today, ctl_days, atl_days)
    if frame.empty:
        return LoadState(as_of=today)

    last = frame.iloc[-1]
    return LoadState(
        ctl=half_up(last["ctl"], LOAD_DECIMALS),
        atl=half_up(last["atl"], LOAD_DECIMALS),
        tsb=half_up(last["ctl"] - last["atl"], LOAD_DECIMALS),
        as_of=today,
    )


def generate_pmc(
    sessions: Sequence[CompletedSession],
    start: date,
    end: date,
    ctl_days: float = CTL_TIME_CONSTANT_DAYS,
    atl_days: float = ATL_TIME_CONSTANT_DAYS,
) -> list[PmcDataPoint]:
    """One data point per day from ``start`` to ``end`` inclusive.

    The EMAs are warmed up from the earliest session (or ``start`` if that
    is earlier) with the same per-day rule; warm-up days are not emitted.
    """
    if start > end:
        return []

    first = first_session_date(sessions)
    walk_start = min(start, first) if first is not None else start
    frame = walk_load(build_daily_tss(sessions), walk_start, end, ctl_days, atl_days)

    return [
        _to_point(day, row.tss, row.ctl, row.atl)
        for day, row in zip(frame.index, frame.itertuples(index=False))
        if day >= start
    ]


def project_pmc(
    history: Sequence[PmcDataPoint],
    daily_tss: float,
    days: int,
    ctl_days: float = CTL_TIME_CONSTANT_DAYS,
    atl_days: float = ATL_TIME_CONSTANT_DAYS,
) -> list[PmcDataPoint]:
    """Extend a chart ``days`` days past its last point at a constant daily TSS."""
    if not history or days <= 0:
        return []
    return _project(history[-1], [float(daily_tss)] * days, ctl_days, atl_days)


def project_pmc_from_schedule(
    history: Sequence[PmcDataPoint],
    scheduled_tss: Mapping[date, float],
    days: int,
    ctl_days: float = CTL_TIME_CONSTANT_DAYS,
    atl_days: float = ATL_TIME_CONSTANT_DAYS,
) -> list[PmcDataPoint]:
    """Extend a chart using planned TSS per date; unplanned days are rest."""
    if not history or days <= 0:
        return []
    last_day = history[-1].date
    loads = [
        float(scheduled_tss.get(last_day + timedelta(days=offset), 0.0))
        for offset in range(1, days + 1)
    ]
    return _project(history[-1], loads, ctl_days, atl_days)


def _project(
    last: PmcDataPoint,
    loads: list[float],
    ctl_days: float,
    atl_days: float,
) -> list[PmcDataPoint]:
    start = last.date + timedelta(days=1)
    end = last.date + timedelta(days=len(loads))
    planned = pd.Series(loads, index=pd.date_range(start, end, freq="D").date)
    seed = LoadState(ctl=last.ctl, atl=last.atl, tsb=last.tsb)

    frame = walk_load(planned, start, end, ctl_days, atl_days, seed=seed)
    return [
        _to_point(day, row.tss, row.ctl, row.atl, predicted=True)
        for day, row in zip(frame.index, frame.itertuples(index=False))
    ]


def _to_point(
    day: date, tss: float, ctl: float, atl: float, predicted: bool = False
) -> PmcDataPoint:
    return PmcDataPoint(
        date=day,
        ctl=half_up(ctl, LOAD_DECIMALS),
        atl=half_up(atl, LOAD_DECIMALS),
        tsb=half_up(ctl - atl, LOAD_DECIMALS),
        daily_tss=float(tss),
        predicted=predicted,
    )


def find_peak_form(points: Sequence[PmcDataPoint]) -> PmcDataPoint | None:
    """The point with the highest TSB; the earliest wins a tie."""
    if not points:
        return None
    return max(points, key=lambda point: point.tsb)


def classify_form(tsb: float) -> FormStatus:
    """Interpret a TSB value.

    > 25 very fresh, > 5 fresh, > -10 neutral, > -25 fatigued, else very
    fatigued.
    """
    if tsb > FORM_VERY_FRESH_TSB:
        return FormStatus.VERY_FRESH
    if tsb > FORM_FRESH_TSB:
        return FormStatus.FRESH
    if tsb > FORM_NEUTRAL_TSB:
        return FormStatus.NEUTRAL
    if tsb > FORM_FATIGUED_TSB:
        return FormStatus.FATIGUED
    return FormStatus.VERY_FATIGUED
