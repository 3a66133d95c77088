"""Shared test fixtures: athlete thresholds, zone systems, in-memory collaborators."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Sequence

import pytest

from load_engine.exceptions import AthleteNotFoundError, ZoneSystemNotFoundError
from load_engine.models.athlete import AthleteThresholds
from load_engine.models.enums import SportType, ZoneReferenceType
from load_engine.models.session import CompletedSession
from load_engine.models.zone_system import Zone, ZoneSystem
from load_engine.ports import (
    AthleteDirectory,
    CoachDirectory,
    SessionHistory,
    ZoneSystemCatalog,
)
from load_engine.zone_resolution.resolver import pick_zone_system


class InMemoryPlatform(AthleteDirectory, SessionHistory, CoachDirectory, ZoneSystemCatalog):
    """All four collaborators backed by plain dicts."""

    def __init__(self) -> None:
        self.thresholds: dict[str, AthleteThresholds] = {}
        self.sessions: dict[str, list[CompletedSession]] = {}
        self.coaches: dict[str, list[str]] = {}
        self.zone_systems: list[ZoneSystem] = []

    def add_athlete(self, thresholds: AthleteThresholds, coaches: Sequence[str] = ()) -> None:
        self.thresholds[thresholds.athlete_id] = thresholds
        self.coaches[thresholds.athlete_id] = list(coaches)

    def add_session(self, session: CompletedSession) -> None:
        self.sessions.setdefault(session.user_id, []).append(session)

    def get_thresholds(self, athlete_id: str) -> AthleteThresholds:
        if athlete_id not in self.thresholds:
            raise AthleteNotFoundError(athlete_id)
        return self.thresholds[athlete_id]

    def list_completed_sessions(self, athlete_id: str) -> Sequence[CompletedSession]:
        return sorted(self.sessions.get(athlete_id, []), key=lambda s: s.completed_at)

    def find_coaches_for_athlete(self, athlete_id: str) -> Sequence[str]:
        return list(self.coaches.get(athlete_id, []))

    def find_zone_system(
        self,
        coach_id: str,
        sport_type: SportType,
        prefer_active: bool = True,
        fallback_default: bool = True,
    ) -> ZoneSystem | None:
        owned = [s for s in self.zone_systems if s.coach_id == coach_id]
        return pick_zone_system(owned, sport_type, prefer_active, fallback_default)

    def get_zone_system(self, zone_system_id: str) -> ZoneSystem:
        for system in self.zone_systems:
            if system.id == zone_system_id:
                return system
        raise ZoneSystemNotFoundError(zone_system_id)


@pytest.fixture
def cyclist() -> AthleteThresholds:
    """Cyclist with FTP 250 W and default running/swimming references."""
    return AthleteThresholds(
        athlete_id="athlete-1",
        ftp=250,
        threshold_pace_s_per_km=300,  # 5:00/km
        css_s_per_100m=120,           # 2:00/100m
    )


@pytest.fixture
def zone_athlete() -> AthleteThresholds:
    """Athlete with FTP 200 W and a full set of running paces."""
    return AthleteThresholds(
        athlete_id="athlete-2",
        ftp=200,
        threshold_pace_s_per_km=280,
        css_s_per_100m=110,
        pace_5k_s_per_km=260,
        pace_10k_s_per_km=275,
        pace_half_marathon_s_per_km=290,
        pace_marathon_s_per_km=305,
    )


@pytest.fixture
def ftp_zones() -> ZoneSystem:
    """Coggan-style power zones, active for coach-1."""
    return ZoneSystem(
        id="zs-ftp",
        coach_id="coach-1",
        name="Power zones",
        sport_type=SportType.CYCLING,
        reference_type=ZoneReferenceType.FTP,
        zones=(
            Zone("Z1", 0, 55, "Active recovery"),
            Zone("Z2", 56, 75, "Endurance"),
            Zone("Z3", 76, 90, "Tempo"),
            Zone("Z4", 91, 105, "Threshold"),
            Zone("Z5", 106, 120, "VO2max"),
        ),
        active=True,
    )


@pytest.fixture
def pace_zones() -> ZoneSystem:
    """Running pace zones on threshold pace, default for coach-1."""
    return ZoneSystem(
        id="zs-pace",
        coach_id="coach-1",
        name="Pace zones",
        sport_type=SportType.RUNNING,
        reference_type=ZoneReferenceType.THRESHOLD_PACE,
        zones=(
            Zone("Easy", 120, 130),
            Zone("Threshold", 98, 102),
        ),
        default=True,
    )


@pytest.fixture
def platform(
    zone_athlete: AthleteThresholds,
    ftp_zones: ZoneSystem,
    pace_zones: ZoneSystem,
) -> InMemoryPlatform:
    """zone_athlete coached by coach-1, who owns the FTP and pace systems."""
    store = InMemoryPlatform()
    store.add_athlete(zone_athlete, coaches=["coach-1"])
    store.zone_systems.extend([ftp_zones, pace_zones])
    return store


@pytest.fixture
def make_session() -> Callable[..., CompletedSession]:
    """Factory for a scored session completed at 07:00 on ``day``."""

    def _make(
        day: date,
        tss: float | None = 100.0,
        user_id: str = "athlete-1",
        **overrides,
    ) -> CompletedSession:
        return CompletedSession(
            user_id=user_id,
            completed_at=datetime.combine(day, time(7, 0)),
            total_duration_seconds=overrides.pop("total_duration_seconds", 3600),
            tss=tss,
            **overrides,
        )

    return _make
