"""Collaborator interfaces the engine reads from.

The engine never performs I/O itself. Callers inject objects implementing
these interfaces, backed by whatever store holds athletes, sessions and
zone systems. Persisting results is the caller's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from load_engine.models.athlete import AthleteThresholds
from load_engine.models.enums import SportType
from load_engine.models.session import CompletedSession
from load_engine.models.zone_system import ZoneSystem


class AthleteDirectory(ABC):
    """Source of athlete reference thresholds."""

    @abstractmethod
    def get_thresholds(self, athlete_id: str) -> AthleteThresholds:
        """Return the athlete's thresholds.

        Raises:
            AthleteNotFoundError: if no such athlete exists.
        """
        ...


class SessionHistory(ABC):
    """Source of completed sessions."""

    @abstractmethod
    def list_completed_sessions(self, athlete_id: str) -> Sequence[CompletedSession]:
        """All of the athlete's sessions, ascending by ``completed_at``."""
        ...


class CoachDirectory(ABC):
    """Coach/athlete relationships."""

    @abstractmethod
    def find_coaches_for_athlete(self, athlete_id: str) -> Sequence[str]:
        """Coach ids linked to the athlete, in a stable order."""
        ...


class ZoneSystemCatalog(ABC):
    """Coach-owned zone systems."""

    @abstractmethod
    def find_zone_system(
        self,
        coach_id: str,
        sport_type: SportType,
        prefer_active: bool = True,
        fallback_default: bool = True,
    ) -> ZoneSystem | None:
        """The coach's system for a sport: active first, then default.

        Implementations usually delegate to
        ``load_engine.zone_resolution.resolver.pick_zone_system``.
        """
        ...

    @abstractmethod
    def get_zone_system(self, zone_system_id: str) -> ZoneSystem:
        """Load one system by id.

        Raises:
            ZoneSystemNotFoundError: if no such system exists.
        """
        ...
