"""TrainingLoadEngine — the facade callers use for every load computation."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date
from typing import Sequence

from load_engine import config
from load_engine.exceptions import AthleteNotFoundError
from load_engine.math.performance import generate_pmc, recompute_load
from load_engine.math.session_metrics import apply_session_metrics, compute_session_metrics
from load_engine.math.training_metrics import (
    apply_training_metrics,
    compute_training_metrics,
    standardize_blocks,
)
from load_engine.models.athlete import AthleteThresholds, LoadState
from load_engine.models.enums import SportType
from load_engine.models.pmc import PmcDataPoint
from load_engine.models.session import CompletedSession, SessionMetrics
from load_engine.models.workout import Training, TrainingMetrics, WorkoutBlock
from load_engine.ports import (
    AthleteDirectory,
    CoachDirectory,
    SessionHistory,
    ZoneSystemCatalog,
)
from load_engine.zone_resolution.resolver import ZoneResolver

logger = logging.getLogger(__name__)


class TrainingLoadEngine:
    """Computes workout estimates, session scores, rolling load and zone targets.

    All computation is synchronous and in memory. Lookups go through the
    injected collaborators; results are returned for the caller to persist.

    Usage:
        engine = TrainingLoadEngine(athletes, sessions, coaches, zone_systems)
        training = engine.enrich_training(training)
        state = engine.recompute_load(athlete_id)
        chart = engine.generate_pmc(athlete_id, date(2025, 1, 1), date(2025, 3, 31))
    """

    def __init__(
        self,
        athletes: AthleteDirectory,
        sessions: SessionHistory,
        coaches: CoachDirectory,
        zone_systems: ZoneSystemCatalog,
        ctl_days: float | None = None,
        atl_days: float | None = None,
        resolver: ZoneResolver | None = None,
    ) -> None:
        self.athletes = athletes
        self.sessions = sessions
        self.ctl_days = ctl_days or config.CTL_DAYS
        self.atl_days = atl_days or config.ATL_DAYS
        self.resolver = resolver or ZoneResolver(athletes, coaches, zone_systems)

    # ------------------------------------------------------------------
    # Workout estimates
    # ------------------------------------------------------------------

    @staticmethod
    def compute_training_metrics(
        blocks: Sequence[WorkoutBlock],
        sport_type: SportType | None,
        thresholds: AthleteThresholds | None,
    ) -> TrainingMetrics:
        """Workout-level TSS, IF, duration and distance for explicit thresholds."""
        return compute_training_metrics(blocks, sport_type, thresholds)

    def enrich_training(self, training: Training) -> Training:
        """Recompute a training's estimates from its creator's thresholds.

        Called on create/update. Block types are always normalised. A
        training without blocks gets zero estimates. When the creator cannot
        be found the estimated fields are left as they were.
        """
        training = standardize_blocks(training)
        if not training.blocks:
            return apply_training_metrics(training, None)

        if training.created_by is None:
            logger.warning("Training %s has no creator, estimates not computed", training.id)
            return training
        try:
            thresholds = self.athletes.get_thresholds(training.created_by)
        except AthleteNotFoundError:
            logger.warning(
                "Creator %s of training %s not found, estimates not computed",
                training.created_by, training.id,
            )
            return training

        enriched = apply_training_metrics(training, thresholds)
        logger.debug(
            "Training %s: TSS=%s IF=%s duration=%ss distance=%sm",
            training.id, enriched.estimated_tss, enriched.estimated_if,
            enriched.estimated_duration_seconds, enriched.estimated_distance,
        )
        return enriched

    # ------------------------------------------------------------------
    # Completed sessions
    # ------------------------------------------------------------------

    @staticmethod
    def compute_session_metrics(
        session: CompletedSession, thresholds: AthleteThresholds | None
    ) -> SessionMetrics:
        """Session TSS/IF from measured averages; empty when not computable."""
        return compute_session_metrics(session, thresholds)

    def complete_session(self, session: CompletedSession) -> CompletedSession:
        """Attach TSS/IF to a session being saved, using its athlete's thresholds."""
        try:
            thresholds = self.athletes.get_thresholds(session.user_id)
        except AthleteNotFoundError:
            logger.warning("Athlete %s not found, session %s left unscored",
                           session.user_id, session.id)
            return session

        scored = apply_session_metrics(session, thresholds)
        if scored.tss is None:
            logger.info("Session %s could not be scored (missing threshold or averages)",
                        session.id)
        return scored

    # ------------------------------------------------------------------
    # Zone resolution
    # ------------------------------------------------------------------

    def resolve_zones(
        self,
        blocks: Sequence[WorkoutBlock],
        athlete_id: str,
        sport_type: SportType | None,
    ) -> tuple[WorkoutBlock, ...]:
        """Rewrite zone-labelled blocks into concrete targets for an athlete."""
        return self.resolver.resolve_zones(blocks, athlete_id, sport_type)

    def resolve_training(self, training: Training, athlete_id: str) -> Training:
        """Copy of ``training`` with its blocks resolved for display to an athlete."""
        blocks = self.resolve_zones(training.blocks, athlete_id, training.sport)
        return dataclasses.replace(training, blocks=blocks)

    # ------------------------------------------------------------------
    # Performance Management Chart
    # ------------------------------------------------------------------

    def recompute_load(self, athlete_id: str, today: date | None = None) -> LoadState:
        """Walk the athlete's full history through ``today`` (default: now).

        The caller persists the returned state; recomputation for one
        athlete must not run concurrently with itself.
        """
        today = today or date.today()
        history = self.sessions.list_completed_sessions(athlete_id)
        state = recompute_load(history, today, self.ctl_days, self.atl_days)
        logger.info(
            "Athlete %s load as of %s: CTL=%.1f ATL=%.1f TSB=%.1f (%d sessions)",
            athlete_id, today.isoformat(), state.ctl, state.atl, state.tsb, len(history),
        )
        return state

    def generate_pmc(self, athlete_id: str, start: date, end: date) -> list[PmcDataPoint]:
        """One chart point per day from ``start`` to ``end`` inclusive."""
        history = self.sessions.list_completed_sessions(athlete_id)
        return generate_pmc(history, start, end, self.ctl_days, self.atl_days)
