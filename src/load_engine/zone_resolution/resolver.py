"""ZoneResolver — rewrites zone-labelled blocks into concrete targets.

A block carrying ``zone_label`` ("Z4") is resolved against the athlete's
coach's zone system for the sport: the zone's midpoint percentage is scaled
by the athlete's reference value and written into the sport's target field.

Missing coach, system, zone or reference never raises; the block comes back
unchanged with ``resolved=False`` and a reason.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from load_engine.exceptions import AthleteNotFoundError, ZoneSystemNotFoundError
from load_engine.math.block_metrics import block_intensity
from load_engine.math.rounding import half_up, half_up_int
from load_engine.models.athlete import AthleteThresholds
from load_engine.models.enums import SportType, ZoneReferenceType
from load_engine.models.workout import WorkoutBlock
from load_engine.models.zone_system import ZoneSystem
from load_engine.ports import AthleteDirectory, CoachDirectory, ZoneSystemCatalog

logger = logging.getLogger(__name__)

# Reference used for percentage zones when the athlete has no value,
# so the target equals the zone midpoint itself.
NEUTRAL_PERCENT_REFERENCE = 100.0

_REFERENCE_FIELDS: dict[ZoneReferenceType, str] = {
    ZoneReferenceType.FTP: "ftp",
    ZoneReferenceType.VO2MAX_POWER: "vo2max_power",
    ZoneReferenceType.THRESHOLD_PACE: "threshold_pace_s_per_km",
    ZoneReferenceType.VO2MAX_PACE: "vo2max_pace_s_per_km",
    ZoneReferenceType.CSS: "css_s_per_100m",
    ZoneReferenceType.PACE_5K: "pace_5k_s_per_km",
    ZoneReferenceType.PACE_10K: "pace_10k_s_per_km",
    ZoneReferenceType.PACE_HALF_MARATHON: "pace_half_marathon_s_per_km",
    ZoneReferenceType.PACE_MARATHON: "pace_marathon_s_per_km",
}

_TARGET_FIELDS: dict[SportType, str] = {
    SportType.CYCLING: "power_target_percent",
    SportType.BRICK: "power_target_percent",
    SportType.RUNNING: "pace_target_seconds_per_km",
    SportType.SWIMMING: "swim_pace_per_100m",
}


@dataclass(frozen=True)
class ZoneResolution:
    """Outcome of resolving one block."""

    block: WorkoutBlock
    resolved: bool
    reason: str = ""


def pick_zone_system(
    candidates: Iterable[ZoneSystem],
    sport_type: SportType,
    prefer_active: bool = True,
    fallback_default: bool = True,
) -> ZoneSystem | None:
    """Choose one coach's system for a sport: first active, else first default."""
    matching = [s for s in candidates if s.sport_type == sport_type]
    if prefer_active:
        for system in matching:
            if system.active:
                return system
    if fallback_default:
        for system in matching:
            if system.default:
                return system
    return None


def reference_value(
    reference_type: ZoneReferenceType, thresholds: AthleteThresholds | None
) -> float:
    """The athlete's numeric reference for a zone system.

    Missing or non-positive values fall back to 100 for percentage
    references and 0 for pace references.
    """
    field_name = _REFERENCE_FIELDS.get(reference_type)
    value = getattr(thresholds, field_name, None) if thresholds and field_name else None
    if value is not None and value > 0:
        return float(value)
    return 0.0 if reference_type.is_pace else NEUTRAL_PERCENT_REFERENCE


def zone_intensity(midpoint: float, reference_type: ZoneReferenceType) -> float:
    """Block intensity (% of threshold effort) for a zone midpoint.

    Power zones are already % of the reference. Pace zones are % of a pace,
    where higher means slower, so they are inverted to % of speed.
    """
    if midpoint <= 0:
        return 0.0
    if reference_type.is_pace:
        return half_up(100.0 * 100.0 / midpoint, 1)
    return float(midpoint)


def apply_zone(
    block: WorkoutBlock,
    system: ZoneSystem | None,
    thresholds: AthleteThresholds | None,
    sport_type: SportType,
) -> ZoneResolution:
    """Resolve ``block`` against an already chosen zone system.

    The target is round(midpoint% / 100 × reference) and is written only
    when the sport's target field is not already set on the block. A block
    without its own intensity also gets ``intensity_target`` from the zone,
    so the resolved copy scores in the block metrics.
    """
    if not block.zone_label:
        return ZoneResolution(block, False, "no zone label")
    if system is None:
        return ZoneResolution(block, False, "no zone system")

    zone = system.find_zone(block.zone_label)
    if zone is None:
        return ZoneResolution(block, False, f"zone {block.zone_label!r} not in system")

    target_field = _TARGET_FIELDS[sport_type]
    if getattr(block, target_field) is not None:
        return ZoneResolution(block, False, "explicit target kept")

    reference = reference_value(system.reference_type, thresholds)
    target = half_up_int(zone.midpoint / 100.0 * reference)
    if target <= 0:
        return ZoneResolution(block, False, "no reference value")

    changes: dict[str, float] = {target_field: target}
    if block_intensity(block) <= 0:
        changes["intensity_target"] = zone_intensity(zone.midpoint, system.reference_type)
    return ZoneResolution(dataclasses.replace(block, **changes), True)


class ZoneResolver:
    """Resolves zone labels for an athlete using their coaches' zone systems.

    Usage:
        resolver = ZoneResolver(athletes, coaches, zone_systems)
        blocks = resolver.resolve_zones(training.blocks, athlete_id, SportType.CYCLING)
    """

    def __init__(
        self,
        athletes: AthleteDirectory,
        coaches: CoachDirectory,
        zone_systems: ZoneSystemCatalog,
    ) -> None:
        self.athletes = athletes
        self.coaches = coaches
        self.zone_systems = zone_systems

    def resolve_zones(
        self,
        blocks: Sequence[WorkoutBlock],
        athlete_id: str,
        sport_type: SportType | None,
    ) -> tuple[WorkoutBlock, ...]:
        """One output block per input block, zone labels resolved where possible."""
        return tuple(r.block for r in self.resolve_blocks(blocks, athlete_id, sport_type))

    def resolve_blocks(
        self,
        blocks: Sequence[WorkoutBlock],
        athlete_id: str,
        sport_type: SportType | None,
    ) -> list[ZoneResolution]:
        """Like resolve_zones, but reports per block whether it was rewritten."""
        sport = sport_type or SportType.CYCLING
        if not any(block.zone_label for block in blocks):
            return [ZoneResolution(block, False, "no zone label") for block in blocks]

        thresholds = self._thresholds(athlete_id)
        coach_system = self._coach_zone_system(athlete_id, sport)

        results = []
        for block in blocks:
            system = coach_system
            if block.zone_label and block.zone_system_id:
                system = self._explicit_zone_system(block.zone_system_id) or coach_system
            result = apply_zone(block, system, thresholds, sport)
            logger.debug(
                "Block %r zone %r: resolved=%s %s",
                block.label, block.zone_label, result.resolved, result.reason,
            )
            results.append(result)
        return results

    def _thresholds(self, athlete_id: str) -> AthleteThresholds | None:
        try:
            return self.athletes.get_thresholds(athlete_id)
        except AthleteNotFoundError:
            logger.warning("No thresholds for athlete %s, using neutral references", athlete_id)
            return None

    def _coach_zone_system(self, athlete_id: str, sport: SportType) -> ZoneSystem | None:
        """First coach (in directory order) with an active or default system."""
        for coach_id in self.coaches.find_coaches_for_athlete(athlete_id):
            system = self.zone_systems.find_zone_system(
                coach_id, sport, prefer_active=True, fallback_default=True
            )
            if system is not None:
                return system
        logger.info("No %s zone system for any coach of athlete %s", sport.value, athlete_id)
        return None

    def _explicit_zone_system(self, zone_system_id: str) -> ZoneSystem | None:
        try:
            return self.zone_systems.get_zone_system(zone_system_id)
        except ZoneSystemNotFoundError:
            logger.warning("Zone system %s not found, falling back to coach system", zone_system_id)
            return None
