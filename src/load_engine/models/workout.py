"""Workout models — blocks, trainings and their derived load estimates."""

from __future__ import annotations

from dataclasses import dataclass, field

from load_engine.models.enums import BlockType, SportType


@dataclass(frozen=True)
class WorkoutBlock:
    """One segment of a workout.

    Exactly one of ``duration_seconds`` / ``distance_meters`` is authoritative,
    the other is derived by the block metrics calculator.

    Intensity is a percentage of the sport's reference (FTP, threshold pace,
    CSS): either a single ``intensity_target`` or an ``intensity_start`` /
    ``intensity_end`` ramp. A block with neither is a pause.

    The sport-specific target fields are written by zone resolution and read
    by brick sport inference. Pace targets are seconds per distance
    (lower = faster).
    """

    type: BlockType = BlockType.ACTIVE
    duration_seconds: int | None = None
    distance_meters: int | None = None
    label: str = ""
    zone_label: str | None = None
    zone_system_id: str | None = None

    intensity_target: float | None = None
    intensity_start: float | None = None
    intensity_end: float | None = None
    cadence_target: int | None = None

    # Cycling
    power_target_percent: int | None = None
    power_start_percent: int | None = None
    power_end_percent: int | None = None
    # Running (s/km)
    pace_target_seconds_per_km: int | None = None
    pace_start_seconds_per_km: int | None = None
    pace_end_seconds_per_km: int | None = None
    # Swimming (s/100m)
    swim_pace_per_100m: int | None = None
    swim_stroke_rate: int | None = None

    @property
    def has_power_target(self) -> bool:
        return self.power_target_percent is not None or self.power_start_percent is not None

    @property
    def has_run_pace_target(self) -> bool:
        return (
            self.pace_target_seconds_per_km is not None
            or self.pace_start_seconds_per_km is not None
        )

    @property
    def has_swim_pace_target(self) -> bool:
        return self.swim_pace_per_100m is not None


@dataclass(frozen=True)
class BlockMetrics:
    """Computed contribution of one block to its workout's totals."""

    sport: SportType
    intensity: float                 # % of reference, 0 for a pause
    duration_seconds: int
    distance_meters: int
    tss: float


@dataclass(frozen=True)
class TrainingMetrics:
    """Workout-level estimates. An empty workout is all zeros."""

    estimated_tss: int = 0
    estimated_if: float = 0.0
    estimated_duration_seconds: int = 0
    estimated_distance: int = 0


@dataclass(frozen=True)
class Training:
    """An authored workout: ordered blocks plus cached load estimates.

    The ``estimated_*`` fields are advisory. They are always recomputed from
    the blocks and the creator's thresholds on create/update and are None
    until then.
    """

    blocks: tuple[WorkoutBlock, ...] = field(default_factory=tuple)
    sport_type: SportType | None = SportType.CYCLING
    id: str | None = None
    title: str = ""
    description: str = ""
    created_by: str | None = None
    estimated_tss: int | None = None
    estimated_if: float | None = None
    estimated_duration_seconds: int | None = None
    estimated_distance: int | None = None

    @property
    def sport(self) -> SportType:
        return self.sport_type or SportType.CYCLING
