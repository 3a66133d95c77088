"""Per-block load estimates: intensity, missing time/space dimension, TSS.

TSS generalises Coggan's power-based score to any intensity-normalised
sport: TSS = hours × (intensity / 100)² × 100.

Reference:
    Coggan & Allen (2010). Training and Racing with a Power Meter.
"""

from __future__ import annotations

import dataclasses
import math

from load_engine.math.rounding import half_up_int
from load_engine.models.athlete import AthleteThresholds
from load_engine.models.enums import (
    CYCLING_SPEED_AT_THRESHOLD_M_PER_S,
    FALLBACK_CSS_S_PER_100M,
    FALLBACK_THRESHOLD_PACE_S_PER_KM,
    TSS_PER_HOUR_AT_THRESHOLD,
    BlockType,
    SportType,
)
from load_engine.models.workout import BlockMetrics, WorkoutBlock


def block_intensity(block: WorkoutBlock) -> float:
    """Effective intensity of a block in % of reference.

    A ramp (both ends positive) uses its average, otherwise a positive
    ``intensity_target``. Anything else is a pause at 0%.
    """
    start, end = block.intensity_start, block.intensity_end
    if start is not None and end is not None and start > 0 and end > 0:
        return (start + end) / 2.0
    if block.intensity_target is not None and block.intensity_target > 0:
        return float(block.intensity_target)
    return 0.0


def standardize_block_type(block: WorkoutBlock) -> WorkoutBlock:
    """Normalise a block's type from its intensity fields.

    Both ramp ends positive ⇒ RAMP. No intensity at all ⇒ PAUSE, unless the
    block still waits on a zone label for its target. Otherwise the block is
    returned as is.
    """
    start, end, target = block.intensity_start, block.intensity_end, block.intensity_target
    if start and end and start > 0 and end > 0:
        block_type = BlockType.RAMP
    elif not start and not end and not target and not block.zone_label:
        block_type = BlockType.PAUSE
    else:
        return block
    if block.type == block_type:
        return block
    return dataclasses.replace(block, type=block_type)


def effective_sport(block: WorkoutBlock, sport: SportType) -> SportType:
    """Sport a block is performed in.

    Brick blocks are classified by which target fields are populated:
    power → cycling, run pace → running, swim pace → swimming, else cycling.
    """
    if sport != SportType.BRICK:
        return sport
    if block.has_power_target:
        return SportType.CYCLING
    if block.has_run_pace_target:
        return SportType.RUNNING
    if block.has_swim_pace_target:
        return SportType.SWIMMING
    return SportType.CYCLING


def block_speed(
    sport: SportType,
    intensity: float,
    thresholds: AthleteThresholds | None,
) -> float:
    """Estimated speed in m/s at ``intensity`` % of the sport's reference.

    Running and swimming scale threshold speed linearly. Cycling (and a
    brick block that could not be classified) uses the empirical
    8.33 × sqrt(intensity) heuristic. A non-positive threshold gives 0.
    """
    if intensity <= 0:
        return 0.0
    fraction = intensity / 100.0

    if sport == SportType.RUNNING:
        pace = _threshold_or_fallback(
            thresholds.threshold_pace_s_per_km if thresholds else None,
            FALLBACK_THRESHOLD_PACE_S_PER_KM,
        )
        return (1000.0 / pace) * fraction if pace > 0 else 0.0

    if sport == SportType.SWIMMING:
        css = _threshold_or_fallback(
            thresholds.css_s_per_100m if thresholds else None,
            FALLBACK_CSS_S_PER_100M,
        )
        return (100.0 / css) * fraction if css > 0 else 0.0

    return CYCLING_SPEED_AT_THRESHOLD_M_PER_S * math.sqrt(fraction)


def block_tss(duration_seconds: float, intensity: float) -> float:
    """Time-at-intensity-squared stress of a block."""
    if duration_seconds <= 0 or intensity <= 0:
        return 0.0
    fraction = intensity / 100.0
    return (duration_seconds / 3600.0) * fraction * fraction * TSS_PER_HOUR_AT_THRESHOLD


def compute_block_metrics(
    block: WorkoutBlock,
    sport: SportType,
    thresholds: AthleteThresholds | None,
) -> BlockMetrics:
    """Compute intensity, duration, distance and TSS for one block.

    Args:
        block: The block as authored.
        sport: The workout's sport; BRICK is resolved per block.
        thresholds: The athlete's reference values.

    Returns:
        BlockMetrics. A block with neither a positive duration nor a
        positive distance contributes nothing.
    """
    sport = effective_sport(block, sport)
    intensity = block_intensity(block)
    speed = block_speed(sport, intensity, thresholds)

    if block.duration_seconds is not None and block.duration_seconds > 0:
        duration = block.duration_seconds
        distance = half_up_int(duration * speed)
    elif block.distance_meters is not None and block.distance_meters > 0:
        distance = block.distance_meters
        duration = half_up_int(distance / speed) if speed > 0 else 0
    else:
        return BlockMetrics(sport=sport, intensity=intensity, duration_seconds=0,
                            distance_meters=0, tss=0.0)

    return BlockMetrics(
        sport=sport,
        intensity=intensity,
        duration_seconds=duration,
        distance_meters=distance,
        tss=block_tss(duration, intensity),
    )


def _threshold_or_fallback(value: int | None, fallback: int) -> float:
    return float(fallback if value is None else value)
