"""Workout-level aggregation of block estimates."""

from __future__ import annotations

import dataclasses
import math
from typing import Sequence

from load_engine.math.block_metrics import compute_block_metrics, standardize_block_type
from load_engine.math.rounding import half_up, half_up_int
from load_engine.models.athlete import AthleteThresholds
from load_engine.models.enums import (
    TRAINING_IF_DECIMALS,
    TSS_PER_HOUR_AT_THRESHOLD,
    SportType,
)
from load_engine.models.workout import Training, TrainingMetrics, WorkoutBlock


def intensity_factor_from_tss(tss: float, duration_seconds: float) -> float:
    """Intensity that would accumulate ``tss`` over ``duration_seconds``.

    IF = sqrt(TSS / (hours × 100)). This reflects the stress actually
    accumulated rather than a mean of per-block intensities.
    """
    if duration_seconds <= 0 or tss <= 0:
        return 0.0
    hours = duration_seconds / 3600.0
    return math.sqrt(tss / (hours * TSS_PER_HOUR_AT_THRESHOLD))


def compute_training_metrics(
    blocks: Sequence[WorkoutBlock],
    sport_type: SportType | None,
    thresholds: AthleteThresholds | None,
) -> TrainingMetrics:
    """Sum block estimates into workout-level TSS, IF, duration and distance.

    Args:
        blocks: The workout's blocks in order.
        sport_type: Workout sport; None means cycling.
        thresholds: The creating athlete's reference values.

    Returns:
        TrainingMetrics with TSS rounded to an integer and IF to 2 decimals.
        An empty workout yields all zeros.
    """
    if not blocks:
        return TrainingMetrics()

    sport = sport_type or SportType.CYCLING
    per_block = [compute_block_metrics(block, sport, thresholds) for block in blocks]

    total_tss = math.fsum(m.tss for m in per_block)
    total_duration = sum(m.duration_seconds for m in per_block)
    total_distance = sum(m.distance_meters for m in per_block)

    return TrainingMetrics(
        estimated_tss=half_up_int(total_tss),
        estimated_if=half_up(
            intensity_factor_from_tss(total_tss, total_duration), TRAINING_IF_DECIMALS
        ),
        estimated_duration_seconds=total_duration,
        estimated_distance=total_distance,
    )


def standardize_blocks(training: Training) -> Training:
    """Apply ``standardize_block_type`` to every block; same object if none change."""
    blocks = tuple(standardize_block_type(block) for block in training.blocks)
    if all(new is old for new, old in zip(blocks, training.blocks)):
        return training
    return dataclasses.replace(training, blocks=blocks)


def apply_training_metrics(
    training: Training, thresholds: AthleteThresholds | None
) -> Training:
    """Copy of ``training`` with block types normalised and estimates recomputed."""
    training = standardize_blocks(training)
    metrics = compute_training_metrics(training.blocks, training.sport, thresholds)
    return dataclasses.replace(
        training,
        estimated_tss=metrics.estimated_tss,
        estimated_if=metrics.estimated_if,
        estimated_duration_seconds=metrics.estimated_duration_seconds,
        estimated_distance=metrics.estimated_distance,
    )
