"""Data models for the training load engine."""

from load_engine.models.athlete import AthleteThresholds, LoadState
from load_engine.models.enums import (
    BlockType,
    FormStatus,
    SportType,
    ZoneReferenceType,
)
from load_engine.models.pmc import PmcDataPoint
from load_engine.models.session import CompletedSession, SessionMetrics
from load_engine.models.workout import (
    BlockMetrics,
    Training,
    TrainingMetrics,
    WorkoutBlock,
)
from load_engine.models.zone_system import Zone, ZoneSystem, validate_zone_system

__all__ = [
    "AthleteThresholds",
    "BlockMetrics",
    "BlockType",
    "CompletedSession",
    "FormStatus",
    "LoadState",
    "PmcDataPoint",
    "SessionMetrics",
    "SportType",
    "Training",
    "TrainingMetrics",
    "WorkoutBlock",
    "Zone",
    "ZoneReferenceType",
    "ZoneSystem",
    "validate_zone_system",
]
