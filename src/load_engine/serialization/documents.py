"""Document-store mapping for engine models.

Converts the camelCase documents the platform stores (users, trainings,
completed sessions, zone systems) to engine models and back. All functions
are pure (no I/O). Malformed documents raise DocumentStoreError.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from load_engine.exceptions import DocumentStoreError
from load_engine.models.athlete import AthleteThresholds, LoadState
from load_engine.models.enums import BlockType, SportType, ZoneReferenceType
from load_engine.models.pmc import PmcDataPoint
from load_engine.models.session import CompletedSession
from load_engine.models.workout import Training, WorkoutBlock
from load_engine.models.zone_system import Zone, ZoneSystem, validate_zone_system

# Stored profile defaults applied when a user document omits a threshold.
PROFILE_DEFAULTS: dict[str, int] = {
    "ftp": 250,
    "functionalThresholdPace": 300,   # 5:00/km
    "criticalSwimSpeed": 120,         # 2:00/100m
    "pace5k": 270,
    "pace10k": 285,
    "paceHalfMarathon": 300,
    "paceMarathon": 315,
}

# WorkoutBlock attribute → document key, for optional scalar fields.
_BLOCK_FIELDS: tuple[tuple[str, str], ...] = (
    ("duration_seconds", "durationSeconds"),
    ("distance_meters", "distanceMeters"),
    ("zone_label", "zoneLabel"),
    ("zone_system_id", "zoneSystemId"),
    ("intensity_target", "intensityTarget"),
    ("intensity_start", "intensityStart"),
    ("intensity_end", "intensityEnd"),
    ("cadence_target", "cadenceTarget"),
    ("power_target_percent", "powerTargetPercent"),
    ("power_start_percent", "powerStartPercent"),
    ("power_end_percent", "powerEndPercent"),
    ("pace_target_seconds_per_km", "paceTargetSecondsPerKm"),
    ("pace_start_seconds_per_km", "paceStartSecondsPerKm"),
    ("pace_end_seconds_per_km", "paceEndSecondsPerKm"),
    ("swim_pace_per_100m", "swimPacePer100m"),
    ("swim_stroke_rate", "swimStrokeRate"),
)

_THRESHOLD_FIELDS: tuple[tuple[str, str], ...] = (
    ("ftp", "ftp"),
    ("threshold_pace_s_per_km", "functionalThresholdPace"),
    ("css_s_per_100m", "criticalSwimSpeed"),
    ("pace_5k_s_per_km", "pace5k"),
    ("pace_10k_s_per_km", "pace10k"),
    ("pace_half_marathon_s_per_km", "paceHalfMarathon"),
    ("pace_marathon_s_per_km", "paceMarathon"),
    ("vo2max_power", "vo2maxPower"),
    ("vo2max_pace_s_per_km", "vo2maxPace"),
)


def document_id(doc: dict[str, Any]) -> str | None:
    """The document's id, accepting both ``id`` and Mongo's ``_id``."""
    value = doc.get("id", doc.get("_id"))
    return str(value) if value is not None else None


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


def block_from_document(doc: dict[str, Any]) -> WorkoutBlock:
    try:
        values = {attr: doc[key] for attr, key in _BLOCK_FIELDS if doc.get(key) is not None}
        return WorkoutBlock(
            type=BlockType(str(doc.get("type", BlockType.ACTIVE.value)).upper()),
            label=doc.get("label") or "",
            **values,
        )
    except (ValueError, TypeError) as exc:
        raise DocumentStoreError(f"Invalid workout block: {exc}") from exc


def block_to_document(block: WorkoutBlock) -> dict[str, Any]:
    doc: dict[str, Any] = {"type": block.type.value, "label": block.label}
    for attr, key in _BLOCK_FIELDS:
        value = getattr(block, attr)
        if value is not None:
            doc[key] = value
    return doc


def training_from_document(doc: dict[str, Any]) -> Training:
    blocks = doc.get("blocks") or []
    if not isinstance(blocks, list):
        raise DocumentStoreError("Training blocks must be a list")
    return Training(
        id=document_id(doc),
        title=doc.get("title") or "",
        description=doc.get("description") or "",
        blocks=tuple(block_from_document(b) for b in blocks),
        sport_type=SportType.parse(doc.get("sportType")),
        created_by=doc.get("createdBy"),
        estimated_tss=doc.get("estimatedTss"),
        estimated_if=doc.get("estimatedIf"),
        estimated_duration_seconds=doc.get("estimatedDurationSeconds"),
        estimated_distance=doc.get("estimatedDistance"),
    )


def training_to_document(training: Training) -> dict[str, Any]:
    return {
        "id": training.id,
        "title": training.title,
        "description": training.description,
        "sportType": training.sport.value,
        "createdBy": training.created_by,
        "blocks": [block_to_document(b) for b in training.blocks],
        "estimatedTss": training.estimated_tss,
        "estimatedIf": training.estimated_if,
        "estimatedDurationSeconds": training.estimated_duration_seconds,
        "estimatedDistance": training.estimated_distance,
    }


# ---------------------------------------------------------------------------
# Athletes
# ---------------------------------------------------------------------------


def thresholds_from_document(doc: dict[str, Any]) -> AthleteThresholds:
    """Thresholds from a user document.

    A missing key takes the stored-profile default; an explicit null stays
    None (unknown).
    """
    athlete_id = document_id(doc)
    if athlete_id is None:
        raise DocumentStoreError("User document has no id")
    values = {}
    for attr, key in _THRESHOLD_FIELDS:
        value = doc.get(key, PROFILE_DEFAULTS.get(key))
        values[attr] = int(value) if value is not None else None
    return AthleteThresholds(athlete_id=athlete_id, **values)


def load_state_from_document(doc: dict[str, Any]) -> LoadState:
    return LoadState(
        ctl=float(doc.get("ctl") or 0.0),
        atl=float(doc.get("atl") or 0.0),
        tsb=float(doc.get("tsb") or 0.0),
    )


def apply_load_state(doc: dict[str, Any], state: LoadState) -> dict[str, Any]:
    """Copy of a user document with ctl/atl/tsb replaced by ``state``."""
    updated = dict(doc)
    updated.update({"ctl": state.ctl, "atl": state.atl, "tsb": state.tsb})
    return updated


# ---------------------------------------------------------------------------
# Completed sessions
# ---------------------------------------------------------------------------


def session_from_document(doc: dict[str, Any]) -> CompletedSession:
    user_id = doc.get("userId")
    if not user_id:
        raise DocumentStoreError(f"Session {document_id(doc)} has no userId")
    try:
        return CompletedSession(
            id=document_id(doc),
            user_id=str(user_id),
            training_id=doc.get("trainingId"),
            title=doc.get("title") or "",
            completed_at=_parse_datetime(doc.get("completedAt")),
            total_duration_seconds=int(doc.get("totalDurationSeconds") or 0),
            sport_type=doc.get("sportType"),
            avg_power=float(doc.get("avgPower") or 0.0),
            avg_speed=float(doc.get("avgSpeed") or 0.0),
            avg_hr=float(doc.get("avgHR") or 0.0),
            avg_cadence=float(doc.get("avgCadence") or 0.0),
            tss=_optional_float(doc.get("tss")),
            intensity_factor=_optional_float(doc.get("intensityFactor")),
        )
    except (ValueError, TypeError) as exc:
        raise DocumentStoreError(f"Invalid session {document_id(doc)}: {exc}") from exc


def session_to_document(session: CompletedSession) -> dict[str, Any]:
    return {
        "id": session.id,
        "userId": session.user_id,
        "trainingId": session.training_id,
        "title": session.title,
        "completedAt": session.completed_at.isoformat() if session.completed_at else None,
        "totalDurationSeconds": session.total_duration_seconds,
        "sportType": session.sport_type,
        "avgPower": session.avg_power,
        "avgSpeed": session.avg_speed,
        "avgHR": session.avg_hr,
        "avgCadence": session.avg_cadence,
        "tss": session.tss,
        "intensityFactor": session.intensity_factor,
    }


# ---------------------------------------------------------------------------
# Zone systems
# ---------------------------------------------------------------------------


def zone_system_from_document(doc: dict[str, Any]) -> ZoneSystem:
    """Zone system from its document, validated.

    Zone bounds accept both ``low``/``high`` and the older
    ``lowerPercent``/``upperPercent`` keys.
    """
    try:
        zones = tuple(
            Zone(
                label=str(z["label"]),
                low=float(z.get("low", z.get("lowerPercent"))),
                high=float(z.get("high", z.get("upperPercent"))),
                description=z.get("description") or "",
            )
            for z in doc.get("zones") or []
        )
        system = ZoneSystem(
            id=document_id(doc),
            coach_id=str(doc["coachId"]),
            name=doc.get("name") or "",
            sport_type=SportType.parse(doc.get("sportType")),
            reference_type=ZoneReferenceType(doc.get("referenceType") or "CUSTOM"),
            reference_name=doc.get("referenceName") or "",
            zones=zones,
            active=bool(doc.get("active", False)),
            default=bool(doc.get("default", False)),
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise DocumentStoreError(f"Invalid zone system {document_id(doc)}: {exc}") from exc
    return validate_zone_system(system)


# ---------------------------------------------------------------------------
# Chart output
# ---------------------------------------------------------------------------


def pmc_to_documents(points: list[PmcDataPoint]) -> list[dict[str, Any]]:
    return [
        {
            "date": p.date.isoformat(),
            "ctl": p.ctl,
            "atl": p.atl,
            "tsb": p.tsb,
            "dailyTss": p.daily_tss,
            "predicted": p.predicted,
        }
        for p in points
    ]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None
